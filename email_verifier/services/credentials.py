"""Resolution of Mailgun credentials from the environment or AWS Secrets Manager."""
import json
import logging
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from email_verifier.config import Settings
from email_verifier.exceptions import CredentialsError
from email_verifier.models.schemas import EmailCredentials


logger = logging.getLogger(__name__)

API_KEY_FIELD = "MAILGUN_API_KEY"
DOMAIN_NAME_FIELD = "MAILGUN_DOMAIN_NAME"


def get_secrets_client(region_name: str | None = None):
    """Get a boto3 Secrets Manager client."""
    return boto3.client("secretsmanager", region_name=region_name)


class CredentialsProvider:
    """Looks up the Mailgun API key and sending domain for one invocation."""

    def __init__(self, settings: Settings, secrets_client: Any | None = None) -> None:
        self._settings = settings
        self._secrets_client = secrets_client

    def resolve(self) -> EmailCredentials:
        if self._settings.credentials_source == "secrets_manager":
            return self._from_secrets_manager(self._settings.email_credentials_secret_name)
        return self._from_environment()

    def _from_environment(self) -> EmailCredentials:
        api_key = self._settings.mail_gun_api_key
        domain_name = self._settings.mail_gun_domain_name
        if api_key is None or not domain_name:
            raise CredentialsError("MAIL_GUN_API_KEY and MAIL_GUN_DOMAIN_NAME must both be set")
        logger.info("Using Mailgun credentials from environment for domain %s", domain_name)
        return EmailCredentials(api_key=api_key, domain_name=domain_name)

    def _from_secrets_manager(self, secret_name: str | None) -> EmailCredentials:
        if not secret_name:
            raise CredentialsError("EMAIL_CREDENTIALS_SECRET_NAME is not set")

        client = self._secrets_client
        if client is None:
            client = get_secrets_client(self._settings.aws_region)

        try:
            response = client.get_secret_value(SecretId=secret_name)
        except (BotoCoreError, ClientError) as err:
            logger.error("Failed to fetch email credentials from secret %s: %s", secret_name, err)
            raise CredentialsError(f"Failed to fetch email credentials: {err}") from err

        secret_string = response.get("SecretString")
        if not secret_string:
            raise CredentialsError(f"Secret {secret_name} has no SecretString value")

        try:
            values = json.loads(secret_string)
        except json.JSONDecodeError as err:
            raise CredentialsError(f"Secret {secret_name} is not valid JSON") from err
        if not isinstance(values, dict):
            raise CredentialsError(f"Secret {secret_name} must decode to a JSON object")

        missing = [key for key in (API_KEY_FIELD, DOMAIN_NAME_FIELD) if not values.get(key)]
        if missing:
            raise CredentialsError(f"Secret {secret_name} is missing {', '.join(missing)}")

        logger.info("Successfully fetched email credentials from Secrets Manager")
        return EmailCredentials(
            api_key=str(values[API_KEY_FIELD]),
            domain_name=str(values[DOMAIN_NAME_FIELD]),
        )
