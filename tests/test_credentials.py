"""Tests for Mailgun credential resolution."""
from __future__ import annotations

import json
from typing import Any, Dict

import pytest
from botocore.exceptions import ClientError

from email_verifier.exceptions import CredentialsError
from email_verifier.services.credentials import CredentialsProvider


class FakeSecretsClient:
    def __init__(self, response: Dict[str, Any] | None = None, error: Exception | None = None) -> None:
        self.response = response or {}
        self.error = error
        self.calls: list[str] = []

    def get_secret_value(self, SecretId: str) -> Dict[str, Any]:
        self.calls.append(SecretId)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def secrets_settings(make_settings):
    return make_settings(
        credentials_source="secrets_manager",
        email_credentials_secret_name="prod/mailgun",
    )


def test_environment_credentials(make_settings):
    credentials = CredentialsProvider(make_settings()).resolve()

    assert credentials.api_key.get_secret_value() == "key-test"
    assert credentials.domain_name == "mg.example.com"
    assert credentials.from_address == "noreply@mg.example.com"


def test_secrets_manager_credentials(secrets_settings):
    client = FakeSecretsClient(
        {"SecretString": json.dumps({"MAILGUN_API_KEY": "key-secret", "MAILGUN_DOMAIN_NAME": "mail.acme.io"})}
    )

    credentials = CredentialsProvider(secrets_settings, secrets_client=client).resolve()

    assert client.calls == ["prod/mailgun"]
    assert credentials.api_key.get_secret_value() == "key-secret"
    assert credentials.from_address == "noreply@mail.acme.io"


def test_default_client_uses_configured_region(make_settings, monkeypatch):
    settings = make_settings(
        credentials_source="secrets_manager",
        email_credentials_secret_name="prod/mailgun",
        aws_region="eu-west-1",
    )
    created: Dict[str, Any] = {}
    client = FakeSecretsClient(
        {"SecretString": json.dumps({"MAILGUN_API_KEY": "k", "MAILGUN_DOMAIN_NAME": "d.example"})}
    )

    def fake_client(service_name: str, region_name: str | None = None):
        created["service"] = service_name
        created["region"] = region_name
        return client

    monkeypatch.setattr("email_verifier.services.credentials.boto3.client", fake_client)

    CredentialsProvider(settings).resolve()

    assert created == {"service": "secretsmanager", "region": "eu-west-1"}


def test_client_error_is_credentials_error(secrets_settings):
    error = ClientError(
        {"Error": {"Code": "ResourceNotFoundException", "Message": "not found"}},
        "GetSecretValue",
    )
    provider = CredentialsProvider(secrets_settings, secrets_client=FakeSecretsClient(error=error))

    with pytest.raises(CredentialsError):
        provider.resolve()


@pytest.mark.parametrize(
    "secret_string",
    [
        "not json",
        json.dumps(["MAILGUN_API_KEY"]),
        json.dumps({"MAILGUN_API_KEY": "key-only"}),
        "",
    ],
)
def test_unusable_secret_is_credentials_error(secrets_settings, secret_string):
    client = FakeSecretsClient({"SecretString": secret_string})

    with pytest.raises(CredentialsError):
        CredentialsProvider(secrets_settings, secrets_client=client).resolve()


def test_secret_value_is_not_logged(secrets_settings, caplog):
    client = FakeSecretsClient(
        {"SecretString": json.dumps({"MAILGUN_API_KEY": "key-very-secret", "MAILGUN_DOMAIN_NAME": "d.example"})}
    )

    with caplog.at_level("DEBUG"):
        CredentialsProvider(secrets_settings, secrets_client=client).resolve()

    assert "key-very-secret" not in caplog.text
