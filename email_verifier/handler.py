"""SNS entry point that sends account verification emails.

Each invocation carries one or more SNS records whose message body is a JSON
object with ``email``, ``activationLink`` and, when token expiration updates
are enabled, ``tokenId``. Records are processed in order and the first send or
update failure ends the batch with the matching result string.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Callable, Iterable, Protocol

from pydantic import ValidationError

from email_verifier.config import Settings, get_settings
from email_verifier.database import create_db_engine
from email_verifier.exceptions import EmailSendError, PayloadError, TokenUpdateError
from email_verifier.logging_config import configure_logging
from email_verifier.models.schemas import (
    BatchResult,
    EmailCredentials,
    NotificationRecord,
    TokenExpirationUpdate,
    VerificationEmail,
)
from email_verifier.services.credentials import CredentialsProvider
from email_verifier.services.email_templates import build_verification_email
from email_verifier.services.mailgun_client import MailgunClient
from email_verifier.services.token_repository import TokenRepository


logger = logging.getLogger(__name__)


class MessageSender(Protocol):
    def send_message(self, domain: str, message: VerificationEmail) -> str | None: ...

    def close(self) -> None: ...


def extract_messages(event: dict[str, Any]) -> list[str]:
    """Return the raw SNS message bodies of ``event`` in delivery order."""

    records = event.get("Records") if isinstance(event, dict) else None
    if not isinstance(records, list):
        raise PayloadError("Event has no Records list")

    messages: list[str] = []
    for position, record in enumerate(records):
        sns = None
        if isinstance(record, dict):
            sns = record.get("Sns") or record.get("sns")
        message = None
        if isinstance(sns, dict):
            message = sns.get("Message", sns.get("message"))
        if not isinstance(message, str):
            raise PayloadError(f"Record {position} has no SNS message body")
        messages.append(message)
    return messages


def parse_record(message: str, require_token: bool = False) -> NotificationRecord:
    """Decode one SNS message body into a NotificationRecord."""

    try:
        payload = json.loads(message)
    except json.JSONDecodeError as err:
        raise PayloadError(f"Message is not valid JSON: {err}") from err
    if not isinstance(payload, dict):
        raise PayloadError("Message must be a JSON object")

    try:
        record = NotificationRecord.model_validate(payload)
    except ValidationError as err:
        raise PayloadError(f"Message is missing required fields: {err}") from err

    if require_token and not record.token_id:
        raise PayloadError("Message is missing tokenId")
    return record


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NotificationHandler:
    """Send a verification email per record and optionally extend its token."""

    def __init__(
        self,
        settings: Settings,
        credentials_provider: CredentialsProvider | None = None,
        mail_client_factory: Callable[[EmailCredentials], MessageSender] | None = None,
        token_repository: TokenRepository | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._settings = settings
        self._credentials_provider = credentials_provider or CredentialsProvider(settings)
        self._mail_client_factory = mail_client_factory or self._default_mail_client
        self._clock = clock

        self._token_repository: TokenRepository | None = None
        if settings.update_token_expiration:
            self._token_repository = token_repository or TokenRepository(create_db_engine(settings))

    def _default_mail_client(self, credentials: EmailCredentials) -> MessageSender:
        return MailgunClient.from_credentials(
            credentials,
            base_url=self._settings.mailgun_base_url,
            timeout=self._settings.mailgun_timeout_seconds,
        )

    def handle(self, event: dict[str, Any]) -> BatchResult:
        """Process every record of ``event`` and return the batch result.

        Configuration, credential and payload errors propagate. Send and
        update failures are logged and turned into a result string; records
        after the failing one are not processed.
        """

        credentials = self._credentials_provider.resolve()
        sender = self._mail_client_factory(credentials)
        try:
            return self._process(extract_messages(event), credentials, sender)
        finally:
            sender.close()

    def _process(
        self,
        messages: Iterable[str],
        credentials: EmailCredentials,
        sender: MessageSender,
    ) -> BatchResult:
        require_token = self._token_repository is not None

        for message in messages:
            record = parse_record(message, require_token=require_token)

            email = build_verification_email(
                credentials,
                record.email,
                record.activation_link,
                style=self._settings.email_body_style,
                expiration_minutes=self._settings.token_expiration_minutes,
            )
            try:
                sender.send_message(credentials.domain_name, email)
            except EmailSendError:
                logger.exception("Error sending verification email to %s", record.email)
                return BatchResult.EMAIL_FAILED
            logger.info("Verification email sent to: %s", record.email)

            if self._token_repository is None:
                continue

            change = TokenExpirationUpdate(
                token_id=record.token_id,
                new_expiration=self._clock()
                + timedelta(minutes=self._settings.token_expiration_minutes),
            )
            try:
                matched = self._token_repository.extend_expiration(change)
            except TokenUpdateError:
                logger.exception("Error updating expiration time for token %s", change.token_id)
                return BatchResult.TOKEN_UPDATE_FAILED

            if matched == 0:
                logger.warning("No confirmation token found with id %s", change.token_id)
            else:
                logger.info(
                    "Expiration time for token %s set to %s",
                    change.token_id,
                    change.new_expiration.isoformat(),
                )

        return BatchResult.SUCCESS


@lru_cache()
def get_handler() -> NotificationHandler:
    """Return the handler shared by warm invocations of the same container."""

    return NotificationHandler(get_settings())


def lambda_handler(event: dict[str, Any], context: Any = None) -> str:
    """AWS Lambda entry point for SNS verification events."""

    configure_logging()
    return get_handler().handle(event).value
