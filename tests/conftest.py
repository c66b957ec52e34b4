"""Pytest configuration for global fixtures and logging setup."""
from __future__ import annotations

import json
import os
from typing import Any, Callable, Dict, List

import pytest

os.environ["MAIL_GUN_API_KEY"] = "key-test"
os.environ["MAIL_GUN_DOMAIN_NAME"] = "mg.example.com"

from email_verifier.logging_config import configure_logging

configure_logging()

from email_verifier.config import Settings, load_settings
from email_verifier.exceptions import EmailSendError
from email_verifier.models.schemas import EmailCredentials, VerificationEmail


_VARIANT_ENV = (
    "CREDENTIALS_SOURCE",
    "EMAIL_CREDENTIALS_SECRET_NAME",
    "UPDATE_TOKEN_EXPIRATION",
    "DATABASE_URL",
    "RDS_HOST",
    "RDS_DATABASE",
    "RDS_USERNAME",
    "RDS_PASSWORD",
    "EMAIL_BODY_STYLE",
)


@pytest.fixture(autouse=True)
def _isolate_variant_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep variant toggles from the outer shell out of the tests."""

    for name in _VARIANT_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """Build settings that ignore any local .env file."""

    def _make(**overrides: Any) -> Settings:
        return load_settings(_env_file=None, **overrides)

    return _make


@pytest.fixture
def credentials() -> EmailCredentials:
    return EmailCredentials(api_key="key-test", domain_name="mg.example.com")


class RecordingSender:
    """Stand-in for MailgunClient that records each message it is given."""

    def __init__(self, fail_for: set[str] | None = None) -> None:
        self.fail_for = fail_for or set()
        self.sent: List[Dict[str, Any]] = []
        self.closed = 0

    def send_message(self, domain: str, message: VerificationEmail) -> str | None:
        self.sent.append({"domain": domain, "message": message})
        if message.to in self.fail_for:
            raise EmailSendError(f"rejected {message.to}")
        return f"<{len(self.sent)}@mg.example.com>"

    def close(self) -> None:
        self.closed += 1


@pytest.fixture
def recording_sender() -> RecordingSender:
    return RecordingSender()


def sns_event(*payloads: Dict[str, Any] | str) -> Dict[str, Any]:
    """Wrap payloads in an SNS-shaped event; strings are used verbatim."""

    records = []
    for payload in payloads:
        body = payload if isinstance(payload, str) else json.dumps(payload)
        records.append({"EventSource": "aws:sns", "Sns": {"Message": body}})
    return {"Records": records}


@pytest.fixture
def make_event() -> Callable[..., Dict[str, Any]]:
    return sns_event


@pytest.fixture
def make_sender() -> Callable[..., RecordingSender]:
    return RecordingSender
