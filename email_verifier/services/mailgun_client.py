"""Thin client for the Mailgun messages API."""
import logging

import requests

from email_verifier.exceptions import EmailSendError
from email_verifier.models.schemas import EmailCredentials, VerificationEmail


logger = logging.getLogger(__name__)


class MailgunClient:
    """Sends messages through ``POST /v3/<domain>/messages``."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.mailgun.net",
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    @classmethod
    def from_credentials(
        cls,
        credentials: EmailCredentials,
        base_url: str = "https://api.mailgun.net",
        timeout: float | None = None,
    ) -> "MailgunClient":
        return cls(credentials.api_key.get_secret_value(), base_url=base_url, timeout=timeout)

    def send_message(self, domain: str, message: VerificationEmail) -> str | None:
        """Send ``message`` from ``domain`` and return Mailgun's message id."""

        url = f"{self._base_url}/v3/{domain}/messages"
        try:
            response = self._session.post(
                url,
                auth=("api", self._api_key),
                data=message.as_form_data(),
                timeout=self._timeout,
            )
        except requests.RequestException as err:
            raise EmailSendError(f"Failed to reach Mailgun: {err}") from err

        if not response.ok:
            raise EmailSendError(
                f"Mailgun returned HTTP {response.status_code}: {response.text[:200]}"
            )

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        message_id = payload.get("id") if isinstance(payload, dict) else None
        logger.debug("Mailgun accepted message %s for %s", message_id, message.to)
        return message_id

    def close(self) -> None:
        """Release pooled connections held by the HTTP session."""
        self._session.close()
