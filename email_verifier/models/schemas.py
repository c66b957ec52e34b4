"""Pydantic models describing event payloads and outbound messages."""
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class BatchResult(str, Enum):
    """Terminal result string returned for one invocation."""

    SUCCESS = "Success"
    EMAIL_FAILED = "Error sending email"
    TOKEN_UPDATE_FAILED = "Error updating expiration time"

    def __str__(self) -> str:
        return self.value


class NotificationRecord(BaseModel):
    """One verification request carried in an SNS message body."""

    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(min_length=1)
    activation_link: str = Field(alias="activationLink", min_length=1)
    token_id: str | None = Field(default=None, alias="tokenId")


class EmailCredentials(BaseModel):
    """Mailgun API key and sending domain resolved for one invocation."""

    api_key: SecretStr
    domain_name: str = Field(min_length=1)

    @property
    def from_address(self) -> str:
        return f"noreply@{self.domain_name}"


class VerificationEmail(BaseModel):
    """Schema for a rendered verification message."""

    sender: str
    to: str
    subject: str
    text: str
    html: str | None = None

    def as_form_data(self) -> dict[str, str]:
        """Return the form fields expected by the Mailgun messages endpoint."""

        data = {
            "from": self.sender,
            "to": self.to,
            "subject": self.subject,
            "text": self.text,
        }
        if self.html is not None:
            data["html"] = self.html
        return data


class TokenExpirationUpdate(BaseModel):
    """New expiration timestamp for a confirmation token."""

    token_id: str
    new_expiration: datetime
