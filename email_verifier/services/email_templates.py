"""Verification email rendering."""
from html import escape

from email_verifier.config import EmailBodyStyle
from email_verifier.models.schemas import EmailCredentials, VerificationEmail


SUBJECT = "Verify Your Email Address"


def _html_body(activation_link: str) -> str:
    href = escape(activation_link, quote=True)
    return (
        "<p>Dear User,</p>"
        "<p>Please click on the following link to verify your email address.</p>"
        f'<a href="{href}">Verify Email</a>'
        "<p>Thanks</p>"
    )


def _text_body(activation_link: str) -> str:
    return (
        "Dear User,\n\n"
        "Please click on the following link to verify your email address.\n"
        f"{activation_link}"
        "\n\nThanks"
    )


def _plain_sentence(activation_link: str, expiration_minutes: int) -> str:
    unit = "minute" if expiration_minutes == 1 else "minutes"
    return (
        "Please verify your email address by clicking the following link: "
        f"{activation_link}. This link will expire in {expiration_minutes} {unit}."
    )


def build_verification_email(
    credentials: EmailCredentials,
    recipient: str,
    activation_link: str,
    style: EmailBodyStyle = "html",
    expiration_minutes: int = 2,
) -> VerificationEmail:
    """Render the verification message for one recipient."""

    if style == "plain":
        return VerificationEmail(
            sender=credentials.from_address,
            to=recipient,
            subject=SUBJECT,
            text=_plain_sentence(activation_link, expiration_minutes),
        )

    return VerificationEmail(
        sender=credentials.from_address,
        to=recipient,
        subject=SUBJECT,
        text=_text_body(activation_link),
        html=_html_body(activation_link),
    )
