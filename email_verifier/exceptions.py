"""Error types raised by the verification notifier."""


class NotifierError(Exception):
    """Base class for notifier failures."""


class ConfigurationError(NotifierError):
    """Required configuration is missing or invalid. Fatal for the invocation."""


class CredentialsError(NotifierError):
    """Mailgun credentials could not be resolved. Fatal for the invocation."""


class PayloadError(NotifierError):
    """An event record is malformed or lacks a required field. Fatal for the invocation."""


class EmailSendError(NotifierError):
    """Mailgun rejected or never received a message. Aborts the batch."""


class TokenUpdateError(NotifierError):
    """The confirmation token expiration could not be written. Aborts the batch."""
