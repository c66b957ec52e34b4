"""Notifier configuration management."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

from email_verifier.exceptions import ConfigurationError


CredentialsSource = Literal["environment", "secrets_manager"]
EmailBodyStyle = Literal["html", "plain"]


class Settings(BaseSettings):
    """Handler settings derived from environment variables."""

    credentials_source: CredentialsSource | None = Field(
        default=None,
        description="Where Mailgun credentials come from; inferred when unset.",
    )
    email_credentials_secret_name: str | None = None
    mail_gun_api_key: SecretStr | None = None
    mail_gun_domain_name: str | None = None

    update_token_expiration: bool = Field(default=False)
    token_expiration_minutes: int = Field(default=2, ge=1)
    email_body_style: EmailBodyStyle = Field(default="html")

    database_url: str | None = Field(
        default=None,
        description="SQLAlchemy-compatible database URL; overrides the RDS_* parts.",
    )
    rds_host: str | None = None
    rds_port: int | None = Field(default=None, ge=1, le=65535)
    rds_database: str | None = None
    rds_username: str | None = None
    rds_password: SecretStr | None = None
    rds_driver: str = Field(default="postgresql+psycopg2")

    mailgun_base_url: str = Field(default="https://api.mailgun.net")
    mailgun_timeout_seconds: float | None = Field(default=None, gt=0)
    aws_region: str | None = None

    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    log_dir: Path | None = Field(default=None)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        valid = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
        upper = value.upper()
        if upper not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(sorted(valid))}")
        return upper

    @field_validator("mailgun_base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator(
        "email_credentials_secret_name",
        "mail_gun_domain_name",
        "database_url",
        "rds_host",
        "rds_database",
        "rds_username",
        mode="before",
    )
    @classmethod
    def blank_as_missing(cls, value):
        """Treat empty environment values the same as unset ones."""

        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def check_required_for_variant(self) -> "Settings":
        """Fail eagerly when the selected variant is missing a required value."""

        if self.credentials_source is None:
            self.credentials_source = (
                "secrets_manager" if self.email_credentials_secret_name else "environment"
            )

        missing: list[str] = []
        if self.credentials_source == "secrets_manager":
            if not self.email_credentials_secret_name:
                missing.append("EMAIL_CREDENTIALS_SECRET_NAME")
        else:
            if self.mail_gun_api_key is None or not self.mail_gun_api_key.get_secret_value():
                missing.append("MAIL_GUN_API_KEY")
            if not self.mail_gun_domain_name:
                missing.append("MAIL_GUN_DOMAIN_NAME")

        if self.update_token_expiration and not self.database_url:
            for env_name, value in (
                ("RDS_HOST", self.rds_host),
                ("RDS_DATABASE", self.rds_database),
                ("RDS_USERNAME", self.rds_username),
            ):
                if not value:
                    missing.append(env_name)

        if missing:
            raise ValueError(f"Missing required configuration: {', '.join(missing)}")
        return self

    def sqlalchemy_url(self) -> str | URL:
        """Return the database URL used for token expiration updates."""

        if self.database_url:
            return self.database_url
        return URL.create(
            drivername=self.rds_driver,
            username=self.rds_username,
            password=self.rds_password.get_secret_value() if self.rds_password else None,
            host=self.rds_host,
            port=self.rds_port,
            database=self.rds_database,
        )


def load_settings(**overrides) -> Settings:
    """Build settings, raising ConfigurationError instead of ValidationError."""

    try:
        return Settings(**overrides)
    except ValidationError as err:
        # Only field names and messages: input values may hold secrets.
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'settings'}: {error['msg']}"
            for error in err.errors()
        )
        raise ConfigurationError(f"Invalid configuration: {problems}") from None


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance so warm invocations reuse it."""

    return load_settings()
