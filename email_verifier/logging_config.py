"""Central logging configuration for the verification notifier."""
from __future__ import annotations

import logging
from logging.config import dictConfig
from pathlib import Path

from email_verifier.config import get_settings
from email_verifier.exceptions import ConfigurationError

_configured = False


def _default_config(log_dir: Path | None, level: str) -> dict:
    fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    handlers: dict = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
            "level": level,
        },
    }
    if log_dir is not None:
        handlers["file"] = {
            "class": "logging.FileHandler",
            "filename": str(log_dir / "notifier.log"),
            "encoding": "utf-8",
            "formatter": "standard",
            "level": level,
        }
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": fmt,
            },
        },
        "handlers": handlers,
        "root": {
            "level": level,
            "handlers": list(handlers),
        },
        "loggers": {
            # botocore and urllib3 are chatty at INFO
            "botocore": {"level": "WARNING"},
            "urllib3": {"level": "WARNING"},
        },
    }


def configure_logging() -> None:
    """Configure notifier logging once per process."""

    global _configured
    if _configured:
        return

    try:
        settings = get_settings()
        log_dir = settings.log_dir
        level = settings.log_level
    except ConfigurationError:
        # The handler re-raises the configuration error itself; log it to the console.
        log_dir = None
        level = "INFO"
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)

    dictConfig(_default_config(log_dir, level))
    _configured = True
