"""Send one verification email through the handler from the command line."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from email_verifier.config import get_settings
from email_verifier.exceptions import NotifierError
from email_verifier.handler import NotificationHandler
from email_verifier.logging_config import configure_logging
from email_verifier.models.schemas import BatchResult


logger = logging.getLogger("scripts.send_test_event")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Invoke the verification notifier with a locally built SNS event",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Send a verification email using credentials from .env
  python scripts/send_test_event.py --email user@example.com \\
      --activation-link https://example.com/activate?token=abc

  # Also extend the token expiration (requires UPDATE_TOKEN_EXPIRATION=true)
  python scripts/send_test_event.py --email user@example.com \\
      --activation-link https://example.com/activate?token=abc --token-id abc
        """,
    )
    parser.add_argument("--email", required=True, help="Recipient address")
    parser.add_argument("--activation-link", required=True, help="Link to include in the email")
    parser.add_argument("--token-id", default=None, help="Confirmation token to extend")
    return parser.parse_args(argv)


def build_event(email: str, activation_link: str, token_id: str | None = None) -> dict[str, Any]:
    """Wrap a single verification request in an SNS-shaped event."""

    payload: dict[str, str] = {"email": email, "activationLink": activation_link}
    if token_id:
        payload["tokenId"] = token_id
    return {"Records": [{"Sns": {"Message": json.dumps(payload)}}]}


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging()

    try:
        handler = NotificationHandler(get_settings())
        result = handler.handle(build_event(args.email, args.activation_link, args.token_id))
    except NotifierError as err:
        logger.error("❌ Invocation failed: %s", err)
        return 1

    print(result.value)
    return 0 if result is BatchResult.SUCCESS else 1


if __name__ == "__main__":
    sys.exit(main())
