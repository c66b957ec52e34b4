"""Persistence of confirmation token expiration windows."""
import logging

from sqlalchemy import update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from email_verifier.exceptions import TokenUpdateError
from email_verifier.models.database_models import ConfirmationTokenDetail
from email_verifier.models.schemas import TokenExpirationUpdate


logger = logging.getLogger(__name__)


class TokenRepository:
    """Writes new expiration timestamps to ``confirmation_token_detail``."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def extend_expiration(self, change: TokenExpirationUpdate) -> int:
        """Apply ``change`` and return the number of rows it matched.

        Each call opens its own connection and transaction; both are released
        before returning, whether the statement succeeded or not.
        """

        expiration = change.new_expiration
        if expiration.tzinfo is not None:
            # Column is a naive timestamp holding UTC.
            expiration = expiration.replace(tzinfo=None)

        table = ConfirmationTokenDetail.__table__
        stmt = (
            update(table)
            .where(table.c.confirmation_token == change.token_id)
            .values(expiration_date=expiration)
        )
        try:
            with self._engine.begin() as conn:
                result = conn.execute(stmt)
                matched = result.rowcount
        except SQLAlchemyError as err:
            raise TokenUpdateError(
                f"Failed to update expiration for token {change.token_id}: {err}"
            ) from err

        logger.debug("Token %s expiration update matched %d row(s)", change.token_id, matched)
        return matched
