"""SQLAlchemy ORM models for the confirmation token store."""
from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from email_verifier.database import Base


class ConfirmationTokenDetail(Base):
    """Confirmation token issued alongside an activation link.

    The table is owned by the account service; this mapping only covers the
    columns the notifier reads or writes.
    """

    __tablename__ = "confirmation_token_detail"

    confirmation_token: Mapped[str] = mapped_column(String(255), primary_key=True)
    expiration_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
