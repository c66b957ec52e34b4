"""Database engine and base model setup."""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from email_verifier.config import Settings


class Base(DeclarativeBase):
    """Declarative base for SQLAlchemy models."""


def create_db_engine(settings: Settings) -> Engine:
    """Return an engine that opens a fresh connection for every checkout.

    NullPool closes the DBAPI connection as soon as it is returned, so a
    connection never outlives the single update it was opened for.
    """

    return create_engine(
        settings.sqlalchemy_url(),
        echo=settings.debug,
        poolclass=NullPool,
        future=True,
    )
