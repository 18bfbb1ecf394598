"""Database configuration and session management."""

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from recipeconsolidator.config import settings


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


def create_db_engine(database_url: str | None = None) -> Engine:
    """Create a sync engine for the key/value store."""
    url = database_url or settings.database_url
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, echo=False, connect_args=connect_args)


engine = create_db_engine()
SessionLocal = sessionmaker(engine, class_=Session, expire_on_commit=False)


def init_db(bind: Engine | None = None) -> None:
    """Create tables if they don't exist."""
    # Imported for its side effect of registering the tables on Base.metadata
    from recipeconsolidator import models  # noqa: F401

    Base.metadata.create_all(bind or engine)
