"""
Database connection management.

The engine (and its connection pool) is owned by a `Database` object that
the app builds at startup and disposes at shutdown. Nothing here is created
at import time.
"""

import logging
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool


logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """
    Owns the SQLAlchemy engine and the session factory bound to it.

    Args:
        url: SQLAlchemy database URL (e.g. postgresql+psycopg2://..., sqlite:///./x.db)
        echo: Log every SQL statement (debug only)
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine = create_engine(url, echo=echo, **self._engine_options(url))
        self.session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine
        )

    @staticmethod
    def _engine_options(url: str) -> dict:
        if not url.startswith("sqlite"):
            return {"pool_pre_ping": True}

        options = {"connect_args": {"check_same_thread": False}}
        # An in-memory database lives inside one connection, so share it
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options

    def create_tables(self) -> None:
        """Create tables for every model registered on Base"""
        # Import models so they're registered with Base
        from shortlink_app import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        return self.session_factory()

    def sessions(self) -> Iterator[Session]:
        """Yield a session and close it afterwards (FastAPI dependency style)"""
        db = self.session_factory()
        try:
            yield db
        finally:
            db.close()

    def dispose(self) -> None:
        """Close every pooled connection"""
        self.engine.dispose()
        logger.info("Database connection pool closed")
