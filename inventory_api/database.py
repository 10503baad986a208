from dataclasses import dataclass

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from inventory_api.config import Settings

# Base class for models
Base = declarative_base()


def build_engine(settings: Settings) -> Engine:
    """
    Create the SQLAlchemy engine for the configured database.

    Server databases get a bounded connection pool: a request waits up to
    DB_POOL_TIMEOUT seconds for a free connection and then fails.
    In-memory SQLite shares a single connection so every session sees
    the same database.
    """
    url = make_url(settings.DATABASE_URL)

    if url.get_backend_name() == "sqlite":
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)

    return create_engine(
        url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_pre_ping=True,
    )


@dataclass
class AppContext:
    """Everything a request handler needs, built once per application."""
    settings: Settings
    engine: Engine
    session_factory: sessionmaker

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppContext":
        engine = build_engine(settings)
        session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        return cls(settings=settings, engine=engine, session_factory=session_factory)

    def create_tables(self) -> None:
        # Importing registers the tables on Base.metadata
        from inventory_api.models import product, sale, user  # noqa: F401

        Base.metadata.create_all(bind=self.engine)


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_db(request: Request):
    """
    Dependency to get database session.
    Yields a database session and closes it after use.
    """
    db = get_context(request).session_factory()
    try:
        yield db
    finally:
        db.close()
