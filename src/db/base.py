"""SQLAlchemy engine and session setup."""

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from src.utils.config import DatabaseConfig
from src.utils.logger import get_logger

logger = get_logger(__name__)

Base = declarative_base()


def build_engine(config: DatabaseConfig) -> Engine:
    """Create an engine for the configured database URL.

    SQLite connections are shared across threads, and in-memory SQLite
    uses a single static connection so every session sees the same data.

    Args:
        config: Database configuration.

    Returns:
        Configured SQLAlchemy engine.
    """
    kwargs: dict = {"echo": config.echo}
    if config.url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in config.url or config.url == "sqlite://":
            kwargs["poolclass"] = StaticPool
    return create_engine(config.url, **kwargs)


def init_db(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    from src.db import models  # noqa: F401  registers the tables

    Base.metadata.create_all(engine)
    logger.info("Database tables ensured on %s", engine.url)


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Return a session factory whose objects stay readable after commit."""
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
