"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, create_engine

from src.bookstore.runtime.config.config_data import ConfigData
from src.bookstore.runtime.context import get_config


def _engine_options(config: ConfigData) -> dict[str, Any]:
    db = config.database
    if db.is_sqlite:
        if config.app.environment == "production":
            logger.warning("SQLite is not recommended for production, use PostgreSQL")
        return {"connect_args": {"check_same_thread": False, "timeout": 20}}

    return {
        "connect_args": {
            "application_name": f"{config.app.name}_{config.app.environment}",
            "connect_timeout": 30,
        },
        "pool_size": db.pool_size,
        "max_overflow": db.max_overflow,
        "pool_timeout": db.pool_timeout,
        "pool_recycle": db.pool_recycle,
        "pool_pre_ping": True,
    }


class DbSessionService:
    """Owns the engine; hands out sessions for requests, the CLI and jobs."""

    def __init__(self, config: ConfigData | None = None):
        config = config or get_config()
        self._engine = create_engine(
            config.database.connection_string,
            echo=config.database.echo,
            **_engine_options(config),
        )
        logger.bind(sqlite=config.database.is_sqlite).info(
            "Database engine ready for {}", config.app.environment
        )

    @property
    def engine(self) -> Engine:
        return self._engine

    def get_session(self) -> Session:
        return Session(self._engine, expire_on_commit=False, autoflush=True)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Commit on success, roll back and re-raise on error."""
        session = self.get_session()
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            logger.bind(error_type=type(e).__name__).error("Transaction rolled back: {}", e)
            raise
        finally:
            session.close()

    def health_check(self) -> bool:
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.bind(error_type=type(e).__name__).error("Database health check failed: {}", e)
            return False
        return True

    def get_pool_status(self) -> dict[str, int]:
        """Connection pool counters; pools without a counter report 0."""
        pool = self._engine.pool

        def counter(name: str) -> int:
            value = getattr(pool, name, 0)
            return value() if callable(value) else int(value)

        return {
            "size": counter("size"),
            "checked_in": counter("checkedin"),
            "checked_out": counter("checkedout"),
            "overflow": counter("overflow"),
        }
