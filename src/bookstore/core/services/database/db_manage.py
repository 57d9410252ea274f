"""Schema management: create the tables of every entity."""

from loguru import logger
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from src.bookstore.runtime.context import get_config


def register_tables() -> None:
    """Import every entity package so its tables join ``SQLModel.metadata``."""
    import src.bookstore.entities  # noqa: F401


class DbManageService:
    def __init__(self, engine: Engine | None = None):
        self._engine = engine or create_engine(get_config().database.connection_string, echo=False)

    def create_all(self) -> None:
        """Create all database tables that do not exist yet."""
        register_tables()
        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with {} tables", len(SQLModel.metadata.tables))

    def drop_all(self) -> None:
        register_tables()
        SQLModel.metadata.drop_all(self._engine)
        logger.warning("All database tables dropped")
