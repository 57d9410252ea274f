"""Shared utilities for CLI commands."""

from collections.abc import Iterator
from contextlib import contextmanager

import typer
from rich.console import Console
from sqlmodel import Session

from src.bookstore.core.services.database.db_session import DbSessionService

console = Console()


@contextmanager
def db_session() -> Iterator[Session]:
    """Committed session for one command; any failure exits with status 1."""
    try:
        with DbSessionService().session_scope() as session:
            yield session
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]❌ {type(e).__name__}: {e}[/red]")
        raise typer.Exit(1) from e
