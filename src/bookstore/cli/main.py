"""Command-line entry point for the bookstore service."""

import typer

from src.bookstore.runtime.context import get_config

from .db_commands import create_admin, db_app, init_db, seed
from .job_commands import cleanup_carts, cleanup_recommendations, jobs_app
from .utils import console

app = typer.Typer(
    name="bookstore",
    help="Bookstore API - database setup, maintenance jobs and the HTTP server",
    rich_markup_mode="rich",
)

app.add_typer(db_app, name="db")
app.add_typer(jobs_app, name="jobs")

# top-level shortcuts for the everyday commands
app.command("init-db")(init_db)
app.command("create-admin")(create_admin)
app.command("seed")(seed)
app.command("cleanup-carts")(cleanup_carts)
app.command("cleanup-recommendations")(cleanup_recommendations)


@app.command()
def serve(
    host: str | None = typer.Option(None, help="Bind address, defaults to app.host"),
    port: int | None = typer.Option(None, help="Port, defaults to app.port"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    config = get_config()
    bind_host = host or config.app.host
    bind_port = port or config.app.port
    console.print(
        f"[blue]🚀 Serving {config.app.name} on http://{bind_host}:{bind_port}[/blue]"
    )
    uvicorn.run(
        "src.bookstore.api.http.app:app",
        host=bind_host,
        port=bind_port,
        reload=reload,
        access_log=False,
    )


if __name__ == "__main__":
    app()
