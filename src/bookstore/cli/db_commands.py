import typer
from fastapi import HTTPException
from rich.panel import Panel
from rich.table import Table

from src.bookstore.core.services.admin.seed_service import SeedService
from src.bookstore.core.services.auth.auth_service import AuthService
from src.bookstore.core.services.database.db_manage import DbManageService
from src.bookstore.core.services.database.db_session import DbSessionService
from src.bookstore.entities.core.admin import AdminCreate

from .utils import console, db_session

db_app = typer.Typer(help="🗄️ Database commands")


@db_app.command("init")
def init_db(
    drop: bool = typer.Option(False, "--drop", help="Drop every table first"),
) -> None:
    """Create all tables that do not exist yet."""
    service = DbManageService(DbSessionService().engine)
    if drop:
        typer.confirm("This deletes all data. Continue?", abort=True)
        service.drop_all()
    service.create_all()
    console.print("[green]✅ Database initialized[/green]")


@db_app.command("create-admin")
def create_admin(
    email: str = typer.Argument(..., help="Admin login e-mail"),
    full_name: str = typer.Option("Administrator", "--name", help="Display name"),
    password: str = typer.Option(
        ..., prompt=True, hide_input=True, confirmation_prompt=True, help="Login password"
    ),
    phone: str | None = typer.Option(None, help="Contact phone"),
) -> None:
    """Create a back-office account."""
    try:
        data = AdminCreate(email=email, password=password, full_name=full_name, phone=phone)
    except ValueError as e:
        console.print(f"[red]❌ Invalid admin data: {e}[/red]")
        raise typer.Exit(1) from None

    with db_session() as session:
        try:
            admin = AuthService(session).create_admin(data)
        except HTTPException as e:
            console.print(f"[red]❌ {e.detail}[/red]")
            raise typer.Exit(1) from None
        console.print(
            Panel.fit(
                f"[blue]ID:[/blue] {admin.id}\n[blue]Email:[/blue] {admin.email}",
                title="✅ Admin created",
                border_style="green",
            )
        )


@db_app.command("seed")
def seed(
    copies: int = typer.Option(10, min=0, max=1000, help="Stock copies created per book"),
) -> None:
    """Load demo admins, catalogue and customers; existing records are kept."""
    with db_session() as session:
        report = SeedService(session, copies_per_book=copies).run()
    table = Table(title="🌱 Seed data")
    table.add_column("Kind")
    table.add_column("Created", justify="right")
    for kind, created in report.model_dump().items():
        table.add_row(kind, str(created))
    console.print(table)
    if not report.total:
        console.print("[yellow]Nothing to do, demo data already present[/yellow]")
