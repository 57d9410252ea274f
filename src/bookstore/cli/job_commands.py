import typer

from src.bookstore.core.services.recommendation.recommendation_service import (
    RecommendationService,
)
from src.bookstore.core.services.shop.cart_service import CartService

from .utils import console, db_session

jobs_app = typer.Typer(help="🧹 Maintenance jobs, meant to be run from a scheduler")


@jobs_app.command("cleanup-carts")
def cleanup_carts() -> None:
    """Remove cart items whose reservation has expired."""
    with db_session() as session:
        removed = CartService(session).remove_expired()
    console.print(f"[green]✅ Removed {removed} expired cart items[/green]")


@jobs_app.command("cleanup-recommendations")
def cleanup_recommendations() -> None:
    """Delete expired recommendation cache entries."""
    with db_session() as session:
        removed = RecommendationService(session).remove_expired()
    console.print(f"[green]✅ Removed {removed} expired recommendation entries[/green]")
