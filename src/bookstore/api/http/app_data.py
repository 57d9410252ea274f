from dataclasses import dataclass

from src.bookstore.core.services.database.db_session import DbSessionService
from src.bookstore.core.services.jwt import JwtGeneratorService, JwtVerificationService


@dataclass
class AppServices:
    """Long-lived services shared by every request, kept on ``app.state.services``."""

    database: DbSessionService
    token_issuer: JwtGeneratorService
    token_verifier: JwtVerificationService

    def close(self) -> None:
        self.database.engine.dispose()
