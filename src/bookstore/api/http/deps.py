"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from fastapi import Depends, Query, Request
from sqlmodel import Session

from src.bookstore.api.http.app_data import AppServices
from src.bookstore.core.errors import ForbiddenError, UnauthorizedError
from src.bookstore.core.services.auth.auth_service import AuthService, Principal, Role
from src.bookstore.core.services.jwt import JwtGeneratorService, JwtVerificationService


def get_db_service(request: Request):
    services: AppServices = request.app.state.services
    return services.database


def get_session(request: Request) -> Iterator[Session]:
    """One session per request; routers commit, anything uncommitted is rolled back."""
    session = get_db_service(request).get_session()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


def get_jwt_verify_service(request: Request) -> JwtVerificationService:
    """Get the JWT verification service instance."""
    services: AppServices = request.app.state.services
    return services.token_verifier


def get_jwt_generation_service(request: Request) -> JwtGeneratorService:
    """Get the JWT generation service instance."""
    services: AppServices = request.app.state.services
    return services.token_issuer


def get_auth_service(
    session: Session = Depends(get_session),
    jwt_gen: JwtGeneratorService = Depends(get_jwt_generation_service),
) -> AuthService:
    return AuthService(session, jwt_gen)


def _bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    return auth_header.split(" ", 1)[1].strip() or None


def get_current_principal(
    request: Request,
    session: Session = Depends(get_session),
    jwt_verify: JwtVerificationService = Depends(get_jwt_verify_service),
) -> Principal:
    """Authenticate the request using a Bearer token."""
    token = _bearer_token(request)
    if token is None:
        raise UnauthorizedError("Not authorized, no token")
    claims = jwt_verify.verify_jwt(token)
    principal = AuthService(session).resolve(claims.sub, claims.role)
    request.state.uid = principal.id
    request.state.role = principal.role
    return principal


def get_optional_principal(
    request: Request,
    session: Session = Depends(get_session),
    jwt_verify: JwtVerificationService = Depends(get_jwt_verify_service),
) -> Principal | None:
    """Like ``get_current_principal`` but anonymous requests pass through."""
    if _bearer_token(request) is None:
        return None
    return get_current_principal(request, session, jwt_verify)


def require_role(required_role: Role):
    """Create a dependency that requires a specific role for the authenticated principal."""

    def dep(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role != required_role:
            raise ForbiddenError(f"Access denied. {required_role.title()} only.")
        return principal

    return dep


require_admin = require_role(Role.ADMIN)
require_customer = require_role(Role.CUSTOMER)


@dataclass
class PageParams:
    page: int
    limit: int
    sort_by: str | None


def paging(default_limit: int = 10, default_sort: str | None = None):
    """Create a dependency reading ``page``, ``limit`` and ``sort_by`` query parameters."""

    def dep(
        page: int = Query(1, ge=1),
        limit: int = Query(default_limit, ge=1, le=100),
        sort_by: str | None = Query(default_sort, alias="sort"),
    ) -> PageParams:
        return PageParams(page=page, limit=limit, sort_by=sort_by)

    return dep
