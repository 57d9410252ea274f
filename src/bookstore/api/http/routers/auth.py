"""Registration, login and account endpoints for customers and admins."""

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from src.bookstore.api.http.deps import get_auth_service, get_current_principal, get_session
from src.bookstore.api.http.middleware.limiter import login_rate_limit
from src.bookstore.core.services.auth.auth_service import (
    AuthResult,
    AuthService,
    LoginRequest,
    PasswordChange,
    Principal,
    ProfileUpdate,
)
from src.bookstore.entities.core.customer import CustomerRegister

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=AuthResult,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(login_rate_limit())],
)
def register(
    data: CustomerRegister,
    session: Session = Depends(get_session),
    auth: AuthService = Depends(get_auth_service),
) -> AuthResult:
    result = auth.register(data)
    session.commit()
    return result


@router.post("/login", response_model=AuthResult, dependencies=[Depends(login_rate_limit())])
def login(data: LoginRequest, auth: AuthService = Depends(get_auth_service)) -> AuthResult:
    return auth.login(data)


@router.post(
    "/admin/login", response_model=AuthResult, dependencies=[Depends(login_rate_limit())]
)
def admin_login(data: LoginRequest, auth: AuthService = Depends(get_auth_service)) -> AuthResult:
    return auth.admin_login(data)


@router.get("/me", response_model=Principal)
def me(principal: Principal = Depends(get_current_principal)) -> Principal:
    return principal


@router.put("/change-password")
def change_password(
    data: PasswordChange,
    principal: Principal = Depends(get_current_principal),
    session: Session = Depends(get_session),
    auth: AuthService = Depends(get_auth_service),
) -> dict[str, str]:
    auth.change_password(principal, data)
    session.commit()
    return {"message": "Password changed successfully"}


@router.put("/profile", response_model=Principal)
def update_profile(
    data: ProfileUpdate,
    principal: Principal = Depends(get_current_principal),
    session: Session = Depends(get_session),
    auth: AuthService = Depends(get_auth_service),
) -> Principal:
    updated = auth.update_profile(principal, data)
    session.commit()
    return updated


@router.post("/logout")
def logout(principal: Principal = Depends(get_current_principal)) -> dict[str, str]:
    """Tokens are stateless; the client discards its copy."""
    return {"message": "Logged out successfully"}
