import pytest
from sqlmodel import Session

from src.bookstore.core.services.auth.auth_service import AuthService, Principal
from src.bookstore.core.services.jwt import JwtGeneratorService
from src.bookstore.entities.core.admin import Admin, AdminCreate
from src.bookstore.entities.core.customer import CustomerRegister
from tests.utils import bearer

CUSTOMER_PASSWORD = "secret123"
ADMIN_PASSWORD = "admin-pass"


@pytest.fixture
def admin(session: Session) -> Admin:
    admin = AuthService(session).create_admin(
        AdminCreate(email="admin@bookstore.test", password=ADMIN_PASSWORD, full_name="Store Admin")
    )
    session.commit()
    return admin


@pytest.fixture
def admin_headers(admin: Admin) -> dict[str, str]:
    return bearer(JwtGeneratorService().generate_access_token(admin.id, "admin"))


@pytest.fixture
def customer(session: Session) -> Principal:
    result = AuthService(session).register(
        CustomerRegister(
            email="reader@bookstore.test",
            password=CUSTOMER_PASSWORD,
            full_name="Nguyen Van An",
            phone="0901234567",
        )
    )
    session.commit()
    return result.user


@pytest.fixture
def customer_headers(customer: Principal) -> dict[str, str]:
    return bearer(JwtGeneratorService().generate_access_token(customer.id, "customer"))


@pytest.fixture
def other_customer(session: Session) -> Principal:
    result = AuthService(session).register(
        CustomerRegister(
            email="other@bookstore.test", password=CUSTOMER_PASSWORD, full_name="Tran Thi Binh"
        )
    )
    session.commit()
    return result.user


@pytest.fixture
def other_headers(other_customer: Principal) -> dict[str, str]:
    return bearer(JwtGeneratorService().generate_access_token(other_customer.id, "customer"))
