from datetime import date
from enum import StrEnum

from loguru import logger
from pydantic import BaseModel, Field
from sqlmodel import Session

from src.bookstore.core.errors import BadRequestError, ConflictError, UnauthorizedError
from src.bookstore.core.services.auth.password import hash_password, verify_password
from src.bookstore.core.services.jwt.jwt_gen import JwtGeneratorService
from src.bookstore.entities.core.admin import Admin, AdminCreate, AdminRepository
from src.bookstore.entities.core.customer import Customer, CustomerRegister, CustomerRepository
from src.bookstore.entities.core.customer.entity import DEFAULT_AVATAR, Gender
from src.bookstore.entities.shop.address.entity import PHONE_PATTERN


class Role(StrEnum):
    ADMIN = "admin"
    CUSTOMER = "customer"


class Principal(BaseModel):
    """The authenticated admin or customer behind a request."""

    id: str
    role: Role
    email: str
    full_name: str
    avatar: str | None = None
    phone: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @classmethod
    def of(cls, account: Admin | Customer, role: Role) -> "Principal":
        return cls(
            id=account.id,
            role=role,
            email=account.email,
            full_name=account.full_name,
            avatar=account.avatar,
            phone=account.phone,
        )


class LoginRequest(BaseModel):
    email: str
    password: str


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(min_length=6)


class ProfileUpdate(BaseModel):
    full_name: str | None = Field(default=None, min_length=2, max_length=100)
    phone: str | None = Field(default=None, pattern=PHONE_PATTERN)
    date_of_birth: date | None = None
    gender: Gender | None = None
    avatar: str | None = None


class AuthResult(BaseModel):
    user: Principal
    token: str


class AuthService:
    """Registration, login and password management for both audiences."""

    def __init__(self, db_session: Session, jwt_service: JwtGeneratorService | None = None):
        self._customers = CustomerRepository(db_session)
        self._admins = AdminRepository(db_session)
        self._jwt = jwt_service or JwtGeneratorService()

    def _result(self, account: Admin | Customer, role: Role) -> AuthResult:
        return AuthResult(
            user=Principal.of(account, role),
            token=self._jwt.generate_access_token(account.id, role.value),
        )

    def register(self, data: CustomerRegister) -> AuthResult:
        if self._customers.get_by_email(data.email):
            raise ConflictError("Email already exists")
        customer = self._customers.create(
            Customer(
                email=data.email,
                password_hash=hash_password(data.password),
                full_name=data.full_name,
                phone=data.phone,
                avatar=DEFAULT_AVATAR,
            )
        )
        logger.info("Customer registered: {}", customer.id)
        return self._result(customer, Role.CUSTOMER)

    def login(self, data: LoginRequest) -> AuthResult:
        customer = self._customers.get_by_email(data.email)
        if customer is None or not verify_password(data.password, customer.password_hash):
            logger.info("Failed customer login for {}", data.email)
            raise UnauthorizedError("Invalid email or password")
        if not customer.is_active:
            raise UnauthorizedError("Account has been deactivated")
        return self._result(customer, Role.CUSTOMER)

    def admin_login(self, data: LoginRequest) -> AuthResult:
        admin = self._admins.get_by_email(data.email)
        if admin is None or not verify_password(data.password, admin.password_hash):
            logger.info("Failed admin login for {}", data.email)
            raise UnauthorizedError("Invalid email or password")
        return self._result(admin, Role.ADMIN)

    def resolve(self, principal_id: str, role: str) -> Principal:
        """Load the principal named by a verified token."""
        if role == Role.ADMIN:
            admin = self._admins.get(principal_id)
            if admin is None:
                raise UnauthorizedError("User not found")
            return Principal.of(admin, Role.ADMIN)
        customer = self._customers.get(principal_id)
        if customer is None:
            raise UnauthorizedError("User not found")
        if not customer.is_active:
            raise UnauthorizedError("Account has been deactivated")
        return Principal.of(customer, Role.CUSTOMER)

    def change_password(self, principal: Principal, data: PasswordChange) -> None:
        repo = self._admins if principal.is_admin else self._customers
        account = repo.get(principal.id)
        if account is None:
            raise UnauthorizedError("User not found")
        if not verify_password(data.current_password, account.password_hash):
            raise BadRequestError("Current password is incorrect")
        account.password_hash = hash_password(data.new_password)
        repo.update(account)
        logger.info("Password changed for {} {}", principal.role, principal.id)

    def update_profile(self, principal: Principal, data: ProfileUpdate) -> Principal:
        repo = self._admins if principal.is_admin else self._customers
        account = repo.get(principal.id)
        if account is None:
            raise UnauthorizedError("User not found")
        changes = data.model_dump(exclude_unset=True)
        if "avatar" in changes and not changes["avatar"]:
            changes["avatar"] = DEFAULT_AVATAR
        # admins have no birth date or gender
        fields = type(account).model_fields
        account = repo.update(
            account.with_changes({name: value for name, value in changes.items() if name in fields})
        )
        logger.info("Profile updated for {} {}", principal.role, principal.id)
        return Principal.of(account, principal.role)

    def create_admin(self, data: AdminCreate) -> Admin:
        if self._admins.get_by_email(data.email):
            raise ConflictError("Email already exists")
        admin = self._admins.create(
            Admin(
                email=data.email,
                password_hash=hash_password(data.password),
                full_name=data.full_name,
                phone=data.phone,
            )
        )
        logger.info("Admin created: {}", admin.email)
        return admin
