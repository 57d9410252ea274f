"""Demo data for a fresh database: back-office accounts, a small catalogue and customers.

Every record is matched on its natural key (name, e-mail or ISBN) and skipped when
it already exists, so seeding twice leaves the database unchanged.
"""

from datetime import date
from typing import Any

from loguru import logger
from pydantic import BaseModel
from sqlmodel import Session

from src.bookstore.core.services.admin.customer_service import CustomerService
from src.bookstore.core.services.auth.auth_service import AuthService
from src.bookstore.core.services.catalog.book_service import BookService
from src.bookstore.core.services.catalog.taxonomy_service import (
    AuthorService,
    CategoryService,
    PublisherService,
)
from src.bookstore.entities.catalog.author import AuthorCreate, AuthorRepository
from src.bookstore.entities.catalog.book import BookCreate, BookRepository
from src.bookstore.entities.catalog.category import CategoryCreate, CategoryRepository
from src.bookstore.entities.catalog.publisher import PublisherCreate, PublisherRepository
from src.bookstore.entities.core.admin import AdminCreate, AdminRepository
from src.bookstore.entities.core.customer import CustomerCreate, CustomerRepository
from src.bookstore.entities.core.customer.entity import Gender

ADMINS = [
    AdminCreate(
        email="admin@bookstore.com",
        password="admin123456",
        full_name="Administrator",
        phone="0901234567",
    ),
    AdminCreate(
        email="manager@bookstore.com",
        password="manager123456",
        full_name="Manager User",
        phone="0901234568",
    ),
]

CATEGORIES = [
    CategoryCreate(name="Văn học", description="Tiểu thuyết, truyện ngắn, thơ ca"),
    CategoryCreate(name="Kinh tế", description="Sách kinh doanh, quản trị, tài chính"),
    CategoryCreate(name="Tâm lý - Kỹ năng sống", description="Phát triển bản thân"),
    CategoryCreate(name="Thiếu nhi", description="Sách cho trẻ em"),
    CategoryCreate(name="Truyện tranh - Manga", description="Truyện tranh trong và ngoài nước"),
]

AUTHORS = [
    AuthorCreate(name="Nguyễn Nhật Ánh", nationality="Việt Nam"),
    AuthorCreate(name="Aoyama Gosho", nationality="Nhật Bản"),
    AuthorCreate(name="Dale Carnegie", nationality="Mỹ"),
    AuthorCreate(name="Paulo Coelho", nationality="Brazil"),
]

PUBLISHERS = [
    PublisherCreate(name="NXB Kim Đồng", address="55 Quang Trung, Hà Nội"),
    PublisherCreate(name="NXB Trẻ", address="161B Lý Chính Thắng, TP.HCM"),
    PublisherCreate(name="NXB Tổng hợp TP.HCM", address="62 Nguyễn Thị Minh Khai, TP.HCM"),
    PublisherCreate(name="Alphabooks"),
]

# (title, isbn, author, publisher, category, original price, sale price)
BOOKS = [
    (
        "Tôi thấy hoa vàng trên cỏ xanh",
        "9786041032305",
        "Nguyễn Nhật Ánh",
        "NXB Trẻ",
        "Văn học",
        120000,
        99000,
    ),
    ("Mắt biếc", "9786041032299", "Nguyễn Nhật Ánh", "NXB Trẻ", "Văn học", 110000, 88000),
    (
        "Thám tử lừng danh Conan - Tập 1",
        "9786042137652",
        "Aoyama Gosho",
        "NXB Kim Đồng",
        "Truyện tranh - Manga",
        25000,
        22000,
    ),
    (
        "Thám tử lừng danh Conan - Tập 2",
        "9786042137669",
        "Aoyama Gosho",
        "NXB Kim Đồng",
        "Truyện tranh - Manga",
        25000,
        22000,
    ),
    (
        "Đắc nhân tâm",
        "9786045645017",
        "Dale Carnegie",
        "NXB Tổng hợp TP.HCM",
        "Tâm lý - Kỹ năng sống",
        86000,
        76000,
    ),
]

CUSTOMERS = [
    CustomerCreate(
        email="customer1@gmail.com",
        password="customer123",
        full_name="Nguyễn Văn A",
        phone="0912345678",
        date_of_birth=date(2000, 5, 15),
        gender=Gender.MALE,
    ),
    CustomerCreate(
        email="customer2@gmail.com",
        password="customer123",
        full_name="Trần Thị B",
        phone="0923456789",
        date_of_birth=date(1998, 8, 20),
        gender=Gender.FEMALE,
    ),
]

PLACEHOLDER_COVER = "https://placehold.co/400x600?text=Book"


class SeedReport(BaseModel):
    """How many records of each kind were created by one run."""

    admins: int = 0
    categories: int = 0
    authors: int = 0
    publishers: int = 0
    books: int = 0
    customers: int = 0

    @property
    def total(self) -> int:
        return sum(self.model_dump().values())


class SeedService:
    def __init__(self, db_session: Session, copies_per_book: int = 10):
        self._session = db_session
        self._copies_per_book = copies_per_book

    def run(self) -> SeedReport:
        report = SeedReport()
        self._seed_admins(report)
        session = self._session
        categories = self._seed_named(
            report, "categories", CATEGORIES, CategoryRepository(session), CategoryService(session)
        )
        authors = self._seed_named(
            report, "authors", AUTHORS, AuthorRepository(session), AuthorService(session)
        )
        publishers = self._seed_named(
            report,
            "publishers",
            PUBLISHERS,
            PublisherRepository(session),
            PublisherService(session),
        )
        report.books = self._seed_books(categories, authors, publishers)
        self._seed_customers(report)
        logger.info("Seed finished: {}", report.model_dump())
        return report

    def _seed_admins(self, report: SeedReport) -> None:
        admins = AdminRepository(self._session)
        auth = AuthService(self._session)
        for data in ADMINS:
            if admins.get_by_email(data.email) is None:
                auth.create_admin(data)
                report.admins += 1

    def _seed_named(
        self, report: SeedReport, kind: str, items: list, repository: Any, service: Any
    ) -> dict[str, str]:
        """Create missing items and return the id of every item by name."""
        ids: dict[str, str] = {}
        for data in items:
            existing = repository.get_by_name(data.name)
            if existing is None:
                existing = service.create(data)
                setattr(report, kind, getattr(report, kind) + 1)
            ids[data.name] = existing.id
        return ids

    def _seed_books(
        self, categories: dict[str, str], authors: dict[str, str], publishers: dict[str, str]
    ) -> int:
        books = BookRepository(self._session)
        service = BookService(self._session)
        created = 0
        for title, isbn, author, publisher, category, original, sale in BOOKS:
            if books.get_by_isbn(isbn) is not None:
                continue
            service.create(
                BookCreate(
                    title=title,
                    isbn=isbn,
                    author_id=authors[author],
                    publisher_id=publishers[publisher],
                    category_id=categories[category],
                    images=[PLACEHOLDER_COVER],
                    original_price=original,
                    sale_price=sale,
                    initial_copies=self._copies_per_book,
                    import_price=sale * 7 // 10,
                )
            )
            created += 1
        return created

    def _seed_customers(self, report: SeedReport) -> None:
        customers = CustomerRepository(self._session)
        service = CustomerService(self._session)
        for data in CUSTOMERS:
            if customers.get_by_email(data.email) is None:
                service.create(data)
                report.customers += 1
