import pytest
from sqlmodel import Session

from src.bookstore.core.services.auth.auth_service import Principal
from src.bookstore.core.services.catalog.book_service import BookService
from src.bookstore.core.services.catalog.combo_service import ComboService
from src.bookstore.core.services.catalog.taxonomy_service import (
    AuthorService,
    CategoryService,
    PublisherService,
)
from src.bookstore.core.services.shop.address_service import AddressService
from src.bookstore.entities.catalog.author import Author, AuthorCreate
from src.bookstore.entities.catalog.book import BookCreate, BookDetail
from src.bookstore.entities.catalog.category import Category, CategoryCreate
from src.bookstore.entities.catalog.combo import ComboCreate, ComboDetail, ComboItem
from src.bookstore.entities.catalog.publisher import Publisher, PublisherCreate
from src.bookstore.entities.shop.address import Address, AddressCreate


@pytest.fixture
def category(session: Session) -> Category:
    category = CategoryService(session).create(CategoryCreate(name="Kỹ năng sống"))
    session.commit()
    return category


@pytest.fixture
def author(session: Session) -> Author:
    author = AuthorService(session).create(AuthorCreate(name="Dale Carnegie"))
    session.commit()
    return author


@pytest.fixture
def publisher(session: Session) -> Publisher:
    publisher = PublisherService(session).create(PublisherCreate(name="NXB Tổng Hợp"))
    session.commit()
    return publisher


@pytest.fixture
def make_book(session: Session, category: Category, author: Author, publisher: Publisher):
    """Factory creating active books with ``copies`` available copies."""
    created = 0

    def _make(
        title: str | None = None,
        *,
        copies: int = 5,
        original_price: int = 150000,
        sale_price: int = 120000,
        **fields,
    ) -> BookDetail:
        nonlocal created
        created += 1
        data = {
            "title": title or f"Book {created}",
            "author_id": author.id,
            "publisher_id": publisher.id,
            "category_id": category.id,
            "isbn": f"978604{created:07d}",
            "images": [f"https://img.test/book-{created}.jpg"],
            "original_price": original_price,
            "sale_price": sale_price,
            "initial_copies": copies,
            "import_price": 60000,
            **fields,
        }
        book = BookService(session).create(BookCreate(**data))
        session.commit()
        return book

    return _make


@pytest.fixture
def book(make_book) -> BookDetail:
    return make_book("Đắc Nhân Tâm", description="Nghệ thuật thu phục lòng người")


@pytest.fixture
def second_book(make_book) -> BookDetail:
    return make_book("Quẳng Gánh Lo Đi", copies=3, original_price=100000, sale_price=80000)


@pytest.fixture
def combo(session: Session, book: BookDetail, second_book: BookDetail) -> ComboDetail:
    combo = ComboService(session).create(
        ComboCreate(
            name="Combo Dale Carnegie",
            items=[
                ComboItem(book_id=book.id, quantity=1),
                ComboItem(book_id=second_book.id, quantity=1),
            ],
            combo_price=180000,
        )
    )
    session.commit()
    return combo


@pytest.fixture
def address(session: Session, customer: Principal) -> Address:
    address = AddressService(session).create(
        customer.id,
        AddressCreate(
            recipient_name="Nguyen Van An",
            phone="0901234567",
            province="Hồ Chí Minh",
            district="Quận 1",
            ward="Phường Bến Nghé",
            detail_address="12 Lê Lợi",
        ),
    )
    session.commit()
    return address
