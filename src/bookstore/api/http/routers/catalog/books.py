"""Storefront catalog and back-office book management."""

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from src.bookstore.api.http.deps import (
    PageParams,
    get_optional_principal,
    get_session,
    paging,
    require_admin,
)
from src.bookstore.core.services.auth.auth_service import Principal
from src.bookstore.core.services.catalog.book_service import BookService
from src.bookstore.core.services.catalog.inventory_service import InventoryService
from src.bookstore.entities.catalog.book import Book, BookCreate, BookDetail, BookQuery, BookUpdate
from src.bookstore.entities.catalog.book_copy import BookCopiesCreate, BookCopy, CopyStatus
from src.bookstore.entities.core._base import Page

router = APIRouter(prefix="/books", tags=["books"])
admin_router = APIRouter(
    prefix="/admin/books", tags=["admin: books"], dependencies=[Depends(require_admin)]
)


@router.get("", response_model=Page[Book])
def list_books(
    category: str | None = None,
    author: str | None = None,
    publisher: str | None = None,
    min_price: int | None = Query(None, ge=0),
    max_price: int | None = Query(None, ge=0),
    search: str | None = None,
    include_inactive: bool = False,
    params: PageParams = Depends(paging(12, "-created_at")),
    principal: Principal | None = Depends(get_optional_principal),
    session: Session = Depends(get_session),
) -> Page[Book]:
    query = BookQuery(
        category_id=category,
        author_id=author,
        publisher_id=publisher,
        min_price=min_price,
        max_price=max_price,
        search=search,
        include_inactive=include_inactive and principal is not None and principal.is_admin,
    )
    return BookService(session).search(query, params.page, params.limit, params.sort_by)


@router.get("/slug/{slug}", response_model=BookDetail)
def get_book_by_slug(slug: str, session: Session = Depends(get_session)) -> BookDetail:
    book = BookService(session).view_by_slug(slug)
    session.commit()
    return book


@router.get("/{book_id}", response_model=BookDetail)
def get_book(book_id: str, session: Session = Depends(get_session)) -> BookDetail:
    book = BookService(session).view(book_id)
    session.commit()
    return book


@admin_router.post("", response_model=BookDetail, status_code=status.HTTP_201_CREATED)
def create_book(data: BookCreate, session: Session = Depends(get_session)) -> BookDetail:
    book = BookService(session).create(data)
    session.commit()
    return book


@admin_router.put("/{book_id}", response_model=BookDetail)
def update_book(
    book_id: str, data: BookUpdate, session: Session = Depends(get_session)
) -> BookDetail:
    book = BookService(session).update(book_id, data)
    session.commit()
    return book


@admin_router.delete("/{book_id}")
def delete_book(book_id: str, session: Session = Depends(get_session)) -> dict[str, str]:
    BookService(session).soft_delete(book_id)
    session.commit()
    return {"message": "Book deleted successfully"}


@admin_router.patch("/{book_id}/toggle-status", response_model=Book)
def toggle_book_status(book_id: str, session: Session = Depends(get_session)) -> Book:
    book = BookService(session).toggle_status(book_id)
    session.commit()
    return book


@admin_router.post(
    "/{book_id}/copies", response_model=list[BookCopy], status_code=status.HTTP_201_CREATED
)
def add_copies(
    book_id: str, data: BookCopiesCreate, session: Session = Depends(get_session)
) -> list[BookCopy]:
    copies = InventoryService(session).add_copies(book_id, data)
    session.commit()
    return copies


@admin_router.get("/{book_id}/copies", response_model=Page[BookCopy])
def list_book_copies(
    book_id: str,
    copy_status: CopyStatus | None = Query(None, alias="status"),
    params: PageParams = Depends(paging(20)),
    session: Session = Depends(get_session),
) -> Page[BookCopy]:
    return InventoryService(session).list_for_book(book_id, copy_status, params.page, params.limit)
