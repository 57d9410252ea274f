from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from src.bookstore.api.http.deps import PageParams, get_session, paging, require_admin
from src.bookstore.core.services.catalog.taxonomy_service import AuthorService
from src.bookstore.entities.catalog.author import (
    Author,
    AuthorCreate,
    AuthorUpdate,
    AuthorWithCount,
)
from src.bookstore.entities.catalog.book import Book
from src.bookstore.entities.core._base import Page

router = APIRouter(prefix="/authors", tags=["authors"])


@router.get("", response_model=Page[AuthorWithCount])
def list_authors(
    search: str | None = None,
    params: PageParams = Depends(paging(20, "name")),
    session: Session = Depends(get_session),
) -> Page[AuthorWithCount]:
    return AuthorService(session).list_items(search, params.page, params.limit, params.sort_by)


@router.get("/{author_id}", response_model=AuthorWithCount)
def get_author(author_id: str, session: Session = Depends(get_session)) -> AuthorWithCount:
    return AuthorService(session).get(author_id)


@router.get("/{author_id}/books", response_model=Page[Book])
def author_books(
    author_id: str,
    params: PageParams = Depends(paging(12, "-created_at")),
    session: Session = Depends(get_session),
) -> Page[Book]:
    return AuthorService(session).books(author_id, params.page, params.limit, params.sort_by)


@router.post(
    "",
    response_model=Author,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_author(data: AuthorCreate, session: Session = Depends(get_session)) -> Author:
    author = AuthorService(session).create(data)
    session.commit()
    return author


@router.put("/{author_id}", response_model=Author, dependencies=[Depends(require_admin)])
def update_author(
    author_id: str, data: AuthorUpdate, session: Session = Depends(get_session)
) -> Author:
    author = AuthorService(session).update(author_id, data)
    session.commit()
    return author


@router.delete("/{author_id}", dependencies=[Depends(require_admin)])
def delete_author(author_id: str, session: Session = Depends(get_session)) -> dict[str, str]:
    AuthorService(session).delete(author_id)
    session.commit()
    return {"message": "Author deleted successfully"}
