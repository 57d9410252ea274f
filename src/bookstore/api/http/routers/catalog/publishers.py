from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from src.bookstore.api.http.deps import PageParams, get_session, paging, require_admin
from src.bookstore.core.services.catalog.taxonomy_service import PublisherService
from src.bookstore.entities.catalog.publisher import (
    Publisher,
    PublisherCreate,
    PublisherUpdate,
    PublisherWithCount,
)
from src.bookstore.entities.catalog.book import Book
from src.bookstore.entities.core._base import Page

router = APIRouter(prefix="/publishers", tags=["publishers"])


@router.get("", response_model=Page[PublisherWithCount])
def list_publishers(
    search: str | None = None,
    params: PageParams = Depends(paging(20, "name")),
    session: Session = Depends(get_session),
) -> Page[PublisherWithCount]:
    return PublisherService(session).list_items(search, params.page, params.limit, params.sort_by)


@router.get("/{publisher_id}", response_model=PublisherWithCount)
def get_publisher(publisher_id: str, session: Session = Depends(get_session)) -> PublisherWithCount:
    return PublisherService(session).get(publisher_id)


@router.get("/{publisher_id}/books", response_model=Page[Book])
def publisher_books(
    publisher_id: str,
    params: PageParams = Depends(paging(12, "-created_at")),
    session: Session = Depends(get_session),
) -> Page[Book]:
    return PublisherService(session).books(publisher_id, params.page, params.limit, params.sort_by)


@router.post(
    "",
    response_model=Publisher,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_publisher(data: PublisherCreate, session: Session = Depends(get_session)) -> Publisher:
    publisher = PublisherService(session).create(data)
    session.commit()
    return publisher


@router.put("/{publisher_id}", response_model=Publisher, dependencies=[Depends(require_admin)])
def update_publisher(
    publisher_id: str, data: PublisherUpdate, session: Session = Depends(get_session)
) -> Publisher:
    publisher = PublisherService(session).update(publisher_id, data)
    session.commit()
    return publisher


@router.delete("/{publisher_id}", dependencies=[Depends(require_admin)])
def delete_publisher(publisher_id: str, session: Session = Depends(get_session)) -> dict[str, str]:
    PublisherService(session).delete(publisher_id)
    session.commit()
    return {"message": "Publisher deleted successfully"}
