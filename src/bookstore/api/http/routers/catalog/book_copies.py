"""Back-office inventory of physical book copies."""

from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from src.bookstore.api.http.deps import PageParams, get_session, paging, require_admin
from src.bookstore.core.services.catalog.inventory_service import BookCopyPage, InventoryService
from src.bookstore.entities.catalog.book_copy import (
    BookCopyDetail,
    BookCopyQuery,
    BookCopyStats,
    BookCopyStatusUpdate,
    BookCopyUpdate,
    CopyCondition,
    CopyStatus,
)

router = APIRouter(
    prefix="/admin/book-copies",
    tags=["admin: book copies"],
    dependencies=[Depends(require_admin)],
)


@router.get("", response_model=BookCopyPage)
def list_copies(
    copy_status: CopyStatus | None = Query(None, alias="status"),
    condition: CopyCondition | None = None,
    book_id: str | None = None,
    search: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    date_type: Literal["import", "sold"] = "import",
    params: PageParams = Depends(paging(20)),
    session: Session = Depends(get_session),
) -> BookCopyPage:
    query = BookCopyQuery(
        status=copy_status,
        condition=condition,
        book_id=book_id,
        search=search,
        start_date=start_date,
        end_date=end_date,
        date_type=date_type,
    )
    return InventoryService(session).list_copies(query, params.page, params.limit)


@router.get("/stats/by-book", response_model=list[BookCopyStats])
def copy_stats_by_book(session: Session = Depends(get_session)) -> list[BookCopyStats]:
    return InventoryService(session).stats_by_book()


@router.get("/{copy_id}", response_model=BookCopyDetail)
def get_copy(copy_id: str, session: Session = Depends(get_session)) -> BookCopyDetail:
    return InventoryService(session).get_copy(copy_id)


@router.put("/{copy_id}", response_model=BookCopyDetail)
def update_copy(
    copy_id: str, data: BookCopyUpdate, session: Session = Depends(get_session)
) -> BookCopyDetail:
    copy = InventoryService(session).update_copy(copy_id, data)
    session.commit()
    return copy


@router.put("/{copy_id}/status", response_model=BookCopyDetail)
def set_copy_status(
    copy_id: str, data: BookCopyStatusUpdate, session: Session = Depends(get_session)
) -> BookCopyDetail:
    copy = InventoryService(session).set_status(copy_id, data.status)
    session.commit()
    return copy


@router.delete("/{copy_id}")
def delete_copy(copy_id: str, session: Session = Depends(get_session)) -> dict[str, str]:
    InventoryService(session).delete_copy(copy_id)
    session.commit()
    return {"message": "Book copy deleted successfully"}
