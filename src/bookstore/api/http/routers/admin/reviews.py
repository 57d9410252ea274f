from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from src.bookstore.api.http.deps import PageParams, get_session, paging, require_admin
from src.bookstore.core.services.shop.review_service import ReviewService
from src.bookstore.entities.core._base import Page
from src.bookstore.entities.shop.review import ReviewDetail, ReviewQuery

router = APIRouter(
    prefix="/admin/reviews", tags=["admin: reviews"], dependencies=[Depends(require_admin)]
)


@router.get("", response_model=Page[ReviewDetail])
def list_reviews(
    book_id: str | None = None,
    customer_id: str | None = None,
    rating: int | None = Query(None, ge=1, le=5),
    is_hidden: bool | None = None,
    params: PageParams = Depends(paging(20, "-created_at")),
    session: Session = Depends(get_session),
) -> Page[ReviewDetail]:
    query = ReviewQuery(
        book_id=book_id, customer_id=customer_id, rating=rating, is_hidden=is_hidden
    )
    return ReviewService(session).search(query, params.page, params.limit, params.sort_by)


@router.put("/{review_id}/toggle-visibility", response_model=ReviewDetail)
def toggle_review_visibility(
    review_id: str, session: Session = Depends(get_session)
) -> ReviewDetail:
    review = ReviewService(session).toggle_visibility(review_id)
    session.commit()
    return review
