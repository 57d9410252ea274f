from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from src.bookstore.api.http.deps import (
    PageParams,
    get_session,
    paging,
    require_customer,
)
from src.bookstore.core.services.auth.auth_service import Principal
from src.bookstore.core.services.shop.review_service import ReviewService
from src.bookstore.entities.core._base import Page
from src.bookstore.entities.shop.review import (
    RatingStats,
    ReviewCreate,
    ReviewDetail,
    ReviewUpdate,
)

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.get("/book/{book_id}", response_model=Page[ReviewDetail])
def book_reviews(
    book_id: str,
    params: PageParams = Depends(paging(10, "-created_at")),
    session: Session = Depends(get_session),
) -> Page[ReviewDetail]:
    return ReviewService(session).for_book(book_id, params.page, params.limit, params.sort_by)


@router.get("/book/{book_id}/stats", response_model=RatingStats)
def book_rating_stats(book_id: str, session: Session = Depends(get_session)) -> RatingStats:
    return ReviewService(session).stats(book_id)


@router.post("", response_model=ReviewDetail, status_code=status.HTTP_201_CREATED)
def create_review(
    data: ReviewCreate,
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> ReviewDetail:
    review = ReviewService(session).create(principal.id, data)
    session.commit()
    return review


@router.get("/me", response_model=Page[ReviewDetail])
def my_reviews(
    params: PageParams = Depends(paging(10, "-created_at")),
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> Page[ReviewDetail]:
    return ReviewService(session).for_customer(
        principal.id, params.page, params.limit, params.sort_by
    )


@router.put("/{review_id}", response_model=ReviewDetail)
def update_review(
    review_id: str,
    data: ReviewUpdate,
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> ReviewDetail:
    review = ReviewService(session).update(principal, review_id, data)
    session.commit()
    return review


@router.delete("/{review_id}")
def delete_review(
    review_id: str,
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> dict[str, str]:
    ReviewService(session).delete(principal, review_id)
    session.commit()
    return {"message": "Review deleted successfully"}


@router.put("/{review_id}/like", response_model=ReviewDetail)
def like_review(
    review_id: str,
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> ReviewDetail:
    review = ReviewService(session).like(review_id)
    session.commit()
    return review
