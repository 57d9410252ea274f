from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from src.bookstore.api.http.deps import get_session, require_customer
from src.bookstore.core.services.auth.auth_service import Principal
from src.bookstore.core.services.recommendation.recommendation_service import (
    RecommendationService,
)
from src.bookstore.entities.shop.recommendation import RecommendationResult

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


@router.get("/personalized", response_model=RecommendationResult)
def personalized(
    limit: int | None = Query(None, ge=1, le=50),
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> RecommendationResult:
    result = RecommendationService(session).personalized(principal.id, limit)
    session.commit()
    return result


@router.get("/similar/{book_id}", response_model=RecommendationResult)
def similar(
    book_id: str,
    limit: int | None = Query(None, ge=1, le=50),
    session: Session = Depends(get_session),
) -> RecommendationResult:
    result = RecommendationService(session).similar(book_id, limit)
    session.commit()
    return result


@router.get("/trending", response_model=RecommendationResult)
def trending(
    limit: int | None = Query(None, ge=1, le=50),
    session: Session = Depends(get_session),
) -> RecommendationResult:
    result = RecommendationService(session).trending(limit)
    session.commit()
    return result


@router.delete("/cache")
def clear_cache(
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> dict[str, str | int]:
    removed = RecommendationService(session).clear_cache(principal.id)
    session.commit()
    return {"message": "Recommendation cache cleared", "removed": removed}
