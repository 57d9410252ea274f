from fastapi import APIRouter, Depends
from sqlmodel import Session

from src.bookstore.api.http.deps import get_session, require_customer
from src.bookstore.core.services.auth.auth_service import Principal
from src.bookstore.core.services.shop.wishlist_service import WishlistService
from src.bookstore.entities.shop.wishlist import (
    MoveToCartResult,
    WishlistAdd,
    WishlistCheck,
    WishlistView,
)

router = APIRouter(prefix="/wishlist", tags=["wishlist"])


@router.get("", response_model=WishlistView)
def get_wishlist(
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> WishlistView:
    wishlist = WishlistService(session).view(principal.id)
    session.commit()
    return wishlist


@router.post("/items", response_model=WishlistView)
def add_to_wishlist(
    data: WishlistAdd,
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> WishlistView:
    wishlist = WishlistService(session).add(principal.id, data.book_id)
    session.commit()
    return wishlist


@router.delete("/items/{book_id}", response_model=WishlistView)
def remove_from_wishlist(
    book_id: str,
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> WishlistView:
    wishlist = WishlistService(session).remove(principal.id, book_id)
    session.commit()
    return wishlist


@router.get("/check/{book_id}", response_model=WishlistCheck)
def check_wishlist(
    book_id: str,
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> WishlistCheck:
    return WishlistService(session).check(principal.id, book_id)


@router.post("/move-to-cart", response_model=MoveToCartResult)
def move_to_cart(
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> MoveToCartResult:
    result = WishlistService(session).move_to_cart(principal.id)
    session.commit()
    return result
