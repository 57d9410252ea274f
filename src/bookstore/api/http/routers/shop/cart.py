from fastapi import APIRouter, Depends
from sqlmodel import Session

from src.bookstore.api.http.deps import get_session, require_customer
from src.bookstore.core.services.auth.auth_service import Principal
from src.bookstore.core.services.shop.cart_service import CartService
from src.bookstore.entities.shop.cart import CartItemAdd, CartItemUpdate, CartView

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartView)
def get_cart(
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> CartView:
    cart = CartService(session).view(principal.id)
    session.commit()
    return cart


@router.post("/items", response_model=CartView)
def add_to_cart(
    data: CartItemAdd,
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> CartView:
    cart = CartService(session).add_item(principal.id, data)
    session.commit()
    return cart


@router.put("/items/{item_id}", response_model=CartView)
def update_cart_item(
    item_id: str,
    data: CartItemUpdate,
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> CartView:
    cart = CartService(session).update_item(principal.id, item_id, data.quantity)
    session.commit()
    return cart


@router.delete("/items/{item_id}", response_model=CartView)
def remove_cart_item(
    item_id: str,
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> CartView:
    cart = CartService(session).remove_item(principal.id, item_id)
    session.commit()
    return cart


@router.delete("/clear", response_model=CartView)
def clear_cart(
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> CartView:
    cart = CartService(session).clear(principal.id)
    session.commit()
    return cart
