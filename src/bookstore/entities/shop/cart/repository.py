from datetime import datetime

from sqlmodel import Session, col, select

from src.bookstore.entities.core._repository import EntityRepository
from src.bookstore.entities.shop.cart.entity import Cart, CartItem
from src.bookstore.entities.shop.cart.table import CartItemTable, CartTable


class CartItemRepository(EntityRepository[CartItem, CartItemTable]):
    entity_type = CartItem
    table_type = CartItemTable

    def _delete_rows(self, statement) -> int:
        rows = self._session.exec(statement).all()
        for row in rows:
            self._session.delete(row)
        self._session.flush()
        return len(rows)

    def delete_for_cart(self, cart_id: str) -> int:
        return self._delete_rows(select(CartItemTable).where(CartItemTable.cart_id == cart_id))

    def delete_expired(self, now: datetime) -> int:
        return self._delete_rows(
            select(CartItemTable).where(
                col(CartItemTable.reserved_until).is_not(None),
                CartItemTable.reserved_until < now,
            )
        )


class CartRepository(EntityRepository[Cart, CartTable]):
    """Carts are assembled with their items; items are written through ``items``."""

    entity_type = Cart
    table_type = CartTable

    def __init__(self, session: Session) -> None:
        super().__init__(session)
        self.items = CartItemRepository(session)

    def _to_entity(self, row: CartTable) -> Cart:
        lines = self._session.exec(
            select(CartItemTable)
            .where(CartItemTable.cart_id == row.id)
            .order_by(CartItemTable.added_at, CartItemTable.id)
        ).all()
        return Cart(
            id=row.id,
            customer_id=row.customer_id,
            created_at=row.created_at,
            updated_at=row.updated_at,
            items=[CartItem.model_validate(line, from_attributes=True) for line in lines],
        )

    def get_by_customer(self, customer_id: str) -> Cart | None:
        return self._first(select(CartTable).where(CartTable.customer_id == customer_id))

    def get_or_create(self, customer_id: str) -> Cart:
        cart = self.get_by_customer(customer_id)
        if cart is None:
            cart = self.create(Cart(customer_id=customer_id))
        return cart

    def touch(self, cart_id: str) -> Cart:
        """Bump ``updated_at`` after an item change and return the fresh cart."""
        return self.update(self.get(cart_id))  # type: ignore[arg-type]
