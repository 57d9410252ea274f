from sqlmodel import select

from src.bookstore.core.helpers import utcnow
from src.bookstore.entities.core._repository import EntityRepository
from src.bookstore.entities.shop.wishlist.entity import Wishlist, WishlistItem
from src.bookstore.entities.shop.wishlist.table import WishlistItemTable, WishlistTable


class WishlistRepository(EntityRepository[Wishlist, WishlistTable]):
    entity_type = Wishlist
    table_type = WishlistTable

    def _to_entity(self, row: WishlistTable) -> Wishlist:
        lines = self._session.exec(
            select(WishlistItemTable)
            .where(WishlistItemTable.wishlist_id == row.id)
            .order_by(WishlistItemTable.added_at, WishlistItemTable.book_id)
        ).all()
        return Wishlist(
            id=row.id,
            customer_id=row.customer_id,
            created_at=row.created_at,
            updated_at=row.updated_at,
            items=[WishlistItem(book_id=line.book_id, added_at=line.added_at) for line in lines],
        )

    def get_by_customer(self, customer_id: str) -> Wishlist | None:
        return self._first(select(WishlistTable).where(WishlistTable.customer_id == customer_id))

    def get_or_create(self, customer_id: str) -> Wishlist:
        wishlist = self.get_by_customer(customer_id)
        if wishlist is None:
            wishlist = self.create(Wishlist(customer_id=customer_id))
        return wishlist

    def add_book(self, wishlist_id: str, book_id: str) -> None:
        self._session.add(
            WishlistItemTable(wishlist_id=wishlist_id, book_id=book_id, added_at=utcnow())
        )
        self._session.flush()

    def remove_book(self, wishlist_id: str, book_id: str) -> bool:
        line = self._session.get(WishlistItemTable, (wishlist_id, book_id))
        if line is None:
            return False
        self._session.delete(line)
        self._session.flush()
        return True
