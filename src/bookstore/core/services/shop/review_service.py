from loguru import logger
from sqlmodel import Session

from src.bookstore.core.errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from src.bookstore.core.services.auth.auth_service import Principal
from src.bookstore.core.services.shop.order_service import OrderService
from src.bookstore.entities.catalog.book import BookRepository
from src.bookstore.entities.core._base import Page, Pagination, RefSummary
from src.bookstore.entities.core.customer import CustomerRepository
from src.bookstore.entities.shop.order import OrderRepository, OrderStatus
from src.bookstore.entities.shop.review import (
    RatingStats,
    Review,
    ReviewAuthor,
    ReviewCreate,
    ReviewDetail,
    ReviewQuery,
    ReviewRepository,
    ReviewUpdate,
)


class ReviewService:
    """Verified-purchase reviews; every change refreshes the book's rating."""

    def __init__(self, db_session: Session):
        self._reviews = ReviewRepository(db_session)
        self._books = BookRepository(db_session)
        self._orders = OrderRepository(db_session)
        self._customers = CustomerRepository(db_session)
        self._order_service = OrderService(db_session)

    def refresh_book_rating(self, book_id: str) -> None:
        book = self._books.get(book_id)
        if book is None:
            return
        book.average_rating, book.review_count = self._reviews.visible_summary(book_id)
        self._books.update(book)

    def _require(self, review_id: str) -> Review:
        review = self._reviews.get(review_id)
        if review is None:
            raise NotFoundError("Review not found")
        return review

    def _owned(self, principal: Principal, review_id: str) -> Review:
        review = self._require(review_id)
        if review.customer_id != principal.id:
            raise ForbiddenError("Not authorized")
        return review

    def _details(self, reviews: list[Review]) -> list[ReviewDetail]:
        customers = self._customers.get_many(review.customer_id for review in reviews)
        books = self._books.get_many(review.book_id for review in reviews)
        details = []
        for review in reviews:
            customer = customers.get(review.customer_id)
            book = books.get(review.book_id)
            details.append(
                ReviewDetail(
                    **review.model_dump(),
                    customer=ReviewAuthor(**customer.model_dump()) if customer else None,
                    book=RefSummary(id=book.id, name=book.title, slug=book.slug) if book else None,
                )
            )
        return details

    def _page(self, query: ReviewQuery, page: int, limit: int, sort_by: str) -> Page[ReviewDetail]:
        reviews, total = self._reviews.search(query, page, limit, sort_by)
        return Page(items=self._details(reviews), pagination=Pagination.build(page, limit, total))

    def create(self, customer_id: str, data: ReviewCreate) -> ReviewDetail:
        if self._books.get(data.book_id) is None:
            raise NotFoundError("Book not found")
        order = self._orders.get(data.order_id)
        if (
            order is None
            or order.customer_id != customer_id
            or order.status != OrderStatus.DELIVERED
        ):
            raise BadRequestError("Order not found or not delivered yet")
        if not self._order_service.contains_book(order, data.book_id):
            raise BadRequestError("You have not purchased this book")
        if self._reviews.find(customer_id, data.book_id, data.order_id):
            raise ConflictError("You have already reviewed this book for this order")

        review = self._reviews.create(
            Review(customer_id=customer_id, is_verified=True, **data.model_dump())
        )
        self.refresh_book_rating(review.book_id)
        logger.info("Review {} created for book {}", review.id, review.book_id)
        return self._details([review])[0]

    def for_book(
        self, book_id: str, page: int, limit: int, sort_by: str | None
    ) -> Page[ReviewDetail]:
        query = ReviewQuery(book_id=book_id, is_hidden=False)
        return self._page(query, page, limit, sort_by or "-created_at")

    def stats(self, book_id: str) -> RatingStats:
        return self._reviews.rating_stats(book_id)

    def for_customer(
        self, customer_id: str, page: int, limit: int, sort_by: str | None = None
    ) -> Page[ReviewDetail]:
        query = ReviewQuery(customer_id=customer_id)
        return self._page(query, page, limit, sort_by or "-created_at")

    def update(self, principal: Principal, review_id: str, data: ReviewUpdate) -> ReviewDetail:
        review = self._owned(principal, review_id)
        review = self._reviews.update(review.with_changes(data.model_dump(exclude_unset=True)))
        self.refresh_book_rating(review.book_id)
        return self._details([review])[0]

    def delete(self, principal: Principal, review_id: str) -> None:
        review = self._owned(principal, review_id)
        self._reviews.delete(review.id)
        self.refresh_book_rating(review.book_id)
        logger.info("Review {} deleted", review.id)

    def like(self, review_id: str) -> ReviewDetail:
        review = self._require(review_id)
        review.likes += 1
        return self._details([self._reviews.update(review)])[0]

    def search(
        self, query: ReviewQuery, page: int, limit: int, sort_by: str | None
    ) -> Page[ReviewDetail]:
        return self._page(query, page, limit, sort_by or "-created_at")

    def toggle_visibility(self, review_id: str) -> ReviewDetail:
        review = self._require(review_id)
        review.is_hidden = not review.is_hidden
        review = self._reviews.update(review)
        self.refresh_book_rating(review.book_id)
        logger.info("Review {} {}", review.id, "hidden" if review.is_hidden else "shown")
        return self._details([review])[0]
