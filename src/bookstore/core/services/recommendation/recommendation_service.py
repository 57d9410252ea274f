from datetime import timedelta

from loguru import logger
from sqlmodel import Session

from src.bookstore.core.errors import NotFoundError
from src.bookstore.core.helpers import utcnow
from src.bookstore.core.services.recommendation.similarity import (
    content_tokens,
    cosine_similarity,
    mean_vector,
    term_frequencies,
)
from src.bookstore.entities.catalog.author import AuthorRepository
from src.bookstore.entities.catalog.book import Book, BookRepository, BookSummary
from src.bookstore.entities.catalog.category import CategoryRepository
from src.bookstore.entities.catalog.combo import ComboRepository
from src.bookstore.entities.shop.order import OrderRepository
from src.bookstore.entities.shop.recommendation import (
    Recommendation,
    RecommendationAlgorithm,
    RecommendationLine,
    RecommendationRepository,
    RecommendationResult,
    RecommendationType,
    RecommendedBook,
)
from src.bookstore.entities.shop.wishlist import WishlistRepository
from src.bookstore.runtime.context import get_config

PERSONALIZED_REASON = "Based on your interests"
TRENDING_REASON = "Trending book"
SIMILAR_CANDIDATES = 50

Scored = tuple[Book, float, str]


def trending_score(book: Book) -> float:
    return (
        book.purchase_count * 0.5
        + book.average_rating * 10 * 0.3
        + book.view_count * 0.0001 * 0.2
    )


def similar_reason(same_category: bool, same_author: bool, text_score: float) -> str:
    if same_category and same_author:
        return "Same category and author"
    if same_category:
        return "Same category"
    if same_author:
        return "Same author"
    if text_score > 0.5:
        return "Similar title"
    return "Similar book"


def _ranked(scored: list[Scored], limit: int) -> list[Scored]:
    return sorted(scored, key=lambda item: (-item[1], item[0].id))[:limit]


class RecommendationService:
    """Content-based and popularity suggestions, cached per scope.

    Personalized lists are cached per customer, similar-book lists per source
    book and the trending list once for everybody. Cached scores are clamped
    to ``[0, 1]``; freshly computed ones are returned as scored.
    """

    def __init__(self, db_session: Session):
        self._books = BookRepository(db_session)
        self._authors = AuthorRepository(db_session)
        self._categories = CategoryRepository(db_session)
        self._combos = ComboRepository(db_session)
        self._orders = OrderRepository(db_session)
        self._wishlists = WishlistRepository(db_session)
        self._cache = RecommendationRepository(db_session)

    # -- scoring ----------------------------------------------------------
    def _vectors(self, books: list[Book]) -> dict[str, dict[str, float]]:
        authors = self._authors.get_many(book.author_id for book in books)
        categories = self._categories.get_many(book.category_id for book in books)
        vectors = {}
        for book in books:
            author = authors.get(book.author_id)
            category = categories.get(book.category_id)
            tokens = content_tokens(
                book.title,
                book.description,
                category.name if category else None,
                author.name if author else None,
            )
            vectors[book.id] = term_frequencies(tokens)
        return vectors

    def _trending(self, limit: int) -> list[Scored]:
        candidates = self._books.active_candidates(
            [], get_config().recommendation.candidate_limit
        )
        scored = [(book, round(trending_score(book), 4), TRENDING_REASON) for book in candidates]
        return _ranked(scored, limit)

    def _interacted_books(self, customer_id: str) -> list[Book]:
        book_ids: list[str] = []
        wishlist = self._wishlists.get_by_customer(customer_id)
        if wishlist is not None:
            book_ids += [item.book_id for item in wishlist.items]
        book_ids += self._orders.delivered_book_ids(customer_id)
        for combo in self._combos.get_many(self._orders.delivered_combo_ids(customer_id)).values():
            book_ids += [item.book_id for item in combo.items]
        books = self._books.get_many(book_ids)
        return [books[book_id] for book_id in dict.fromkeys(book_ids) if book_id in books]

    def _personalized(self, customer_id: str, limit: int) -> list[Scored] | None:
        interacted = self._interacted_books(customer_id)
        if not interacted:
            return None
        candidates = self._books.active_candidates(
            [book.id for book in interacted], get_config().recommendation.candidate_limit
        )
        if not candidates:
            return []
        vectors = self._vectors(interacted + candidates)
        profile = mean_vector(vectors[book.id] for book in interacted)
        scored = [
            (book, round(cosine_similarity(profile, vectors[book.id]), 4), PERSONALIZED_REASON)
            for book in candidates
        ]
        return _ranked(scored, limit)

    def _similar(self, source: Book, limit: int) -> list[Scored] | None:
        candidates = self._books.active_candidates(
            [source.id],
            SIMILAR_CANDIDATES,
            category_id=source.category_id,
            author_id=source.author_id,
        )
        if not candidates:
            return None
        vectors = self._vectors([source, *candidates])
        scored = []
        for book in candidates:
            text_score = cosine_similarity(vectors[source.id], vectors[book.id])
            same_category = book.category_id == source.category_id
            same_author = book.author_id == source.author_id
            score = text_score * 0.5 + (0.3 if same_category else 0) + (0.2 if same_author else 0)
            scored.append(
                (book, round(score, 4), similar_reason(same_category, same_author, text_score))
            )
        return _ranked(scored, limit)

    # -- cache ------------------------------------------------------------
    def _from_cache(
        self,
        customer_id: str | None,
        type: RecommendationType,
        limit: int,
        source_book_id: str | None = None,
    ) -> RecommendationResult | None:
        entry = self._cache.find_valid(customer_id, type, source_book_id, utcnow())
        if entry is None or not entry.recommended_books:
            return None
        books = self._books.get_many(item.book_id for item in entry.recommended_books)
        items = [
            RecommendationLine(
                book=BookSummary.from_book(books[item.book_id]),
                score=item.score,
                reason=item.reason,
            )
            for item in entry.recommended_books
            if item.book_id in books and books[item.book_id].is_active
        ]
        return RecommendationResult(
            type=entry.type,
            algorithm=entry.algorithm,
            source_book_id=entry.source_book_id,
            cached=True,
            items=items[:limit],
        )

    def _store(
        self,
        customer_id: str | None,
        type: RecommendationType,
        algorithm: RecommendationAlgorithm,
        scored: list[Scored],
        source_book_id: str | None = None,
    ) -> RecommendationResult:
        if scored:
            now = utcnow()
            self._cache.replace(
                Recommendation(
                    customer_id=customer_id,
                    type=type,
                    source_book_id=source_book_id,
                    algorithm=algorithm,
                    recommended_books=[
                        RecommendedBook(
                            book_id=book.id, score=min(max(score, 0.0), 1.0), reason=reason
                        )
                        for book, score, reason in scored
                    ],
                    generated_at=now,
                    expires_at=now + timedelta(hours=get_config().recommendation.cache_ttl_hours),
                )
            )
        return RecommendationResult(
            type=type,
            algorithm=algorithm,
            source_book_id=source_book_id,
            items=[
                RecommendationLine(book=BookSummary.from_book(book), score=score, reason=reason)
                for book, score, reason in scored
            ],
        )

    # -- public API -------------------------------------------------------
    def personalized(self, customer_id: str, limit: int | None = None) -> RecommendationResult:
        """Books close to what the customer wished for or received.

        Customers without any history get the trending list instead.
        """
        limit = limit or get_config().recommendation.default_limit
        cached = self._from_cache(customer_id, RecommendationType.PERSONALIZED, limit)
        if cached is not None:
            return cached
        scored = self._personalized(customer_id, limit)
        if scored is None:
            return self._store(
                customer_id,
                RecommendationType.PERSONALIZED,
                RecommendationAlgorithm.POPULARITY,
                self._trending(limit),
            )
        return self._store(
            customer_id,
            RecommendationType.PERSONALIZED,
            RecommendationAlgorithm.CONTENT_BASED,
            scored,
        )

    def similar(self, book_id: str, limit: int | None = None) -> RecommendationResult:
        limit = limit or get_config().recommendation.default_limit
        source = self._books.get(book_id)
        if source is None:
            raise NotFoundError("Book not found")
        cached = self._from_cache(None, RecommendationType.SIMILAR, limit, book_id)
        if cached is not None:
            return cached
        scored = self._similar(source, limit)
        if scored is None:
            return self._store(
                None,
                RecommendationType.SIMILAR,
                RecommendationAlgorithm.POPULARITY,
                [item for item in self._trending(limit + 1) if item[0].id != book_id][:limit],
                source_book_id=book_id,
            )
        return self._store(
            None,
            RecommendationType.SIMILAR,
            RecommendationAlgorithm.CONTENT_BASED,
            scored,
            source_book_id=book_id,
        )

    def trending(self, limit: int | None = None) -> RecommendationResult:
        limit = limit or get_config().recommendation.default_limit
        cached = self._from_cache(None, RecommendationType.TRENDING, limit)
        if cached is not None:
            return cached
        return self._store(
            None,
            RecommendationType.TRENDING,
            RecommendationAlgorithm.POPULARITY,
            self._trending(limit),
        )

    def clear_cache(self, customer_id: str) -> int:
        removed = self._cache.delete_for_customer(customer_id)
        logger.info("Cleared {} recommendation cache entries for customer {}", removed, customer_id)
        return removed

    def remove_expired(self) -> int:
        removed = self._cache.delete_expired(utcnow())
        if removed:
            logger.info("Removed {} expired recommendation cache entries", removed)
        return removed
