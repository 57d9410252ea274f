from datetime import timedelta

import pytest

from src.bookstore.core.errors import NotFoundError
from src.bookstore.core.helpers import utcnow
from src.bookstore.core.services.catalog.book_service import BookService
from src.bookstore.core.services.catalog.taxonomy_service import AuthorService, CategoryService
from src.bookstore.core.services.recommendation.recommendation_service import (
    RecommendationService,
    trending_score,
)
from src.bookstore.core.services.shop.wishlist_service import WishlistService
from src.bookstore.entities.catalog.author import AuthorCreate
from src.bookstore.entities.catalog.book import BookRepository
from src.bookstore.entities.catalog.category import CategoryCreate
from src.bookstore.entities.shop.recommendation import (
    Recommendation,
    RecommendationAlgorithm,
    RecommendationRepository,
    RecommendationType,
    RecommendedBook,
)


def set_popularity(session, book_id, **counters):
    book = BookService(session)._require(book_id)
    BookRepository(session).update(book.model_copy(update=counters))


class TestTrendingScore:
    def test_purchases_outweigh_views(self, session, book, second_book):
        bought = BookService(session)._require(book.id).model_copy(
            update={"purchase_count": 2}
        )
        viewed = bought.model_copy(update={"purchase_count": 0, "view_count": 1000})
        assert trending_score(bought) == pytest.approx(1.0)
        assert trending_score(viewed) == pytest.approx(0.02)

    def test_rating_contributes(self, session, book):
        rated = BookService(session)._require(book.id).model_copy(
            update={"average_rating": 4.5}
        )
        assert trending_score(rated) == pytest.approx(13.5)


class TestTrending:
    def test_ordered_by_popularity(self, session, book, second_book):
        set_popularity(session, second_book.id, purchase_count=1)
        result = RecommendationService(session).trending()

        assert result.algorithm == RecommendationAlgorithm.POPULARITY
        assert [line.book.id for line in result.items] == [second_book.id, book.id]
        assert result.items[0].reason == "Trending book"

    def test_cached_scores_are_clamped(self, session, book):
        set_popularity(session, book.id, purchase_count=4)
        service = RecommendationService(session)

        fresh = service.trending()
        cached = service.trending()

        assert fresh.cached is False
        assert fresh.items[0].score == 2.0
        assert cached.cached is True
        assert cached.items[0].score == 1.0

    def test_inactive_books_dropped_from_cached_list(self, session, book, second_book):
        service = RecommendationService(session)
        service.trending()
        BookService(session).soft_delete(second_book.id)

        cached = service.trending()
        assert cached.cached is True
        assert [line.book.id for line in cached.items] == [book.id]


class TestPersonalized:
    def test_without_history_falls_back_to_trending(self, session, customer, book):
        result = RecommendationService(session).personalized(customer.id)

        assert result.type == RecommendationType.PERSONALIZED
        assert result.algorithm == RecommendationAlgorithm.POPULARITY
        assert [line.book.id for line in result.items] == [book.id]

    def test_wishlist_drives_content_suggestions(self, session, customer, book, second_book):
        WishlistService(session).add(customer.id, book.id)
        service = RecommendationService(session)

        result = service.personalized(customer.id)
        assert result.algorithm == RecommendationAlgorithm.CONTENT_BASED
        assert [line.book.id for line in result.items] == [second_book.id]
        assert result.items[0].reason == "Based on your interests"
        assert 0 < result.items[0].score <= 1

        assert service.personalized(customer.id).cached is True

    def test_clear_cache(self, session, customer, book):
        service = RecommendationService(session)
        service.personalized(customer.id)

        assert service.clear_cache(customer.id) == 1
        assert service.personalized(customer.id).cached is False


class TestSimilar:
    def test_shared_category_and_author(self, session, book, second_book):
        result = RecommendationService(session).similar(book.id)

        assert result.source_book_id == book.id
        assert result.algorithm == RecommendationAlgorithm.CONTENT_BASED
        assert [line.book.id for line in result.items] == [second_book.id]
        assert result.items[0].reason == "Same category and author"
        assert result.items[0].score >= 0.5

    def test_unrelated_book_falls_back_to_trending(self, session, book, second_book, make_book):
        author = AuthorService(session).create(AuthorCreate(name="Paulo Coelho"))
        category = CategoryService(session).create(CategoryCreate(name="Tiểu thuyết"))
        loner = make_book("Nhà Giả Kim", author_id=author.id, category_id=category.id)

        result = RecommendationService(session).similar(loner.id)

        assert result.algorithm == RecommendationAlgorithm.POPULARITY
        ids = {line.book.id for line in result.items}
        assert ids == {book.id, second_book.id}

    def test_unknown_book(self, session):
        with pytest.raises(NotFoundError, match="Book not found"):
            RecommendationService(session).similar("missing")

    def test_cached_per_source_book(self, session, book, second_book):
        service = RecommendationService(session)
        service.similar(book.id)

        assert service.similar(book.id).cached is True
        assert service.similar(second_book.id).cached is False


class TestCacheExpiry:
    def test_expired_entries_removed_and_ignored(self, session, book):
        RecommendationRepository(session).create(
            Recommendation(
                type=RecommendationType.TRENDING,
                algorithm=RecommendationAlgorithm.POPULARITY,
                recommended_books=[RecommendedBook(book_id=book.id, score=0.5, reason="old")],
                expires_at=utcnow() - timedelta(hours=1),
            )
        )
        service = RecommendationService(session)

        assert service.trending().cached is False
        # the fresh list replaced the stale one
        assert service.remove_expired() == 0

    def test_remove_expired(self, session, book):
        RecommendationRepository(session).create(
            Recommendation(
                customer_id="someone",
                type=RecommendationType.PERSONALIZED,
                recommended_books=[RecommendedBook(book_id=book.id, score=0.5, reason="old")],
                expires_at=utcnow() - timedelta(minutes=1),
            )
        )
        assert RecommendationService(session).remove_expired() == 1
