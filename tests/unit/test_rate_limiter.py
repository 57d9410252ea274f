import pytest
from fastapi import HTTPException, Response

from src.bookstore.api.http.middleware.limiter import (
    LocalRateLimiter,
    get_rate_limiter,
    login_rate_limit,
    reset_rate_limiters,
)
from src.bookstore.runtime.config.config_data import ConfigData, RateLimiterConfig
from src.bookstore.runtime.context import with_context


class TestLocalRateLimiter:
    """Sliding-window limiter keyed by user or client address."""

    async def test_allows_requests_within_quota(self, request_factory):
        limiter = LocalRateLimiter(3, 60000, per_endpoint=False, per_method=False)
        request = request_factory()
        for _ in range(3):
            await limiter(request, Response())

    async def test_rejects_requests_over_quota(self, request_factory):
        limiter = LocalRateLimiter(2, 60000, per_endpoint=False, per_method=False)
        request = request_factory()
        await limiter(request, Response())
        await limiter(request, Response())

        with pytest.raises(HTTPException) as exc_info:
            await limiter(request, Response())

        assert exc_info.value.status_code == 429
        assert exc_info.value.detail == "Too many requests, please try again later"
        assert int(exc_info.value.headers["Retry-After"]) >= 1

    async def test_clients_are_counted_separately(self, request_factory):
        limiter = LocalRateLimiter(1, 60000, per_endpoint=False, per_method=False)
        await limiter(request_factory(client_host="10.0.0.1"), Response())
        await limiter(request_factory(client_host="10.0.0.2"), Response())

    async def test_forwarded_for_header_identifies_client(self, request_factory):
        limiter = LocalRateLimiter(1, 60000, per_endpoint=False, per_method=False)
        await limiter(request_factory({"X-Forwarded-For": "203.0.113.7, 10.0.0.1"}), Response())

        with pytest.raises(HTTPException):
            await limiter(
                request_factory({"X-Forwarded-For": "203.0.113.7"}, client_host="10.0.0.9"),
                Response(),
            )

    async def test_authenticated_user_is_the_key(self, request_factory):
        limiter = LocalRateLimiter(1, 60000, per_endpoint=False, per_method=False)
        first = request_factory(client_host="10.0.0.1")
        first.state.uid = "customer-1"
        second = request_factory(client_host="10.0.0.2")
        second.state.uid = "customer-1"

        await limiter(first, Response())
        with pytest.raises(HTTPException):
            await limiter(second, Response())

    async def test_reset_forgets_hits(self, request_factory):
        limiter = LocalRateLimiter(1, 60000, per_endpoint=False, per_method=False)
        request = request_factory()
        await limiter(request, Response())
        limiter.reset()
        await limiter(request, Response())


class TestLimiterDependencies:
    def test_limiters_are_shared_per_quota(self):
        assert get_rate_limiter(5, 1000) is get_rate_limiter(5, 1000)
        assert get_rate_limiter(5, 1000) is not get_rate_limiter(6, 1000)

    async def test_login_quota_from_config(self, request_factory):
        reset_rate_limiters()
        dependency = login_rate_limit()
        config = ConfigData(rate_limiter=RateLimiterConfig(login_requests=1))
        with with_context(config):
            await dependency(request_factory(client_host="192.0.2.1"), Response())
            with pytest.raises(HTTPException) as exc_info:
                await dependency(request_factory(client_host="192.0.2.1"), Response())
        assert exc_info.value.status_code == 429
        reset_rate_limiters()

    async def test_disabled_limiter_lets_everything_through(self, request_factory):
        dependency = login_rate_limit()
        config = ConfigData(rate_limiter=RateLimiterConfig(enabled=False, login_requests=1))
        with with_context(config):
            for _ in range(5):
                await dependency(request_factory(client_host="192.0.2.2"), Response())
