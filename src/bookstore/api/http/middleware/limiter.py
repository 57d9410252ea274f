"""In-memory rate limiting used by the HTTP layer."""

from __future__ import annotations

import asyncio
import time
from collections import defaultdict, deque
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import HTTPException, Request, Response
from loguru import logger

from src.bookstore.runtime.context import get_config

RateLimiterType = Callable[[Request, Response], Awaitable[Any]]

_limiters: dict[tuple[int, int, bool, bool], LocalRateLimiter] = {}


class LocalRateLimiter:
    """Sliding-window limiter keyed by principal or client address."""

    def __init__(
        self, times: int, milliseconds: int, per_endpoint: bool, per_method: bool
    ) -> None:
        self._hits: defaultdict[str, deque[float]] = defaultdict(deque)
        self._lock = asyncio.Lock()
        self._times = times
        self._seconds = milliseconds / 1000
        self._per_endpoint = per_endpoint
        self._per_method = per_method
        self._last_cleanup = time.monotonic()
        self._cleanup_interval = 60.0

    async def __call__(self, request: Request, response: Response) -> Any:
        await self._throttle(self._make_key(request))

    def _make_key(self, request: Request) -> str:
        uid = getattr(request.state, "uid", None)
        if uid is not None:
            ident = f"user:{uid}"
        else:
            xff = request.headers.get("x-forwarded-for")
            client_host = (
                xff.split(",")[0].strip()
                if xff
                else request.client.host
                if request.client
                else "anonymous"
            )
            ident = f"ip:{client_host}"

        parts = [ident]
        if self._per_method:
            parts.append(request.method)
        if self._per_endpoint:
            route = request.scope.get("route")
            template = getattr(route, "path", None)
            parts.append((template or request.url.path).rstrip("/"))
        return ":".join(parts)

    def _cleanup_old_keys(self, now: float) -> None:
        """Drop keys whose hits have all left the window."""
        if now - self._last_cleanup < self._cleanup_interval:
            return
        self._last_cleanup = now
        stale = [
            key
            for key, hits in self._hits.items()
            if not hits or hits[-1] <= now - self._seconds
        ]
        for key in stale:
            del self._hits[key]

    async def _throttle(self, key: str) -> None:
        now = time.monotonic()
        window_start = now - self._seconds
        async with self._lock:
            self._cleanup_old_keys(now)
            hits = self._hits[key]
            while hits and hits[0] <= window_start:
                hits.popleft()
            if len(hits) >= self._times:
                retry_after = max(1, int(self._seconds - (now - hits[0])))
                logger.bind(limiter_key=key).warning("Rate limit exceeded")
                raise HTTPException(
                    status_code=429,
                    detail="Too many requests, please try again later",
                    headers={"Retry-After": str(retry_after)},
                )
            hits.append(now)

    def reset(self) -> None:
        self._hits.clear()


def get_rate_limiter(requests: int | None = None, window_ms: int | None = None) -> LocalRateLimiter:
    """Return the shared limiter for the given quota, creating it on first use."""
    config = get_config().rate_limiter
    key = (
        requests if requests is not None else config.requests,
        window_ms if window_ms is not None else config.window_ms,
        config.per_endpoint,
        config.per_method,
    )
    limiter = _limiters.get(key)
    if limiter is None:
        limiter = _limiters[key] = LocalRateLimiter(*key)
    return limiter


def rate_limit(requests: int | None = None, window_ms: int | None = None) -> RateLimiterType:
    """Return a dependency enforcing request quotas."""

    async def dependency(request: Request, response: Response) -> Any:
        if not get_config().rate_limiter.enabled:
            return None
        return await get_rate_limiter(requests, window_ms)(request, response)

    return dependency


def login_rate_limit() -> RateLimiterType:
    """Stricter quota for credential endpoints."""

    async def dependency(request: Request, response: Response) -> Any:
        config = get_config().rate_limiter
        if not config.enabled:
            return None
        return await get_rate_limiter(config.login_requests)(request, response)

    return dependency


def reset_rate_limiters() -> None:
    """Forget every recorded hit."""
    for limiter in _limiters.values():
        limiter.reset()


async def close_rate_limiter() -> None:
    reset_rate_limiters()
    _limiters.clear()
    logger.info("Rate limiter cleanup completed")
