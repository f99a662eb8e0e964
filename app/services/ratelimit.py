"""
Per-Author Rate Limiting

slowapi throttles requests by client address, but post creation is limited
per author, which is only known after the session token is verified. This
module talks to the `limits` library (the engine underneath slowapi)
directly, against the same Redis storage, so the check can be keyed on the
author id.

A PostRateLimiter is created at application startup and handed to the
post writer; it is not a module-level global.
"""

import asyncio
import logging
from datetime import datetime, timezone

from limits import parse
from limits.storage import storage_from_string
from limits.strategies import STRATEGIES

from app.config import settings
from app.schemas import RateLimitResult

logger = logging.getLogger(__name__)


class PostRateLimiter:
    """
    Allows at most `limit` post creations per key per window.

    Args:
        storage_uri: Any `limits` storage URI, e.g. "redis://localhost:6379"
                     or "memory://"
        limit: Rate limit string such as "3/minute"
        strategy: "moving-window" (rolling window) or "fixed-window"
        namespace: Prefix that keeps these counters apart from slowapi's
    """

    def __init__(
        self,
        storage_uri: str,
        limit: str = "3/minute",
        strategy: str = "moving-window",
        namespace: str = "posts.create",
    ):
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown rate limit strategy: {strategy}")
        self.item = parse(limit)
        self.storage = storage_from_string(storage_uri)
        self.strategy = STRATEGIES[strategy](self.storage)
        self.namespace = namespace

    @classmethod
    def from_settings(cls) -> "PostRateLimiter":
        return cls(
            settings.rate_limit_storage_uri,
            limit=settings.POST_RATE_LIMIT,
            strategy=settings.POST_RATE_LIMIT_STRATEGY,
        )

    async def limit(self, key: str) -> RateLimitResult:
        """
        Count one attempt against `key` and report whether it is allowed.

        The hit is a single atomic operation in the storage backend, so
        concurrent requests for the same author can't both slip past the
        limit.

        Returns:
            RateLimitResult with `success` and the UTC time the current
            window resets
        """
        def _hit_sync():
            success = self.strategy.hit(self.item, self.namespace, key)
            reset_time, _remaining = self.strategy.get_window_stats(self.item, self.namespace, key)
            return success, reset_time

        success, reset_time = await asyncio.to_thread(_hit_sync)
        reset = datetime.fromtimestamp(reset_time, tz=timezone.utc)
        if not success:
            logger.info(f"Post rate limit reached for {key}, resets at {reset.isoformat()}")
        return RateLimitResult(success=success, reset=reset)
