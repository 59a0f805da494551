"""Shared call budget applied as endpoint middleware."""

from __future__ import annotations

import logging
from typing import Any

from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage, Storage
from limits.strategies import MovingWindowRateLimiter

from vault.application.endpoints import Endpoint, EndpointMiddleware
from vault.domain.errors import RateLimitedError

logger = logging.getLogger(__name__)

_BUDGET_KEY = "vault"


class CallBudget:
    """Allow at most capacity calls in any moving window of window_seconds.

    Calls free up as earlier ones age out of the window, so a full budget refills at
    capacity/window_seconds calls per second.
    """

    def __init__(
        self,
        *,
        capacity: int,
        window_seconds: int = 1,
        storage: Storage | None = None,
    ) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self._item = RateLimitItemPerSecond(capacity, window_seconds)
        self._limiter = MovingWindowRateLimiter(storage or MemoryStorage())

    @property
    def capacity(self) -> int:
        return self._item.amount

    def try_take(self) -> bool:
        """Take one call from the budget without blocking; False when none is left."""

        return self._limiter.hit(self._item, _BUDGET_KEY)

    def remaining(self) -> int:
        return self._limiter.get_window_stats(self._item, _BUDGET_KEY).remaining


def rate_limiter(budget: CallBudget) -> EndpointMiddleware:
    """Build middleware that takes one call per attempt and fails fast when none is left."""

    def middleware(next_endpoint: Endpoint[Any, Any]) -> Endpoint[Any, Any]:
        async def limited_endpoint(request: Any) -> Any:
            if not budget.try_take():
                logger.warning("vault_rate_limited request_type=%s", type(request).__name__)
                raise RateLimitedError()
            return await next_endpoint(request)

        return limited_endpoint

    return middleware
