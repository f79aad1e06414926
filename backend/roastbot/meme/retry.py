"""Reusable retry-with-backoff policy.

One policy object covers every retried call in the service: image decoding,
PNG encoding and LLM requests. Delays grow geometrically:
``base_delay * multiplier ** (attempt - 1)``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _retry_everything(exc: BaseException) -> bool:
    return True


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    base_delay: float = 1.0  # seconds
    multiplier: float = 1.5
    should_retry: Callable[[BaseException], bool] = field(default=_retry_everything)
    sleep: Callable[[float], Awaitable[Any]] = field(default=asyncio.sleep, repr=False, compare=False)

    def delays(self) -> list[float]:
        """Back-off delays between attempts (one fewer than ``max_attempts``)."""
        return [self.base_delay * self.multiplier ** i for i in range(max(0, self.max_attempts - 1))]

    def with_predicate(self, should_retry: Callable[[BaseException], bool]) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.max_attempts,
            base_delay=self.base_delay,
            multiplier=self.multiplier,
            should_retry=should_retry,
            sleep=self.sleep,
        )

    async def run(self, operation: Callable[[], Awaitable[T]], *, label: str = "operation") -> T:
        """Await ``operation()`` until it succeeds or the policy gives up.

        Non-retryable errors propagate immediately; the last retryable error
        propagates once attempts are exhausted.
        """
        attempts = max(1, self.max_attempts)
        delay = self.base_delay
        for attempt in range(1, attempts + 1):
            try:
                return await operation()
            except Exception as e:
                if attempt == attempts or not self.should_retry(e):
                    raise
                logger.warning(
                    "%s attempt %d/%d failed, retrying in %.2fs: %s",
                    label, attempt, attempts, delay, e,
                )
                await self.sleep(delay)
                delay *= self.multiplier
        raise AssertionError("unreachable")


def policy_from_settings(settings, **overrides) -> RetryPolicy:
    params = {
        "max_attempts": settings.retry_max_attempts,
        "base_delay": settings.retry_base_delay_seconds,
        "multiplier": settings.retry_backoff_multiplier,
    }
    params.update(overrides)
    return RetryPolicy(**params)
