"""Exponential backoff policy for outbound calls."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


def _always(_: BaseException) -> bool:
    return True


@dataclass(frozen=True)
class BackoffPolicy:
    """Retry an async operation with capped exponential delays.

    Delay before retry ``n`` (1-based attempt that just failed) is
    ``min(base_delay * 2 ** (n - 1), max_delay)`` seconds. Exceptions for
    which ``retry_on`` returns False are re-raised immediately; once
    ``max_attempts`` is reached the last exception is re-raised without
    a final sleep.
    """

    max_attempts: int = 5
    base_delay: float = 1.0
    max_delay: float = 30.0
    retry_on: Callable[[BaseException], bool] = _always

    def delay_for(self, attempt: int) -> float:
        return min(self.base_delay * (2 ** (attempt - 1)), self.max_delay)

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        sleep: Sleep = asyncio.sleep,
        description: str = "operation",
    ) -> T:
        attempt = 1
        while True:
            try:
                return await operation()
            except Exception as exc:
                if not self.retry_on(exc) or attempt >= self.max_attempts:
                    raise
                delay = self.delay_for(attempt)
                logger.warning(
                    "%s failed on attempt %d/%d: %s. Retrying in %.0fms...",
                    description,
                    attempt,
                    self.max_attempts,
                    exc,
                    delay * 1000,
                )
                await sleep(delay)
                attempt += 1
