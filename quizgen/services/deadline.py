from __future__ import annotations
import asyncio
import time
from typing import Awaitable, Optional, TypeVar

from quizgen.errors import DeadlineExceeded

T = TypeVar("T")


class Deadline:
    """Absolute point in time by which a request has to be finished.

    Created once per request and handed down to every collaborator that
    suspends (fetch, model calls), so they all share one budget.
    """

    def __init__(self, seconds: float, clock=time.monotonic) -> None:
        self._clock = clock
        self.expires_at = clock() + seconds

    def remaining(self) -> float:
        return max(0.0, self.expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0

    def check(self) -> None:
        if self.expired:
            raise DeadlineExceeded("request deadline exceeded")

    def cap(self, timeout: Optional[float]) -> float:
        """Smaller of ``timeout`` and the time left."""
        left = self.remaining()
        return left if timeout is None else min(timeout, left)

    async def run(self, aw: Awaitable[T]) -> T:
        """Await ``aw``, cancelling it once the deadline passes."""
        if self.expired:
            if asyncio.iscoroutine(aw):
                aw.close()
            raise DeadlineExceeded("request deadline exceeded")
        try:
            return await asyncio.wait_for(aw, timeout=self.remaining())
        except asyncio.TimeoutError as e:
            raise DeadlineExceeded("request deadline exceeded") from e
