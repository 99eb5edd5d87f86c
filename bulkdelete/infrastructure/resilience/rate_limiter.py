"""Implementation of the rate-limited scheduler.

Controls the frequency and concurrency of outgoing delete calls so the
Management API rate limit is respected. Admission is FIFO: the head of the
queue is dispatched once fewer than `max_concurrent` calls are in flight and
at least `min_delay` has elapsed since the previous dispatch.
"""

import time
import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from bulkdelete.domain.models.config import SchedulerConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], float]
Sleeper = Callable[[float], Awaitable[Any]]

class RateLimitedScheduler:
    """Throttle plus FIFO queue for async operations."""

    def __init__(
        self,
        max_concurrent: int,
        min_delay_seconds: float,
        clock: Clock = time.monotonic,
        sleep: Sleeper = asyncio.sleep,
    ):
        """Initializes the scheduler.

        Args:
            max_concurrent: Maximum number of operations in flight at any instant.
            min_delay_seconds: Minimum time between two successive dispatches.
            clock: Monotonic clock returning seconds.
            sleep: Coroutine function used to wait.
        """
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1.")
        if min_delay_seconds < 0:
            raise ValueError("min_delay_seconds must not be negative.")
        self.max_concurrent = max_concurrent
        self.min_delay_seconds = min_delay_seconds
        self._clock = clock
        self._sleep = sleep
        # The lock keeps admission FIFO; its holder is the head of the queue.
        self._admission = asyncio.Lock()
        self._slots = asyncio.Semaphore(max_concurrent)
        self._last_dispatch: Optional[float] = None
        self._in_flight = 0
        self._dispatched = 0
        logger.info(
            f"RateLimitedScheduler initialized: max_concurrent={max_concurrent}, "
            f"min_delay={min_delay_seconds * 1000:.0f}ms"
        )

    @classmethod
    def from_config(cls, config: SchedulerConfig, **kwargs: Any) -> "RateLimitedScheduler":
        return cls(config.max_concurrent, config.min_delay_seconds, **kwargs)

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @property
    def dispatched(self) -> int:
        """Total number of dispatches so far, retries included."""
        return self._dispatched

    def _time_until_next_dispatch(self) -> float:
        if self._last_dispatch is None:
            return 0.0
        return max(0.0, self._last_dispatch + self.min_delay_seconds - self._clock())

    async def wait_for_permission(self) -> None:
        """Waits until the caller may dispatch; the caller must call release() afterwards."""
        async with self._admission:
            await self._slots.acquire()
            try:
                while True:
                    wait_time = self._time_until_next_dispatch()
                    if wait_time <= 0:
                        break
                    logger.debug(f"Dispatch spacing not reached. Waiting for {wait_time:.3f} seconds.")
                    await self._sleep(wait_time)
            except asyncio.CancelledError:
                self._slots.release()
                raise
            self._last_dispatch = self._clock()
            self._in_flight += 1
            self._dispatched += 1

    def release(self) -> None:
        """Marks one dispatched operation as settled."""
        self._in_flight -= 1
        self._slots.release()

    async def schedule(self, operation: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Runs `operation(*args, **kwargs)` once admitted.

        The operation's result or exception is passed through unchanged.
        """
        await self.wait_for_permission()
        try:
            return await operation(*args, **kwargs)
        finally:
            self.release()

    async def readmit(
        self,
        delay_seconds: float,
        operation: Callable[..., Awaitable[T]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """Re-queues an operation after a backoff delay of at least `min_delay_seconds`."""
        delay = max(delay_seconds, self.min_delay_seconds)
        logger.debug(f"Re-admitting operation after {delay:.3f}s backoff.")
        await self._sleep(delay)
        return await self.schedule(operation, *args, **kwargs)

    async def get_wait_time(self) -> float:
        """Estimates the time needed before the next dispatch can happen."""
        if self._in_flight >= self.max_concurrent:
            # Unknown: depends on when an in-flight call settles.
            return max(self._time_until_next_dispatch(), self.min_delay_seconds)
        return self._time_until_next_dispatch()
