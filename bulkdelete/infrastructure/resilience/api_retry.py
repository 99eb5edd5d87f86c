"""Retry policy for Management API delete calls.

Classifies the result of each dispatched call into an Outcome. Rate-limit
errors (429) are retried through the scheduler's re-admission path until the
retry budget is spent; every other error is permanent and goes straight to
the failure ledger.
"""

import logging
import random
from typing import Any, Awaitable, Callable, Optional, Union

from bulkdelete.domain.events.delete_events import (
    DeleteDispatched, DeleteFailed, DeleteSucceeded, DomainEvent, EventSink, RetryScheduled
)
from bulkdelete.domain.interfaces.failure_ledger import FailureLedger
from bulkdelete.domain.models.common import NO_RESPONSE_STATUS, RATE_LIMITED_STATUS, StatusCode
from bulkdelete.domain.models.config import RetryConfig
from bulkdelete.domain.models.errors import ManagementApiError
from bulkdelete.domain.models.jobs import FailureRecord, Job, Outcome, Permanent, Retryable, Success
from bulkdelete.infrastructure.resilience.rate_limiter import RateLimitedScheduler

logger = logging.getLogger(__name__)

# What a dispatched delete call settles to: its 2xx status or the error it raised.
RawResult = Union[StatusCode, ManagementApiError]

def classify(job: Job, raw: RawResult, max_retries: int) -> Outcome:
    """Maps the raw result of one attempt to an Outcome.

    Pure: does not touch the job or any collaborator.
    """
    if not isinstance(raw, ManagementApiError):
        return Success(StatusCode(raw))
    status = StatusCode(raw.status_code)
    if status == RATE_LIMITED_STATUS and job.attempt < max_retries:
        return Retryable(status)
    return Permanent(status)


def _log_event(event: DomainEvent) -> None:
    logger.debug(f"EVENT: {event}")


class RetryPolicy:
    """Drives a job through dispatch, retries and settlement."""

    def __init__(
        self,
        scheduler: RateLimitedScheduler,
        ledger: FailureLedger,
        config: RetryConfig,
        event_sink: Optional[EventSink] = None,
        uniform: Callable[[float, float], float] = random.uniform,
    ):
        """Initializes the RetryPolicy.

        Args:
            scheduler: Scheduler used for the first dispatch and for re-admission.
            ledger: Ledger receiving one record per permanently failed job.
            config: Retry bound and optional backoff jitter.
            event_sink: Receives diagnostic events; logs them at DEBUG if None.
            uniform: Random source for jitter.
        """
        self.scheduler = scheduler
        self.ledger = ledger
        self.max_retries = config.max_retries
        self.jitter_seconds = config.jitter_ms / 1000.0
        self._emit = event_sink or _log_event
        self._uniform = uniform
        logger.info(
            f"RetryPolicy initialized: max_retries={self.max_retries}, "
            f"jitter={config.jitter_ms}ms"
        )

    def classify(self, job: Job, raw: RawResult) -> Outcome:
        return classify(job, raw, self.max_retries)

    def backoff_delay(self) -> float:
        """Delay before a retried job re-enters admission."""
        delay = self.scheduler.min_delay_seconds
        if self.jitter_seconds > 0:
            delay += self._uniform(0.0, self.jitter_seconds)
        return delay

    async def _attempt(
        self,
        job: Job,
        operation: Callable[..., Awaitable[StatusCode]],
        *args: Any,
        delay: Optional[float] = None,
    ) -> RawResult:
        async def dispatch() -> StatusCode:
            self._emit(DeleteDispatched(entity_id=job.id, attempt=job.attempt))
            return await operation(*args)

        try:
            if delay is None:
                return await self.scheduler.schedule(dispatch)
            return await self.scheduler.readmit(delay, dispatch)
        except ManagementApiError as e:
            return e
        except Exception as e:
            logger.error(f"[{job.id}] Unexpected error during delete: {e}", exc_info=True)
            return ManagementApiError(NO_RESPONSE_STATUS, str(e))

    async def execute(
        self,
        job: Job,
        operation: Callable[..., Awaitable[StatusCode]],
        *args: Any,
    ) -> Outcome:
        """Runs `operation(*args)` for `job` until it reaches a terminal Outcome.

        Returns:
            Success or Permanent. Never raises for errors of the call itself.
        """
        raw = await self._attempt(job, operation, *args)
        while True:
            outcome = self.classify(job, raw)
            if isinstance(outcome, Success):
                logger.info(f"[{job.id}] deleted ({outcome.status_code})")
                self._emit(DeleteSucceeded(entity_id=job.id, status_code=outcome.status_code, attempt=job.attempt))
                return outcome
            elif isinstance(outcome, Retryable):
                job.attempt += 1
                delay = self.backoff_delay()
                logger.warning(
                    f"[{job.id}] failed with {outcome.status_code} - will be retried in "
                    f"{delay * 1000:.0f} ms (retry {job.attempt}/{self.max_retries})"
                )
                self._emit(RetryScheduled(
                    entity_id=job.id, attempt_number=job.attempt,
                    delay_seconds=delay, status_code=outcome.status_code,
                ))
                raw = await self._attempt(job, operation, *args, delay=delay)
            elif isinstance(outcome, Permanent):
                exhausted = outcome.status_code == RATE_LIMITED_STATUS
                if exhausted:
                    logger.error(f"[{job.id}] failed - in spite of {self.max_retries} retries")
                else:
                    logger.error(
                        f"[{job.id}] failed - will NOT be retried as error isn't 429 but {outcome.status_code}"
                    )
                self._emit(DeleteFailed(
                    entity_id=job.id, status_code=outcome.status_code,
                    attempt=job.attempt, retries_exhausted=exhausted,
                ))
                await self.ledger.record(FailureRecord(job.id, outcome.status_code))
                return outcome
            else:
                raise TypeError(f"Unhandled outcome: {outcome!r}")
