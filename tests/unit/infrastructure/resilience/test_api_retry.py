from unittest.mock import AsyncMock

import pytest

from bulkdelete.domain.events.delete_events import DeleteDispatched, DeleteFailed, DeleteSucceeded, RetryScheduled
from bulkdelete.domain.interfaces.failure_ledger import FailureLedger
from bulkdelete.domain.models.common import EntityId, StatusCode
from bulkdelete.domain.models.config import RetryConfig
from bulkdelete.domain.models.errors import ManagementApiError, TransientRateLimitError
from bulkdelete.domain.models.jobs import FailureRecord, Job, Permanent, Retryable, Success
from bulkdelete.infrastructure.resilience.api_retry import RetryPolicy, classify
from bulkdelete.infrastructure.resilience.rate_limiter import RateLimitedScheduler

@pytest.fixture
def mock_ledger():
    return AsyncMock(spec=FailureLedger)

@pytest.fixture
def scheduler(fake_clock):
    return RateLimitedScheduler(
        max_concurrent=2, min_delay_seconds=0.3, clock=fake_clock, sleep=fake_clock.sleep
    )

@pytest.fixture
def events():
    return []

@pytest.fixture
def policy(scheduler, mock_ledger, events):
    return RetryPolicy(scheduler, mock_ledger, RetryConfig(max_retries=3), event_sink=events.append)

# --- classify ---

def test_classify_success_status():
    assert classify(Job(EntityId("u1")), StatusCode(204), max_retries=3) == Success(204)

def test_classify_429_with_budget_left_is_retryable():
    job = Job(EntityId("u1"), attempt=2)
    assert classify(job, TransientRateLimitError(), max_retries=3) == Retryable(429)
    # classification does not touch the job
    assert job.attempt == 2

def test_classify_429_with_budget_spent_is_permanent():
    job = Job(EntityId("u1"), attempt=3)
    assert classify(job, TransientRateLimitError(), max_retries=3) == Permanent(429)

@pytest.mark.parametrize("status", [400, 401, 403, 404, 500, 503, 0])
def test_classify_other_errors_are_always_permanent(status):
    job = Job(EntityId("u1"), attempt=0)
    assert classify(job, ManagementApiError(status), max_retries=5) == Permanent(status)

def test_classify_with_zero_retries():
    assert classify(Job(EntityId("u1")), TransientRateLimitError(), max_retries=0) == Permanent(429)

# --- execute ---

@pytest.mark.asyncio
async def test_execute_success(policy, mock_ledger, events):
    operation = AsyncMock(return_value=StatusCode(204))
    job = Job(EntityId("u1"))

    outcome = await policy.execute(job, operation, "users", job.id, "token")

    assert outcome == Success(204)
    operation.assert_awaited_once_with("users", "u1", "token")
    mock_ledger.record.assert_not_awaited()
    assert [type(e) for e in events] == [DeleteDispatched, DeleteSucceeded]

@pytest.mark.asyncio
async def test_execute_retries_429_up_to_max_retries(policy, mock_ledger, events, fake_clock):
    """Four 429s with three retries: three re-admissions, then one ledger record."""
    operation = AsyncMock(side_effect=TransientRateLimitError())
    job = Job(EntityId("u2"))

    outcome = await policy.execute(job, operation)

    assert outcome == Permanent(429)
    assert operation.await_count == 4
    assert job.attempt == 3
    mock_ledger.record.assert_awaited_once_with(FailureRecord(EntityId("u2"), StatusCode(429)))
    retries = [e for e in events if isinstance(e, RetryScheduled)]
    assert [e.attempt_number for e in retries] == [1, 2, 3]
    assert [e.attempt for e in events if isinstance(e, DeleteDispatched)] == [0, 1, 2, 3]
    failed = [e for e in events if isinstance(e, DeleteFailed)]
    assert len(failed) == 1 and failed[0].retries_exhausted
    # every backoff is at least the minimum delay
    assert all(e.delay_seconds >= 0.3 for e in retries)
    assert fake_clock.sleeps.count(0.3) >= 3

@pytest.mark.asyncio
async def test_execute_recovers_after_rate_limit(policy, mock_ledger):
    operation = AsyncMock(side_effect=[TransientRateLimitError(), StatusCode(204)])
    job = Job(EntityId("u1"))

    outcome = await policy.execute(job, operation)

    assert outcome == Success(204)
    assert job.attempt == 1
    mock_ledger.record.assert_not_awaited()

@pytest.mark.asyncio
@pytest.mark.parametrize("status", [500, 404, 403])
async def test_execute_never_retries_other_errors(policy, mock_ledger, events, status):
    operation = AsyncMock(side_effect=ManagementApiError(status))
    job = Job(EntityId("u3"))

    outcome = await policy.execute(job, operation)

    assert outcome == Permanent(status)
    operation.assert_awaited_once()
    assert job.attempt == 0
    mock_ledger.record.assert_awaited_once_with(FailureRecord(EntityId("u3"), StatusCode(status)))
    assert not any(isinstance(e, RetryScheduled) for e in events)
    assert not events[-1].retries_exhausted

@pytest.mark.asyncio
async def test_execute_with_zero_retries(scheduler, mock_ledger):
    policy = RetryPolicy(scheduler, mock_ledger, RetryConfig(max_retries=0))
    operation = AsyncMock(side_effect=TransientRateLimitError())

    outcome = await policy.execute(Job(EntityId("u1")), operation)

    assert outcome == Permanent(429)
    operation.assert_awaited_once()
    mock_ledger.record.assert_awaited_once()

@pytest.mark.asyncio
async def test_unexpected_exception_is_isolated_as_permanent(policy, mock_ledger):
    operation = AsyncMock(side_effect=RuntimeError("connection reset"))

    outcome = await policy.execute(Job(EntityId("u9")), operation)

    assert outcome == Permanent(0)
    mock_ledger.record.assert_awaited_once_with(FailureRecord(EntityId("u9"), StatusCode(0)))

def test_backoff_delay_adds_jitter(scheduler, mock_ledger):
    policy = RetryPolicy(
        scheduler, mock_ledger, RetryConfig(max_retries=3, jitter_ms=200),
        uniform=lambda low, high: high,
    )
    assert policy.backoff_delay() == pytest.approx(0.5)

def test_backoff_delay_without_jitter(policy):
    assert policy.backoff_delay() == pytest.approx(0.3)
