"""Domain Events related to delete calls and their resilience handling.

Examples include events for when calls are deferred, dispatched, retried,
succeed or fail permanently.
"""

from dataclasses import dataclass, field
import time
from typing import Callable

# Base Event Class
@dataclass
class DomainEvent:
    """Base class for domain events."""
    pass

# --- Specific Delete Events ---

@dataclass
class DeleteDispatched(DomainEvent):
    """Event triggered when a delete call is admitted by the scheduler."""
    entity_id: str
    attempt: int
    timestamp: float = field(default_factory=time.time)

@dataclass
class DeleteSucceeded(DomainEvent):
    """Event triggered when a delete call returns a 2xx status."""
    entity_id: str
    status_code: int
    attempt: int
    timestamp: float = field(default_factory=time.time)

@dataclass
class RetryScheduled(DomainEvent):
    """Event triggered when a rate limited delete is queued for another attempt."""
    entity_id: str
    attempt_number: int
    delay_seconds: float
    status_code: int = 429
    timestamp: float = field(default_factory=time.time)

@dataclass
class DeleteFailed(DomainEvent):
    """Event triggered when a delete fails definitively."""
    entity_id: str
    status_code: int
    attempt: int
    retries_exhausted: bool = False
    timestamp: float = field(default_factory=time.time)

# Receives every event emitted during a run.
EventSink = Callable[[DomainEvent], None]
