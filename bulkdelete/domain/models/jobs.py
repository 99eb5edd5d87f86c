"""Domain models for delete jobs and their outcomes.

A Job is one delete operation for one entity. Every Job is settled by the
retry policy into exactly one terminal Outcome.
"""

from dataclasses import dataclass, field
from typing import List, Union

from .common import EntityId, StatusCode


@dataclass
class Job:
    """One delete operation for one entity."""
    id: EntityId
    attempt: int = 0  # number of retries already scheduled


# --- Outcome (tagged union) ---

@dataclass(frozen=True)
class Success:
    """The delete call returned a 2xx status."""
    status_code: StatusCode


@dataclass(frozen=True)
class Retryable:
    """The delete call was rate limited and the job still has retry budget."""
    status_code: StatusCode


@dataclass(frozen=True)
class Permanent:
    """The job failed and will not be retried."""
    status_code: StatusCode


Outcome = Union[Success, Retryable, Permanent]


@dataclass(frozen=True)
class FailureRecord:
    """One line of the failure ledger."""
    id: EntityId
    status_code: StatusCode

    def to_line(self) -> str:
        return f"{self.id},{self.status_code}"


@dataclass
class Summary:
    """Aggregated statistics of a bulk delete run."""
    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    failures: List[FailureRecord] = field(default_factory=list)
