import abc
from typing import List

from bulkdelete.domain.models.errors import LedgerWriteError
from bulkdelete.domain.models.jobs import FailureRecord


class FailureLedger(abc.ABC):
    """Interface for the append-only record of permanently failed deletes."""

    def __init__(self):
        # Writes that could not be completed, in the order they happened.
        self.write_errors: List[LedgerWriteError] = []

    @abc.abstractmethod
    async def initialize(self, entity_type: str) -> None:
        """Discards content from earlier runs and writes the header line."""
        pass

    @abc.abstractmethod
    async def record(self, failure: FailureRecord) -> None:
        """Appends one failure. Best effort: never raises on write failure; see write_errors."""
        pass
