"""File-backed failure ledger.

The file starts with one header comment naming the entity type; each
permanently failed job appends one `id,statusCode` line in completion order.
All writes go through a single lock so lines never interleave.
"""

import asyncio
import logging
from pathlib import Path
from typing import Union

import aiofiles

from bulkdelete.domain.interfaces.failure_ledger import FailureLedger
from bulkdelete.domain.models.errors import LedgerWriteError
from bulkdelete.domain.models.jobs import FailureRecord

logger = logging.getLogger(__name__)

HEADER_TEMPLATE = "# Failed {entity_type} deletion (if any) will be recorded below:"

class FileFailureLedger(FailureLedger):
    """Append-only CSV-like ledger on the local disk."""

    def __init__(self, path: Union[str, Path]):
        super().__init__()
        self.path = Path(path)
        self._lock = asyncio.Lock()
        self.records_written = 0

    async def _write(self, mode: str, line: str) -> None:
        async with aiofiles.open(self.path, mode=mode, encoding='utf-8') as f:
            await f.write(line + "\n")
            await f.flush()

    def _report(self, error: LedgerWriteError) -> None:
        self.write_errors.append(error)
        logger.error(str(error))

    async def initialize(self, entity_type: str) -> None:
        """Truncates the ledger and writes the header line."""
        header = HEADER_TEMPLATE.format(entity_type=entity_type)
        async with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                await self._write('w', header)
                logger.debug(f"Initialized failure ledger {self.path}")
            except OSError as e:
                self._report(LedgerWriteError(f"Cannot initialize failure log {self.path}: {e}"))

    async def record(self, failure: FailureRecord) -> None:
        line = failure.to_line()
        async with self._lock:
            try:
                await self._write('a', line)
                self.records_written += 1
            except OSError as e:
                self._report(LedgerWriteError(f"Cannot record failure '{line}' in {self.path}: {e}"))
