"""Id Source backed by a plain text file, one entity id per line.

Lines starting with '#' are comments. Line endings may be LF, CRLF or CR
regardless of the platform the file was written on.
"""

import logging
from typing import Iterable, List

from bulkdelete.domain.interfaces.file_system import FileSystem
from bulkdelete.domain.interfaces.id_source import IdSource
from bulkdelete.domain.models.common import EntityId, FilePath
from bulkdelete.domain.models.errors import IdSourceError

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "#"

def parse_entity_ids(lines: Iterable[str]) -> List[EntityId]:
    """Filters comment and blank lines, keeping input order."""
    ids: List[EntityId] = []
    for line in lines:
        if line.startswith(COMMENT_PREFIX):
            continue
        entity_id = line.strip()
        if entity_id:
            ids.append(EntityId(entity_id))
    return ids


class FileIdSource(IdSource):
    """Reads the ids to delete from a file."""

    def __init__(self, path: FilePath, file_system: FileSystem):
        self.path = path
        self.file_system = file_system

    async def read_ids(self) -> List[EntityId]:
        try:
            content = await self.file_system.read_file(self.path)
        except OSError as e:
            raise IdSourceError(f"Cannot read entity ids from {self.path}: {e}") from e
        ids = parse_entity_ids(content.splitlines())
        logger.info(f"Read {len(ids)} entity ids from {self.path}")
        for entity_id in ids:
            logger.debug(entity_id)
        return ids
