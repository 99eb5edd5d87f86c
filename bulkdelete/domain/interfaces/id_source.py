import abc
from typing import List

from bulkdelete.domain.models.common import EntityId


class IdSource(abc.ABC):
    """Interface for the ordered list of entity ids to delete."""

    @abc.abstractmethod
    async def read_ids(self) -> List[EntityId]:
        """Returns the ids in input order, comment and blank lines excluded.

        Raises:
            IdSourceError: If the ids cannot be read.
        """
        pass
