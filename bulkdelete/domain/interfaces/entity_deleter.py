"""Interface for the remote delete call.

Hides the HTTP client used to talk to the Management API from the runner.
"""

import abc

from bulkdelete.domain.models.common import BearerToken, EntityId, StatusCode


class EntityDeleter(abc.ABC):
    """Deletes single entities through the Management API."""

    @abc.abstractmethod
    async def delete_entity(self, entity_type: str, entity_id: EntityId, token: BearerToken) -> StatusCode:
        """Issues `DELETE {baseUrl}/{entity_type}/{entity_id}`.

        Returns:
            The 2xx status code of the response.

        Raises:
            ManagementApiError: For any non-2xx status (TransientRateLimitError for 429)
                or when no response was received (status code 0).
        """
        pass

    async def close(self) -> None:
        """Releases network resources held by the deleter."""
        pass
