import abc

from bulkdelete.domain.models.common import BearerToken


class TokenProvider(abc.ABC):
    """Interface for acquiring a Management API bearer token."""

    @abc.abstractmethod
    async def acquire_token(
        self,
        domain: str,
        client_id: str,
        client_secret: str,
        audience: str,
        scope: str,
    ) -> BearerToken:
        """Acquires an access token once per run.

        Raises:
            AuthError: On any non-success response or malformed payload.
        """
        pass

    async def close(self) -> None:
        """Releases network resources held by the provider."""
        pass
