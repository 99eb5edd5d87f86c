"""Concrete implementation of the EntityDeleter interface using httpx.

Translates delete requests into Management API v2 calls and HTTP failures
into ManagementApiError values carrying the status code.
"""

import logging
from typing import Optional
from urllib.parse import quote

import httpx

from bulkdelete.domain.interfaces.entity_deleter import EntityDeleter
from bulkdelete.domain.models.common import BearerToken, EntityId, NO_RESPONSE_STATUS, StatusCode
from bulkdelete.domain.models.errors import ManagementApiError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0

def management_api_base_url(domain: str) -> str:
    return f"https://{domain}/api/v2"


def error_message(response: httpx.Response) -> str:
    """Best-effort extraction of the API's error message."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)[:200]


class ManagementApiClient(EntityDeleter):
    """Deletes entities through the Management API v2."""

    def __init__(
        self,
        domain: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        """Initializes the client.

        Args:
            domain: Tenant domain, e.g. 'acme.eu.auth0.com'.
            client: Optional pre-configured httpx client (tests inject a mock transport).
            timeout: Request timeout in seconds when the client is created here.
        """
        self.base_url = management_api_base_url(domain)
        self._client = client
        self._timeout = timeout
        logger.info(f"ManagementApiClient initialized for {self.base_url}")

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout))
        return self._client

    def entity_url(self, entity_type: str, entity_id: str) -> str:
        return f"{self.base_url}/{entity_type}/{quote(entity_id, safe='')}"

    async def delete_entity(self, entity_type: str, entity_id: EntityId, token: BearerToken) -> StatusCode:
        url = self.entity_url(entity_type, entity_id)
        client = await self._get_client()
        try:
            response = await client.delete(url, headers={"Authorization": f"Bearer {token}"})
        except httpx.HTTPError as e:
            logger.warning(f"[{entity_id}] no response from Management API: {type(e).__name__}: {e}")
            raise ManagementApiError(NO_RESPONSE_STATUS, f"No response for DELETE {url}: {e}") from e

        if response.is_success:
            return StatusCode(response.status_code)
        raise ManagementApiError.from_status(response.status_code, error_message(response))

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
