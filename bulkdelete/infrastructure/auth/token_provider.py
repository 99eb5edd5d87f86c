"""Client-credentials Token Provider for the Management API.

Exchanges the machine-to-machine application's client id and secret for a
Management API access token at `https://{domain}/oauth/token`.
"""

import logging
from typing import Optional

import httpx

from bulkdelete.domain.interfaces.token_provider import TokenProvider
from bulkdelete.domain.models.common import BearerToken, api_scope_name
from bulkdelete.infrastructure.api.management_client import (
    DEFAULT_TIMEOUT_SECONDS, error_message, management_api_base_url
)
from bulkdelete.domain.models.errors import AuthError

logger = logging.getLogger(__name__)

def management_audience(domain: str) -> str:
    return management_api_base_url(domain) + "/"


def delete_scope(entity_type: str) -> str:
    """Scopes needed to delete entities of one type, e.g. 'delete:users read:users'."""
    name = api_scope_name(entity_type)
    return f"delete:{name} read:{name}"


class ClientCredentialsTokenProvider(TokenProvider):
    """TokenProvider using the OAuth2 client-credentials grant."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        self._client = client
        self._timeout = timeout

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout))
        return self._client

    async def acquire_token(
        self,
        domain: str,
        client_id: str,
        client_secret: str,
        audience: str,
        scope: str,
    ) -> BearerToken:
        logger.info("acquiring access_token for mgmt-api")
        payload = {
            "client_id": client_id,
            "client_secret": client_secret,
            "audience": audience,
            "grant_type": "client_credentials",
            "scope": scope,
        }
        client = await self._get_client()
        try:
            response = await client.post(f"https://{domain}/oauth/token", json=payload)
        except httpx.HTTPError as e:
            raise AuthError(f"Token request to {domain} failed: {e}") from e

        if not response.is_success:
            raise AuthError(
                f"Token endpoint returned HTTP {response.status_code}: {error_message(response)}",
                status_code=response.status_code,
            )
        try:
            body = response.json()
        except ValueError as e:
            raise AuthError("Token endpoint returned a malformed payload (not JSON)") from e

        token = body.get("access_token") if isinstance(body, dict) else None
        if not isinstance(token, str) or not token:
            raise AuthError("Token endpoint response did not contain an access_token")
        logger.info(f"access_token acquired (scope: {body.get('scope', scope)})")
        return BearerToken(token)

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
