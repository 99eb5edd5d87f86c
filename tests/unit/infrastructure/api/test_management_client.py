import httpx
import pytest

from bulkdelete.domain.models.common import BearerToken, EntityId
from bulkdelete.domain.models.errors import ManagementApiError, TransientRateLimitError
from bulkdelete.infrastructure.api.management_client import ManagementApiClient

def make_client(handler):
    return ManagementApiClient(
        "acme.eu.auth0.com",
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

@pytest.mark.asyncio
async def test_delete_success_returns_status_and_sends_bearer_token():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(204)

    client = make_client(handler)
    status = await client.delete_entity("users", EntityId("auth0|123"), BearerToken("tok"))
    await client.close()

    assert status == 204
    request = seen[0]
    assert request.method == "DELETE"
    assert request.url.host == "acme.eu.auth0.com"
    assert request.url.path == "/api/v2/users/auth0|123"
    assert request.headers["Authorization"] == "Bearer tok"

@pytest.mark.asyncio
async def test_rate_limit_raises_transient_error():
    client = make_client(lambda request: httpx.Response(429, json={"message": "Too Many Requests"}))

    with pytest.raises(TransientRateLimitError) as exc_info:
        await client.delete_entity("clients", EntityId("c1"), BearerToken("tok"))

    assert exc_info.value.status_code == 429

@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 404, 500])
async def test_other_errors_carry_their_status(status):
    client = make_client(lambda request: httpx.Response(status, json={"message": "nope"}))

    with pytest.raises(ManagementApiError) as exc_info:
        await client.delete_entity("connections", EntityId("con_1"), BearerToken("tok"))

    assert not isinstance(exc_info.value, TransientRateLimitError)
    assert exc_info.value.status_code == status
    assert "nope" in str(exc_info.value)

@pytest.mark.asyncio
async def test_transport_failure_has_status_zero():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)

    with pytest.raises(ManagementApiError) as exc_info:
        await client.delete_entity("users", EntityId("u1"), BearerToken("tok"))

    assert exc_info.value.status_code == 0

def test_entity_url_percent_encodes_ids():
    client = ManagementApiClient("acme.eu.auth0.com")
    assert client.entity_url("resource-servers", "a/b") == "https://acme.eu.auth0.com/api/v2/resource-servers/a%2Fb"
