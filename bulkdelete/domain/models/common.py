"""Defines common Value Objects used across different domain contexts.

These objects represent simple values or concepts like entity ids, status
codes and tenant names, ensuring consistency and type safety.
"""

from typing import NewType, Tuple

# === Core Value Objects ===

# Using NewType for semantic clarity, although they are strings/ints at runtime.
EntityId = NewType("EntityId", str)            # Id of a remote entity to delete
EntityType = NewType("EntityType", str)        # Management API collection, e.g. 'users'
StatusCode = NewType("StatusCode", int)        # HTTP status code of a delete call
BearerToken = NewType("BearerToken", str)      # Management API access token
TenantDomain = NewType("TenantDomain", str)    # e.g. 'acme.eu.auth0.com'
TenantShortName = NewType("TenantShortName", str)  # e.g. 'acme'
FilePath = NewType("FilePath", str)
PromptText = NewType("PromptText", str)

# Entity collections that may be bulk deleted.
ENTITY_TYPES: Tuple[str, ...] = (
    "users",
    "clients",
    "resource-servers",
    "device-credentials",
    "client-grants",
    "connections",
)

# Status code recorded when a delete call never produced a response.
NO_RESPONSE_STATUS = StatusCode(0)
RATE_LIMITED_STATUS = StatusCode(429)


def tenant_short_name(domain: str) -> TenantShortName:
    """Returns the part of the tenant domain before its first '.'."""
    return TenantShortName(domain.split(".")[0])


def api_scope_name(entity_type: str) -> str:
    """Scope suffix for an entity type ('resource-servers' -> 'resource_servers')."""
    return entity_type.replace("-", "_")
