"""Error taxonomy of the bulk delete tool.

Only ValidationError, AuthError, IdSourceError and ConfirmationDeclinedError
stop a run. Errors of a single delete call are settled by the retry policy
and never escape the job they belong to.
"""

from typing import List, Optional

from .common import RATE_LIMITED_STATUS
from .config import FieldError


class BulkDeleteError(Exception):
    """Base class for all errors raised by the bulk delete tool."""


class ValidationError(BulkDeleteError):
    """Raised when the run configuration is invalid."""

    def __init__(self, errors: List[FieldError]):
        self.errors = list(errors)
        super().__init__("Invalid configuration: " + "; ".join(str(e) for e in self.errors))


class AuthError(BulkDeleteError):
    """Raised when a Management API access token cannot be acquired."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class IdSourceError(BulkDeleteError):
    """Raised when the list of entity ids cannot be read."""


class ConfirmationDeclinedError(BulkDeleteError):
    """Raised when the operator does not confirm the deletion."""

    def __init__(self, received: str, expected: str):
        self.received = received
        self.expected = expected
        super().__init__(f"received {received!r}, expected tenant short name {expected!r}")


class ManagementApiError(BulkDeleteError):
    """A delete call that did not return a 2xx status."""

    def __init__(self, status_code: int, message: str = ""):
        self.status_code = status_code
        super().__init__(message or f"Management API returned HTTP {status_code}")

    @classmethod
    def from_status(cls, status_code: int, message: str = "") -> "ManagementApiError":
        if status_code == RATE_LIMITED_STATUS:
            return TransientRateLimitError(message)
        return cls(status_code, message)


class TransientRateLimitError(ManagementApiError):
    """HTTP 429: the Management API rate limit was hit."""

    def __init__(self, message: str = ""):
        super().__init__(RATE_LIMITED_STATUS, message or "Management API rate limit exceeded (HTTP 429)")


class LedgerWriteError(BulkDeleteError):
    """A failure record could not be written. Reported, never fatal."""
