"""Static validation of the run configuration.

Every input is checked before any side effect (token acquisition, ledger
initialization, network calls). All field-level problems are collected so
the operator sees them at once.
"""

import logging
from typing import Any, List, Optional, Tuple

from bulkdelete.domain.models.common import ENTITY_TYPES, EntityType, FilePath, TenantDomain
from bulkdelete.domain.models.config import (
    MAX_CONCURRENT, MAX_DELAY_MS, MAX_RETRIES, MIN_CONCURRENT, MIN_DELAY_MS, MIN_RETRIES,
    Credentials, FieldError, RetryConfig, RunConfig, SchedulerConfig,
)
from bulkdelete.domain.models.errors import ValidationError

logger = logging.getLogger(__name__)

MAX_JITTER_MS = 3000

def _check_int(errors: List[FieldError], field: str, value: Any, low: int, high: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        errors.append(FieldError(field, f"must be an integer between {low} and {high}, got {value!r}"))
    elif not low <= value <= high:
        errors.append(FieldError(field, f"must be between {low} and {high}, got {value}"))

def _check_present(errors: List[FieldError], field: str, value: Optional[str]) -> None:
    if value is None or not str(value).strip():
        errors.append(FieldError(field, "is required (set it in the environment or a .env file)"))

def validate_run_config(
    *,
    mode: Any,
    concurrent: Any,
    delay: Any,
    retry: Any,
    prompt: bool = True,
    jitter: Any = 0,
    ids_file: str,
    failure_log: str,
    domain: Optional[str],
    client_id: Optional[str],
    client_secret: Optional[str],
) -> Tuple[Optional[RunConfig], List[FieldError]]:
    """Validates raw inputs.

    Returns:
        (RunConfig, []) when every value is valid, otherwise (None, errors).
    """
    errors: List[FieldError] = []

    if mode not in ENTITY_TYPES:
        errors.append(FieldError("mode", f"must be one of {', '.join(ENTITY_TYPES)}, got {mode!r}"))
    _check_int(errors, "concurrent", concurrent, MIN_CONCURRENT, MAX_CONCURRENT)
    _check_int(errors, "delay", delay, MIN_DELAY_MS, MAX_DELAY_MS)
    _check_int(errors, "retry", retry, MIN_RETRIES, MAX_RETRIES)
    _check_int(errors, "jitter", jitter, 0, MAX_JITTER_MS)
    if not ids_file:
        errors.append(FieldError("ids_file", "must not be empty"))
    if not failure_log:
        errors.append(FieldError("failure_log", "must not be empty"))
    _check_present(errors, "AUTH0_DOMAIN", domain)
    _check_present(errors, "AUTH0_CLIENT_ID", client_id)
    _check_present(errors, "AUTH0_CLIENT_SECRET", client_secret)

    if errors:
        for error in errors:
            logger.debug(f"Validation error: {error}")
        return None, errors

    config = RunConfig(
        entity_type=EntityType(mode),
        scheduler=SchedulerConfig(max_concurrent=concurrent, min_delay_ms=delay),
        retry=RetryConfig(max_retries=retry, jitter_ms=jitter),
        credentials=Credentials(
            domain=TenantDomain(str(domain).strip()),
            client_id=str(client_id).strip(),
            client_secret=str(client_secret),
        ),
        confirm=bool(prompt),
        ids_file=FilePath(ids_file),
        failure_log=FilePath(failure_log),
    )
    return config, []

def require_valid_run_config(**kwargs: Any) -> RunConfig:
    """Like validate_run_config, but raises ValidationError on any error."""
    config, errors = validate_run_config(**kwargs)
    if config is None:
        raise ValidationError(errors)
    return config
