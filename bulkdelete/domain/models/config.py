"""Run configuration value objects.

All of these are immutable for the duration of a run and are only ever
built by the validation function in the config infrastructure.
"""

from dataclasses import dataclass

from .common import EntityType, FilePath, TenantDomain

# --- Bounds and defaults ---
MIN_CONCURRENT, MAX_CONCURRENT = 1, 20
MIN_DELAY_MS, MAX_DELAY_MS = 300, 3000
MIN_RETRIES, MAX_RETRIES = 0, 5

DEFAULT_CONCURRENT = 5
DEFAULT_DELAY_MS = 333
DEFAULT_RETRIES = 3
DEFAULT_IDS_FILE = "entity_ids.delete"
DEFAULT_FAILURE_LOG = "failures.log"


@dataclass(frozen=True)
class SchedulerConfig:
    max_concurrent: int
    min_delay_ms: int

    @property
    def min_delay_seconds(self) -> float:
        return self.min_delay_ms / 1000.0


@dataclass(frozen=True)
class RetryConfig:
    max_retries: int
    jitter_ms: int = 0


@dataclass(frozen=True)
class Credentials:
    """Client-credentials grant inputs for the Management API."""
    domain: TenantDomain
    client_id: str
    client_secret: str

    def __repr__(self) -> str:
        return f"Credentials(domain={self.domain!r}, client_id={self.client_id!r}, client_secret='***')"


@dataclass(frozen=True)
class RunConfig:
    """Validated configuration of one bulk delete run."""
    entity_type: EntityType
    scheduler: SchedulerConfig
    retry: RetryConfig
    credentials: Credentials
    confirm: bool = True
    ids_file: FilePath = FilePath(DEFAULT_IDS_FILE)
    failure_log: FilePath = FilePath(DEFAULT_FAILURE_LOG)


@dataclass(frozen=True)
class FieldError:
    """A single rejected configuration value."""
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"
