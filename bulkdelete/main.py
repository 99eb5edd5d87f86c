"""Main entry point for the bulkdelete application.

Sets up the Typer CLI application, validates the run configuration, performs
dependency injection (Composition Root) and delegates execution to the
CommandHandler.
"""

import asyncio
import logging
from typing import Any, Coroutine, Dict, Optional

import httpx
import typer
from typing_extensions import Annotated

# --- Core Layer ---
from bulkdelete.core.command_handler import CommandHandler, EXIT_FAILURE
from bulkdelete.core.services.bulk_delete_service import BulkDeleteService
from bulkdelete.core.services.confirmation_gate import ConfirmationGate

# --- Domain Layer ---
from bulkdelete.domain.models.config import (
    DEFAULT_CONCURRENT, DEFAULT_DELAY_MS, DEFAULT_FAILURE_LOG, DEFAULT_IDS_FILE, DEFAULT_RETRIES, RunConfig,
)
from bulkdelete.domain.models.errors import ValidationError

# --- Infrastructure Layer ---
from bulkdelete.infrastructure.api.management_client import ManagementApiClient
from bulkdelete.infrastructure.auth.token_provider import ClientCredentialsTokenProvider
from bulkdelete.infrastructure.cli.display import ConsoleDisplay
from bulkdelete.infrastructure.config.settings import (
    get_client_id, get_client_secret, get_config, get_domain, get_http_timeout, load_configuration,
)
from bulkdelete.infrastructure.config.validation import require_valid_run_config
from bulkdelete.infrastructure.filesystem.failure_ledger import FileFailureLedger
from bulkdelete.infrastructure.filesystem.id_source import FileIdSource
from bulkdelete.infrastructure.filesystem.local_fs import LocalFileSystem
from bulkdelete.infrastructure.monitoring.logger_setup import DEFAULT_LOG_FORMAT, resolve_log_level, setup_logging
from bulkdelete.infrastructure.resilience.api_retry import RetryPolicy
from bulkdelete.infrastructure.resilience.rate_limiter import RateLimitedScheduler

logger = logging.getLogger(__name__)

# --- Dependency Injection Container (Manual) ---

def build_http_client(timeout: float) -> httpx.AsyncClient:
    """Single HTTP client shared by the token provider and the Management API client."""
    return httpx.AsyncClient(timeout=httpx.Timeout(timeout))

def create_dependencies(config: RunConfig, ui: Optional[ConsoleDisplay] = None) -> Dict[str, Any]:
    """Creates and wires up all dependencies for one run.

    This acts as the Composition Root. The scheduler is constructed once
    here and injected; there is no process-wide limiter.
    """
    logger.debug("Initializing application dependencies...")
    dependencies: Dict[str, Any] = {}

    dependencies['ui'] = ui or ConsoleDisplay()
    http_client = build_http_client(get_http_timeout())
    dependencies['token_provider'] = ClientCredentialsTokenProvider(client=http_client)
    dependencies['deleter'] = ManagementApiClient(config.credentials.domain, client=http_client)
    dependencies['id_source'] = FileIdSource(config.ids_file, LocalFileSystem())
    dependencies['ledger'] = FileFailureLedger(config.failure_log)

    dependencies['scheduler'] = RateLimitedScheduler.from_config(config.scheduler)
    dependencies['retry_policy'] = RetryPolicy(
        scheduler=dependencies['scheduler'],
        ledger=dependencies['ledger'],
        config=config.retry,
    )

    confirmation_gate = None
    if config.confirm:
        confirmation_gate = ConfirmationGate(dependencies['ui'], config.credentials.domain)
    dependencies['bulk_delete_service'] = BulkDeleteService(
        entity_type=config.entity_type,
        deleter=dependencies['deleter'],
        retry_policy=dependencies['retry_policy'],
        ledger=dependencies['ledger'],
        confirmation_gate=confirmation_gate,
    )

    dependencies['command_handler'] = CommandHandler(
        config=config,
        token_provider=dependencies['token_provider'],
        id_source=dependencies['id_source'],
        bulk_delete_service=dependencies['bulk_delete_service'],
        deleter=dependencies['deleter'],
        ledger=dependencies['ledger'],
        ui=dependencies['ui'],
    )
    logger.debug("All dependencies initialized successfully.")
    return dependencies

# --- Typer App Definition ---
app = typer.Typer(
    name="bulk-delete",
    help="Bulk delete Management API entities listed in a file, within the API rate limits.",
    add_completion=False,
)

# --- Helper for Running Async Commands ---
def run_async(coro: Coroutine[Any, Any, int]) -> int:
    """Runs an async command from a sync Typer command and returns its exit code."""
    try:
        return asyncio.run(coro)
    except KeyboardInterrupt:
        logger.warning("Interrupted by operator; no further deletes were dispatched.")
        return 130

# --- CLI Commands ---

@app.command()
def delete(
    mode: Annotated[str, typer.Option(
        "--mode", help="Entity type you want to delete: users, clients, resource-servers, "
                       "device-credentials, client-grants or connections.")],
    prompt: Annotated[bool, typer.Option("--prompt/--no-prompt", help="Show warning prompt.")] = True,
    concurrent: Annotated[int, typer.Option(help="Max concurrent requests (1..20).")] = DEFAULT_CONCURRENT,
    delay: Annotated[int, typer.Option(help="Min delay (ms) between requests (300..3000).")] = DEFAULT_DELAY_MS,
    retry: Annotated[int, typer.Option(help="Number of retries for HTTP 429 requests (0..5).")] = DEFAULT_RETRIES,
    jitter: Annotated[int, typer.Option(help="Random extra backoff (ms) added to each retry (0..3000).")] = 0,
    ids_file: Annotated[str, typer.Option("--ids-file", help="File with one entity id per line; '#' starts a comment.")] = DEFAULT_IDS_FILE,
    failure_log: Annotated[str, typer.Option("--failure-log", help="File receiving 'id,statusCode' for every failed delete.")] = DEFAULT_FAILURE_LOG,
    log_level: Annotated[Optional[str], typer.Option("--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR).")] = None,
):
    """Delete every entity listed in the ids file."""
    # 1. Load Configuration and logging
    load_configuration()
    setup_logging(
        log_level=resolve_log_level(log_level or get_config('logging.level', 'INFO')),
        log_file=get_config('logging.file'),
        log_format=get_config('logging.format', DEFAULT_LOG_FORMAT),
    )

    # 2. Validate every input before any side effect
    try:
        config = require_valid_run_config(
            mode=mode, concurrent=concurrent, delay=delay, retry=retry, prompt=prompt, jitter=jitter,
            ids_file=ids_file, failure_log=failure_log,
            domain=get_domain(), client_id=get_client_id(), client_secret=get_client_secret(),
        )
    except ValidationError as e:
        ui = ConsoleDisplay()
        ui.display_error("Invalid input:\n" + "\n".join(f"- {error}" for error in e.errors))
        typer.echo("see usage: bulk-delete --help", err=True)
        raise typer.Exit(code=EXIT_FAILURE)

    # 3. Wire dependencies and run
    handler: CommandHandler = create_dependencies(config)['command_handler']
    exit_code = run_async(handler.handle_delete())
    raise typer.Exit(code=exit_code)

# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()

if __name__ == "__main__":
    cli_entry_point()
