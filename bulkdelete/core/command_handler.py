"""Command Handler: Orchestrates the 'delete' command.

Receives a validated RunConfig from the main entry point (main.py), acquires
the access token and the ids concurrently, delegates the deletion to the
BulkDeleteService and maps fatal errors to process exit codes.
"""

import asyncio
import logging
from typing import Any, Dict, List

from bulkdelete.core.services.bulk_delete_service import BulkDeleteService
from bulkdelete.domain.interfaces.entity_deleter import EntityDeleter
from bulkdelete.domain.interfaces.failure_ledger import FailureLedger
from bulkdelete.domain.interfaces.id_source import IdSource
from bulkdelete.domain.interfaces.token_provider import TokenProvider
from bulkdelete.domain.interfaces.user_interface import UserInterface
from bulkdelete.domain.models.common import BearerToken
from bulkdelete.domain.models.config import RunConfig
from bulkdelete.domain.models.errors import (
    AuthError, BulkDeleteError, ConfirmationDeclinedError, IdSourceError
)
from bulkdelete.infrastructure.auth.token_provider import delete_scope, management_audience

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1

def run_parameters(config: RunConfig) -> Dict[str, Any]:
    """Summary of the inputs/defaults used, shown before the run starts."""
    return {
        "Entity type you want to delete": config.entity_type,
        "Tenant domain": config.credentials.domain,
        "Max concurrent requests": config.scheduler.max_concurrent,
        "Min delay between requests (ms)": config.scheduler.min_delay_ms,
        "Retry attempts for HTTP 429 failed requests": config.retry.max_retries,
        "Show delete warning prompt": config.confirm,
        "Ids file": config.ids_file,
        "Failure log": config.failure_log,
    }

class CommandHandler:
    """Handles the delete command and delegates to the bulk delete service."""

    def __init__(
        self,
        config: RunConfig,
        token_provider: TokenProvider,
        id_source: IdSource,
        bulk_delete_service: BulkDeleteService,
        deleter: EntityDeleter,
        ledger: FailureLedger,
        ui: UserInterface,
    ):
        self.config = config
        self.token_provider = token_provider
        self.id_source = id_source
        self.bulk_delete_service = bulk_delete_service
        self.deleter = deleter
        self.ledger = ledger
        self.ui = ui

    async def _acquire_token(self) -> BearerToken:
        credentials = self.config.credentials
        return await self.token_provider.acquire_token(
            credentials.domain,
            credentials.client_id,
            credentials.client_secret,
            management_audience(credentials.domain),
            delete_scope(self.config.entity_type),
        )

    async def handle_delete(self) -> int:
        """Runs the whole deletion and returns the process exit code."""
        parameters = run_parameters(self.config)
        logger.info("Run parameters: " + ", ".join(f"{k}: {v}" for k, v in parameters.items()))
        self.ui.display_run_parameters(parameters)

        try:
            return await self._delete()
        finally:
            await self.token_provider.close()
            await self.deleter.close()

    async def _delete(self) -> int:
        token_result, ids_result = await asyncio.gather(
            self._acquire_token(), self.id_source.read_ids(), return_exceptions=True
        )
        for result in (token_result, ids_result):
            if isinstance(result, (AuthError, IdSourceError)):
                logger.error(f"[fatal] Cannot continue: {result}")
                self.ui.display_error(f"Cannot continue: {result}")
                return EXIT_FAILURE
            if isinstance(result, BaseException):
                raise result
        token: BearerToken = token_result
        ids: List[str] = ids_result

        if not ids:
            self.ui.display_warning(f"No ids found in {self.config.ids_file}. Nothing to delete.")
            return EXIT_OK

        try:
            summary = await self.bulk_delete_service.run(ids, token)
        except ConfirmationDeclinedError as e:
            self.ui.display_info(f"received {e.received!r}, exiting!")
            return EXIT_FAILURE
        except BulkDeleteError as e:
            logger.error(f"[fatal] Cannot continue: {e}", exc_info=True)
            self.ui.display_error(f"Cannot continue: {e}")
            return EXIT_FAILURE

        self.ui.display_summary(summary, self.config.failure_log)
        write_errors = self.ledger.write_errors
        if write_errors:
            self.ui.display_warning(
                f"{len(write_errors)} failure record(s) could not be written to {self.config.failure_log}. "
                "See the log output for the affected ids."
            )
        return EXIT_OK
