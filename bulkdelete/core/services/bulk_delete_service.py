"""Bulk Operation Runner.

Turns an ordered list of entity ids into delete jobs, runs every job to a
terminal outcome through the retry policy and aggregates the results.
Individual failures never stop the run.
"""

import asyncio
import logging
from typing import Optional, Sequence

from bulkdelete.core.services.confirmation_gate import ConfirmationGate
from bulkdelete.domain.interfaces.entity_deleter import EntityDeleter
from bulkdelete.domain.interfaces.failure_ledger import FailureLedger
from bulkdelete.domain.models.common import BearerToken, EntityId
from bulkdelete.domain.models.jobs import FailureRecord, Job, Permanent, Success, Summary
from bulkdelete.infrastructure.resilience.api_retry import RetryPolicy

logger = logging.getLogger(__name__)

class BulkDeleteService:
    """Deletes a batch of entities of one type."""

    def __init__(
        self,
        entity_type: str,
        deleter: EntityDeleter,
        retry_policy: RetryPolicy,
        ledger: FailureLedger,
        confirmation_gate: Optional[ConfirmationGate] = None,
    ):
        """Initializes the BulkDeleteService.

        Args:
            entity_type: Management API collection the ids belong to.
            deleter: Performs the remote delete call.
            retry_policy: Settles each job, owns the scheduler.
            ledger: Failure ledger, initialized at the start of every run.
            confirmation_gate: When set, the operator must confirm before any job is issued.
        """
        self.entity_type = entity_type
        self.deleter = deleter
        self.retry_policy = retry_policy
        self.ledger = ledger
        self.confirmation_gate = confirmation_gate

    async def run(self, ids: Sequence[EntityId], token: BearerToken) -> Summary:
        """Deletes every id and waits until all of them are settled.

        Raises:
            ConfirmationDeclinedError: If confirmation is required and not given.
                No job has been issued in that case.
        """
        ids = list(ids)
        if ids and self.confirmation_gate is not None:
            await self.confirmation_gate.confirm(len(ids), self.entity_type)

        await self.ledger.initialize(self.entity_type)
        summary = Summary(attempted=len(ids))
        if not ids:
            logger.warning(f"No {self.entity_type} ids to delete.")
            return summary

        logger.info(f"Deleting {len(ids)} {self.entity_type}...")
        jobs = [Job(entity_id) for entity_id in ids]
        outcomes = await asyncio.gather(*(
            self.retry_policy.execute(job, self.deleter.delete_entity, self.entity_type, job.id, token)
            for job in jobs
        ))

        for job, outcome in zip(jobs, outcomes):
            if isinstance(outcome, Success):
                summary.succeeded += 1
            elif isinstance(outcome, Permanent):
                summary.failed += 1
                summary.failures.append(FailureRecord(job.id, outcome.status_code))
            else:
                raise TypeError(f"Job {job.id} settled with non-terminal outcome {outcome!r}")

        logger.info(
            f"Bulk delete of {self.entity_type} finished: attempted={summary.attempted}, "
            f"succeeded={summary.succeeded}, failed={summary.failed}"
        )
        return summary
