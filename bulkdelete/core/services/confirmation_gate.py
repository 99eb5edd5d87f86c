"""Confirmation Gate: asks the operator to confirm a destructive run.

The operator must type the tenant's short name (the part of the domain before
its first '.'); anything else aborts the run before a single delete is issued.
"""

import asyncio
import logging

from bulkdelete.domain.interfaces.user_interface import UserInterface
from bulkdelete.domain.models.common import tenant_short_name
from bulkdelete.domain.models.errors import ConfirmationDeclinedError

logger = logging.getLogger(__name__)

class ConfirmationGate:
    """Requires the tenant short name before deleting anything."""

    def __init__(self, ui: UserInterface, domain: str):
        self.ui = ui
        self.domain = domain
        self.expected = tenant_short_name(domain)

    def warning_message(self, count: int, entity_type: str) -> str:
        return (
            f"You are DELETING {count} {entity_type} from {self.domain}!\n"
            "This CANNOT be undone."
        )

    async def confirm(self, count: int, entity_type: str) -> None:
        """Returns normally only when the operator typed the tenant short name.

        Raises:
            ConfirmationDeclinedError: On any other input, or when no input is available.
        """
        self.ui.display_warning(self.warning_message(count, entity_type))
        prompt = f"If you wish to proceed please type in tenant shortname {self.expected}:"
        try:
            received = await asyncio.to_thread(self.ui.get_prompt, prompt)
        except EOFError:
            received = ""
        received = str(received).strip()
        if received != self.expected:
            logger.info(f"Confirmation declined: received {received!r}")
            raise ConfirmationDeclinedError(received, self.expected)
        logger.info(f"Deletion of {count} {entity_type} confirmed by operator.")
