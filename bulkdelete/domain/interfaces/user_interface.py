"""Interface for interacting with the operator (input/output).

Defines the contract for displaying information, errors, warnings,
run summaries and getting input from the operator, allowing different UI
implementations.
"""

import abc
from typing import Any, Dict

from bulkdelete.domain.models.common import PromptText
from bulkdelete.domain.models.jobs import Summary

class UserInterface(abc.ABC):
    """Abstract Base Class for operator interaction."""

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the operator.

        Args:
            error_message: The error message string.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message to the operator.

        Args:
            warning_message: The warning message string.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message to the operator.

        Args:
            info_message: The informational message string.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def get_prompt(self, prompt_message: str = "Input: ") -> PromptText:
        """Gets input from the operator synchronously.

        Note: For async contexts, the caller should wrap this in asyncio.to_thread.

        Args:
            prompt_message: The message to display before the input prompt.

        Returns:
            The operator's input as PromptText.
        """
        pass

    def display_run_parameters(self, parameters: Dict[str, Any]) -> None:
        """Displays the inputs and defaults used for the run."""
        pass

    def display_summary(self, summary: Summary, failure_log: str) -> None:
        """Displays the final statistics of a run."""
        pass
