import logging
from typing import Any, Dict, Optional

from rich.console import Console
from rich.panel import Panel
from rich.box import HEAVY, ROUNDED, SIMPLE
from rich.text import Text
from rich.table import Table

from bulkdelete.domain.interfaces.user_interface import UserInterface
from bulkdelete.domain.models.common import PromptText
from bulkdelete.domain.models.jobs import Summary

logger = logging.getLogger(__name__)

# Failure rows shown in the summary; the ledger file has all of them.
MAX_FAILURE_ROWS = 20

class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self, console: Optional[Console] = None):
        """Initializes the rich Console."""
        self._console = console or Console()

    @property
    def console(self) -> Console:
        """Get the Rich console instance for direct operations."""
        return self._console

    def get_prompt(self, prompt_message: str = "> ") -> PromptText:
        """Gets input from the operator.

        Args:
            prompt_message: The message to display before the input cursor.

        Returns:
            The text input by the operator.
        """
        self.console.print("")
        user_input = self.console.input(f"[bold yellow]{prompt_message}[/bold yellow] ")
        return PromptText(user_input)

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message in a distinct style."""
        panel = Panel(
            Text(error_message, style="white"),
            title="[bold red]Error[/bold red]",
            border_style="red",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message."""
        panel = Panel(
            Text(info_message, style="white"),
            title="[bold blue]Info[/bold blue]",
            border_style="blue",
            box=SIMPLE,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message."""
        logger.warning(f"Display warning: {warning_message}")
        panel = Panel(
            Text(warning_message, style="white"),
            title="[bold yellow]Warning[/bold yellow]",
            border_style="yellow",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_run_parameters(self, parameters: Dict[str, Any]) -> None:
        """Displays the inputs and defaults used for the run."""
        table = Table(show_header=False, box=ROUNDED, border_style="cyan", padding=(0, 1))
        table.add_column("Parameter", style="cyan")
        table.add_column("Value", style="bold")
        for name, value in parameters.items():
            table.add_row(name, str(value))
        self.console.print(table)

    def display_summary(self, summary: Summary, failure_log: str) -> None:
        """Displays the final statistics of a run, followed by the first failures."""
        style = "green" if summary.failed == 0 else "yellow"
        title = "Bulk delete summary"
        # Wide enough that rich never wraps the title.
        table = Table(
            title=title, show_header=False, box=ROUNDED, border_style=style,
            padding=(0, 1), min_width=len(title) + 4,
        )
        table.add_column("Metric", style="cyan")
        table.add_column("Count", justify="right", style="bold")
        table.add_row("Attempted", str(summary.attempted))
        table.add_row("Succeeded", f"[green]{summary.succeeded}[/green]")
        table.add_row("Failed", f"[red]{summary.failed}[/red]" if summary.failed else "0")
        self.console.print("")
        self.console.print(table)

        if summary.failures:
            failures = Table(show_header=True, box=SIMPLE, border_style="red", padding=(0, 1))
            failures.add_column("Id")
            failures.add_column("Status", justify="right")
            for record in summary.failures[:MAX_FAILURE_ROWS]:
                failures.add_row(str(record.id), str(record.status_code))
            self.console.print(failures)
            if len(summary.failures) > MAX_FAILURE_ROWS:
                self.console.print(f"[dim]... and {len(summary.failures) - MAX_FAILURE_ROWS} more[/dim]")
            self.console.print(f"Failed deletions were recorded in [bold]{failure_log}[/bold]")
