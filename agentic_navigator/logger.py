"""
Logging and console output for Agentic Navigator.

Handles logging setup and rich console output for agent runs.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .actions import Action, Type


def configure_logging(debug: bool = False, console: Optional[Console] = None) -> None:
    """Route agentic_navigator logs through a rich handler.
    
    Args:
        debug: Log at DEBUG instead of WARNING
        console: Console to write to (defaults to stderr)
    """
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    
    package_logger = logging.getLogger("agentic_navigator")
    package_logger.handlers = [handler]
    package_logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    package_logger.propagate = False


def shorten_for_display(action: Action) -> Action:
    """Shorten long TYPE payloads for console output."""
    if isinstance(action, Type) and len(action.text) > 80:
        return Type(action.element_id, action.text[:77] + "...")
    return action


class RunConsole:
    """Console reporter for a single agent run."""
    
    def __init__(
        self,
        goal: str,
        enable_console: bool = True,
        console: Optional[Console] = None,
    ):
        self.goal = goal
        if enable_console:
            self.console = console or Console()
        else:
            self.console = None
        self.step_count = 0
    
    def print_header(self) -> None:
        """Print the run header to console."""
        if not self.console:
            return
        
        self.console.print()
        self.console.print(Panel(
            f"[bold cyan]Goal:[/bold cyan] {self.goal}",
            title="Agentic Navigator",
            border_style="cyan",
        ))
        self.console.print()
    
    def print_step(self, step: int, url: str, action: Action) -> None:
        """Print a decoded action to the console.
        
        Args:
            step: Step number (1-based)
            url: URL the action was requested for
            action: The decoded action
        """
        self.step_count = step
        if not self.console:
            return
        
        step_text = Text()
        step_text.append(f"Step {step}: ", style="bold")
        step_text.append(shorten_for_display(action).to_command(), style="bold cyan")
        
        self.console.print(step_text)
        self.console.print(f"  [dim]URL:[/dim] {url}")
    
    def print_goal_update(self, goal: str) -> None:
        self.goal = goal
        if not self.console:
            return
        self.console.print(f"  [yellow]Goal updated:[/yellow] {goal}")
    
    def print_error(self, error: str) -> None:
        """Print an error message to console."""
        if not self.console:
            return
        self.console.print(f"  [bold red]Error:[/bold red] {error}")
    
    def print_summary(self, steps: int, history_length: int, stopped_reason: str) -> None:
        """Print the run summary to console."""
        if not self.console:
            return
        
        table = Table(title="Run Summary", show_header=False)
        table.add_column("Property", style="dim")
        table.add_column("Value")
        
        table.add_row("Final Goal", self.goal)
        table.add_row("Steps Executed", str(steps))
        table.add_row("Messages In Context", str(history_length))
        table.add_row("Stopped", stopped_reason)
        
        self.console.print()
        self.console.print(table)
