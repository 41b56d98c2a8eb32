"""Notifier that prints alerts to the terminal."""

from typing import Optional

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel

from financeagent.notifiers.base import BaseNotifier


class ConsoleNotifier(BaseNotifier):
    """Print notifications as a rich panel."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    async def deliver(self, text: str) -> None:
        self.console.print(Panel(
            Markdown(text),
            title="[bold yellow]Price Alert[/bold yellow]",
            border_style="yellow",
        ))
