"""Helpers shared by FinanceAgent CLI commands."""

import toml
from rich.console import Console
from rich.panel import Panel

from financeagent.config import get_config_path, load_config

console = Console()


def error_panel(title: str, message: str) -> Panel:
    return Panel(
        f"[red]{title}[/red]\n\n{message}",
        title="[bold red]Error[/bold red]",
        border_style="red",
    )


def get_config() -> dict:
    """Load configuration or exit with an error panel."""
    try:
        return load_config()
    except toml.TomlDecodeError as e:
        console.print(error_panel(
            "Invalid configuration file:",
            f"[cyan]{get_config_path()}[/cyan]\n\n{e}",
        ))
        raise SystemExit(1)
