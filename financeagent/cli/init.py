"""Setup command for FinanceAgent CLI."""

import click
from rich.console import Console
from rich.panel import Panel

from financeagent.config import create_template_config, get_config_path

console = Console()


@click.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing config file.")
def init(force: bool) -> None:
    """Create a template configuration file.

    \b
    Examples:
      financeagent init
      financeagent init --force
    """
    config_path = get_config_path()

    if config_path.exists() and not force:
        console.print(f"[yellow]Config already exists at {config_path}[/yellow]")
        console.print("[dim]Use --force to overwrite it[/dim]")
        return

    path = create_template_config(config_path)
    console.print(Panel(
        f"[bold green]Config created[/bold green]\n\n"
        f"Path: [cyan]{path}[/cyan]\n\n"
        "Set OPENAI_API_KEY in your environment to use [cyan]financeagent ask[/cyan].",
        title="[bold]FinanceAgent[/bold]",
        border_style="green",
    ))
