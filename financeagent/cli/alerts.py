"""Alert management commands for FinanceAgent CLI.

Handles creating, listing and removing price alerts, and showing the
notifications delivered by the monitor.
"""

import asyncio
from datetime import datetime
from typing import Optional

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from financeagent.cli.common import error_panel, get_config
from financeagent.exceptions import PersistenceError
from financeagent.models import AlertCondition
from financeagent.runtime import AlertRuntime, build_runtime

console = Console()


async def _create_alert(
    runtime: AlertRuntime, symbol: str, target_price: float, condition: str
) -> dict:
    try:
        return await runtime.service.create_alert(
            symbol, target_price, AlertCondition(condition)
        )
    finally:
        # The monitor process picks the persisted wake-up up on resume
        runtime.timer.close()


@click.command("alert")
@click.argument("symbol")
@click.argument("target_price", type=float)
@click.option("--above", "condition", flag_value="above", default=True,
              help="Trigger when price reaches or exceeds TARGET_PRICE (default).")
@click.option("--below", "condition", flag_value="below",
              help="Trigger when price reaches or falls below TARGET_PRICE.")
def create_alert(symbol: str, target_price: float, condition: str) -> None:
    """Create a price alert.

    SYMBOL is the ticker symbol (e.g., AAPL, TSLA, BTC-USD).
    TARGET_PRICE is the price threshold.

    \b
    Examples:
      financeagent alert AAPL 200            # Notify when AAPL >= 200
      financeagent alert TSLA 150 --below    # Notify when TSLA <= 150
    """
    config = get_config()

    try:
        runtime = build_runtime(config)
        result = asyncio.run(_create_alert(runtime, symbol, target_price, condition))
    except (PersistenceError, ValueError) as e:
        console.print(error_panel("Failed to create alert:", str(e)))
        raise SystemExit(1)

    console.print(Panel(
        f"[bold green]Alert Created[/bold green]\n\n"
        f"ID:        {result['alert_id']}\n"
        f"Symbol:    {symbol.upper()}\n"
        f"Condition: {condition} {target_price:.2f}\n"
        f"Checks:    every {runtime.monitor.check_interval:.0f}s while "
        "[cyan]financeagent monitor[/cyan] is running",
        title="[bold]New Alert[/bold]",
        border_style="green",
    ))


@click.command("alerts")
@click.option(
    "--remove", "remove_id",
    default=None,
    help="Remove alert with specified ID.",
)
def list_alerts(remove_id: Optional[str]) -> None:
    """Display or manage active alerts.

    Shows all active alerts. Use --remove ID to delete an alert.

    \b
    Examples:
      financeagent alerts                           # List active alerts
      financeagent alerts --remove alert-1700000000000-a1b2c3
    """
    config = get_config()

    try:
        runtime = build_runtime(config)

        if remove_id is not None:
            result = asyncio.run(runtime.service.delete_alert(remove_id))
            if not result["found"]:
                console.print(f"[yellow]Alert with ID {remove_id} not found[/yellow]")
                return
            console.print(f"[green]✓ Removed alert {remove_id}[/green]")
            return

        alerts = asyncio.run(runtime.service.list_alerts())
    except PersistenceError as e:
        console.print(error_panel("Failed to access alerts:", str(e)))
        raise SystemExit(1)

    if not alerts:
        console.print(Panel(
            "[dim]No active alerts. Use 'financeagent alert SYMBOL PRICE' to create one.[/dim]",
            title="[bold]Alerts[/bold]",
            border_style="dim",
        ))
        return

    table = Table(
        title="Active Alerts",
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("ID", style="dim")
    table.add_column("Symbol", style="bold")
    table.add_column("Condition")
    table.add_column("Target", justify="right")
    table.add_column("Created", style="dim")

    for alert in alerts:
        created = datetime.fromisoformat(alert["created_at"]).strftime("%Y-%m-%d %H:%M")
        table.add_row(
            alert["id"],
            alert["symbol"],
            alert["condition"],
            f"${alert['target_price']:.2f}",
            created,
        )

    console.print(table)
    console.print(f"\n[dim]Total: {len(alerts)} alerts[/dim]")
    console.print("[dim]Use 'financeagent alerts --remove ID' to delete an alert[/dim]")


@click.command("notifications")
@click.option("--limit", default=10, show_default=True, help="Number of messages to show.")
def notifications(limit: int) -> None:
    """Show recent assistant messages, including triggered alerts.

    \b
    Examples:
      financeagent notifications
      financeagent notifications --limit 50
    """
    config = get_config()
    runtime = build_runtime(config)

    messages = runtime.data_store.get_messages(
        runtime.session_id, limit=limit, role="assistant"
    )

    if not messages:
        console.print("[dim]No notifications yet.[/dim]")
        return

    for message in messages:
        console.print(Panel(
            Markdown(message.text),
            title=f"[dim]{message.created_at.strftime('%Y-%m-%d %H:%M')}[/dim]",
            border_style="yellow",
        ))
