"""Price lookup command for FinanceAgent CLI."""

import click
from rich.console import Console
from rich.panel import Panel

from financeagent.cli.common import error_panel
from financeagent.tools.market import get_price_change, get_stock_price

console = Console()


@click.command("price")
@click.argument("symbol")
@click.option(
    "--period",
    type=click.Choice(["1d", "5d", "1mo", "3mo", "6mo", "1y"]),
    default=None,
    help="Also show the change over this period.",
)
def price(symbol: str, period: str | None) -> None:
    """Display the current price for a symbol.

    SYMBOL is the ticker symbol (e.g., AAPL, TSLA, BTC-USD).

    \b
    Examples:
      financeagent price AAPL
      financeagent price TSLA --period 1mo
    """
    quote = get_stock_price(symbol)
    if quote["error"]:
        console.print(error_panel("Failed to get price:", quote["error"]))
        raise SystemExit(1)

    text = f"[bold]{quote['symbol']}[/bold]\n\n[bold white]Price:[/bold white] ${quote['price']:.2f}"
    color = "cyan"

    if period:
        change = get_price_change(symbol, period)
        if change["error"]:
            text += f"\n\n[yellow]{period} change unavailable: {change['error']}[/yellow]"
        else:
            color = "green" if change["change"] >= 0 else "red"
            arrow = "▲" if change["change"] >= 0 else "▼"
            text += (
                f"\n[bold white]{period} change:[/bold white] "
                f"[{color}]{arrow} {change['change']:+.2f} ({change['change_percent']:+.2f}%)[/{color}]\n"
                f"[dim]From ${change['start_price']:.2f}[/dim]"
            )

    console.print(Panel(text, title=f"[bold {color}]Quote[/bold {color}]", border_style=color))
