"""Ask command for FinanceAgent CLI.

Sends one natural language turn to the finance assistant.
"""

import asyncio

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel

from financeagent.cli.common import error_panel, get_config
from financeagent.config import get_openai_model
from financeagent.exceptions import PersistenceError
from financeagent.runtime import AlertRuntime, build_runtime

console = Console()


async def _ask(runtime: AlertRuntime, query: str, model: str | None) -> str:
    from financeagent.agents.assistant import FinanceAssistant

    assistant = FinanceAssistant(runtime, model=model)
    try:
        return await assistant.ask(query)
    finally:
        # Alerts created during the turn are resumed by the monitor
        runtime.timer.close()


@click.command()
@click.argument("query")
def ask(query: str) -> None:
    """Ask the finance assistant a question.

    QUERY is your natural language question or request. The assistant
    can look up prices and create, list or delete price alerts.

    \b
    Examples:
      financeagent ask "What is AAPL trading at?"
      financeagent ask "Alert me when TSLA drops below 150"
      financeagent ask "Show my alerts"
    """
    from financeagent.agents.base import get_api_key

    if not get_api_key():
        console.print(error_panel(
            "OpenAI API key not configured.",
            "Set the [cyan]OPENAI_API_KEY[/cyan] environment variable.",
        ))
        raise SystemExit(1)

    config = get_config()
    console.print("[dim]Processing your query...[/dim]\n")

    try:
        runtime = build_runtime(config)
        response = asyncio.run(_ask(runtime, query, get_openai_model(config)))
    except PersistenceError as e:
        console.print(error_panel("Failed to record conversation:", str(e)))
        raise SystemExit(1)
    except Exception as e:
        console.print(error_panel("Error processing query:", str(e)))
        raise SystemExit(1)

    console.print(Panel(
        Markdown(response),
        title="[bold cyan]FinanceAgent[/bold cyan]",
        border_style="cyan",
    ))
