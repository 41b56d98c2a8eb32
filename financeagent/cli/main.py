"""Main CLI entry point for FinanceAgent.

This module provides the main click group and lazy loading
for heavy imports to improve startup time.
"""

import importlib

import click
from rich.console import Console

from financeagent.log import setup_logging

# Console for rich output
console = Console()


class LazyGroup(click.Group):
    """A click Group that lazily loads commands.

    Command modules (and the yfinance/openai-agents imports behind them)
    are only imported when the command is invoked.
    """

    def __init__(self, *args, lazy_subcommands: dict[str, str] | None = None, **kwargs):
        """Initialize the lazy group.

        Args:
            lazy_subcommands: Mapping of command names to module paths.
        """
        super().__init__(*args, **kwargs)
        self._lazy_subcommands = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """List all available commands."""
        base = super().list_commands(ctx)
        lazy = list(self._lazy_subcommands.keys())
        return sorted(set(base + lazy))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command by name, lazily loading if needed."""
        if cmd_name in self.commands:
            return self.commands[cmd_name]

        if cmd_name in self._lazy_subcommands:
            return self._lazy_load(cmd_name)

        return None

    def _lazy_load(self, cmd_name: str) -> click.Command:
        """Lazily load a command from its module path."""
        module_path = self._lazy_subcommands[cmd_name]
        module = importlib.import_module(module_path)

        cmd = None
        for attr_name in dir(module):
            attr = getattr(module, attr_name)
            if isinstance(attr, click.Command) and attr.name == cmd_name:
                cmd = attr
                break

        if cmd is None:
            raise click.ClickException(f"Could not find command '{cmd_name}' in {module_path}")

        self.add_command(cmd)
        return cmd


# Define lazy subcommands mapping
LAZY_SUBCOMMANDS = {
    "init": "financeagent.cli.init",
    "price": "financeagent.cli.quote",
    "ask": "financeagent.cli.ask",
    # Alerts
    "alert": "financeagent.cli.alerts",
    "alerts": "financeagent.cli.alerts",
    "notifications": "financeagent.cli.alerts",
    "monitor": "financeagent.cli.monitor",
}


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_SUBCOMMANDS, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="financeagent")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """FinanceAgent - conversational finance assistant with price alerts.

    Ask about prices, set alerts, and run the monitor that checks
    them every few minutes.

    \b
    Quick Start:
      financeagent init                      # Create a config file
      financeagent alert AAPL 200 --above    # Alert when AAPL >= 200
      financeagent monitor                   # Start checking alerts
      financeagent ask "How is TSLA doing?"  # Chat with the assistant
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
