"""CLI commands for FinanceAgent.

This package provides the command-line interface for FinanceAgent,
including price lookups, alert management, the alert monitor and the
chat assistant.
"""

from financeagent.cli.main import cli, main

__all__ = ["cli", "main"]
