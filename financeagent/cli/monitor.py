"""Alert monitor command for FinanceAgent CLI.

Runs the event loop that delivers wake-ups to the alert monitor.
"""

import asyncio

import click
from rich.console import Console

from financeagent.cli.common import error_panel, get_config
from financeagent.config import get_db_path, get_session_id
from financeagent.db.store import DataStore
from financeagent.exceptions import PersistenceError
from financeagent.notifiers import ConsoleNotifier, MultiChannelNotifier, TranscriptNotifier
from financeagent.runtime import AlertRuntime, build_runtime

console = Console()

DEFAULT_POLL_SECONDS = 30.0


async def run_monitor(
    runtime: AlertRuntime,
    stop: asyncio.Event,
    poll_seconds: float = DEFAULT_POLL_SECONDS,
) -> None:
    """Arm persisted wake-ups until ``stop`` is set.

    The schedule table is re-read every ``poll_seconds`` so alerts created
    by other processes are picked up without a restart.
    """
    armed = await runtime.timer.resume()
    console.print(
        f"[green]Monitoring session '{runtime.session_id}'[/green] "
        f"[dim]({armed} pending check(s), interval {runtime.monitor.check_interval:.0f}s)[/dim]"
    )
    try:
        while not stop.is_set():
            try:
                await asyncio.wait_for(stop.wait(), timeout=poll_seconds)
            except asyncio.TimeoutError:
                await runtime.timer.resume()
    finally:
        runtime.timer.close()
        await runtime.timer.drain()


@click.command("monitor")
@click.option("--quiet", is_flag=True, help="Only record notifications in the transcript.")
@click.option("--poll", "poll_seconds", default=DEFAULT_POLL_SECONDS, show_default=True,
              type=click.FloatRange(min=1.0), help="Seconds between scans for new alerts.")
def monitor(quiet: bool, poll_seconds: float) -> None:
    """Check active alerts until interrupted.

    Wake-ups scheduled by 'financeagent alert' or the assistant are
    loaded from the database, including those created while the monitor
    was stopped.

    \b
    Examples:
      financeagent monitor
      financeagent -v monitor     # Log every check
    """
    config = get_config()
    session_id = get_session_id(config)
    transcript = TranscriptNotifier(DataStore(get_db_path()), session_id)
    notifier = transcript if quiet else MultiChannelNotifier([transcript, ConsoleNotifier(console)])

    try:
        runtime = build_runtime(config, notifier=notifier)
        asyncio.run(run_monitor(runtime, asyncio.Event(), poll_seconds))
    except KeyboardInterrupt:
        console.print("\n[dim]Monitor stopped[/dim]")
    except (PersistenceError, ValueError) as e:
        console.print(error_panel("Monitor failed:", str(e)))
        raise SystemExit(1)
