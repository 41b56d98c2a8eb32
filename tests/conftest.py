"""Shared fixtures and fakes for FinanceAgent tests."""

import tempfile
from pathlib import Path
from typing import Optional, Union

import pytest

from financeagent.alerts import AlertMonitor, AlertService, AlertStore
from financeagent.db.state import SessionState
from financeagent.db.store import DataStore
from financeagent.exceptions import PriceFeedError
from financeagent.feeds.base import BasePriceFeed
from financeagent.notifiers.base import BaseNotifier
from financeagent.scheduling.timer import BaseTimer


class ScriptedPriceFeed(BasePriceFeed):
    """Returns queued prices per symbol; an exception in the queue is raised."""

    def __init__(self, prices: Optional[dict[str, list[Union[float, Exception]]]] = None):
        self.prices = {k: list(v) for k, v in (prices or {}).items()}
        self.calls: list[str] = []

    def push(self, symbol: str, *values: Union[float, Exception]) -> None:
        self.prices.setdefault(symbol, []).extend(values)

    async def fetch_price(self, symbol: str) -> float:
        self.calls.append(symbol)
        queue = self.prices.get(symbol)
        if not queue:
            raise PriceFeedError(symbol, "no scripted price")
        value = queue.pop(0)
        if isinstance(value, Exception):
            raise value
        return value


class RecordingNotifier(BaseNotifier):
    def __init__(self):
        self.messages: list[str] = []

    async def deliver(self, text: str) -> None:
        self.messages.append(text)


class ManualTimer(BaseTimer):
    """Records wake-up requests; tests fire them explicitly."""

    def __init__(self):
        self.requests: list[tuple[str, float]] = []

    async def schedule_wakeup(self, alert_id: str, delay_seconds: float) -> None:
        self.requests.append((alert_id, delay_seconds))

    def pending_for(self, alert_id: str) -> int:
        return sum(1 for a, _ in self.requests if a == alert_id)

    async def fire(self, alert_id: str):
        """Consume one pending request for the alert and run the callback."""
        for i, (a, _) in enumerate(self.requests):
            if a == alert_id:
                del self.requests[i]
                break
        return await self._callback(alert_id)


class AlertHarness:
    """Store, monitor and service wired to fakes over a real SQLite file."""

    def __init__(self, db_path: Path, check_interval: float = 300):
        self.data_store = DataStore(db_path)
        self.state = SessionState(self.data_store, "test-session")
        self.store = AlertStore(self.state)
        self.feed = ScriptedPriceFeed()
        self.notifier = RecordingNotifier()
        self.timer = ManualTimer()
        self.monitor = AlertMonitor(
            self.store, self.feed, self.notifier, self.timer, check_interval
        )
        self.service = AlertService(self.store, self.monitor)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_db(temp_dir: Path) -> DataStore:
    return DataStore(temp_dir / "test.db")


@pytest.fixture
def harness(temp_dir: Path) -> AlertHarness:
    return AlertHarness(temp_dir / "test.db")
