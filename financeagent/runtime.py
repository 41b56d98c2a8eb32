"""Wiring of stores, feed, notifier and timer for one session."""

from typing import Optional

from financeagent.alerts import DEFAULT_CHECK_INTERVAL, AlertMonitor, AlertService, AlertStore
from financeagent.config import get_check_interval, get_db_path, get_session_id
from financeagent.db.state import SessionState
from financeagent.db.store import DataStore
from financeagent.feeds import BasePriceFeed, YahooPriceFeed
from financeagent.notifiers import BaseNotifier, TranscriptNotifier
from financeagent.scheduling import AsyncioTimer


class AlertRuntime:
    """All alert components for one session, sharing one data store."""

    def __init__(
        self,
        data_store: DataStore,
        session_id: str,
        feed: Optional[BasePriceFeed] = None,
        notifier: Optional[BaseNotifier] = None,
        check_interval: float = DEFAULT_CHECK_INTERVAL,
    ):
        self.data_store = data_store
        self.session_id = session_id
        self.feed = feed or YahooPriceFeed()
        self.notifier = notifier or TranscriptNotifier(data_store, session_id)
        self.state = SessionState(data_store, session_id)
        self.store = AlertStore(self.state)
        self.timer = AsyncioTimer(data_store, session_id)
        self.monitor = AlertMonitor(
            self.store, self.feed, self.notifier, self.timer, check_interval
        )
        self.service = AlertService(self.store, self.monitor)


def build_runtime(
    config: dict,
    notifier: Optional[BaseNotifier] = None,
    feed: Optional[BasePriceFeed] = None,
) -> AlertRuntime:
    """Build the runtime described by a loaded config dict."""
    data_store = DataStore(get_db_path())
    return AlertRuntime(
        data_store,
        get_session_id(config),
        feed=feed,
        notifier=notifier,
        check_interval=get_check_interval(config),
    )
