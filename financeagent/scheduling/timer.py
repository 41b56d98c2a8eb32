"""Wake-up timers that drive the alert monitor."""

import asyncio
import logging
import sqlite3
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Optional

from financeagent.db.store import DataStore
from financeagent.exceptions import PersistenceError


logger = logging.getLogger(__name__)

WakeupCallback = Callable[[str], Awaitable[Any]]


class BaseTimer(ABC):
    """Abstract base class for wake-up timers.

    A timer calls the bound callback with an alert ID no earlier than the
    requested delay. Delivery is at-least-once; there is no ordering
    guarantee between different alerts.
    """

    _callback: Optional[WakeupCallback] = None

    def bind(self, callback: WakeupCallback) -> None:
        """Set the coroutine function invoked for each wake-up."""
        self._callback = callback

    @abstractmethod
    async def schedule_wakeup(self, alert_id: str, delay_seconds: float) -> None:
        """Request a wake-up for an alert.

        Args:
            alert_id: Alert to re-check.
            delay_seconds: Minimum delay before the callback runs.

        Raises:
            PersistenceError: If the request could not be recorded.
        """
        pass


class AsyncioTimer(BaseTimer):
    """Timer backed by the event loop and the ``schedules`` table.

    Each request is written to the data store before it is armed, and the
    row is only removed after the callback finishes, so a wake-up lost to a
    process exit fires again after ``resume()``.
    """

    def __init__(self, data_store: DataStore, session_id: str):
        self.data_store = data_store
        self.session_id = session_id
        self._handles: dict[int, asyncio.TimerHandle] = {}
        self._alert_ids: dict[int, str] = {}
        self._tasks: set[asyncio.Task] = set()

    async def schedule_wakeup(self, alert_id: str, delay_seconds: float) -> None:
        run_at = datetime.now() + timedelta(seconds=delay_seconds)
        try:
            schedule_id = await asyncio.to_thread(
                self.data_store.add_schedule, self.session_id, alert_id, run_at
            )
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to schedule wake-up: {e}", e) from e

        self._arm(schedule_id, alert_id, delay_seconds)
        logger.debug("Scheduled wake-up %d for %s in %.0fs", schedule_id, alert_id, delay_seconds)

    async def resume(self) -> int:
        """Arm wake-ups persisted by another or an earlier process.

        Wake-ups already armed or running here are left alone. If an alert
        has several stored wake-ups only the latest is kept, so each alert
        still has a single pending check.

        Returns:
            Number of wake-ups armed.
        """
        try:
            wakeups = await asyncio.to_thread(self.data_store.get_schedules, self.session_id)
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to load wake-ups: {e}", e) from e

        in_process = set(self._alert_ids.values())
        latest = {}
        stale = []
        for wakeup in wakeups:
            if wakeup.id in self._alert_ids:
                continue
            if wakeup.alert_id in in_process:
                stale.append(wakeup)
                continue
            if wakeup.alert_id in latest:
                stale.append(latest[wakeup.alert_id])
            latest[wakeup.alert_id] = wakeup

        try:
            for wakeup in stale:
                await asyncio.to_thread(self.data_store.delete_schedule, wakeup.id)
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to clear stale wake-ups: {e}", e) from e

        now = datetime.now()
        for wakeup in latest.values():
            delay = max(0.0, (wakeup.run_at - now).total_seconds())
            self._arm(wakeup.id, wakeup.alert_id, delay)

        if latest:
            logger.info("Resumed %d pending wake-up(s) for session '%s'", len(latest), self.session_id)
        return len(latest)

    def pending_count(self) -> int:
        """Number of wake-ups armed or running in this process."""
        return len(self._handles) + len(self._tasks)

    async def drain(self) -> None:
        """Wait for wake-ups that are currently running."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def close(self) -> None:
        """Disarm all wake-ups. Persisted rows are kept for ``resume()``."""
        for schedule_id, handle in self._handles.items():
            handle.cancel()
            self._alert_ids.pop(schedule_id, None)
        self._handles.clear()

    def _arm(self, schedule_id: int, alert_id: str, delay_seconds: float) -> None:
        loop = asyncio.get_running_loop()
        self._alert_ids[schedule_id] = alert_id
        self._handles[schedule_id] = loop.call_later(
            max(0.0, delay_seconds), self._fire, schedule_id, alert_id
        )

    def _fire(self, schedule_id: int, alert_id: str) -> None:
        self._handles.pop(schedule_id, None)
        task = asyncio.ensure_future(self._run(schedule_id, alert_id))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, schedule_id: int, alert_id: str) -> None:
        try:
            if self._callback is None:
                logger.warning("Wake-up %d for %s fired with no callback bound", schedule_id, alert_id)
                return
            await self._callback(alert_id)
        except Exception:
            logger.exception("Wake-up %d for %s failed", schedule_id, alert_id)
        finally:
            await self._clear(schedule_id)

    async def _clear(self, schedule_id: int) -> None:
        try:
            await asyncio.to_thread(self.data_store.delete_schedule, schedule_id)
        except sqlite3.Error:
            # Left in place, the row fires again on the next resume()
            logger.exception("Failed to clear wake-up %d", schedule_id)
        finally:
            self._alert_ids.pop(schedule_id, None)
