"""Alert collection store with serialized read-modify-write."""

import asyncio
import logging
import time
import uuid
from datetime import datetime
from typing import Callable, Optional

from financeagent.db.state import SessionState
from financeagent.models import Alert, AlertCollection, AlertCondition


logger = logging.getLogger(__name__)


def generate_alert_id(existing: set[str]) -> str:
    """Generate an alert ID that does not collide with ``existing``."""
    while True:
        alert_id = f"alert-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"
        if alert_id not in existing:
            return alert_id


class AlertStore:
    """Single source of truth for a session's alerts.

    Every mutation reloads the whole collection, modifies it and writes it
    back inside one database transaction, so writers in other processes
    sharing the database cannot lose each other's updates. Within this
    process mutations also queue on one lock; the in-memory snapshot only
    moves forward once a write has committed.
    """

    def __init__(self, state: SessionState):
        """Initialize the alert store.

        Args:
            state: Durable state for the session.
        """
        self.state = state
        self._lock = asyncio.Lock()
        self._snapshot: Optional[AlertCollection] = None

    async def _load(self) -> AlertCollection:
        return await asyncio.to_thread(self.state.load)

    async def _update(
        self,
        mutate: Callable[[AlertCollection], Optional[AlertCollection]],
    ) -> Optional[AlertCollection]:
        updated = await asyncio.to_thread(self.state.update, mutate)
        if updated is not None:
            self._snapshot = updated
        return updated

    async def create(
        self,
        symbol: str,
        target_price: float,
        condition: AlertCondition,
    ) -> Alert:
        """Create and persist a new active alert.

        Args:
            symbol: Ticker symbol to watch.
            target_price: Price threshold.
            condition: Trigger direction.

        Returns:
            The new alert.

        Raises:
            PersistenceError: If the collection could not be saved.
        """
        condition = AlertCondition(condition)
        created: list[Alert] = []

        def add(collection: AlertCollection) -> AlertCollection:
            alert = Alert(
                id=generate_alert_id(collection.ids()),
                symbol=symbol.upper(),
                target_price=target_price,
                condition=condition,
                created_at=datetime.now(),
                active=True,
            )
            created[:] = [alert]
            return collection.with_alert(alert)

        async with self._lock:
            await self._update(add)

        alert = created[0]
        logger.info("Created alert %s: %s %s %s", alert.id, alert.symbol,
                    alert.condition.value, alert.target_price)
        return alert

    async def get(self, alert_id: str) -> Optional[Alert]:
        """Read an alert from durable state.

        Returns:
            The alert if present, None otherwise.
        """
        collection = await self._load()
        return collection.get(alert_id)

    async def list_active(self) -> list[Alert]:
        """List active alerts in insertion order.

        Served from the latest committed snapshot; the first call loads it.
        """
        if self._snapshot is None:
            self._snapshot = await self._load()
        return self._snapshot.active()

    async def delete(self, alert_id: str) -> bool:
        """Remove an alert.

        Returns:
            True if an alert was removed, False if the ID was absent.

        Raises:
            PersistenceError: If the collection could not be saved.
        """
        def remove(collection: AlertCollection) -> Optional[AlertCollection]:
            if collection.get(alert_id) is None:
                return None
            return collection.without(alert_id)

        async with self._lock:
            removed = await self._update(remove) is not None

        if removed:
            logger.info("Deleted alert %s", alert_id)
        return removed

    async def mark_triggered(self, alert_id: str) -> bool:
        """Deactivate an alert that has fired.

        Returns:
            True if the alert went from active to inactive, False if it
            was absent or already inactive.

        Raises:
            PersistenceError: If the collection could not be saved.
        """
        def deactivate(collection: AlertCollection) -> Optional[AlertCollection]:
            alert = collection.get(alert_id)
            if alert is None or not alert.active:
                return None
            return collection.replace(alert.model_copy(update={"active": False}))

        async with self._lock:
            changed = await self._update(deactivate) is not None

        if changed:
            logger.info("Marked alert %s as triggered", alert_id)
        return changed
