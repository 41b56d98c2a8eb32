"""Alert commands consumed by the assistant and the CLI."""

import logging

from financeagent.alerts.monitor import AlertMonitor
from financeagent.alerts.store import AlertStore
from financeagent.models import AlertCondition


logger = logging.getLogger(__name__)


class AlertService:
    """Create, list and delete alerts for one session."""

    def __init__(self, store: AlertStore, monitor: AlertMonitor):
        self.store = store
        self.monitor = monitor

    async def create_alert(
        self,
        symbol: str,
        target_price: float,
        condition: AlertCondition,
    ) -> dict:
        """Create an alert and schedule its first check.

        Returns:
            Dictionary with ``alert_id`` and a confirmation ``message``.

        Raises:
            PersistenceError: If the alert or its wake-up could not be saved.
        """
        alert = await self.store.create(symbol, target_price, condition)
        await self.monitor.start(alert)
        return {
            "alert_id": alert.id,
            "message": (
                f"✅ Alert set: Notify when {alert.symbol} goes "
                f"{alert.condition.value} ${alert.target_price:.2f}"
            ),
        }

    async def list_alerts(self) -> list[dict]:
        """List active alerts for display."""
        alerts = await self.store.list_active()
        return [
            {
                "id": alert.id,
                "symbol": alert.symbol,
                "condition": alert.condition.value,
                "target_price": alert.target_price,
                "created_at": alert.created_at.isoformat(),
            }
            for alert in alerts
        ]

    async def delete_alert(self, alert_id: str) -> dict:
        """Delete an alert. Pending wake-ups for it become no-ops.

        Raises:
            PersistenceError: If the updated collection could not be saved.
        """
        found = await self.store.delete(alert_id)
        if not found:
            logger.debug("Delete requested for unknown alert %s", alert_id)
        return {"found": found}
