"""Price alert store, monitor and commands."""

from financeagent.alerts.monitor import (
    DEFAULT_CHECK_INTERVAL,
    AlertMonitor,
    CheckOutcome,
    format_notification,
)
from financeagent.alerts.service import AlertService
from financeagent.alerts.store import AlertStore, generate_alert_id

__all__ = [
    "DEFAULT_CHECK_INTERVAL",
    "AlertMonitor",
    "AlertService",
    "AlertStore",
    "CheckOutcome",
    "format_notification",
    "generate_alert_id",
]
