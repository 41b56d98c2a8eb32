"""Data models for FinanceAgent."""

from financeagent.models.alert import Alert, AlertCollection, AlertCondition
from financeagent.models.message import Message
from financeagent.models.wakeup import Wakeup

__all__ = [
    "Alert",
    "AlertCollection",
    "AlertCondition",
    "Message",
    "Wakeup",
]
