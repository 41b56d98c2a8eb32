"""Wake-up scheduling for FinanceAgent."""

from financeagent.scheduling.timer import AsyncioTimer, BaseTimer, WakeupCallback

__all__ = [
    "AsyncioTimer",
    "BaseTimer",
    "WakeupCallback",
]
