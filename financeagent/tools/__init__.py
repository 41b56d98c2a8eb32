"""Agent tools for FinanceAgent.

This module provides tools that AI agents use to look up prices and to
manage price alerts.
"""

from financeagent.tools.alerts import (
    delete_alert,
    get_runtime,
    list_alerts,
    set_price_alert,
    set_runtime,
)
from financeagent.tools.market import (
    calculate_sma,
    get_crypto_price,
    get_price_change,
    get_stock_price,
    set_feed,
)

__all__ = [
    # Alert tools
    "set_runtime",
    "get_runtime",
    "set_price_alert",
    "list_alerts",
    "delete_alert",
    # Market data tools
    "set_feed",
    "get_stock_price",
    "get_crypto_price",
    "get_price_change",
    "calculate_sma",
]
