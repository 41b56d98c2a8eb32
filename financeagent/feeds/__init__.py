"""Price feed implementations for FinanceAgent."""

from financeagent.feeds.base import BasePriceFeed
from financeagent.feeds.yahoo import YahooPriceFeed

__all__ = [
    "BasePriceFeed",
    "YahooPriceFeed",
]
