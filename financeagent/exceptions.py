"""Exceptions raised by FinanceAgent components."""

from typing import Optional


class FinanceAgentError(Exception):
    """Base class for all FinanceAgent errors."""


class PriceFeedError(FinanceAgentError):
    """The price feed could not return a usable price for a symbol."""

    def __init__(self, symbol: str, reason: str):
        self.symbol = symbol
        self.reason = reason
        super().__init__(f"Price unavailable for {symbol}: {reason}")


class PersistenceError(FinanceAgentError):
    """Session state could not be loaded or saved."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)
