"""Base price feed interface for FinanceAgent."""

from abc import ABC, abstractmethod


class BasePriceFeed(ABC):
    """Abstract base class for price feed implementations.

    Implementations must raise ``PriceFeedError`` for every failure so
    callers can tell "no price" apart from a price.
    """

    @abstractmethod
    async def fetch_price(self, symbol: str) -> float:
        """Get the latest price for a symbol.

        Args:
            symbol: Ticker symbol.

        Returns:
            Last traded price.

        Raises:
            PriceFeedError: If no usable price is available.
        """
        pass
