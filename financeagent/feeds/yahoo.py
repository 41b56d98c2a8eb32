"""Yahoo Finance price feed using yfinance."""

import asyncio
import logging
import math

import yfinance as yf

from financeagent.exceptions import PriceFeedError
from financeagent.feeds.base import BasePriceFeed


logger = logging.getLogger(__name__)

VALID_PERIODS = ("1d", "5d", "1mo", "3mo", "6mo", "1y")


class YahooPriceFeed(BasePriceFeed):
    """Price feed backed by Yahoo Finance."""

    async def fetch_price(self, symbol: str) -> float:
        return await asyncio.to_thread(self.get_price, symbol)

    def get_price(self, symbol: str) -> float:
        """Fetch the last traded price synchronously.

        Raises:
            PriceFeedError: If Yahoo returns nothing usable.
        """
        symbol = symbol.upper()
        try:
            price = yf.Ticker(symbol).fast_info.last_price
        except Exception as e:
            logger.debug("yfinance lookup failed for %s", symbol, exc_info=True)
            raise PriceFeedError(symbol, str(e)) from e

        # A zero, missing or NaN price means Yahoo had no quote
        if not isinstance(price, (int, float)) or math.isnan(price) or price <= 0:
            raise PriceFeedError(symbol, f"no price returned ({price!r})")
        return float(price)

    def get_closes(self, symbol: str, period: str = "1mo") -> list[float]:
        """Fetch daily closing prices, oldest first.

        Args:
            symbol: Ticker symbol.
            period: One of ``VALID_PERIODS`` or a yfinance period such as "1y".

        Raises:
            PriceFeedError: If the history is empty or cannot be fetched.
        """
        symbol = symbol.upper()
        try:
            history = yf.Ticker(symbol).history(period=period, interval="1d")
        except Exception as e:
            raise PriceFeedError(symbol, str(e)) from e

        if history is None or history.empty or "Close" not in history:
            raise PriceFeedError(symbol, f"no history for period {period}")
        return [float(c) for c in history["Close"].dropna().tolist()]
