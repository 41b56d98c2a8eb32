"""Market data tools for AI agents.

These tools fetch live prices and simple price statistics from
Yahoo Finance.
"""

from typing import Optional

from financeagent.exceptions import PriceFeedError
from financeagent.feeds.yahoo import VALID_PERIODS, YahooPriceFeed


# Global feed instance (set by application)
_feed: Optional[YahooPriceFeed] = None


def set_feed(feed: Optional[YahooPriceFeed]) -> None:
    """Set the global price feed used by the market tools.

    Args:
        feed: Feed to use, or None to fall back to a fresh YahooPriceFeed.
    """
    global _feed
    _feed = feed


def _ensure_feed() -> YahooPriceFeed:
    return _feed if _feed is not None else YahooPriceFeed()


def get_stock_price(symbol: str) -> dict:
    """Get the current price of a stock or crypto pair.

    Args:
        symbol: Ticker symbol like "AAPL", "TSLA" or "BTC-USD".

    Returns:
        Dictionary containing:
        - symbol: The upper-cased symbol
        - price: Last traded price (None on failure)
        - error: Error message if lookup failed (None if successful)
    """
    symbol = symbol.upper()
    try:
        price = _ensure_feed().get_price(symbol)
        return {"symbol": symbol, "price": round(price, 2), "error": None}
    except PriceFeedError as e:
        return {"symbol": symbol, "price": None, "error": str(e)}


# Common coin names and tickers to Yahoo Finance USD pairs
CRYPTO_PAIRS = {
    "bitcoin": "BTC-USD",
    "btc": "BTC-USD",
    "ethereum": "ETH-USD",
    "eth": "ETH-USD",
    "solana": "SOL-USD",
    "sol": "SOL-USD",
    "dogecoin": "DOGE-USD",
    "doge": "DOGE-USD",
    "cardano": "ADA-USD",
    "ada": "ADA-USD",
    "ripple": "XRP-USD",
    "xrp": "XRP-USD",
}


def crypto_pair(coin: str) -> str:
    """Map a coin name or ticker to its Yahoo USD pair, e.g. "bitcoin" -> "BTC-USD"."""
    name = coin.strip().lower()
    return CRYPTO_PAIRS.get(name, f"{name.upper()}-USD")


def get_crypto_price(coin: str) -> dict:
    """Get the current USD price of a cryptocurrency.

    Args:
        coin: Coin name or ticker like "bitcoin", "eth" or "SOL".

    Returns:
        Dictionary containing:
        - coin: The coin as given
        - symbol: Yahoo pair that was queried (e.g. "BTC-USD")
        - price: Last traded price in USD (None on failure)
        - error: Error message if lookup failed (None if successful)
    """
    symbol = crypto_pair(coin)
    try:
        price = _ensure_feed().get_price(symbol)
        return {"coin": coin, "symbol": symbol, "price": round(price, 2), "error": None}
    except PriceFeedError as e:
        return {
            "coin": coin,
            "symbol": symbol,
            "price": None,
            "error": f"{e}. Try standard coins like bitcoin, ethereum or solana.",
        }


def get_price_change(symbol: str, period: str = "1mo") -> dict:
    """Get the price change of a stock over a time period.

    Args:
        symbol: Ticker symbol.
        period: One of "1d", "5d", "1mo", "3mo", "6mo", "1y".

    Returns:
        Dictionary containing:
        - symbol, period
        - start_price, current_price: First and last close in the period
        - change, change_percent: Absolute and percentage change
        - performance: "positive" or "negative"
        - error: Error message if lookup failed (None if successful)
    """
    symbol = symbol.upper()
    if period not in VALID_PERIODS:
        return {
            "symbol": symbol,
            "period": period,
            "error": f"Invalid period '{period}'. Use one of: {', '.join(VALID_PERIODS)}",
        }

    try:
        closes = _ensure_feed().get_closes(symbol, period)
    except PriceFeedError as e:
        return {"symbol": symbol, "period": period, "error": str(e)}

    start_price = closes[0]
    current_price = closes[-1]
    change = current_price - start_price
    change_percent = (change / start_price) * 100 if start_price else 0.0

    return {
        "symbol": symbol,
        "period": period,
        "start_price": round(start_price, 2),
        "current_price": round(current_price, 2),
        "change": round(change, 2),
        "change_percent": round(change_percent, 2),
        "performance": "positive" if change >= 0 else "negative",
        "error": None,
    }


def calculate_sma(symbol: str, days: int = 20) -> dict:
    """Calculate the Simple Moving Average (SMA) of daily closes.

    Args:
        symbol: Ticker symbol.
        days: Number of days for the SMA (5-200).

    Returns:
        Dictionary containing:
        - symbol, period
        - current_price: Latest close
        - sma: Moving average value
        - percent_from_sma: Distance of price from the SMA in percent
        - signal: "bullish" if price is above the SMA, otherwise "bearish"
        - error: Error message if calculation failed (None if successful)
    """
    symbol = symbol.upper()
    if not 5 <= days <= 200:
        return {"symbol": symbol, "error": "days must be between 5 and 200"}

    try:
        closes = _ensure_feed().get_closes(symbol, "1y")
    except PriceFeedError as e:
        return {"symbol": symbol, "error": str(e)}

    if len(closes) < days:
        return {
            "symbol": symbol,
            "error": f"Not enough historical data for {days}-day SMA. Found {len(closes)} days.",
        }

    window = closes[-days:]
    sma = sum(window) / len(window)
    current_price = window[-1]
    percent_from_sma = ((current_price - sma) / sma) * 100

    return {
        "symbol": symbol,
        "period": f"{days}-day",
        "current_price": round(current_price, 2),
        "sma": round(sma, 2),
        "percent_from_sma": round(percent_from_sma, 2),
        "signal": "bullish" if percent_from_sma > 0 else "bearish",
        "error": None,
    }
