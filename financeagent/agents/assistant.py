"""Finance assistant agent.

Answers price questions and manages price alerts through tools. The
conversation is recorded in the session transcript, next to any alert
notifications the monitor delivers.
"""

import asyncio
from datetime import date
from typing import Literal, Optional

from agents import Agent, function_tool

from financeagent.agents.base import create_agent, run_agent_async
from financeagent.models import Message
from financeagent.runtime import AlertRuntime
from financeagent.tools import alerts as alert_tools
from financeagent.tools import market as market_tools


ASSISTANT_INSTRUCTIONS = """You are FinanceAgent, a friendly financial assistant.

You help users with:
- Real-time stock prices (use get_stock_price with tickers like AAPL, TSLA)
- Cryptocurrency prices (use get_crypto_price with names like bitcoin, ethereum, solana)
- Price performance over a period (use get_price_change)
- Simple Moving Averages (use calculate_sma) and what they suggest
- Price alerts: create with set_price_alert, view with list_alerts, remove with delete_alert

Guidelines:
- After receiving tool results, always respond in natural language
- Never output raw JSON or describe tool calls in text
- When setting alerts, confirm the symbol, direction and target back to the user
- Alerts are checked every few minutes; tell the user they will be notified in this conversation
- If you don't know a ticker symbol, ask the user to clarify
- Explain financial concepts simply

Today's date is {today}.
"""


@function_tool
def get_stock_price_tool(symbol: str) -> dict:
    """Get the current price of a stock or crypto pair.

    Args:
        symbol: Ticker symbol like AAPL, TSLA or BTC-USD.
    """
    return market_tools.get_stock_price(symbol)


@function_tool
def get_crypto_price_tool(coin: str) -> dict:
    """Get the current USD price of a cryptocurrency.

    Args:
        coin: Coin name like bitcoin, ethereum or solana, or a ticker like BTC.
    """
    return market_tools.get_crypto_price(coin)


@function_tool
def get_price_change_tool(
    symbol: str,
    period: Literal["1d", "5d", "1mo", "3mo", "6mo", "1y"],
) -> dict:
    """Get the price change of a stock over a time period.

    Args:
        symbol: Ticker symbol.
        period: Time period for comparison.
    """
    return market_tools.get_price_change(symbol, period)


@function_tool
def calculate_sma_tool(symbol: str, days: int) -> dict:
    """Calculate the Simple Moving Average for a stock.

    Args:
        symbol: Ticker symbol.
        days: Number of days for the SMA (5-200).
    """
    return market_tools.calculate_sma(symbol, days)


@function_tool
async def set_price_alert_tool(
    symbol: str,
    target_price: float,
    condition: Literal["above", "below"],
) -> dict:
    """Set a price alert to be notified when a stock reaches a target price.

    Args:
        symbol: Ticker symbol.
        target_price: Target price to trigger the alert.
        condition: Trigger when price goes above or below target.
    """
    return await alert_tools.set_price_alert(symbol, target_price, condition)


@function_tool
async def list_alerts_tool() -> dict:
    """List all active price alerts."""
    return await alert_tools.list_alerts()


@function_tool
async def delete_alert_tool(alert_id: str) -> dict:
    """Delete a price alert by its ID.

    Args:
        alert_id: The ID of the alert to delete.
    """
    return await alert_tools.delete_alert(alert_id)


ASSISTANT_TOOLS = [
    get_stock_price_tool,
    get_crypto_price_tool,
    get_price_change_tool,
    calculate_sma_tool,
    set_price_alert_tool,
    list_alerts_tool,
    delete_alert_tool,
]


class FinanceAssistant:
    """Conversational assistant bound to one session's alert runtime."""

    def __init__(self, runtime: AlertRuntime, model: Optional[str] = None):
        """Initialize the assistant.

        Args:
            runtime: Alert runtime the alert tools operate on.
            model: Optional model override.
        """
        self.runtime = runtime
        alert_tools.set_runtime(runtime)
        self._agent = self._create_agent(model)

    def _create_agent(self, model: Optional[str]) -> Agent:
        return create_agent(
            name="FinanceAgent",
            instructions=ASSISTANT_INSTRUCTIONS.format(today=date.today().isoformat()),
            tools=ASSISTANT_TOOLS,
            model=model,
        )

    async def _record(self, role: Literal["user", "assistant"], text: str) -> None:
        message = Message(session_id=self.runtime.session_id, role=role, text=text)
        await asyncio.to_thread(self.runtime.data_store.add_message, message)

    async def ask(self, query: str) -> str:
        """Answer one user turn and record both sides in the transcript."""
        await self._record("user", query)
        response = await run_agent_async(self._agent, query)
        await self._record("assistant", response)
        return response
