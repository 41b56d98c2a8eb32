"""Tests for the finance assistant agent.

**Feature: finance-assistant**
"""

import asyncio
from unittest.mock import AsyncMock, patch

from financeagent.agents import ASSISTANT_TOOLS, FinanceAssistant
from financeagent.agents.base import DEFAULT_MODEL, get_model
from financeagent.db.store import DataStore
from financeagent.runtime import AlertRuntime
from financeagent.tools import alerts as alert_tools

from conftest import RecordingNotifier, ScriptedPriceFeed


class TestAssistantTools:
    """The assistant exposes every market and alert tool."""

    def test_tool_names(self):
        names = {tool.name for tool in ASSISTANT_TOOLS}

        assert names == {
            "get_stock_price_tool",
            "get_crypto_price_tool",
            "get_price_change_tool",
            "calculate_sma_tool",
            "set_price_alert_tool",
            "list_alerts_tool",
            "delete_alert_tool",
        }


class TestModelSelection:
    def test_env_overrides_configured(self, monkeypatch):
        monkeypatch.setenv("OPENAI_MODEL", "gpt-4o-mini")
        assert get_model("gpt-4.1") == "gpt-4o-mini"

    def test_configured_then_default(self, monkeypatch):
        monkeypatch.delenv("OPENAI_MODEL", raising=False)
        assert get_model("gpt-4.1") == "gpt-4.1"
        assert get_model() == DEFAULT_MODEL


class TestFinanceAssistant:
    """Each question and answer is appended to the session transcript."""

    def test_ask_records_transcript(self, temp_db: DataStore, monkeypatch):
        monkeypatch.delenv("OPENAI_MODEL", raising=False)
        runtime = AlertRuntime(
            temp_db, "chat", feed=ScriptedPriceFeed(), notifier=RecordingNotifier()
        )
        try:
            assistant = FinanceAssistant(runtime, model="gpt-4.1")
            assert alert_tools.get_runtime() is runtime

            with patch(
                "financeagent.agents.assistant.run_agent_async",
                new=AsyncMock(return_value="AAPL is trading at $190.12."),
            ) as run_agent:
                answer = asyncio.run(assistant.ask("What is AAPL at?"))
        finally:
            alert_tools.set_runtime(None)

        assert answer == "AAPL is trading at $190.12."
        run_agent.assert_awaited_once()
        agent = run_agent.await_args.args[0]
        assert agent.model == "gpt-4.1"
        assert "{today}" not in agent.instructions

        messages = temp_db.get_messages("chat")
        assert [(m.role, m.text) for m in messages] == [
            ("user", "What is AAPL at?"),
            ("assistant", "AAPL is trading at $190.12."),
        ]
