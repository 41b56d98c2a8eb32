"""AI agents for FinanceAgent."""

from financeagent.agents.base import (
    create_agent,
    get_api_key,
    get_model,
    run_agent_async,
)
from financeagent.agents.assistant import ASSISTANT_TOOLS, FinanceAssistant

__all__ = [
    "create_agent",
    "run_agent_async",
    "get_model",
    "get_api_key",
    "ASSISTANT_TOOLS",
    "FinanceAssistant",
]
