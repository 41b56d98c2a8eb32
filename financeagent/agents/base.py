"""Base utilities for AI agents.

This module provides common utilities for creating and running AI agents
using the OpenAI Agents SDK.
"""

import logging
import os
from typing import Any, Optional

# Disable tracing to avoid noisy 503 errors from telemetry
os.environ.setdefault("OPENAI_AGENTS_DISABLE_TRACING", "1")

from agents import Agent, Runner


logger = logging.getLogger(__name__)

# Default model to use for agents
DEFAULT_MODEL = "gpt-4o"


def get_model(configured: Optional[str] = None) -> str:
    """Get the model to use for agents.

    Checks OPENAI_MODEL environment variable, then the configured model,
    falls back to default.

    Returns:
        Model name string.
    """
    return os.environ.get("OPENAI_MODEL") or configured or DEFAULT_MODEL


def get_api_key() -> Optional[str]:
    """Get the OpenAI API key.

    Returns:
        API key string or None if not configured.
    """
    return os.environ.get("OPENAI_API_KEY")


def create_agent(
    name: str,
    instructions: str,
    tools: Optional[list[Any]] = None,
    model: Optional[str] = None,
) -> Agent:
    """Create an AI agent with the specified configuration.

    Args:
        name: Name of the agent.
        instructions: System instructions for the agent.
        tools: Optional list of function tools the agent can use.
        model: Optional model override. Uses default if not specified.

    Returns:
        Configured Agent instance.
    """
    return Agent(
        name=name,
        instructions=instructions,
        tools=tools or [],
        model=get_model(model),
    )


async def run_agent_async(
    agent: Agent,
    message: str,
    context: Optional[dict[str, Any]] = None,
    max_turns: int = 10,
) -> str:
    """Run an agent asynchronously and return the response.

    Args:
        agent: The agent to run.
        message: User message to send to the agent.
        context: Optional context dictionary to pass to the agent.
        max_turns: Maximum number of model/tool round trips.

    Returns:
        Agent's response as a string.
    """
    logger.info("Agent: %s | Model: %s", agent.name, agent.model)
    result = await Runner.run(agent, message, context=context, max_turns=max_turns)
    return result.final_output
