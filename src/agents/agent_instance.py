"""Agent instance and proxy for tool registration.

This module is separated to avoid circular imports between the agent
and tools that need to register themselves with the agent.
"""

import logging

from pydantic_ai import Agent
from pydantic_ai.models.openrouter import OpenRouterModel
from pydantic_ai.providers.openrouter import OpenRouterProvider

from src.agents.base import Deps
from src.core.config import settings
from src.core.logging import configure_logfire
from src.core.module_registry import get_modules


logger = logging.getLogger(__name__)


class _AgentState:
    """Singleton state for agent instance."""

    instance: Agent[Deps, str] | None = None


def _create_agent() -> Agent[Deps, str]:
    """Create the agent instance (called once during initialization)."""
    configure_logfire()

    api_key = settings.require_credential("openrouter_api_key", "OpenRouter API key")
    model = OpenRouterModel(
        model_name=settings.model_id,
        provider=OpenRouterProvider(api_key=api_key),
    )

    # Tool failures come back as text, so model-level retries are not needed
    return Agent(model=model, deps_type=Deps, retries=0)


def get_agent() -> Agent[Deps, str]:
    """Get or create the agent instance with all tools registered."""
    if _AgentState.instance is None:
        _AgentState.instance = _create_agent()
        _register_all_tools(_AgentState.instance)
        logger.info("Agent created", extra={"model_id": settings.model_id})

    return _AgentState.instance


def reset_agent() -> None:
    """Drop the cached agent so the next get_agent() call rebuilds it."""
    _AgentState.instance = None


def _register_all_tools(agent_instance: Agent[Deps, str]) -> None:
    """Register all tool modules with the agent."""
    # Iterate through registered modules and register their tools
    # This avoids decorator execution at import time
    for module in get_modules().values():
        module.register_tools(agent_instance)
