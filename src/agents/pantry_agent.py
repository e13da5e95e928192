"""Main Pydantic AI agent for pantry, recipe and shopping list conversations."""

import logging
import re
from datetime import datetime

from pydantic_ai.messages import ModelMessage

from src.agents.agent_instance import get_agent
from src.agents.base import Deps
from src.core import config
from src.core.errors import classify_agent_error
from src.core.module_registry import get_modules


logger = logging.getLogger(__name__)

# Regex pattern to strip special tokens from LLM output
# These tokens can leak from various models (Qwen, DeepSeek, etc.)
_SPECIAL_TOKEN_PATTERN = re.compile(
    r"<\|(?:FunctionCallEnd|endoftext|im_start|im_end|pad|eos|bos|assistant|user|system)\|>",
    re.IGNORECASE,
)


def _sanitize_llm_output(text: str) -> str:
    """Remove leaked special tokens from LLM output.

    Args:
        text: Raw LLM output text

    Returns:
        Sanitized text with special tokens removed
    """
    sanitized = _SPECIAL_TOKEN_PATTERN.sub("", text)
    sanitized = re.sub(r"[ \t]{2,}", " ", sanitized)
    return sanitized.strip()


def _build_system_prompt(current_time: datetime) -> str:
    """Build the system prompt from the base section and every registered module's section.

    Args:
        current_time: Time of the request, so the model can reason about expiry dates

    Returns:
        Complete system prompt as a string
    """
    bot_name = config.settings.bot_name
    base_prompt = f"""You are {bot_name}, a kitchen assistant that keeps a household's pantry, recipes and \
shopping list up to date in Notion.

CORE DIRECTIVES:
1. Be concise. Report what changed, with quantities and units.
2. Use the tools for every fact about the pantry, recipes or shopping list. Never invent stock levels.
3. Confirm before removing items unless the user asked for the removal explicitly.
4. If a request is ambiguous (which recipe, how much was used), ask a short clarifying question.

CURRENT CONTEXT:
- Today: {current_time.date().isoformat()}
- Time: {current_time.isoformat(timespec="minutes")}
"""

    module_sections = [
        section for module in get_modules().values() if (section := module.get_system_prompt_section())
    ]
    return "\n".join([base_prompt, *module_sections])


async def run_agent(
    *,
    user_message: str,
    deps: Deps,
    message_history: list[ModelMessage] | None = None,
) -> str:
    """
    Run the pantry agent with the given message.

    Args:
        user_message: The message from the user
        deps: The injected dependencies (request time, conversation id)
        message_history: Optional conversation history for context

    Returns:
        The agent's response, or a user-friendly error message if the run failed
    """
    instructions = _build_system_prompt(deps.current_time)

    try:
        agent = get_agent()
        logger.info("pantry_agent_run", extra={"conversation_id": deps.conversation_id})
        result = await agent.run(
            user_message,
            deps=deps,
            message_history=message_history or [],
            instructions=instructions,
        )
        return _sanitize_llm_output(result.output)
    except Exception as e:
        error_category, friendly_message = classify_agent_error(e)
        logger.error(
            "Agent execution failed",
            extra={"error": str(e), "error_category": error_category.value},
        )
        return friendly_message
