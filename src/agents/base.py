"""Base utilities and dependencies for Pydantic AI agents."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Deps:
    """Dependencies injected into agent RunContext."""

    current_time: datetime
    conversation_id: str | None = None
