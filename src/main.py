"""Pantry assistant - pantry, recipes and shopping list in Notion, over chat and MCP."""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from src.agents.base import Deps
from src.agents.pantry_agent import run_agent
from src.core import notion_client
from src.core.config import settings
from src.core.logging import configure_logfire, instrument_fastapi, instrument_httpx, instrument_pydantic_ai
from src.core.module_registry import get_missing_config, register_default_modules
from src.interface.mcp_server import mcp


logger = logging.getLogger(__name__)


class ChatRequest(BaseModel):
    """Incoming chat message."""

    message: str = Field(min_length=1)
    conversation_id: str | None = None


class ChatResponse(BaseModel):
    """Agent reply."""

    reply: str


async def check_notion_connectivity() -> None:
    """Verify Notion connectivity.

    Raises:
        ConnectionError: If Notion is unreachable or rejects the token
    """
    try:
        await notion_client.check_connectivity()
        logger.info("startup_validation", extra={"service": "notion", "status": "ok"})
    except ConnectionError as e:
        logger.error("startup_validation", extra={"service": "notion", "status": "failed", "error": str(e)})
        raise


async def validate_startup_configuration() -> None:
    """Validate all required credentials and external service connectivity.

    Performs startup validation:
    - Validates settings declared as required by the registered modules
    - Validates the OpenRouter API key
    - Tests connectivity to Notion
    - Fails fast with clear error messages

    Raises:
        SystemExit: If a credential is missing or Notion is unreachable
    """
    logger.info("startup_validation_begin")

    try:
        missing = get_missing_config()
        if missing:
            raise ValueError(f"Missing required settings: {', '.join(missing)}")
        settings.require_credential("openrouter_api_key", "OpenRouter API key")

        logger.info("startup_validation", extra={"stage": "credentials", "status": "ok"})

        await check_notion_connectivity()

        logger.info("startup_validation_complete", extra={"status": "ok"})

    except (ValueError, ConnectionError) as e:
        logger.error("startup_validation_failed", extra={"error": str(e)})
        print(f"\n❌ Startup validation failed: {e}\n", file=sys.stderr)  # noqa: T201
        sys.exit(1)
    except Exception as e:
        logger.error("startup_validation_unexpected_error", extra={"error": str(e)})
        print(f"\n❌ Unexpected error during startup validation: {e}\n", file=sys.stderr)  # noqa: T201
        sys.exit(1)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Startup
    # Configure logging first so validation logs are captured
    configure_logfire()
    register_default_modules()

    await validate_startup_configuration()

    instrument_pydantic_ai()
    instrument_httpx()
    async with mcp.session_manager.run():
        yield


mcp_app = mcp.streamable_http_app()

app = FastAPI(
    title="pantry-assistant",
    description="Pantry, recipes and shopping list in Notion, over chat and MCP",
    version="0.1.0",
    lifespan=lifespan,
)

# Instrument FastAPI with Logfire
instrument_fastapi(app)

# MCP streamable HTTP endpoint at /pantry/mcp
app.mount("/pantry", mcp_app)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "healthy"}, status_code=200)


@app.post("/chat")
async def chat(request: ChatRequest) -> ChatResponse:
    """Send a message to the pantry agent and return its reply."""
    deps = Deps(current_time=datetime.now(), conversation_id=request.conversation_id)
    reply = await run_agent(user_message=request.message, deps=deps)
    return ChatResponse(reply=reply)
