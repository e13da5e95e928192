"""Configuration management for the pantry assistant."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Notion Configuration
    notion_token: str | None = Field(default=None, description="Notion integration token")
    notion_api_url: str = Field(default="https://api.notion.com/v1", description="Notion REST API base URL")
    notion_api_version: str = Field(default="2022-06-28", description="Notion-Version header value")
    notion_pantry_db: str | None = Field(default=None, description="Notion database ID for pantry items")
    notion_recipes_db: str | None = Field(default=None, description="Notion database ID for recipes")
    notion_shopping_list_db: str | None = Field(default=None, description="Notion database ID for the shopping list")
    notion_ingredients_db: str | None = Field(
        default=None, description="Notion database ID for the ingredient catalogue (optional)"
    )
    notion_recipe_ingredients_db: str | None = Field(
        default=None, description="Notion database ID for recipe-ingredient relations (optional)"
    )

    # OpenRouter Configuration
    openrouter_api_key: str | None = Field(default=None, description="OpenRouter API key for LLM access")

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")

    def require_credential(self, field_name: str, service_name: str) -> str:
        """Validate that a required credential is set, raising a clear error if missing.

        Args:
            field_name: Name of the field to check
            service_name: Human-readable service name for error message

        Returns:
            The credential value

        Raises:
            ValueError: If the credential is None or empty
        """
        value = getattr(self, field_name)
        if not value:
            raise ValueError(
                f"{service_name} credential not configured. "
                f"Set {field_name.upper()} environment variable or add to .env file."
            )
        return value

    # AI Model Configuration
    model_id: str = Field(
        default="anthropic/claude-3.5-sonnet",
        description="Model ID for OpenRouter (defaults to Claude 3.5 Sonnet)",
    )
    bot_name: str = Field(default="Pantry", description="Name the assistant uses for itself")


# Application Constants
class Constants:
    """Application-wide constants."""

    # API Configuration
    API_TIMEOUT_SECONDS: int = 30

    # HTTP Status Codes
    HTTP_OK: int = 200
    HTTP_NOT_FOUND: int = 404
    HTTP_TOO_MANY_REQUESTS: int = 429

    # Notion pagination (API maximum is 100)
    NOTION_PAGE_SIZE: int = 100

    # Pantry defaults
    EXPIRING_SOON_DAYS: int = 7
    DEFAULT_LOCATION: str = "Pantry"
    STAPLE_MIN_QUANTITY_RATIO: float = 0.2

    # Recipes
    DEFAULT_MAX_RECIPES: int = 10
    DEFAULT_SUGGESTION_COUNT: int = 5

    # Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent.parent


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
