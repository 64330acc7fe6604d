"""
Configuration module - Central access point for environment variables.

CRITICAL: Access ALL environment variables through this module.
NEVER use os.getenv() directly in application code.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings

# Values that mean "no key configured" for the model provider
PLACEHOLDER_API_KEYS = {"", "sk-or-placeholder"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # OpenRouter (Unified LLM API)
    OPENROUTER_API_KEY: str = Field(
        default="sk-or-placeholder",
        description="OpenRouter key. Placeholder disables translation and model fallback"
    )
    OPENROUTER_BASE_URL: str = Field(default="https://openrouter.ai/api/v1")
    LLM_MODEL: str = Field(
        default="openai/gpt-4o-mini",
        description="Model used for Catalan translation and date fallback (OpenRouter format)"
    )
    LLM_MAX_TOKENS: int = Field(default=60)
    LLM_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Hard limit for a single model call; a timeout means 'fallback unavailable'"
    )
    SITE_URL: str = Field(
        default="https://rbp-time-parser.local",
        description="Site URL for OpenRouter rankings (optional)"
    )
    SITE_NAME: str = Field(
        default="RBP Time Parser",
        description="Site name for OpenRouter rankings (optional)"
    )

    # Resolution policy (see agent.temporal.models.Policy)
    POLICY_WEEKEND_SKIP: bool = Field(
        default=True,
        description="On Fridays, 'sábado/domingo que viene' moves to the following Monday"
    )
    POLICY_DEFAULT_HOUR: int = Field(
        default=12,
        description="Hour assigned when the expression carries no time token"
    )
    POLICY_MORNING_WINDOW_WEEKDAY: int | None = Field(
        default=None,
        description="Weekday (0=Monday) where 10:00-14:00 results are kept. None disables the rule"
    )
    POLICY_AMBIGUOUS_HOUR_PM_THRESHOLD: int = Field(
        default=8,
        description="Bare hours below this value ('a las 7') are promoted to PM"
    )
    POLICY_CORRECT_PAST_WEEKDAYS: bool = Field(default=True)
    POLICY_ASSIGN_DEFAULT_HOUR: bool = Field(default=True)
    POLICY_PROMOTE_AMBIGUOUS_HOURS: bool = Field(default=True)

    # Application Settings
    TIMEZONE: str = Field(default="Europe/Madrid")
    LOG_LEVEL: str = Field(default="INFO")
    PORT: int = Field(default=8080)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    @property
    def llm_enabled(self) -> bool:
        """True when a real model key is configured."""
        return self.OPENROUTER_API_KEY.strip() not in PLACEHOLDER_API_KEYS


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.
    """
    return Settings()
