"""Application configuration loaded from environment variables."""

from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """Centralised settings — no hardcoded values anywhere else."""

    # Database
    database_url: str = Field(..., env="DATABASE_URL")

    # Text-generation API (server-side key only, never shipped to clients)
    anthropic_api_key: str = Field(..., env="ANTHROPIC_API_KEY")
    anthropic_api_url: str = Field(
        "https://api.anthropic.com/v1/messages", env="ANTHROPIC_API_URL"
    )
    anthropic_version: str = Field("2023-06-01", env="ANTHROPIC_VERSION")
    chat_model: str = Field("claude-3-5-sonnet-20241022", env="CHAT_MODEL")
    chat_max_tokens: int = Field(1024, env="CHAT_MAX_TOKENS")
    chat_timeout_seconds: int = Field(30, env="CHAT_TIMEOUT_SECONDS")

    # Local profile document
    profile_store_path: str = Field("data/profile.json", env="PROFILE_STORE_PATH")

    # Security
    service_token: str = Field(..., env="SERVICE_TOKEN")
    allowed_origins: str = Field(
        "http://localhost:3000",
        env="ALLOWED_ORIGINS",
    )

    # App
    app_env: str = Field("development", env="APP_ENV")
    log_level: str = Field("INFO", env="LOG_LEVEL")

    # Derived
    @property
    def allowed_origins_list(self) -> list[str]:
        """Return ALLOWED_ORIGINS as a list."""
        return [o.strip() for o in self.allowed_origins.split(",")]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()


settings = get_settings()
