"""
Configuration settings for the trivia service.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from trivia_service.models.llm_models import ModelConfiguration


PACKAGE_DIR = Path(__file__).resolve().parent


def default_model_configs() -> list[ModelConfiguration]:
    """Fallback order used when MODEL_CONFIGS is not set."""
    return [
        ModelConfiguration(name="gemini-2.0-flash", max_output_tokens=500),
        # Thinking tokens count against maxOutputTokens, so give it room and
        # switch thinking off.
        ModelConfiguration(
            name="gemini-2.5-flash",
            max_output_tokens=8192,
            thinking_budget=0,
        ),
        ModelConfiguration(name="gemini-2.0-flash-lite", max_output_tokens=500),
    ]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "Trivia Service"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # === Gemini ===
    GEMINI_API_KEY: str = ""
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_TIMEOUT: float = 20.0  # seconds, per provider call
    LLM_TEMPERATURE: float = 0.7
    MODEL_CONFIGS: list[ModelConfiguration] = default_model_configs()  # JSON list in env

    # === Trivia Rules ===
    REGION_NAME: str = "北九州"
    TRIVIA_MODE: str = "kitakyushu"
    TRIVIA_MIN_CHARS: int = 70
    TRIVIA_MAX_CHARS: int = 100
    MAX_CORRECTIONS: int = 3  # per model configuration
    FALLBACK_MIN_CHARS: int = 10
    KEYWORD_MAX_LENGTH: int = 30
    PROMPT_TEMPLATES_DIR: str = str(PACKAGE_DIR / "prompts")
    PROMPT_EXAMPLE: str = (
        "入力「カレー」→「カレーの隠し味に醤油を入れる家庭は多いが、北九州の小倉では"
        "焼きうどん発祥の地として知られ、うどん出汁にカレーを合わせた一杯が"
        "地元民に密かに愛されているらしい。」"
    )

    # === Rate Limiting ===
    RATE_LIMIT_PER_MINUTE: int = 10
    RATE_LIMIT_WINDOW_SECONDS: float = 60.0
    RATE_LIMIT_SWEEP_INTERVAL_SECONDS: float = 300.0

    # === Redis (keyword analytics) ===
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_MAX_CONNECTIONS: int = 20
    ANALYTICS_ENABLED: bool = True
    ANALYTICS_TIMEZONE: str = "Asia/Tokyo"
    DAILY_KEY_TTL_SECONDS: int = 60 * 60 * 24 * 31
    RANKING_LIMIT: int = 50
    TREND_DAYS: int = 30

    # === Keyword Log Dispatch ===
    KEYWORD_LOG_DISPATCH: Literal["inline", "celery"] = "inline"
    CELERY_BROKER_URL: str = "redis://localhost:6379/1"
    CELERY_TASK_TIME_LIMIT: int = 30  # seconds

    # === Admin ===
    ADMIN_PASSWORD: str = ""
    ADMIN_SESSION_SECRET: str = ""  # falls back to ADMIN_PASSWORD when empty
    ADMIN_SESSION_TTL_SECONDS: int = 60 * 60 * 24

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True

    @property
    def api_key(self) -> str:
        """Gemini API key with surrounding whitespace removed."""
        return self.GEMINI_API_KEY.strip()

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


# Global settings instance
settings = Settings()
