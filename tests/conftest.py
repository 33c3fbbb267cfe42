"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

from pathlib import Path

import pytest

from trivia_service.config import PACKAGE_DIR, Settings
from trivia_service.llm.prompt_builder import PromptBuilder


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.

    Analytics and metrics are off, so nothing tries to reach Redis.
    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.MAX_CORRECTIONS = 1
    """
    return Settings(
        # === Application ===
        APP_NAME="Trivia Service (Test)",
        APP_VERSION="0.1.0",
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",

        # === Gemini ===
        GEMINI_API_KEY="test-api-key",
        GEMINI_BASE_URL="https://gemini.test/v1beta",

        # === Redis / analytics ===
        REDIS_URL="redis://localhost:6379/0",
        ANALYTICS_ENABLED=False,
        KEYWORD_LOG_DISPATCH="inline",

        # === Admin ===
        ADMIN_PASSWORD="",
        ADMIN_SESSION_SECRET="test-session-secret",

        # === Feature Flags ===
        PROMETHEUS_ENABLED=False,
    )


@pytest.fixture
def templates_dir() -> Path:
    """Prompt templates shipped inside the package."""
    return PACKAGE_DIR / "prompts"


@pytest.fixture
def prompt_builder(templates_dir: Path) -> PromptBuilder:
    """PromptBuilder with the default 北九州 / 70-100 character rules."""
    return PromptBuilder(templates_dir=templates_dir, region="北九州", min_chars=70, max_chars=100)


@pytest.fixture
def make_text():
    """Factory fixture for candidate text of an exact character length.

    Usage:
        def test_something(make_text):
            text = make_text(85)  # 84 characters + "。"
    """
    def _make(length: int, char: str = "北") -> str:
        if length <= 0:
            return ""
        return char * (length - 1) + "。"

    return _make
