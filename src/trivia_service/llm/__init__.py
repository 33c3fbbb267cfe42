"""
LLM client abstraction and implementations.

Components:
- BaseLLMClient: Abstract base class for LLM clients
- GeminiClient: Implementation for the Gemini generateContent API
- PromptBuilder: Constructs system, initial and correction prompts
- exceptions: LLM-specific exceptions
"""

from trivia_service.llm.base_client import BaseLLMClient
from trivia_service.llm.gemini_client import GeminiClient
from trivia_service.llm.prompt_builder import PromptBuilder
from trivia_service.llm.exceptions import (
    LLMClientError,
    LLMConnectionError,
    LLMGenerationError,
    LLMTimeoutError,
)

__all__ = [
    "BaseLLMClient",
    "GeminiClient",
    "PromptBuilder",
    "LLMClientError",
    "LLMConnectionError",
    "LLMGenerationError",
    "LLMTimeoutError",
]
