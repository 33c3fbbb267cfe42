"""
Abstract base client for LLM inference.

Defines the interface that the retry engine programs against. The engine
never sees HTTP details: it hands over a model configuration and a
conversation and gets back a ModelInvocation or an LLMClientError.
"""

from abc import ABC, abstractmethod
from typing import Sequence

import structlog

from trivia_service.models.llm_models import (
    ConversationTurn,
    ModelConfiguration,
    ModelInvocation,
)


logger = structlog.get_logger(__name__)


class BaseLLMClient(ABC):
    """
    Abstract base class for LLM inference clients.

    Responsibilities:
    - Send one generation request for one model configuration
    - Parse the provider response into a ModelInvocation
    - Translate transport failures into LLMClientError subclasses

    Does NOT handle:
    - Prompt construction (that's PromptBuilder's job)
    - Length checks, corrections or model fallback (that's RetryEngine's job)
    """

    def __init__(self, base_url: str, timeout: float = 20.0):
        """
        Initialize base client.

        Args:
            base_url: Base URL of the provider API
            timeout: Per-call timeout in seconds
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

        logger.info(
            "Initialized LLM client",
            client_class=self.__class__.__name__,
            base_url=self.base_url,
            timeout=timeout,
        )

    @abstractmethod
    async def invoke(
        self,
        model_config: ModelConfiguration,
        api_key: str,
        conversation: Sequence[ConversationTurn],
    ) -> ModelInvocation:
        """
        Run one generation call.

        Args:
            model_config: Model name and generation parameters
            api_key: Provider API key
            conversation: Ordered conversation turns (oldest first)

        Returns:
            ModelInvocation; text is None when nothing usable came back, and
            finish_signal is NOT_FOUND when the model does not exist

        Raises:
            LLMTimeoutError: Call exceeded the timeout
            LLMConnectionError: Transport failure
            LLMGenerationError: Non-success status (other than 404) or bad body
        """
        pass

    @abstractmethod
    async def health_check(self, api_key: str) -> bool:
        """
        Check whether the provider is reachable with this key.

        Returns:
            True if healthy, False otherwise

        Note:
            This should NOT raise exceptions - return False on error.
        """
        pass

    async def close(self):
        """
        Close client connections and cleanup resources.

        Default implementation does nothing. Subclasses holding persistent
        connections should override.
        """
        logger.debug("Closing LLM client", client_class=self.__class__.__name__)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"base_url={self.base_url}, "
            f"timeout={self.timeout}s)"
        )
