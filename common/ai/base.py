"""
Abstract AI provider interface.

Defines the contract that all AI/LLM providers must implement.
This allows swapping between different AI services (Gemini, Claude, OpenAI)
without changing application code.

Example:
    from common.ai import AIProvider, GeminiProvider, ClaudeProvider

    def get_ai_provider(settings) -> AIProvider:
        if settings.AI_PROVIDER == "claude":
            return ClaudeProvider(api_key=settings.CLAUDE_API_KEY)
        return GeminiProvider(api_key=settings.GEMINI_API_KEY)
"""

from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any

from config.ai_config import AI_ERROR_MESSAGES, AI_GENERIC_ERROR_MESSAGE


class AIProviderError(Exception):
    """Raised when a provider call fails; str(error) is safe to show to clients."""


def friendly_error_message(raw: str) -> str:
    """Map raw provider error text to a client-facing message."""
    for marker, message in AI_ERROR_MESSAGES:
        if marker in raw:
            return message
    return AI_GENERIC_ERROR_MESSAGE


class AIProvider(ABC):
    """
    Abstract AI provider interface.

    Implement this for different LLM services.
    Supports text completions and single-image analysis.
    """

    @abstractmethod
    async def chat(
        self,
        message: str,
        system_prompt: Optional[str] = None,
        conversation_history: Optional[List[Dict[str, str]]] = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        **kwargs: Any,
    ) -> str:
        """
        Send a message and get a response.

        Args:
            message: The user's message
            system_prompt: Optional system instructions
            conversation_history: Previous messages in the conversation
                Format: [{"role": "user"|"assistant", "content": "..."}]
            max_tokens: Maximum tokens in the response
            temperature: Sampling temperature (0-1)
            **kwargs: Provider-specific options

        Returns:
            The AI's response text

        Raises:
            AIProviderError: If the provider call fails
        """
        pass

    @abstractmethod
    async def analyze_image(
        self,
        prompt: str,
        image_base64: str,
        mime_type: str = "image/jpeg",
        max_tokens: int = 1024,
    ) -> str:
        """
        Ask a question about an image.

        Args:
            prompt: Instructions for the model
            image_base64: Base64 image payload without the data: prefix
            mime_type: Image MIME type
            max_tokens: Maximum tokens in the response

        Returns:
            The AI's response text

        Raises:
            AIProviderError: If the provider call fails
        """
        pass

    async def health_check(self) -> bool:
        """
        Check if the AI service is available.

        Returns:
            True if the service is healthy and responding
        """
        try:
            await self.chat("test", max_tokens=5)
            return True
        except AIProviderError:
            return False
