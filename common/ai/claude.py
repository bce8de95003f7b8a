"""
Anthropic Claude AI provider implementation.

Provides chat completions and image analysis using the Anthropic API.

Example:
    from common.ai import ClaudeProvider

    claude = ClaudeProvider(api_key="your-api-key")
    response = await claude.chat(
        message="Suggest a five-minute breathing exercise.",
        system_prompt="You are a wellness assistant."
    )
    print(response)
"""

import logging
from typing import Optional, List, Dict, Any

from common.ai.base import AIProvider, AIProviderError, friendly_error_message

logger = logging.getLogger(__name__)


class ClaudeProvider(AIProvider):
    """
    Anthropic Claude AI provider.

    Uses the async Anthropic SDK client.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-5-20250929",
        max_retries: int = 3,
        timeout: float = 60.0,
    ):
        """
        Initialize Claude provider.

        Args:
            api_key: Anthropic API key
            model: Model to use (default: claude-sonnet-4-5-20250929)
            max_retries: Number of retries for failed requests
            timeout: Request timeout in seconds
        """
        try:
            from anthropic import AsyncAnthropic
        except ImportError:
            raise ImportError(
                "anthropic package is required for Claude. "
                "Install with: pip install anthropic"
            )

        self.client = AsyncAnthropic(
            api_key=api_key,
            max_retries=max_retries,
            timeout=timeout,
        )
        self.model = model

    async def chat(
        self,
        message: str,
        system_prompt: Optional[str] = None,
        conversation_history: Optional[List[Dict[str, str]]] = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        **kwargs: Any,
    ) -> str:
        """Send message and get response from Claude."""
        messages = list(conversation_history) if conversation_history else []
        messages.append({"role": "user", "content": message})
        return await self._create(messages, system_prompt, max_tokens, temperature, **kwargs)

    async def analyze_image(
        self,
        prompt: str,
        image_base64: str,
        mime_type: str = "image/jpeg",
        max_tokens: int = 1024,
    ) -> str:
        """Send an image content block with instructions."""
        messages = [{
            "role": "user",
            "content": [
                {
                    "type": "image",
                    "source": {"type": "base64", "media_type": mime_type, "data": image_base64},
                },
                {"type": "text", "text": prompt},
            ],
        }]
        return await self._create(messages, None, max_tokens, 0.7)

    async def _create(
        self,
        messages: List[Dict[str, Any]],
        system_prompt: Optional[str],
        max_tokens: int,
        temperature: float,
        **kwargs: Any,
    ) -> str:
        params: Dict[str, Any] = {
            "model": kwargs.get("model", self.model),
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": messages,
        }

        if system_prompt:
            params["system"] = system_prompt

        for key in ["stop_sequences", "top_p", "top_k", "metadata"]:
            if key in kwargs:
                params[key] = kwargs[key]

        try:
            response = await self.client.messages.create(**params)
        except Exception as e:
            logger.error(f"Claude request failed: {e}")
            raise AIProviderError(friendly_error_message(str(e))) from e

        for block in response.content:
            if getattr(block, "text", None):
                return block.text

        raise AIProviderError(friendly_error_message("Could not extract text"))
