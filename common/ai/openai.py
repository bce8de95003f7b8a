"""
OpenAI GPT provider implementation.

Provides chat completions and image analysis using the OpenAI API.

Example:
    from common.ai import OpenAIProvider

    openai = OpenAIProvider(api_key="your-api-key")
    response = await openai.chat(
        message="What is a balanced breakfast?",
        system_prompt="You are a nutrition coach."
    )
    print(response)
"""

import logging
from typing import Optional, List, Dict, Any

from common.ai.base import AIProvider, AIProviderError, friendly_error_message

logger = logging.getLogger(__name__)


class OpenAIProvider(AIProvider):
    """
    OpenAI GPT provider.

    Uses the OpenAI async client for API calls.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        max_retries: int = 3,
        timeout: float = 60.0,
        organization: Optional[str] = None,
    ):
        """
        Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
            model: Chat model to use (default: gpt-4o)
            max_retries: Number of retries for failed requests
            timeout: Request timeout in seconds
            organization: Optional OpenAI organization ID
        """
        try:
            from openai import AsyncOpenAI
        except ImportError:
            raise ImportError(
                "openai package is required for OpenAI. "
                "Install with: pip install openai"
            )

        self.client = AsyncOpenAI(
            api_key=api_key,
            max_retries=max_retries,
            timeout=timeout,
            organization=organization,
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
        """Send message and get response from OpenAI."""
        messages: List[Dict[str, Any]] = []

        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})

        if conversation_history:
            messages.extend(conversation_history)

        messages.append({"role": "user", "content": message})

        return await self._complete(messages, max_tokens, temperature, **kwargs)

    async def analyze_image(
        self,
        prompt: str,
        image_base64: str,
        mime_type: str = "image/jpeg",
        max_tokens: int = 1024,
    ) -> str:
        """Send an image_url part encoded as a data URL."""
        messages = [{
            "role": "user",
            "content": [
                {"type": "text", "text": prompt},
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:{mime_type};base64,{image_base64}"},
                },
            ],
        }]
        return await self._complete(messages, max_tokens, 0.7)

    async def _complete(
        self,
        messages: List[Dict[str, Any]],
        max_tokens: int,
        temperature: float,
        **kwargs: Any,
    ) -> str:
        params: Dict[str, Any] = {
            "model": kwargs.get("model", self.model),
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }

        for key in ["stop", "presence_penalty", "frequency_penalty", "top_p", "seed"]:
            if key in kwargs:
                params[key] = kwargs[key]

        try:
            response = await self.client.chat.completions.create(**params)
        except Exception as e:
            logger.error(f"OpenAI request failed: {e}")
            raise AIProviderError(friendly_error_message(str(e))) from e

        return response.choices[0].message.content or ""
