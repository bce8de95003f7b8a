"""
Google Gemini AI provider implementation.

Uses the google-genai SDK. When a model answers with an error, the next
model in GEMINI_MODEL_CHAIN is tried; each entry names the API version
the model is served under.

Example:
    from common.ai import GeminiProvider

    gemini = GeminiProvider(api_key="your-api-key")
    response = await gemini.chat(
        message="Suggest a calming evening routine.",
    )
    print(response)
"""

import base64
import binascii
import logging
from typing import Optional, List, Dict, Any, Tuple

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from common.ai.base import AIProvider, AIProviderError, friendly_error_message
from config.ai_config import (
    GEMINI_MODEL_CHAIN,
    GEMINI_VISION_MODEL,
    GEMINI_GENERATION_CONFIG,
    GEMINI_REQUEST_TIMEOUT,
    AI_INVALID_IMAGE_MESSAGE,
)

logger = logging.getLogger(__name__)


class GeminiProvider(AIProvider):
    """
    Google Gemini provider.

    Holds one SDK client per API version in the model chain.
    """

    def __init__(
        self,
        api_key: str,
        models: Optional[List[Tuple[str, str]]] = None,
        timeout: float = GEMINI_REQUEST_TIMEOUT,
    ):
        """
        Initialize Gemini provider.

        Args:
            api_key: Gemini API key
            models: (api_version, model) pairs tried in order
            timeout: Request timeout in seconds
        """
        if not api_key:
            raise AIProviderError("AI service configuration error: Invalid or missing API key")

        self._api_key = api_key
        self._models = models or list(GEMINI_MODEL_CHAIN)
        self._timeout = timeout
        self._clients: Dict[str, genai.Client] = {}

    def _client(self, api_version: str) -> genai.Client:
        if api_version not in self._clients:
            self._clients[api_version] = genai.Client(
                api_key=self._api_key,
                http_options=types.HttpOptions(
                    api_version=api_version,
                    timeout=int(self._timeout * 1000),
                ),
            )
        return self._clients[api_version]

    async def chat(
        self,
        message: str,
        system_prompt: Optional[str] = None,
        conversation_history: Optional[List[Dict[str, str]]] = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        **kwargs: Any,
    ) -> str:
        """Send message and get response from Gemini."""
        contents = []
        for item in conversation_history or []:
            role = "model" if item.get("role") == "assistant" else "user"
            contents.append(types.Content(role=role, parts=[types.Part(text=item.get("content", ""))]))

        # Older models reject system instructions, so they are folded into the prompt
        text = f"{system_prompt}\n\n{message}" if system_prompt else message
        contents.append(types.Content(role="user", parts=[types.Part(text=text)]))

        return await self._generate(contents, self._models, self._config(max_tokens, temperature))

    async def analyze_image(
        self,
        prompt: str,
        image_base64: str,
        mime_type: str = "image/jpeg",
        max_tokens: int = 1024,
    ) -> str:
        """Ask Gemini about an inline image."""
        try:
            image_bytes = base64.b64decode(image_base64)
        except (binascii.Error, ValueError):
            raise AIProviderError(AI_INVALID_IMAGE_MESSAGE)

        contents = [types.Content(role="user", parts=[
            types.Part(text=prompt),
            types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
        ])]
        return await self._generate(
            contents,
            [GEMINI_VISION_MODEL],
            self._config(max_tokens, GEMINI_GENERATION_CONFIG["temperature"]),
        )

    def _config(self, max_tokens: int, temperature: float) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(**{
            **GEMINI_GENERATION_CONFIG,
            "max_output_tokens": max_tokens,
            "temperature": temperature,
        })

    async def _generate(
        self,
        contents: List[types.Content],
        models: List[Tuple[str, str]],
        config: types.GenerateContentConfig,
    ) -> str:
        """
        Call generate_content on each model until one succeeds.

        Raises:
            AIProviderError: If every model fails or the answer has no text
        """
        last_error = "Unknown error"

        for version, model in models:
            try:
                response = await self._client(version).aio.models.generate_content(
                    model=model,
                    contents=contents,
                    config=config,
                )
            except genai_errors.APIError as e:
                last_error = f"{e.message or ''} {e.status or ''}".strip() or str(e)
                logger.warning(f"Gemini model {version}/{model} returned {e.code}: {last_error}")
                continue
            except httpx.HTTPError as e:
                last_error = str(e)
                logger.warning(f"Gemini request to {model} failed: {e}")
                continue

            if response.text:
                return response.text

            logger.error(f"Could not extract text from Gemini response ({version}/{model})")
            raise AIProviderError(friendly_error_message("Could not extract text"))

        logger.error(f"All Gemini models failed. Last error: {last_error}")
        raise AIProviderError(friendly_error_message(last_error))
