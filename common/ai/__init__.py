"""
AI module - Pluggable AI providers (Gemini, Claude, OpenAI).
"""

from common.ai.base import AIProvider, AIProviderError
from common.ai.gemini import GeminiProvider
from common.ai.claude import ClaudeProvider
from common.ai.openai import OpenAIProvider

__all__ = [
    "AIProvider",
    "AIProviderError",
    "GeminiProvider",
    "ClaudeProvider",
    "OpenAIProvider",
]
