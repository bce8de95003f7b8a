"""
Common library for reusable infrastructure components.

Generic modules shared by the RATS API, its jobs and its scripts:

- database: Async MongoDB connection with Beanie ODM
- auth: JWT token issuing and bcrypt password hashing
- ai: Pluggable AI providers (Gemini, Claude, OpenAI)
- utils: Standard responses, exceptions, document serialization
- config: Base settings class
"""

from common.database import MongoDB
from common.auth import JWTAuth
from common.ai import AIProvider, AIProviderError, GeminiProvider, ClaudeProvider, OpenAIProvider
from common.utils import (
    success_response,
    APIException,
    BadRequestException,
    UnauthorizedException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
    serialize_document,
)
from common.config import BaseAppSettings

__all__ = [
    # Database
    "MongoDB",
    # Auth
    "JWTAuth",
    # AI
    "AIProvider",
    "AIProviderError",
    "GeminiProvider",
    "ClaudeProvider",
    "OpenAIProvider",
    # Utils
    "success_response",
    "APIException",
    "BadRequestException",
    "UnauthorizedException",
    "ForbiddenException",
    "NotFoundException",
    "ValidationException",
    "serialize_document",
    # Config
    "BaseAppSettings",
]
