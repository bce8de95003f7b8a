"""
Utilities module - Common helpers for API responses, exceptions, and serialization.
"""

from common.utils.responses import success_response
from common.utils.exceptions import (
    APIException,
    BadRequestException,
    UnauthorizedException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
    InternalServerException,
)
from common.utils.serialization import serialize_document, to_object_id

__all__ = [
    "success_response",
    "APIException",
    "BadRequestException",
    "UnauthorizedException",
    "ForbiddenException",
    "NotFoundException",
    "ValidationException",
    "InternalServerException",
    "serialize_document",
    "to_object_id",
]
