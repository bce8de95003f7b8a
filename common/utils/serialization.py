"""
MongoDB document serialization helpers.

Converts raw Motor documents (ObjectId keys, datetime fields, nested
sub-documents) into JSON-safe dicts for API responses.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId

from common.utils.exceptions import NotFoundException


def serialize_value(value: Any) -> Any:
    """Convert a single BSON value for JSON serialization."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return serialize_document(value)
    if isinstance(value, list):
        return [serialize_value(v) for v in value]
    return value


def serialize_document(
    doc: Optional[Dict[str, Any]],
    exclude: Optional[List[str]] = None
) -> Optional[Dict[str, Any]]:
    """
    Convert MongoDB document for JSON serialization.

    Args:
        doc: Raw document (or None)
        exclude: Top-level keys to drop (e.g. "password")

    Returns:
        JSON-safe dict, or None when doc is None
    """
    if doc is None:
        return None

    exclude = exclude or []
    return {
        key: serialize_value(value)
        for key, value in doc.items()
        if key not in exclude
    }


def to_object_id(value: Any, not_found_message: str = "Not found") -> ObjectId:
    """
    Parse an id from a path or body into an ObjectId.

    Malformed ids cannot match a document, so they are reported as missing.

    Raises:
        NotFoundException: If value is not a valid ObjectId
    """
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        raise NotFoundException(message=not_found_message)
