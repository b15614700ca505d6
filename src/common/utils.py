"""
Common utility functions for Job Copilot.

Helpers shared by services and routes: ObjectId parsing and conversion
of MongoDB documents into JSON-ready dictionaries.
"""

import re
from datetime import datetime, timezone
from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId

from src.common.error_handling import NotFoundError


def utcnow() -> datetime:
    """Current time as a naive UTC datetime (the form pymongo returns)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_object_id(value: Any, not_found_message: str) -> ObjectId:
    """
    Convert a path/body id to ObjectId.

    Malformed ids are reported as not found rather than as a validation
    error, matching how a lookup for a missing document is reported.

    Raises:
        NotFoundError: If value is not a valid ObjectId
    """
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        raise NotFoundError(not_found_message)


def maybe_object_id(value: Any) -> Optional[ObjectId]:
    """ObjectId for value if it parses, else None."""
    if isinstance(value, ObjectId):
        return value
    if value is None or not ObjectId.is_valid(str(value)):
        return None
    return ObjectId(str(value))


def serialize_document(value: Any) -> Any:
    """
    Recursively convert BSON types for JSON responses.

    ObjectId becomes its hex string and datetime becomes ISO-8601 with a
    trailing Z (stored datetimes are UTC).
    """
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value.isoformat(timespec="milliseconds") + "Z"
    if isinstance(value, dict):
        return {key: serialize_document(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_document(item) for item in value]
    return value


def case_insensitive_pattern(text: str) -> dict:
    """Mongo regex filter matching text literally, ignoring case."""
    return {"$regex": re.escape(text), "$options": "i"}
