"""
Firestore query helpers shared by the persistence services.
"""

import logging
import re
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator

from google.api_core.exceptions import GoogleAPIError

from app.core.errors import StoreUnavailable

logger = logging.getLogger(__name__)

_ISO_TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}")


def snapshot_to_dict(doc) -> Dict[str, Any]:
    """Flatten a document snapshot into a dict carrying its id."""
    data = doc.to_dict() or {}
    data["id"] = doc.id
    return data


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """
    Translate Firestore client failures into StoreUnavailable.

    Usage:
        with store_errors("save alert"):
            doc_ref.set(data)
    """
    try:
        yield
    except GoogleAPIError as e:
        logger.error(f"Store operation failed ({operation}): {e}", exc_info=True)
        raise StoreUnavailable() from e


def revive_datetimes(value: Any) -> Any:
    """
    Turn ISO-8601 timestamp strings from JSON seed files into datetimes,
    recursively, so seeded documents sort alongside ones written by the API.
    """
    if isinstance(value, dict):
        return {k: revive_datetimes(v) for k, v in value.items()}
    if isinstance(value, list):
        return [revive_datetimes(v) for v in value]
    if isinstance(value, str) and _ISO_TIMESTAMP_RE.match(value):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return value
