"""
Resource directory store - relief and resource centers.

Firestore has no case-insensitive substring operator, so city filtering
streams the collection and matches in process, stopping at the limit.
"""

from app.config.firebase import get_db
from app.utils.firestore_helpers import snapshot_to_dict, store_errors
from app.utils.geocoding import city_matches
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

RESOURCES_COLLECTION = "resources"


class ResourceRepository:
    def __init__(self, db=None):
        self._db = db

    @property
    def db(self):
        return self._db if self._db is not None else get_db()

    def list_all(self, limit: int) -> List[Dict]:
        query = self.db.collection(RESOURCES_COLLECTION).limit(limit)
        with store_errors("list resources"):
            return [snapshot_to_dict(doc) for doc in query.stream()]

    def find_by_city(self, city: str, limit: int) -> List[Dict]:
        """Resources whose city contains `city`, case-insensitively."""
        matches: List[Dict] = []
        with store_errors("find resources by city"):
            for doc in self.db.collection(RESOURCES_COLLECTION).stream():
                data = doc.to_dict() or {}
                if city_matches(data.get("city"), city):
                    data["id"] = doc.id
                    matches.append(data)
                    if len(matches) >= limit:
                        break
        return matches


# Global repository instance (singleton pattern)
_resource_repository: Optional[ResourceRepository] = None


def get_resource_repository() -> ResourceRepository:
    global _resource_repository
    if _resource_repository is None:
        _resource_repository = ResourceRepository()
    return _resource_repository
