"""
Alert service - publish and list public safety alerts.
"""

from app.config.firebase import get_db
from app.utils.firestore_helpers import snapshot_to_dict, store_errors
from datetime import datetime, timezone
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

ALERTS_COLLECTION = "alerts"
LATEST_ALERTS_LIMIT = 50


class AlertService:
    def __init__(self, db=None):
        self._db = db

    @property
    def db(self):
        return self._db if self._db is not None else get_db()

    def create_alert(self, title: str, message: str) -> Dict:
        doc_ref = self.db.collection(ALERTS_COLLECTION).document()
        alert = {
            "title": title,
            "message": message,
            "time": datetime.now(timezone.utc),
        }
        with store_errors("save alert"):
            doc_ref.set(alert)

        logger.info(f"Alert published: {doc_ref.id}")
        alert["id"] = doc_ref.id
        return alert

    def latest_alerts(self, limit: int = LATEST_ALERTS_LIMIT) -> List[Dict]:
        """Newest alerts first."""
        query = (
            self.db.collection(ALERTS_COLLECTION)
            .order_by("time", direction="DESCENDING")
            .limit(limit)
        )
        with store_errors("list alerts"):
            return [snapshot_to_dict(doc) for doc in query.stream()]


# Global service instance (singleton pattern)
_alert_service: Optional[AlertService] = None


def get_alert_service() -> AlertService:
    global _alert_service
    if _alert_service is None:
        _alert_service = AlertService()
    return _alert_service
