"""
Report service - Firestore persistence for citizen incident reports.

DESIGN NOTE:
- Media arrives already validated by the upload handler
- Media is stored inline on the report as a data URI
"""

from app.config.firebase import get_db
from app.services.upload_handler import UploadedFile
from app.utils.firestore_helpers import store_errors
from datetime import datetime, timezone
from typing import Dict, Optional
import logging

logger = logging.getLogger(__name__)

REPORTS_COLLECTION = "reports"


class ReportService:
    def __init__(self, db=None):
        self._db = db

    @property
    def db(self):
        return self._db if self._db is not None else get_db()

    def create_report(self, description: str, location: Optional[str], media: Optional[UploadedFile] = None) -> Dict:
        """
        Store a new report.

        Args:
            description: What the citizen observed
            location: Free-text location (optional)
            media: Validated attachment, stored as a data URI (optional)

        Returns:
            The stored report with its generated ID
        """
        doc_ref = self.db.collection(REPORTS_COLLECTION).document()
        report = {
            "description": description,
            "location": location,
            "media": media.as_data_uri() if media else None,
            "created_at": datetime.now(timezone.utc),
        }

        with store_errors("save report"):
            doc_ref.set(report)

        if media:
            logger.info(f"Report saved: {doc_ref.id} (media {media.mime_type}, {media.size_bytes} bytes)")
        else:
            logger.info(f"Report saved: {doc_ref.id}")

        report["id"] = doc_ref.id
        return report


# Global service instance (singleton pattern)
_report_service: Optional[ReportService] = None


def get_report_service() -> ReportService:
    global _report_service
    if _report_service is None:
        _report_service = ReportService()
    return _report_service
