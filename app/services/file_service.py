"""
File registry - metadata-only records for uploaded files.
"""

from app.config.firebase import get_db
from app.services.upload_handler import UploadedFile
from app.utils.firestore_helpers import store_errors
from datetime import datetime, timezone
from typing import Dict, Optional
import logging

logger = logging.getLogger(__name__)

FILES_COLLECTION = "files"


class FileService:
    def __init__(self, db=None):
        self._db = db

    @property
    def db(self):
        return self._db if self._db is not None else get_db()

    def save_metadata(self, uploaded: UploadedFile) -> Dict:
        """Persist name, size and type. The content itself is discarded."""
        doc_ref = self.db.collection(FILES_COLLECTION).document()
        record = uploaded.metadata()
        record["upload_date"] = datetime.now(timezone.utc)

        with store_errors("save file metadata"):
            doc_ref.set(record)

        logger.info(f"File metadata saved: {doc_ref.id} ({uploaded.original_name}, {uploaded.size_bytes} bytes)")
        record["id"] = doc_ref.id
        return record


# Global service instance (singleton pattern)
_file_service: Optional[FileService] = None


def get_file_service() -> FileService:
    global _file_service
    if _file_service is None:
        _file_service = FileService()
    return _file_service
