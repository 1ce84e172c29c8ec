"""
Upload Handler - validate and encode incoming files.

Files are held in memory for the duration of the request; nothing is
staged on disk. BodySizeLimitMiddleware refuses bodies over the upload cap
before they are parsed, and the multipart spool threshold is raised to the
same cap in app.main, so a part that reaches the handler is always in memory.

Accepted files can be rendered two ways:
- inline, as a data URI stored on the owning record (report media)
- as metadata only (name, size, type) for the file registry

Validation always runs before anything is persisted.
"""

import base64
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from fastapi import UploadFile

from app.core.errors import FileTooLarge, InvalidFile
from app.core.settings import settings

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"


@dataclass(frozen=True)
class UploadedFile:
    original_name: str
    size_bytes: int
    mime_type: str
    content: bytes

    def as_data_uri(self) -> str:
        encoded = base64.b64encode(self.content).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"

    def metadata(self) -> Dict:
        return {
            "original_name": self.original_name,
            "size": self.size_bytes,
            "mimetype": self.mime_type,
        }


def is_allowed_mime_type(mime_type: Optional[str]) -> bool:
    """Images of any subtype, or PDF."""
    if not mime_type:
        return False
    mime_type = mime_type.lower()
    return mime_type.startswith("image/") or mime_type == PDF_MIME_TYPE


class UploadHandler:
    def __init__(self, max_bytes: int = 5 * 1024 * 1024):
        self.max_bytes = max_bytes

    def accept(self, content: bytes, declared_mime_type: Optional[str], file_name: Optional[str]) -> UploadedFile:
        """
        Validate a file already read into memory.

        Raises:
            InvalidFile: declared type is neither an image nor a PDF
            FileTooLarge: content exceeds max_bytes
        """
        if not is_allowed_mime_type(declared_mime_type):
            logger.info(f"Rejected upload '{file_name}': type {declared_mime_type!r} not allowed")
            raise InvalidFile()

        if len(content) > self.max_bytes:
            logger.info(f"Rejected upload '{file_name}': {len(content)} bytes exceeds {self.max_bytes}")
            raise FileTooLarge()

        return UploadedFile(
            original_name=file_name or "upload",
            size_bytes=len(content),
            mime_type=declared_mime_type.lower(),
            content=content,
        )

    async def accept_upload(self, upload: UploadFile) -> UploadedFile:
        """
        Read a multipart upload and validate it.

        The type is checked before reading. At most max_bytes + 1 bytes are
        read back, which is enough to tell an oversized file apart.
        """
        if not is_allowed_mime_type(upload.content_type):
            logger.info(f"Rejected upload '{upload.filename}': type {upload.content_type!r} not allowed")
            raise InvalidFile()

        content = await upload.read(self.max_bytes + 1)
        return self.accept(content, upload.content_type, upload.filename)


# Global handler instance (singleton pattern)
_upload_handler: Optional[UploadHandler] = None


def get_upload_handler() -> UploadHandler:
    global _upload_handler
    if _upload_handler is None:
        _upload_handler = UploadHandler(max_bytes=settings.MAX_UPLOAD_BYTES)
    return _upload_handler
