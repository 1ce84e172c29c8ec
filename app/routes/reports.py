"""
Report endpoints - citizen incident reports with optional media.
"""

from typing import Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from app.dependencies import require_subject
from app.models.report import ReportResponse
from app.services.report_service import ReportService, get_report_service
from app.services.upload_handler import UploadHandler, get_upload_handler
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reports", tags=["Reports"])


@router.post("", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def submit_report(
    description: str = Form(..., min_length=1, max_length=2000),
    location: Optional[str] = Form(None, max_length=300),
    media: Optional[UploadFile] = File(None),
    subject: str = Depends(require_subject),
    upload_handler: UploadHandler = Depends(get_upload_handler),
    service: ReportService = Depends(get_report_service),
):
    """
    Submit a new citizen report.

    This endpoint:
    1. Validates the optional media file (images or PDF, 5 MiB max)
    2. Stores the report with the media inlined as a data URI

    An invalid file is rejected before anything is stored.
    """
    uploaded = None
    if media is not None and media.filename:
        uploaded = await upload_handler.accept_upload(media)

    logger.info(f"POST /api/reports by '{subject}' (media: {'yes' if uploaded else 'no'})")
    return await run_in_threadpool(service.create_report, description, location, uploaded)
