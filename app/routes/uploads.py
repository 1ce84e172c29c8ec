"""
Upload endpoint - register an uploaded file's metadata.
"""

from typing import Optional
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from app.models.upload import UploadResponse
from app.services.file_service import FileService, get_file_service
from app.services.upload_handler import UploadHandler, get_upload_handler

router = APIRouter(tags=["Uploads"])


@router.post("/upload", response_model=UploadResponse)
async def upload_file(
    file: Optional[UploadFile] = File(None),
    upload_handler: UploadHandler = Depends(get_upload_handler),
    service: FileService = Depends(get_file_service),
):
    """Validate the file and store its name, size and type. The content is not kept."""
    if file is None or not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    uploaded = await upload_handler.accept_upload(file)
    record = await run_in_threadpool(service.save_metadata, uploaded)
    return UploadResponse(message="File metadata saved!", id=record["id"])
