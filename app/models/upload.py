"""
Pydantic models for metadata-only file uploads.
"""

from pydantic import BaseModel, Field
from typing import Optional


class UploadResponse(BaseModel):
    message: str
    id: Optional[str] = Field(None, description="ID of the stored metadata record")
