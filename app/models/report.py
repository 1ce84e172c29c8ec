"""
Pydantic models for citizen incident reports.

Reports arrive as multipart forms (description, location, optional media
file), so only the response shape is modelled here.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class ReportResponse(BaseModel):
    """Model for report responses (what the API returns)."""
    id: str = Field(..., description="Firestore document ID")
    description: str = Field(..., description="What the citizen observed")
    location: Optional[str] = Field(None, description="Free-text location")
    media: Optional[str] = Field(None, description="Attached media as a data URI")
    created_at: datetime = Field(..., description="When the report was submitted")
