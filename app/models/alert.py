"""
Pydantic models for public safety alerts.
"""

from pydantic import BaseModel, Field
from datetime import datetime


class AlertCreate(BaseModel):
    """Model for publishing a new alert (incoming POST request)."""
    title: str = Field(..., min_length=1, max_length=200, description="Short alert headline")
    message: str = Field(..., min_length=1, max_length=2000, description="Alert body")


class AlertResponse(BaseModel):
    id: str = Field(..., description="Firestore document ID")
    title: str
    message: str
    time: datetime = Field(..., description="When the alert was published")
