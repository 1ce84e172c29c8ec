"""
Pydantic models for safety check-ins.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from enum import Enum


class NotificationStatus(str, Enum):
    """Outcome of the optional SMS sent after a check-in is stored."""
    SENT = "sent"
    SKIPPED = "skipped"  # No SMS gateway configured
    FAILED = "failed"    # Check-in stored, SMS dispatch failed


class CheckinCreate(BaseModel):
    message: str = Field(..., min_length=1, max_length=500, description="Check-in message")
    phone: str = Field(
        ...,
        min_length=10,
        max_length=15,
        pattern=r"^\+?[0-9]+$",
        description="Phone number (with country code) to notify",
    )


class CheckinResponse(BaseModel):
    id: str = Field(..., description="Firestore document ID")
    message: str
    phone: str
    created_at: datetime
    notification: NotificationStatus = Field(..., description="SMS notification outcome")
