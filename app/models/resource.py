"""
Pydantic models for the relief/resource center directory.
"""

from pydantic import BaseModel, Field
from typing import Optional


class ResourceResponse(BaseModel):
    id: str = Field(..., description="Firestore document ID")
    name: str = Field(..., description="Name of the relief or resource center")
    type: Optional[str] = Field(None, description="Kind of center (shelter, hospital, food...)")
    address: Optional[str] = None
    contact: Optional[str] = None
    city: Optional[str] = None
