"""
Pydantic base models shared by every route.

DESIGN PRINCIPLE:
- Models should reflect data structure, not business logic
- Keep models simple and focused on validation
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Error envelope returned for every failed request.
    Never carries stack traces or internal detail.
    """
    error: str = Field(..., description="Client-facing error message")
