"""
Login models for bearer token issuance.
"""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Username/password pair checked by the credential verifier."""
    username: str = Field(..., description="Username")
    password: str = Field(..., description="Password")


class TokenResponse(BaseModel):
    """Issued bearer token."""
    token: str = Field(..., description="Signed bearer token for the Authorization header")
