"""
Request dependencies shared by the routers.
"""

from typing import Optional

from fastapi import Depends, Header

from app.services.token_service import TokenService, get_token_service


def bearer_token(authorization: Optional[str] = Header(None)) -> Optional[str]:
    """Token part of `Authorization: Bearer <token>`, or None."""
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) < 2:
        return None
    return parts[1].strip() or None


def require_subject(
    token: Optional[str] = Depends(bearer_token),
    token_service: TokenService = Depends(get_token_service),
) -> str:
    """
    Protect a route with a bearer token.

    Raises TokenMissing (401) or InvalidToken (403) before the handler runs.
    """
    return token_service.verify(token)
