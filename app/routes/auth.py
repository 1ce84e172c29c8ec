"""
Authentication endpoint - exchange a username/password pair for a bearer token.
"""

from fastapi import APIRouter, Depends
from app.core.errors import InvalidCredentials
from app.models.base import ErrorResponse
from app.models.auth import LoginRequest, TokenResponse
from app.services.token_service import (
    CredentialVerifier,
    TokenService,
    get_credential_verifier,
    get_token_service,
)
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Authentication"])


@router.post("/login", response_model=TokenResponse, responses={401: {"model": ErrorResponse}})
def login(
    request: LoginRequest,
    verifier: CredentialVerifier = Depends(get_credential_verifier),
    token_service: TokenService = Depends(get_token_service),
):
    """
    Issue a bearer token.

    The pair is checked by the configured credential verifier; the token is
    then sent as `Authorization: Bearer <token>` on protected routes.
    """
    subject = verifier.authenticate(request.username, request.password)
    if subject is None:
        logger.info("Login rejected: invalid credentials")
        raise InvalidCredentials()

    credential = token_service.issue(subject)
    logger.info(f"Token issued for '{subject}' (expires {credential.expires_at.isoformat()})")
    return TokenResponse(token=credential.token)
