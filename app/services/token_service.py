"""
Token Service - issues and verifies bearer credentials.

Tokens are HS256 JWTs signed with JWT_SECRET. Verification is stateless:
nothing is persisted and no session lookup happens.

Login is delegated to a CredentialVerifier so a real identity backend can
replace the fixed username/password pair without touching the routes.
"""

import hmac
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt
from jwt.exceptions import InvalidTokenError

from app.core.errors import InvalidToken, TokenMissing
from app.core.settings import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credential:
    token: str
    subject: str
    issued_at: datetime
    expires_at: datetime


class CredentialVerifier(ABC):
    """
    Checks a username/password pair.

    Contract:
    - Returns the authenticated subject on success.
    - Returns None when the pair is not accepted.
    """

    @abstractmethod
    def authenticate(self, username: str, password: str) -> Optional[str]:
        raise NotImplementedError


class FixedCredentialVerifier(CredentialVerifier):
    """Accepts exactly one configured username/password pair."""

    def __init__(self, username: str, password: str):
        self._username = username
        self._password = password

    def authenticate(self, username: str, password: str) -> Optional[str]:
        username_ok = hmac.compare_digest((username or "").encode(), self._username.encode())
        password_ok = hmac.compare_digest((password or "").encode(), self._password.encode())
        if username_ok and password_ok:
            return username
        return None


class TokenService:
    def __init__(
        self,
        secret: str,
        expires_minutes: int = 60,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._secret = secret
        self._expires = timedelta(minutes=expires_minutes)
        self._algorithm = algorithm
        self._clock = clock

    def issue(self, subject: str) -> Credential:
        issued_at = self._clock()
        expires_at = issued_at + self._expires
        payload = {
            "sub": subject,
            "username": subject,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        return Credential(token=token, subject=subject, issued_at=issued_at, expires_at=expires_at)

    def verify(self, token: Optional[str]) -> str:
        """
        Return the token's subject.

        Raises:
            TokenMissing: token absent or empty
            InvalidToken: malformed, expired or signed with another secret
        """
        if not token:
            raise TokenMissing()

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "sub"]},
            )
        except InvalidTokenError as e:
            logger.info(f"Rejected bearer token: {e}")
            raise InvalidToken() from e

        return payload["sub"]


# Global service instances (singleton pattern)
_token_service: Optional[TokenService] = None
_credential_verifier: Optional[CredentialVerifier] = None


def get_token_service() -> TokenService:
    global _token_service
    if _token_service is None:
        _token_service = TokenService(
            secret=settings.JWT_SECRET,
            expires_minutes=settings.JWT_EXPIRES_MINUTES,
            algorithm=settings.JWT_ALGORITHM,
        )
    return _token_service


def get_credential_verifier() -> CredentialVerifier:
    global _credential_verifier
    if _credential_verifier is None:
        _credential_verifier = FixedCredentialVerifier(settings.LOGIN_USERNAME, settings.LOGIN_PASSWORD)
    return _credential_verifier
