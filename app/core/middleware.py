"""
Request guards that run before routing, caching or authentication.

- RateLimitMiddleware: fixed-window limit per client. A rejected request
  never reaches a handler, so it has no side effects.
- BodySizeLimitMiddleware: caps request bodies so an oversized upload is
  refused before the multipart parser buffers it.
"""

import logging
from typing import Optional

from fastapi import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.core.errors import FileTooLarge, RateLimited
from app.services.rate_limiter import FixedWindowRateLimiter, RateLimitDecision
from app.utils.security import mask_ip_address

logger = logging.getLogger(__name__)


def client_key(request: Request, trust_forwarded: bool = False) -> str:
    """Peer address, or the first X-Forwarded-For hop behind a trusted proxy."""
    if trust_forwarded:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            first_hop = forwarded.split(",")[0].strip()
            if first_hop:
                return first_hop
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def _rate_limit_headers(decision: RateLimitDecision) -> dict:
    return {
        "X-RateLimit-Limit": str(decision.limit),
        "X-RateLimit-Remaining": str(decision.remaining),
        "X-RateLimit-Reset": str(int(decision.reset_at)),
    }


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app,
        limiter: FixedWindowRateLimiter,
        status_code: Optional[int] = None,
        trust_forwarded: bool = False,
    ):
        super().__init__(app)
        self.limiter = limiter
        self.status_code = status_code or RateLimited.status_code
        self.trust_forwarded = trust_forwarded

    async def dispatch(self, request: Request, call_next):
        key = client_key(request, self.trust_forwarded)
        decision = self.limiter.hit(key)
        headers = _rate_limit_headers(decision)

        if not decision.allowed:
            logger.warning(f"Rate limit exceeded for {mask_ip_address(key)} on {request.method} {request.url.path}")
            headers["Retry-After"] = str(decision.retry_after(self.limiter.now()))
            return JSONResponse(
                status_code=self.status_code,
                content={"error": RateLimited.message},
                headers=headers,
            )

        response = await call_next(request)
        response.headers.update(headers)
        return response


def declared_body_length(scope: Scope) -> Optional[int]:
    for name, value in scope.get("headers", []):
        if name == b"content-length":
            try:
                return int(value)
            except ValueError:
                return None
    return None


class BodySizeLimitMiddleware:
    """
    Refuse request bodies larger than `max_bytes`.

    A Content-Length over the limit is answered with 413 before the body is
    read. Bodies without one are counted as they stream in, and the request
    fails with 413 as soon as the count passes the limit.

    Plain ASGI rather than BaseHTTPMiddleware: the streamed check raises from
    inside `receive`, which must reach FastAPI's body parsing unwrapped.
    """

    def __init__(self, app: ASGIApp, max_bytes: int):
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = declared_body_length(scope)
        if declared is not None and declared > self.max_bytes:
            logger.info(f"Refused {scope['method']} {scope['path']}: body of {declared} bytes exceeds {self.max_bytes}")
            response = JSONResponse(status_code=FileTooLarge.status_code, content={"error": FileTooLarge.message})
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    logger.info(f"Refused {scope['method']} {scope['path']}: streamed body exceeds {self.max_bytes}")
                    raise HTTPException(status_code=FileTooLarge.status_code, detail=FileTooLarge.message)
            return message

        await self.app(scope, limited_receive, send)
