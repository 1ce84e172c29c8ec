"""
Safe Bharat API - FastAPI Application Entry Point

Public API for a civic safety portal: alerts, incident reports with media,
the relief/resource center directory, a relayed government news feed and
safety check-ins with optional SMS.

REQUEST PIPELINE (outermost first):
- CORS
- Rate limiting (every route, fixed window per client)
- Request body cap (uploads are refused before they are buffered)
- Response cache (read routes only, see CachedRoute)
- Bearer token check (protected routes only)
- Route handler

When VERCEL is set the module-level `app` is the exported handler and no
socket is bound.
"""

import logging
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartParser

from app.core.errors import SafetyPortalError
from app.core.middleware import BodySizeLimitMiddleware, RateLimitMiddleware
from app.core.settings import settings
from app.config.firebase import initialize_firestore
from app.routes import alerts, auth, checkins, health, news, reports, resources, uploads
from app.services.rate_limiter import get_rate_limiter


logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


# Initialize FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Public safety portal API: alerts, reports, resources, news and check-ins",
    debug=settings.DEBUG
)


@app.exception_handler(SafetyPortalError)
async def safety_portal_error_handler(request: Request, exc: SafetyPortalError):
    """Known pipeline errors: status and message come from the error class."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {type(exc).__name__}", exc_info=exc)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Catch Pydantic validation errors and log them."""
    logger.info(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error": "Invalid request", "detail": jsonable_encoder(exc.errors())}
    )


# Global exception handler to catch ALL other exceptions
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Log the full traceback; the client only ever sees a generic message."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"}
    )


# Uploaded parts stay in memory up to the body cap, so nothing spools to disk.
MultiPartParser.spool_max_size = settings.max_request_body_bytes

# Middleware added last runs first: CORS, then the rate limiter, then the body cap.
app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_request_body_bytes)

app.add_middleware(
    RateLimitMiddleware,
    limiter=get_rate_limiter(),
    status_code=settings.RATE_LIMIT_STATUS_CODE,
    trust_forwarded=settings.RATE_LIMIT_TRUST_FORWARDED,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.FRONTEND_URL.split(",") if origin.strip()],
    allow_methods=["*"],
    allow_headers=["*"],
)


# Application lifecycle events
@app.on_event("startup")
async def startup_event():
    """
    Initialize services on application startup.
    Currently: Firestore connection
    """
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    try:
        initialize_firestore()
    except RuntimeError as e:
        logger.warning(f"Firestore initialization failed: {e}")
        logger.warning("The app will start but database operations will fail.")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info(f"Shutting down {settings.APP_NAME}")


# Include routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(alerts.cached_router)
app.include_router(alerts.router)
app.include_router(reports.router)
app.include_router(resources.router)
app.include_router(news.router)
app.include_router(checkins.router)
app.include_router(uploads.router)


# Root endpoint
@app.get("/")
async def root():
    """
    Root endpoint - API information.
    """
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/docs",
        "health": "/health",
    }


def run():
    """Serve with uvicorn, unless a serverless host invokes `app` itself."""
    if settings.VERCEL:
        logger.info("VERCEL is set; not binding a socket")
        return

    import uvicorn
    logger.info(f"Server running on port {settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
