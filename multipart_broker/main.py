"""FastAPI application entry point."""

import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from .config import settings
from .config.storage import get_storage_client
from .core.exceptions import StorageError
from .middleware.rate_limit import limiter, rate_limit_exceeded_handler
from .routers import uploads
from .schemas.upload import GenericResponse
from .utils.constants import BAD_REQUEST_MESSAGE, INTERNAL_ERROR_MESSAGE
from .utils.logger import (
    REQUEST_ID_HEADER,
    bind_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
    new_request_id,
)

# Configure logging
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup: a bad storage configuration must stop the process here
    logger.info(
        "Starting application",
        version=settings.app_version,
        provider=settings.storage_provider,
        bucket=settings.s3_bucket,
        region=settings.aws_region,
    )
    try:
        get_storage_client()
    except StorageError as e:
        logger.critical("Invalid storage configuration", error=e.message)
        raise SystemExit(1) from e
    yield
    logger.info("Shutting down application")


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build the ``{code, message}`` error envelope."""
    return JSONResponse(
        status_code=status_code,
        content=GenericResponse(code=status_code, message=message).model_dump(),
    )


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Brokers multipart uploads to object storage with presigned part URLs",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Add rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log one event per request and tag it with a request id."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
    bind_request_context(request_id, request.method, request.url.path)
    started = time.perf_counter()
    try:
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return response
    finally:
        clear_request_context()


# Exception handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reject malformed request bodies without exposing validation details."""
    logger.warning("Bad request", path=request.url.path, errors=exc.errors())
    return error_response(status.HTTP_400_BAD_REQUEST, BAD_REQUEST_MESSAGE)


@app.exception_handler(StorageError)
async def storage_exception_handler(request: Request, exc: StorageError):
    """Surface object store failures as server errors."""
    logger.error(
        "Storage operation failed",
        path=request.url.path,
        operation=exc.operation,
        error_code=exc.error_code,
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error("Unhandled exception", exc_info=exc, path=request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": settings.app_version}


# Include routers
app.include_router(uploads.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "multipart_broker.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
