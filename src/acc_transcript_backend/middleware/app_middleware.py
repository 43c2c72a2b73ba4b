"""
Middleware configuration for the ACC transcript backend.

Centralizes CORS configuration, request logging and global exception handlers.
"""

import logging
import time

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from acc_transcript_backend.app_config import AppConfig

logger = logging.getLogger(__name__)
request_logger = logging.getLogger("api.requests")


def setup_cors_middleware(app: FastAPI, config: AppConfig) -> None:
    """Configure CORS middleware for the FastAPI application."""
    logger.info(f"🌐 CORS configured with origins: {config.allowed_origins}")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials="*" not in config.allowed_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to log API requests with status and duration.

    Response bodies are never logged since they carry transcript content.
    Excludes the health check and the long-lived SSE stream.
    """

    EXCLUDED_PATHS = {
        "/health",
        "/mcp/sse",
        "/mcp/messages/",
    }

    def should_log_request(self, path: str) -> bool:
        return path not in self.EXCLUDED_PATHS

    async def dispatch(self, request: Request, call_next):
        path = request.url.path

        if not self.should_log_request(path):
            return await call_next(request)

        start_time = time.time()
        request_logger.info(f"→ {request.method} {path}")

        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000
        request_logger.info(
            f"← {request.method} {path} - {response.status_code} - {duration_ms:.2f}ms"
        )
        return response


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure global exception handlers for the FastAPI application."""

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions with structured error response."""
        # For authentication failures (401), add error_type
        if exc.status_code == 401:
            return JSONResponse(
                status_code=exc.status_code,
                content={
                    "error": "Unauthorized",
                    "message": exc.detail,
                    "error_type": "authentication_failure",
                    "error_category": "security",
                },
            )

        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail}
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        """Turn unexpected failures into a generic 500 without leaking internals."""
        logger.exception(f"[ERROR] Unhandled error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "error_type": "internal_error",
            },
        )


def setup_middleware(app: FastAPI, config: AppConfig) -> None:
    """Set up all middleware for the FastAPI application."""
    app.add_middleware(RequestLoggingMiddleware)
    logger.info("📝 Request logging middleware enabled")

    setup_cors_middleware(app, config)
    setup_exception_handlers(app)
