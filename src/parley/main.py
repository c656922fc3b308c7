# src/parley/main.py
"""Main entry point for the Parley application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from parley.api import (
    auth_router,
    beams_router,
    messages_router,
    rooms_router,
    users_router,
)
from parley.core.errors import ParleyError, StorageError, ValidationError
from parley.core.settings import settings
from parley.services.notifications import get_push_notifier

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Parley API",
    description="Session-authenticated room and private chat",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(auth_router, prefix=settings.api_prefix)
app.include_router(messages_router, prefix=settings.api_prefix)
app.include_router(users_router, prefix=settings.api_prefix)
app.include_router(rooms_router, prefix=settings.api_prefix)
app.include_router(beams_router, prefix=settings.api_prefix)


@app.exception_handler(ParleyError)
async def parley_error_handler(request: Request, exc: ParleyError) -> JSONResponse:
    """Render domain errors as ``{"code", "message"}`` bodies."""
    if isinstance(exc, StorageError):
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed bodies and query parameters as 400 validation failures."""
    errors = exc.errors()
    message = errors[0]["msg"] if errors else ValidationError.default_message
    body = ValidationError(message).to_payload()
    body["errors"] = jsonable_encoder(errors)
    return JSONResponse(status_code=ValidationError.status_code, content=body)


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await get_push_notifier().close()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)
    uvicorn.run("parley.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
