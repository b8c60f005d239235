# src/forum_diff/main.py
"""Main entry point for the Forum Diff application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware

from forum_diff import __version__
from forum_diff.api.v1 import posts_router, revisions_router
from forum_diff.core.settings import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Revision history and diffs for forum posts",
    version=__version__,
)

# Rendered diffs are verbose HTML; compress responses.
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(revisions_router, prefix="/api/v1")
app.include_router(posts_router, prefix="/api/v1")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": __version__,
        "description": "Revision history and diffs for forum posts",
        "docs": "/docs",
        "redoc": "/redoc"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("forum_diff.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
