"""FastAPI application entry point."""

from __future__ import annotations

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from latitude_mcp.api.router import api_router
from latitude_mcp.config import get_settings
from latitude_mcp.core.sync import get_sync_operations
from latitude_mcp.utils.logging import setup_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info("latitude_mcp.starting", port=settings.port)

    ops = app.dependency_overrides.get(get_sync_operations, get_sync_operations)()
    await ops.cache.refresh()

    yield

    await ops.client.close()
    logger.info("latitude_mcp.shutdown")


app = FastAPI(
    title="Latitude MCP",
    description="Prompt-set sync and deployment for a Latitude project",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(api_router, prefix="/api/v1")


@app.get("/")
async def root():
    """Service info endpoint."""
    return {"service": "latitude-mcp", "version": "0.1.0"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "service": "latitude-mcp", "version": "0.1.0"}
