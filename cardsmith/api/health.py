"""
Health check endpoints.

`/health` answers as long as the process is serving requests. `/ready`
also checks the two places card data lives: the database holding card
and design records, and the configured blob store holding card images.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cardsmith.config import settings
from cardsmith.db.database import get_session
from cardsmith.storage.blobs import BlobStore, BlobStoreError, get_blob_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Probe result, with per-dependency status on readiness checks."""

    status: str
    database: str | None = None
    blob_store: str | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness probe; touches no storage."""
    return HealthResponse(status="healthy")


async def _database_status(session: AsyncSession) -> str:
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("Database not reachable: %s", e)
        return "disconnected"
    return "connected"


async def _blob_store_status(blobs: BlobStore) -> str:
    try:
        await blobs.check()
    except BlobStoreError as e:
        logger.warning("Blob store (%s) not usable: %s", settings.blob_backend, e)
        return "unavailable"
    return "available"


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    session: Annotated[AsyncSession, Depends(get_session)],
    blobs: Annotated[BlobStore, Depends(get_blob_store)],
) -> HealthResponse:
    """
    Readiness probe.

    Returns 503 unless both the database and the blob store can be used,
    since neither cards nor their images can be served without them.
    """
    database = await _database_status(session)
    blob_store = await _blob_store_status(blobs)

    if database != "connected" or blob_store != "available":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", database=database, blob_store=blob_store)
    return HealthResponse(status="ready", database=database, blob_store=blob_store)
