"""
Health check endpoints.

Liveness reports the simulation worker pool; readiness also checks that
decks can be loaded from the database.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from decktester.db.database import get_session
from decktester.simulation.session import default_worker_count

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    simulation_workers: int
    database: str | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness probe. Does not check dependencies."""
    return HealthResponse(status="healthy", simulation_workers=default_worker_count())


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> HealthResponse:
    """
    Readiness probe.

    Returns 503 if the deck database is unavailable.
    """
    workers = default_worker_count()
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(
            status="not ready", simulation_workers=workers, database="disconnected"
        )
    return HealthResponse(status="ready", simulation_workers=workers, database="connected")
