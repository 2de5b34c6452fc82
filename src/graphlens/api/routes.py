"""Admin routes for Graphlens."""

import logging

from fastapi import APIRouter, Request
from pydantic import BaseModel

from graphlens import __version__

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    neo4j_connected: bool
    version: str = __version__


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Report whether the graph backend is reachable."""
    db = getattr(request.app.state, "db", None)
    connected = False
    if db is not None:
        try:
            await db.execute_query("RETURN 1 AS ok")
            connected = True
        except Exception as e:
            logger.warning(f"Health check failed: {e}")
    return HealthResponse(
        status="healthy" if connected else "degraded",
        neo4j_connected=connected,
    )
