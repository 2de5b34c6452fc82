"""FastAPI application for Graphlens.

Serves normalized, filtered and highlighted graph views as JSON for the
canvas and table renderers.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from graphlens import __version__
from graphlens.api.graph import router as graph_router
from graphlens.api.routes import router
from graphlens.config import settings
from graphlens.graph.store import CollectionsGraphStore
from graphlens.storage.neo4j_client import Neo4jClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifespan - startup and shutdown."""
    logger.info("Starting Graphlens API...")

    db = Neo4jClient()
    await db.connect()
    logger.info("Connected to Neo4j")

    # Routes read their collaborators from app state
    app.state.db = db
    app.state.fetcher = db.fetch_graph
    app.state.collections_store = CollectionsGraphStore(db.fetch_graph)

    yield

    logger.info("Shutting down Graphlens API...")
    app.state.collections_store.reset()
    await db.close()
    logger.info("Disconnected from Neo4j")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Graphlens",
        description="Graph normalization, classification, filtering and search for graph views",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    app.include_router(graph_router)

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "graphlens.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
