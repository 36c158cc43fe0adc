from __future__ import annotations

from fastapi import FastAPI

from ide_bridge import __version__
from ide_bridge.api.dependencies import SnapshotReader
from ide_bridge.api.middleware import AllowAnyOriginMiddleware
from ide_bridge.api.routes.context import router as context_router
from ide_bridge.api.routes.health import router as health_router
from ide_bridge.core.extract import StateExtractor
from ide_bridge.core.ports.editor import ModelAccess


def create_app(extractor: StateExtractor, owner: ModelAccess) -> FastAPI:
    """Build the read-only bridge app; every extractor read goes through *owner*."""
    app = FastAPI(
        title="IDE Bridge",
        description="Point-in-time snapshots of live editor state.",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.snapshots = SnapshotReader(extractor=extractor, owner=owner)

    app.add_middleware(AllowAnyOriginMiddleware)

    app.include_router(context_router, prefix="/api")
    app.include_router(health_router, prefix="/api")

    return app
