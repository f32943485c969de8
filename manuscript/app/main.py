"""FastAPI application."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from manuscript.app.api.errors import register_exception_handlers
from manuscript.app.api.routes.ai import router as ai_router
from manuscript.app.api.routes.creative import router as creative_router
from manuscript.app.api.routes.documents import router as documents_router
from manuscript.app.api.routes.health import router as health_router
from manuscript.app.api.routes.metrics import router as metrics_router
from manuscript.app.api.routes.revisions import router as revisions_router
from manuscript.app.config import get_settings
from manuscript.app.db.inmemory import InMemoryChangeStore
from manuscript.app.db.repositories import ChangeStore
from manuscript.app.llm.gateway import ProviderGateway, build_gateway

logger = logging.getLogger(__name__)

API_TITLE = "Manuscript Editor API"
API_VERSION = "0.1.0"


def create_app(
    store: ChangeStore | None = None, gateway: ProviderGateway | None = None
) -> FastAPI:
    """Build the application.

    Args:
        store: Change store shared by all requests (fresh in-memory store if None)
        gateway: Provider gateway (built from settings if None)
    """
    settings = get_settings()

    app = FastAPI(title=API_TITLE, version=API_VERSION)
    app.state.store = store if store is not None else InMemoryChangeStore()
    app.state.gateway = gateway if gateway is not None else build_gateway(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.ui_origin],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    # Register routes
    app.include_router(health_router, tags=["health"])
    app.include_router(metrics_router, tags=["metrics"])
    app.include_router(documents_router, prefix="/api")
    app.include_router(revisions_router, prefix="/api")
    app.include_router(ai_router, prefix="/api")
    app.include_router(creative_router, prefix="/api")

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {"message": API_TITLE, "version": API_VERSION}

    return app


app = create_app()
