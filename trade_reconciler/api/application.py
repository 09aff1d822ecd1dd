"""FastAPI application factory for the reconciliation service.

This module defines API application composition used by the runtime.
"""

from fastapi import FastAPI

from trade_reconciler.config import ReconcilerSettings
from trade_reconciler.jobs import ReconciliationPipelinePort

from .routers import api_create_health_router, api_create_reconciliation_router


def create_api_application(settings: ReconcilerSettings, pipeline: ReconciliationPipelinePort) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings used for runtime metadata.
        pipeline: Reconciliation pipeline executing posted imports.

    Returns:
        FastAPI: Framework application instance.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """
    application = FastAPI(title="Options Trade Reconciler")

    @application.get("/", tags=["foundation"])
    def foundation_index() -> dict[str, str]:
        """Return a minimal service marker for bootstrap verification."""

        return {
            "service": "options-trade-reconciler",
            "status": "ready",
            "environment": settings.environment_name,
        }

    application.include_router(api_create_health_router())
    application.include_router(api_create_reconciliation_router(settings=settings, pipeline=pipeline))

    return application
