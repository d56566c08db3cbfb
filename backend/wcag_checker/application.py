from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .container import Container
from .routes import analysis_router, criteria_router, report_router


def create_app(container: Container | None = None) -> FastAPI:
    """Create and configure a FastAPI application instance."""

    container = container or Container()
    logging.getLogger("wcag_checker").setLevel(container.settings.log_level)

    app = FastAPI()
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=container.settings.allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    app.include_router(analysis_router)
    app.include_router(report_router)
    app.include_router(criteria_router)

    @app.get("/")
    def read_root() -> dict[str, str]:
        return {
            "project": "WCAG-Checker",
            "status": "running",
        }

    @app.get("/health")
    def health() -> dict[str, object]:
        return {
            "status": "healthy",
            "standard": container.settings.wcag_standard,
            "scannerConfigured": container.analysis_service is not None,
        }

    return app
