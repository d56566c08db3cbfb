from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from .config import Settings
from .container import Container
from .services.accessibility import AccessibilityAnalysisService


def get_container(request: Request) -> Container:
    container = getattr(request.app.state, "container", None)
    if not isinstance(container, Container):
        raise RuntimeError("Application container is not configured on FastAPI app state.")
    return container


def get_settings(container: Container = Depends(get_container)) -> Settings:
    return container.settings


def get_analysis_service(
    container: Container = Depends(get_container),
) -> AccessibilityAnalysisService:
    service = container.analysis_service
    if service is None:
        raise HTTPException(status_code=503, detail="No accessibility scanner is configured.")
    return service
