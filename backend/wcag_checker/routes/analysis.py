from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_analysis_service
from ..schemas import AggregateRequest, PageScanRequest, WebsiteScanRequest
from ..services.accessibility import (
    AccessibilityAnalysisService,
    DEFAULT_IMPACT_POLICY,
    PageAnalysisError,
    PageDiscoveryError,
    ViolationAggregator,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analysis", tags=["analysis"])


@router.post("/aggregate")
def aggregate_issues(payload: AggregateRequest) -> Dict[str, Any]:
    source: List[Any] = []
    if payload.pages is not None:
        source.extend(payload.pages)
    if payload.issues is not None:
        source.append(payload.issues)

    policy = DEFAULT_IMPACT_POLICY
    if payload.minor_types:
        policy = policy.with_minor_types(payload.minor_types)

    aggregator = ViolationAggregator(
        impact_policy=policy,
        count_unmatched=payload.count_unmatched,
    )
    return aggregator.aggregate(source).to_dict()


@router.post("/page")
async def analyze_page(
    payload: PageScanRequest,
    service: AccessibilityAnalysisService = Depends(get_analysis_service),
) -> Dict[str, Any]:
    try:
        page = await service.analyze_page(payload.url, standard=payload.standard)
    except PageAnalysisError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return {
        "page": page.to_dict(),
        "aggregate": service.aggregate(page).to_dict(),
    }


@router.post("/website")
async def analyze_website(
    payload: WebsiteScanRequest,
    service: AccessibilityAnalysisService = Depends(get_analysis_service),
) -> Dict[str, Any]:
    try:
        analysis = await service.crawl_and_analyze(
            payload.url,
            max_depth=payload.max_depth,
            max_pages=payload.max_pages,
            standard=payload.standard,
        )
    except PageDiscoveryError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    if not analysis.page_analyses and analysis.failed_pages:
        logger.warning("No pages could be analyzed for %s", payload.url)
    return {
        "analysis": analysis.to_dict(),
        "aggregate": service.aggregate(analysis).to_dict(),
    }
