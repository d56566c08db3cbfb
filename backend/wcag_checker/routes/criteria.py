from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException, Query

from ..services.accessibility import catalog

router = APIRouter(prefix="/criteria", tags=["criteria"])


@router.get("")
def list_criteria(
    topic: str | None = Query(None, description="Criterion id, topic or keyword"),
    level: str | None = Query(None, description="Conformance level (A, AA, AAA)"),
    standard: str | None = Query(None, description="Conformance target such as WCAG2AA"),
) -> Dict[str, Any]:
    if topic:
        results = catalog.search_criteria(topic)
    elif level:
        results = catalog.criteria_by_level(level)
    elif standard:
        try:
            results = catalog.criteria_for_standard(standard)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
    else:
        results = catalog.all_criteria()

    items: List[Dict[str, Any]] = [criterion.to_dict() for criterion in results]
    return {"criteria": items, "stats": catalog.coverage_stats()}


@router.get("/{criterion_id}")
def get_criterion(criterion_id: str) -> Dict[str, Any]:
    criterion = catalog.get_criterion(criterion_id)
    if criterion is None:
        raise HTTPException(status_code=404, detail=f"Unknown WCAG criterion: {criterion_id}")
    return {"criterion": criterion.to_dict()}
