from __future__ import annotations

import io
import json
import logging
from datetime import datetime
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import PlainTextResponse, Response, StreamingResponse
from pydantic import ValidationError

from ..config import Settings
from ..dependencies import get_settings
from ..schemas import (
    QuickReportRequest,
    WebsiteAnalysisPayload,
    WebsiteReportRequest,
)
from ..services.accessibility import AccessibilityAnalysisService
from ..services.accessibility.exporter import export_csv
from ..services.excel_templates import (
    ChecklistFormatError,
    ChecklistTemplateNotFoundError,
    load_checklist_template,
    populate_checklist,
)
from ..services.markdown_report import LANGUAGES, render_quick_report, render_website_report

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _attachment_header(filename: str) -> dict[str, str]:
    return {"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"}


@router.post("/markdown", response_class=PlainTextResponse)
def render_markdown_report(payload: WebsiteReportRequest) -> str:
    analysis = payload.analysis.to_domain()
    aggregate = AccessibilityAnalysisService.aggregate(analysis)
    return render_website_report(analysis, aggregate, language=payload.language)


@router.post("/quick", response_class=PlainTextResponse)
def render_quick_markdown_report(payload: QuickReportRequest) -> str:
    return render_quick_report(payload.page.to_domain(), language=payload.language)


@router.post("/csv")
def export_criteria_csv(payload: WebsiteAnalysisPayload) -> Response:
    aggregate = AccessibilityAnalysisService.aggregate(payload.to_domain())
    csv_text = export_csv(aggregate)
    filename = f"WCAG-criteria-{datetime.now().date().isoformat()}.csv"
    return Response(
        content=csv_text.encode("utf-8-sig"),
        media_type="text/csv",
        headers=_attachment_header(filename),
    )


@router.post("/checklist")
async def generate_checklist(
    analysis: str = Form(..., description="JSON encoded website analysis"),
    language: str = Form("no"),
    checklist_type: str = Form("WEB"),
    template: UploadFile | None = File(None),
    settings: Settings = Depends(get_settings),
) -> StreamingResponse:
    if language not in LANGUAGES:
        raise HTTPException(status_code=422, detail=f"Unsupported language: {language}")

    try:
        parsed = WebsiteAnalysisPayload.model_validate(json.loads(analysis))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise HTTPException(status_code=422, detail="Invalid analysis payload.") from exc

    if template is not None:
        template_bytes = await template.read()
        await template.close()
        if not template_bytes:
            raise HTTPException(status_code=400, detail="Checklist template file is empty.")
    else:
        try:
            template_bytes = load_checklist_template(
                settings.checklist_template_root, checklist_type
            )
        except ChecklistTemplateNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc

    website = parsed.to_domain()
    aggregate = AccessibilityAnalysisService.aggregate(website)
    summary = {
        "url": website.base_url,
        "date": (website.timestamp or datetime.now().isoformat())[:10],
        "pages": website.pages_analyzed or 1,
        "issues": website.total_issues,
        "generated": website.timestamp or datetime.now().isoformat(timespec="seconds"),
    }

    try:
        workbook_bytes = populate_checklist(
            template_bytes,
            aggregate,
            summary=summary,
            language=language,
            standard=settings.wcag_standard,
        )
    except ChecklistFormatError as exc:
        logger.exception("Failed to populate checklist template.")
        raise HTTPException(status_code=422, detail="Checklist template could not be read.") from exc

    checklist_key = checklist_type.strip().upper() or "WEB"
    filename = f"WCAG-report-{checklist_key}-{datetime.now().date().isoformat()}.xlsx"
    logger.info("Excel report ready: %s", filename)
    return StreamingResponse(
        io.BytesIO(workbook_bytes),
        media_type=XLSX_MEDIA_TYPE,
        headers=_attachment_header(filename),
    )
