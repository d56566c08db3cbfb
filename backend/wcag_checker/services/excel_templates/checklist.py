from __future__ import annotations

import io
import logging
import re
from pathlib import Path
from typing import Any, List, Mapping

from openpyxl import load_workbook
from openpyxl.comments import Comment
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from ..accessibility.models import AnalysisAggregate, CriterionBucket
from .models import (
    CHECKLIST_LABELS,
    CHECKLIST_START_ROW,
    CHECKLIST_TEMPLATE_FILES,
    COMMENT_AUTHOR,
    COMMENT_ISSUE_LIMIT,
    COMMENT_MESSAGE_LIMIT,
    CRITERION_COLUMN,
    DISCLAIMER_ROWS,
    DISCLAIMER_SHEET_TITLES,
    STATUS_COLUMN,
    STATUS_STYLES,
    SUMMARY_ROW,
)

logger = logging.getLogger(__name__)

__all__ = [
    "ChecklistError",
    "ChecklistFormatError",
    "ChecklistTemplateNotFoundError",
    "load_checklist_template",
    "build_status_comment",
    "populate_checklist",
]

_CRITERION_PATTERN = re.compile(r"^\s*(\d+\.\d+\.\d+)")


class ChecklistError(Exception):
    """Base error for checklist spreadsheet handling."""


class ChecklistFormatError(ChecklistError):
    """Raised when the workbook cannot be read."""


class ChecklistTemplateNotFoundError(ChecklistError):
    """Raised when no template exists for the requested checklist type."""


def load_checklist_template(root: Path | None, checklist_type: str = "WEB") -> bytes:
    key = str(checklist_type or "WEB").strip().upper()
    file_name = CHECKLIST_TEMPLATE_FILES.get(key)
    if file_name is None:
        raise ChecklistTemplateNotFoundError(f"Unknown checklist type: {checklist_type}")
    if root is None:
        raise ChecklistTemplateNotFoundError("Checklist template directory is not configured")
    path = root / file_name
    try:
        return path.read_bytes()
    except FileNotFoundError as exc:
        raise ChecklistTemplateNotFoundError(f"Checklist template not found: {path}") from exc


def _labels(language: str) -> Mapping[str, str]:
    return CHECKLIST_LABELS.get(language, CHECKLIST_LABELS["no"])


def _truncate(message: str, limit: int = COMMENT_MESSAGE_LIMIT) -> str:
    if len(message) <= limit:
        return message
    return f"{message[:limit]}..."


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    text = getattr(value, "text", None)
    if isinstance(text, str):
        return text
    return str(value)


def build_status_comment(bucket: CriterionBucket, *, language: str = "no") -> str:
    t = _labels(language)
    lines = [
        t["found"].format(count=len(bucket.issues)),
        t["errors"].format(count=bucket.error_count),
        t["warnings"].format(count=bucket.warning_count),
        t["elements"].format(count=bucket.total_affected_elements),
        "",
        t["details"],
    ]
    lines.extend(
        f"• {_truncate(issue.message)}" for issue in bucket.issues[:COMMENT_ISSUE_LIMIT]
    )
    return "\n".join(lines)


def _apply_status(cell: Any, bucket: CriterionBucket, language: str) -> None:
    style = STATUS_STYLES[bucket.status]
    cell.value = _labels(language)[bucket.status.value]
    cell.font = Font(color=style.font_color, bold=style.bold)
    if style.fill_color:
        cell.fill = PatternFill(fill_type="solid", fgColor=style.fill_color)
    cell.comment = Comment(build_status_comment(bucket, language=language), COMMENT_AUTHOR)


def _update_worksheet(
    worksheet: Worksheet,
    aggregate: AnalysisAggregate,
    language: str,
) -> List[str]:
    updated: List[str] = []
    for row_index in range(CHECKLIST_START_ROW, worksheet.max_row + 1):
        criterion_text = _cell_text(worksheet.cell(row=row_index, column=CRITERION_COLUMN).value)
        match = _CRITERION_PATTERN.match(criterion_text)
        if not match:
            continue
        bucket = aggregate.by_criterion.get(match.group(1))
        if bucket is None:
            continue
        _apply_status(worksheet.cell(row=row_index, column=STATUS_COLUMN), bucket, language)
        updated.append(bucket.criterion)
    logger.info("Updated %d rows with violation data", len(updated))
    return updated


def _write_summary(worksheet: Worksheet, summary: Mapping[str, Any], language: str) -> None:
    t = _labels(language)
    text = " | ".join(
        [
            t["analysed"].format(url=summary.get("url", "")),
            t["date"].format(date=summary.get("date", "")),
            t["pages"].format(count=summary.get("pages", 1)),
            t["issues"].format(count=summary.get("issues", 0)),
        ]
    )
    cell = worksheet.cell(row=SUMMARY_ROW, column=1)
    cell.value = text
    cell.font = Font(bold=True, size=11)


def _add_disclaimer_sheet(
    workbook: Workbook,
    language: str,
    standard: str,
    summary: Mapping[str, Any] | None = None,
) -> None:
    title = DISCLAIMER_SHEET_TITLES.get(language, DISCLAIMER_SHEET_TITLES["no"])
    if title in workbook.sheetnames:
        del workbook[title]
    sheet = workbook.create_sheet(title=title, index=0)
    sheet.sheet_properties.tabColor = "FFFF6600"
    sheet.column_dimensions["A"].width = 24
    sheet.column_dimensions["B"].width = 80

    rows = DISCLAIMER_ROWS.get(language, DISCLAIMER_ROWS["no"])
    for offset, (label, text, emphasised) in enumerate(rows):
        row_index = 1 + offset * 2
        label_cell = sheet.cell(row=row_index, column=1, value=label)
        text_cell = sheet.cell(row=row_index, column=2, value=text.format(standard=standard))
        if emphasised:
            label_cell.font = Font(bold=True, size=12, color="FFFF0000")
        text_cell.alignment = Alignment(wrap_text=True, vertical="top")

    if summary is not None:
        t = _labels(language)
        row_index = 1 + len(rows) * 2
        generated = summary.get("generated") or summary.get("date", "")
        sheet.cell(row=row_index, column=2, value=t["generated"].format(timestamp=generated))
        run_url = t["run_url"].format(url=summary.get("url", ""))
        sheet.cell(row=row_index + 1, column=2, value=run_url)
    workbook.active = 0


def populate_checklist(
    workbook_bytes: bytes,
    aggregate: AnalysisAggregate,
    *,
    summary: Mapping[str, Any] | None = None,
    language: str = "no",
    standard: str = "WCAG2AA",
    include_disclaimer: bool = True,
) -> bytes:
    """Write per-criterion status cells into a WCAG checklist template.

    The first worksheet is treated as the checklist: column C holds the
    criterion (``"1.1.1 Ikke-tekstlig innhold"``), column D receives the
    status with a comment summarising the findings. Rows whose criterion has
    no findings keep their template value.
    """

    try:
        workbook = load_workbook(io.BytesIO(workbook_bytes))
    except Exception as exc:
        raise ChecklistFormatError("Failed to load checklist workbook") from exc
    if not workbook.worksheets:
        raise ChecklistFormatError("Checklist workbook has no worksheets")

    worksheet = workbook.worksheets[0]
    logger.info(
        "Mapped violations to %d WCAG criteria", len(aggregate.by_criterion)
    )
    _update_worksheet(worksheet, aggregate, language)
    if summary is not None:
        _write_summary(worksheet, summary, language)
    if include_disclaimer:
        _add_disclaimer_sheet(workbook, language, standard, summary)

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()
