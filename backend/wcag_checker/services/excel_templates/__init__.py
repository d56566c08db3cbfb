from __future__ import annotations

from .checklist import (
    ChecklistError,
    ChecklistFormatError,
    ChecklistTemplateNotFoundError,
    build_status_comment,
    load_checklist_template,
    populate_checklist,
)
from .models import CHECKLIST_START_ROW, CHECKLIST_TEMPLATE_FILES

__all__ = [
    "CHECKLIST_START_ROW",
    "CHECKLIST_TEMPLATE_FILES",
    "ChecklistError",
    "ChecklistFormatError",
    "ChecklistTemplateNotFoundError",
    "build_status_comment",
    "load_checklist_template",
    "populate_checklist",
]
