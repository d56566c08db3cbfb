from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Sequence, Tuple

from ..accessibility.models import CriterionStatus

__all__ = [
    "CHECKLIST_START_ROW",
    "CRITERION_COLUMN",
    "STATUS_COLUMN",
    "SUMMARY_ROW",
    "CHECKLIST_TEMPLATE_FILES",
    "COMMENT_AUTHOR",
    "COMMENT_ISSUE_LIMIT",
    "COMMENT_MESSAGE_LIMIT",
    "StatusStyle",
    "STATUS_STYLES",
    "CHECKLIST_LABELS",
    "DISCLAIMER_SHEET_TITLES",
    "DISCLAIMER_ROWS",
]

CHECKLIST_START_ROW = 6
CRITERION_COLUMN = 3
STATUS_COLUMN = 4
SUMMARY_ROW = 2

CHECKLIST_TEMPLATE_FILES: Mapping[str, str] = {
    "WEB": "WCAG-sjekkliste-web.xlsx",
    "APP": "WCAG-sjekkliste-app.xlsx",
}

COMMENT_AUTHOR = "WCAG Checker"
COMMENT_ISSUE_LIMIT = 3
COMMENT_MESSAGE_LIMIT = 100


@dataclass(frozen=True)
class StatusStyle:
    font_color: str
    bold: bool
    fill_color: str | None


STATUS_STYLES: Mapping[CriterionStatus, StatusStyle] = {
    CriterionStatus.NOT_COMPLIANT: StatusStyle("FFFF0000", True, "FFFFCCCC"),
    CriterionStatus.WARNING: StatusStyle("FFFF6600", True, "FFFFEECC"),
    CriterionStatus.COMPLIANT: StatusStyle("FF006600", False, None),
}

CHECKLIST_LABELS: Mapping[str, Dict[str, str]] = {
    "no": {
        CriterionStatus.NOT_COMPLIANT.value: "Ikke oppfylt",
        CriterionStatus.WARNING.value: "Advarsel",
        CriterionStatus.COMPLIANT.value: "Oppfylt",
        "found": "Funnet {count} type(r) problemer:",
        "errors": "- Feil: {count}",
        "warnings": "- Advarsler: {count}",
        "elements": "- Berørte elementer: {count}",
        "details": "Detaljer:",
        "analysed": "Analyse av: {url}",
        "date": "Dato: {date}",
        "pages": "Sider analysert: {count}",
        "issues": "Problemer funnet: {count}",
        "generated": "Generert: {timestamp}",
        "run_url": "URL: {url}",
    },
    "en": {
        CriterionStatus.NOT_COMPLIANT.value: "Not compliant",
        CriterionStatus.WARNING.value: "Warning",
        CriterionStatus.COMPLIANT.value: "Compliant",
        "found": "Found {count} issue type(s):",
        "errors": "- Errors: {count}",
        "warnings": "- Warnings: {count}",
        "elements": "- Affected elements: {count}",
        "details": "Details:",
        "analysed": "Analysis of: {url}",
        "date": "Date: {date}",
        "pages": "Pages analysed: {count}",
        "issues": "Issues found: {count}",
        "generated": "Generated: {timestamp}",
        "run_url": "URL: {url}",
    },
}

DISCLAIMER_SHEET_TITLES: Mapping[str, str] = {
    "no": "Les Meg Først",
    "en": "Read Me First",
}

# (label column A, text column B, emphasised)
DISCLAIMER_ROWS: Mapping[str, Sequence[Tuple[str, str, bool]]] = {
    "no": (
        ("VIKTIG:", "Automatisert WCAG-analyse - Begrensninger og anbefalinger", True),
        ("ADVARSEL", "Automatiserte verktøy fanger kun 30-40% av tilgjengelighetsproblemer!", True),
        ("Verktøyet kan finne:", "Manglende alt-tekst, lav fargekontrast, manglende skjemamerking, ugyldig HTML og feil bruk av ARIA", False),
        ("Krever manuell testing:", "Tastaturnavigasjon, skjermleserkvalitet, komplekse widgets og reell brukeropplevelse", False),
        ("FALSKE POSITIVER", "Enkelte feil kan være falske positiver, spesielt for Single Page Applications og dynamisk innhold", True),
        ("ANBEFALINGER", "Verifiser funn manuelt, test med skjermleser og tastatur, og gjennomfør brukertesting", True),
        ("WCAG-STANDARDER", "Standard brukt: {standard}", False),
        ("MER INFORMASJON", "https://www.uutilsynet.no/ og https://www.w3.org/WAI/WCAG21/Understanding/", False),
    ),
    "en": (
        ("IMPORTANT:", "Automated WCAG analysis - limitations and recommendations", True),
        ("WARNING", "Automated tools only catch 30-40% of accessibility problems!", True),
        ("The tool can find:", "Missing alt text, low colour contrast, missing form labels, invalid HTML and ARIA misuse", False),
        ("Needs manual testing:", "Keyboard navigation, screen reader quality, complex widgets and real user experience", False),
        ("FALSE POSITIVES", "Some errors may be false positives, especially for Single Page Applications and dynamic content", True),
        ("RECOMMENDATIONS", "Verify findings manually, test with screen readers and keyboard, and run user testing", True),
        ("WCAG STANDARDS", "Standard used: {standard}", False),
        ("MORE INFORMATION", "https://www.w3.org/WAI/WCAG21/Understanding/", False),
    ),
}
