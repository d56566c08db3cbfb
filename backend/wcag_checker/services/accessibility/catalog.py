"""Static WCAG 2.1 success-criterion reference data used by report renderers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .models import criterion_sort_key

__all__ = [
    "WcagCriterion",
    "LEVELS",
    "PRINCIPLES",
    "get_criterion",
    "all_criteria",
    "criteria_by_level",
    "criteria_for_standard",
    "criteria_by_principle",
    "search_criteria",
    "coverage_stats",
]

LEVELS: Tuple[str, ...] = ("A", "AA", "AAA")

PRINCIPLES: Dict[str, str] = {
    "1": "Perceivable",
    "2": "Operable",
    "3": "Understandable",
    "4": "Robust",
}

GUIDELINES: Dict[str, str] = {
    "1.1": "Text Alternatives",
    "1.2": "Time-based Media",
    "1.3": "Adaptable",
    "1.4": "Distinguishable",
    "2.1": "Keyboard Accessible",
    "2.2": "Enough Time",
    "2.3": "Seizures and Physical Reactions",
    "2.4": "Navigable",
    "2.5": "Input Modalities",
    "3.1": "Readable",
    "3.2": "Predictable",
    "3.3": "Input Assistance",
    "4.1": "Compatible",
}

# (id, name, level, added in WCAG 2.1)
_CRITERIA_ROWS: Tuple[Tuple[str, str, str, bool], ...] = (
    ("1.1.1", "Non-text Content", "A", False),
    ("1.2.1", "Audio-only and Video-only (Prerecorded)", "A", False),
    ("1.2.2", "Captions (Prerecorded)", "A", False),
    ("1.2.3", "Audio Description or Media Alternative (Prerecorded)", "A", False),
    ("1.2.4", "Captions (Live)", "AA", False),
    ("1.2.5", "Audio Description (Prerecorded)", "AA", False),
    ("1.2.6", "Sign Language (Prerecorded)", "AAA", False),
    ("1.2.7", "Extended Audio Description (Prerecorded)", "AAA", False),
    ("1.2.8", "Media Alternative (Prerecorded)", "AAA", False),
    ("1.2.9", "Audio-only (Live)", "AAA", False),
    ("1.3.1", "Info and Relationships", "A", False),
    ("1.3.2", "Meaningful Sequence", "A", False),
    ("1.3.3", "Sensory Characteristics", "A", False),
    ("1.3.4", "Orientation", "AA", True),
    ("1.3.5", "Identify Input Purpose", "AA", True),
    ("1.3.6", "Identify Purpose", "AAA", True),
    ("1.4.1", "Use of Color", "A", False),
    ("1.4.2", "Audio Control", "A", False),
    ("1.4.3", "Contrast (Minimum)", "AA", False),
    ("1.4.4", "Resize Text", "AA", False),
    ("1.4.5", "Images of Text", "AA", False),
    ("1.4.6", "Contrast (Enhanced)", "AAA", False),
    ("1.4.7", "Low or No Background Audio", "AAA", False),
    ("1.4.8", "Visual Presentation", "AAA", False),
    ("1.4.9", "Images of Text (No Exception)", "AAA", False),
    ("1.4.10", "Reflow", "AA", True),
    ("1.4.11", "Non-text Contrast", "AA", True),
    ("1.4.12", "Text Spacing", "AA", True),
    ("1.4.13", "Content on Hover or Focus", "AA", True),
    ("2.1.1", "Keyboard", "A", False),
    ("2.1.2", "No Keyboard Trap", "A", False),
    ("2.1.3", "Keyboard (No Exception)", "AAA", False),
    ("2.1.4", "Character Key Shortcuts", "A", True),
    ("2.2.1", "Timing Adjustable", "A", False),
    ("2.2.2", "Pause, Stop, Hide", "A", False),
    ("2.2.3", "No Timing", "AAA", False),
    ("2.2.4", "Interruptions", "AAA", False),
    ("2.2.5", "Re-authenticating", "AAA", False),
    ("2.2.6", "Timeouts", "AAA", True),
    ("2.3.1", "Three Flashes or Below Threshold", "A", False),
    ("2.3.2", "Three Flashes", "AAA", False),
    ("2.3.3", "Animation from Interactions", "AAA", True),
    ("2.4.1", "Bypass Blocks", "A", False),
    ("2.4.2", "Page Titled", "A", False),
    ("2.4.3", "Focus Order", "A", False),
    ("2.4.4", "Link Purpose (In Context)", "A", False),
    ("2.4.5", "Multiple Ways", "AA", False),
    ("2.4.6", "Headings and Labels", "AA", False),
    ("2.4.7", "Focus Visible", "AA", False),
    ("2.4.8", "Location", "AAA", False),
    ("2.4.9", "Link Purpose (Link Only)", "AAA", False),
    ("2.4.10", "Section Headings", "AAA", False),
    ("2.5.1", "Pointer Gestures", "A", True),
    ("2.5.2", "Pointer Cancellation", "A", True),
    ("2.5.3", "Label in Name", "A", True),
    ("2.5.4", "Motion Actuation", "A", True),
    ("2.5.5", "Target Size", "AAA", True),
    ("2.5.6", "Concurrent Input Mechanisms", "AAA", True),
    ("3.1.1", "Language of Page", "A", False),
    ("3.1.2", "Language of Parts", "AA", False),
    ("3.1.3", "Unusual Words", "AAA", False),
    ("3.1.4", "Abbreviations", "AAA", False),
    ("3.1.5", "Reading Level", "AAA", False),
    ("3.1.6", "Pronunciation", "AAA", False),
    ("3.2.1", "On Focus", "A", False),
    ("3.2.2", "On Input", "A", False),
    ("3.2.3", "Consistent Navigation", "AA", False),
    ("3.2.4", "Consistent Identification", "AA", False),
    ("3.2.5", "Change on Request", "AAA", False),
    ("3.3.1", "Error Identification", "A", False),
    ("3.3.2", "Labels or Instructions", "A", False),
    ("3.3.3", "Error Suggestion", "AA", False),
    ("3.3.4", "Error Prevention (Legal, Financial, Data)", "AA", False),
    ("3.3.5", "Help", "AAA", False),
    ("3.3.6", "Error Prevention (All)", "AAA", False),
    ("4.1.1", "Parsing", "A", False),
    ("4.1.2", "Name, Role, Value", "A", False),
    ("4.1.3", "Status Messages", "AA", True),
)

TOPIC_ALIASES: Dict[str, Tuple[str, ...]] = {
    "images": ("1.1.1",),
    "alt": ("1.1.1",),
    "text alternatives": ("1.1.1",),
    "video": ("1.2.1", "1.2.2", "1.2.3", "1.2.5"),
    "audio": ("1.2.1", "1.2.2", "1.2.4"),
    "captions": ("1.2.2", "1.2.4"),
    "media": ("1.2.1", "1.2.2", "1.2.3", "1.2.4", "1.2.5"),
    "structure": ("1.3.1", "1.3.2"),
    "semantic": ("1.3.1",),
    "headings": ("1.3.1", "2.4.6", "2.4.10"),
    "forms": ("1.3.1", "1.3.5", "3.3.1", "3.3.2", "3.3.3", "3.3.4"),
    "labels": ("1.3.1", "2.5.3", "3.3.2"),
    "orientation": ("1.3.4",),
    "autocomplete": ("1.3.5",),
    "color": ("1.4.1", "1.4.3", "1.4.6", "1.4.11"),
    "contrast": ("1.4.3", "1.4.6", "1.4.11"),
    "color-contrast": ("1.4.3", "1.4.6"),
    "resize": ("1.4.4", "1.4.10"),
    "spacing": ("1.4.12",),
    "hover": ("1.4.13",),
    "keyboard": ("2.1.1", "2.1.2", "2.1.4"),
    "focus": ("2.1.1", "2.4.3", "2.4.7"),
    "timing": ("2.2.1", "2.2.2", "2.2.6"),
    "animation": ("2.2.2", "2.3.3"),
    "flashing": ("2.3.1", "2.3.2"),
    "seizure": ("2.3.1", "2.3.2"),
    "navigation": ("2.4.1", "2.4.5", "3.2.3"),
    "skip link": ("2.4.1",),
    "page title": ("2.4.2",),
    "links": ("2.4.4", "2.4.9"),
    "touch": ("2.5.1", "2.5.2", "2.5.5"),
    "pointer": ("2.5.1", "2.5.2"),
    "target size": ("2.5.5",),
    "language": ("3.1.1", "3.1.2"),
    "lang": ("3.1.1", "3.1.2"),
    "predictable": ("3.2.1", "3.2.2"),
    "consistent": ("3.2.3", "3.2.4"),
    "errors": ("3.3.1", "3.3.3", "3.3.4", "3.3.6"),
    "validation": ("3.3.1", "3.3.3"),
    "aria": ("4.1.2", "4.1.3"),
    "name role value": ("4.1.2",),
    "live region": ("4.1.3",),
}

_STANDARD_LEVELS: Dict[str, Tuple[str, ...]] = {
    "WCAG2A": ("A",),
    "WCAG2AA": ("A", "AA"),
    "WCAG2AAA": ("A", "AA", "AAA"),
}


@dataclass(frozen=True)
class WcagCriterion:
    id: str
    name: str
    level: str
    principle: str
    guideline: str
    wcag21: bool = False

    @property
    def understanding_url(self) -> str:
        slug = "".join(
            char if char.isalnum() else "-" for char in self.name.lower()
        )
        slug = "-".join(part for part in slug.split("-") if part)
        return f"https://www.w3.org/WAI/WCAG21/Understanding/{slug}.html"

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "level": self.level,
            "principle": self.principle,
            "guideline": self.guideline,
            "wcag21": self.wcag21,
            "url": self.understanding_url,
        }


def _build_catalog() -> Dict[str, WcagCriterion]:
    catalog: Dict[str, WcagCriterion] = {}
    for criterion_id, name, level, wcag21 in _CRITERIA_ROWS:
        principle_key, guideline_minor, _ = criterion_id.split(".")
        guideline_key = f"{principle_key}.{guideline_minor}"
        catalog[criterion_id] = WcagCriterion(
            id=criterion_id,
            name=name,
            level=level,
            principle=PRINCIPLES[principle_key],
            guideline=f"{guideline_key} {GUIDELINES[guideline_key]}",
            wcag21=wcag21,
        )
    return catalog


_CATALOG: Dict[str, WcagCriterion] = _build_catalog()


def get_criterion(criterion_id: str) -> Optional[WcagCriterion]:
    return _CATALOG.get(str(criterion_id or "").strip())


def all_criteria() -> List[WcagCriterion]:
    return [_CATALOG[key] for key in sorted(_CATALOG, key=criterion_sort_key)]


def criteria_by_level(level: str) -> List[WcagCriterion]:
    normalized = str(level or "").strip().upper()
    return [criterion for criterion in all_criteria() if criterion.level == normalized]


def criteria_for_standard(standard: str) -> List[WcagCriterion]:
    """Criteria a conformance target such as ``WCAG2AA`` requires."""

    levels = _STANDARD_LEVELS.get(str(standard or "").strip().upper())
    if levels is None:
        raise ValueError(f"Unknown WCAG standard: {standard}")
    return [criterion for criterion in all_criteria() if criterion.level in levels]


def criteria_by_principle(principle: str) -> List[WcagCriterion]:
    normalized = str(principle or "").strip().capitalize()
    return [criterion for criterion in all_criteria() if criterion.principle == normalized]


def search_criteria(topic: str) -> List[WcagCriterion]:
    normalized = str(topic or "").strip().lower()
    if not normalized:
        return []

    direct = _CATALOG.get(normalized)
    if direct is not None:
        return [direct]

    for alias, criterion_ids in TOPIC_ALIASES.items():
        if alias in normalized or normalized in alias:
            return [_CATALOG[criterion_id] for criterion_id in criterion_ids]

    return [
        criterion
        for criterion in all_criteria()
        if normalized in criterion.name.lower()
        or normalized in criterion.guideline.lower()
        or normalized in criterion.principle.lower()
    ]


def coverage_stats() -> Dict[str, object]:
    by_level = {level: 0 for level in LEVELS}
    by_principle = {name: 0 for name in PRINCIPLES.values()}
    for criterion in _CATALOG.values():
        by_level[criterion.level] += 1
        by_principle[criterion.principle] += 1
    return {
        "totalCriteria": len(_CATALOG),
        "wcag21Additions": sum(1 for criterion in _CATALOG.values() if criterion.wcag21),
        "byLevel": by_level,
        "byPrinciple": by_principle,
    }
