from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Tuple

ERROR_TYPE = "error"
WARNING_TYPE = "warning"
NOTICE_TYPE = "notice"


def _clean_text(value: Any) -> str:
    if value is None:
        return ""
    try:
        return str(value)
    except Exception:
        return ""


def _positive_int(value: Any, default: int = 1) -> int:
    if isinstance(value, bool):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


@dataclass(frozen=True, slots=True)
class RawIssue:
    """Single issue as reported by the accessibility scanner."""

    code: str = ""
    type: str = ""
    message: str = ""
    selector: str = ""
    context: str = ""
    affected_elements: int = 1
    type_code: int | None = None
    runner: str = ""

    @property
    def is_error(self) -> bool:
        return self.type == ERROR_TYPE

    @property
    def is_warning(self) -> bool:
        return self.type == WARNING_TYPE

    @staticmethod
    def from_payload(payload: Any) -> RawIssue:
        """Build an issue from a scanner record, defaulting anything missing.

        Accepts camelCase (``affectedElements``/``typeCode``) and snake_case
        keys. Objects that are not mappings yield an empty issue.
        """

        if isinstance(payload, RawIssue):
            return payload
        if not isinstance(payload, Mapping):
            return RawIssue()

        affected = payload.get("affectedElements", payload.get("affected_elements"))
        type_code = payload.get("typeCode", payload.get("type_code"))
        try:
            type_code = int(type_code) if type_code is not None else None
        except (TypeError, ValueError):
            type_code = None

        return RawIssue(
            code=_clean_text(payload.get("code")).strip(),
            type=_clean_text(payload.get("type")).strip().lower(),
            message=_clean_text(payload.get("message")),
            selector=_clean_text(payload.get("selector")),
            context=_clean_text(payload.get("context")),
            affected_elements=_positive_int(affected),
            type_code=type_code,
            runner=_clean_text(payload.get("runner")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "type": self.type,
            "typeCode": self.type_code,
            "message": self.message,
            "selector": self.selector,
            "context": self.context,
            "runner": self.runner,
            "affectedElements": self.affected_elements,
        }


@dataclass(frozen=True, slots=True)
class IssueSummary:
    """Deduplicated issue entry stored inside a criterion bucket."""

    code: str
    type: str
    message: str
    selector: str
    affected_elements: int = 1
    context: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "type": self.type,
            "message": self.message,
            "selector": self.selector,
            "context": self.context,
            "affectedElements": self.affected_elements,
        }


class CriterionStatus(str, Enum):
    NOT_COMPLIANT = "not compliant"
    WARNING = "warning"
    COMPLIANT = "compliant"


@dataclass(frozen=True, slots=True)
class CriterionBucket:
    """All deduplicated issues resolved to one success criterion."""

    criterion: str
    issues: Tuple[IssueSummary, ...] = ()

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.type == ERROR_TYPE)

    @property
    def warning_count(self) -> int:
        return sum(1 for issue in self.issues if issue.type == WARNING_TYPE)

    @property
    def total_affected_elements(self) -> int:
        return sum(issue.affected_elements for issue in self.issues)

    @property
    def status(self) -> CriterionStatus:
        # A single error outweighs any number of warnings.
        if self.error_count > 0:
            return CriterionStatus.NOT_COMPLIANT
        if self.warning_count > 0:
            return CriterionStatus.WARNING
        return CriterionStatus.COMPLIANT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "criterion": self.criterion,
            "status": self.status.value,
            "errorCount": self.error_count,
            "warningCount": self.warning_count,
            "totalAffectedElements": self.total_affected_elements,
            "issues": [issue.to_dict() for issue in self.issues],
        }


@dataclass(frozen=True, slots=True)
class ImpactTally:
    critical: int = 0
    serious: int = 0
    moderate: int = 0
    minor: int = 0

    @property
    def total(self) -> int:
        return self.critical + self.serious + self.moderate + self.minor

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def criterion_sort_key(criterion: str) -> Tuple[int, ...]:
    parts = []
    for part in criterion.split("."):
        try:
            parts.append(int(part))
        except ValueError:
            parts.append(0)
    return tuple(parts)


@dataclass(frozen=True, slots=True)
class AnalysisAggregate:
    """Per-criterion buckets and the global impact tally for one run."""

    by_criterion: Mapping[str, CriterionBucket] = field(default_factory=dict)
    issues_by_impact: ImpactTally = field(default_factory=ImpactTally)
    total_issues: int = 0
    unmatched_issues: int = 0

    def sorted_buckets(self) -> Tuple[CriterionBucket, ...]:
        return tuple(
            self.by_criterion[key]
            for key in sorted(self.by_criterion, key=criterion_sort_key)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "byCriterion": {
                bucket.criterion: bucket.to_dict() for bucket in self.sorted_buckets()
            },
            "issuesByImpact": self.issues_by_impact.to_dict(),
            "totalIssues": self.total_issues,
            "unmatchedIssues": self.unmatched_issues,
        }


@dataclass(frozen=True, slots=True)
class PageAnalysis:
    """Scan result of a single page with issues grouped by (code, type)."""

    url: str
    issues: Tuple[RawIssue, ...] = ()
    total_issues: int = 0
    page_title: str = ""
    timestamp: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "pageTitle": self.page_title,
            "issues": [issue.to_dict() for issue in self.issues],
            "totalIssues": self.total_issues,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True, slots=True)
class FailedPage:
    url: str
    error: str

    def to_dict(self) -> Dict[str, str]:
        return {"url": self.url, "error": self.error}


@dataclass(frozen=True, slots=True)
class WebsiteAnalysis:
    """Result of scanning every discovered page of a site."""

    base_url: str
    page_analyses: Tuple[PageAnalysis, ...] = ()
    issues_by_impact: ImpactTally = field(default_factory=ImpactTally)
    failed_pages: Tuple[FailedPage, ...] = ()
    timestamp: str = ""

    @property
    def pages_analyzed(self) -> int:
        return len(self.page_analyses)

    @property
    def total_issues(self) -> int:
        return sum(len(page.issues) for page in self.page_analyses)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "baseUrl": self.base_url,
            "pagesAnalyzed": self.pages_analyzed,
            "totalIssues": self.total_issues,
            "pageAnalyses": [page.to_dict() for page in self.page_analyses],
            "issuesByImpact": self.issues_by_impact.to_dict(),
            "failedPages": [page.to_dict() for page in self.failed_pages],
            "timestamp": self.timestamp,
        }
