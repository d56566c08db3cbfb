from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .services.accessibility.aggregator import tally_impact
from .services.accessibility.models import FailedPage, PageAnalysis, RawIssue, WebsiteAnalysis

Language = Literal["no", "en"]
Standard = Literal["WCAG2A", "WCAG2AA", "WCAG2AAA"]
ChecklistType = Literal["WEB", "APP"]


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore", alias_generator=_to_camel, populate_by_name=True
    )


class AggregateRequest(_CamelModel):
    issues: Optional[List[Any]] = None
    pages: Optional[List[List[Any]]] = None
    count_unmatched: bool = True
    minor_types: List[str] = Field(default_factory=list)


class PageAnalysisPayload(_CamelModel):
    url: str
    page_title: str = ""
    issues: List[Any] = Field(default_factory=list)
    total_issues: Optional[int] = None
    timestamp: str = ""

    def to_domain(self) -> PageAnalysis:
        issues = tuple(RawIssue.from_payload(item) for item in self.issues)
        return PageAnalysis(
            url=self.url,
            issues=issues,
            total_issues=self.total_issues if self.total_issues is not None else len(issues),
            page_title=self.page_title,
            timestamp=self.timestamp,
        )


class FailedPagePayload(_CamelModel):
    url: str
    error: str = ""


class WebsiteAnalysisPayload(_CamelModel):
    base_url: str = ""
    page_analyses: List[PageAnalysisPayload] = Field(default_factory=list)
    failed_pages: List[FailedPagePayload] = Field(default_factory=list)
    timestamp: str = ""

    def to_domain(self) -> WebsiteAnalysis:
        pages = tuple(page.to_domain() for page in self.page_analyses)
        return WebsiteAnalysis(
            base_url=self.base_url or (pages[0].url if pages else ""),
            page_analyses=pages,
            issues_by_impact=tally_impact(issue for page in pages for issue in page.issues),
            failed_pages=tuple(
                FailedPage(url=failed.url, error=failed.error) for failed in self.failed_pages
            ),
            timestamp=self.timestamp,
        )


class WebsiteReportRequest(_CamelModel):
    analysis: WebsiteAnalysisPayload
    language: Language = "no"


class QuickReportRequest(_CamelModel):
    page: PageAnalysisPayload
    language: Language = "no"


class WebsiteScanRequest(_CamelModel):
    url: str
    max_depth: Optional[int] = Field(None, ge=0, le=10)
    max_pages: Optional[int] = Field(None, ge=1, le=200)
    standard: Optional[Standard] = None


class PageScanRequest(_CamelModel):
    url: str
    standard: Optional[Standard] = None

