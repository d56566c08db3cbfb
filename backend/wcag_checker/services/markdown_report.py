"""Markdown projections of accessibility analysis results."""
from __future__ import annotations

from typing import Dict, List, Mapping

from .accessibility.catalog import get_criterion
from .accessibility.models import (
    AnalysisAggregate,
    CriterionBucket,
    CriterionStatus,
    ERROR_TYPE,
    PageAnalysis,
    WARNING_TYPE,
    WebsiteAnalysis,
)

__all__ = ["LANGUAGES", "render_website_report", "render_quick_report"]

LANGUAGES = ("no", "en")

_LABELS: Mapping[str, Dict[str, str]] = {
    "en": {
        "title": "WCAG Compliance Report",
        "website": "Website",
        "pages": "Pages Analyzed",
        "issues": "Total Issues",
        "timestamp": "Analysis Date",
        "critical": "Critical",
        "serious": "Serious",
        "moderate": "Moderate",
        "minor": "Minor",
        "violations_heading": "WCAG Success Criteria Violations",
        "violated": "Violated",
        "criteria": "WCAG success criteria",
        "issue_count": "issues",
        "severity_heading": "Issues by Severity",
        "severity": "Severity",
        "count": "Count",
        "details_heading": "Detailed WCAG Criteria Analysis",
        "affects": "Affects",
        "elements": "elements",
        "page_results": "Page Results",
        "issues_found": "Issues Found",
        "top_issues": "Top issues",
        "failed_pages": "Pages That Could Not Be Analyzed",
        "footer": "Report generated by pa11y WCAG analyzer",
        "error": "Error",
        "warning": "Warning",
        "notice": "Notice",
        "quick_title": "Quick WCAG Check",
        "url": "URL",
        "quick_issues": "Issues",
        "type": "Type",
        "selector": "Selector",
        "no_issues": "No issues found!",
    },
    "no": {
        "title": "WCAG Tilgjengelighetsrapport",
        "website": "Nettsted",
        "pages": "Sider analysert",
        "issues": "Totalt antall problemer",
        "timestamp": "Analysedato",
        "critical": "Kritisk",
        "serious": "Alvorlig",
        "moderate": "Moderat",
        "minor": "Mindre",
        "violations_heading": "WCAG Suksesskriterier - Brudd",
        "violated": "Brudd på",
        "criteria": "WCAG suksesskriterier",
        "issue_count": "problemer",
        "severity_heading": "Problemer etter alvorlighetsgrad",
        "severity": "Alvorlighetsgrad",
        "count": "Antall",
        "details_heading": "Detaljert WCAG-kriterieanalyse",
        "affects": "Påvirker",
        "elements": "elementer",
        "page_results": "Sideresultater",
        "issues_found": "Problemer funnet",
        "top_issues": "Viktigste problemer",
        "failed_pages": "Sider som ikke kunne analyseres",
        "footer": "Rapport generert av pa11y WCAG-analysator",
        "error": "Feil",
        "warning": "Advarsel",
        "notice": "Merknad",
        "quick_title": "Rask WCAG-sjekk",
        "url": "URL",
        "quick_issues": "Problemer",
        "type": "Type",
        "selector": "Velger",
        "no_issues": "Ingen problemer funnet!",
    },
}

_STATUS_DISPLAY = {
    CriterionStatus.NOT_COMPLIANT: ("🔴", "error"),
    CriterionStatus.WARNING: ("🟡", "warning"),
    CriterionStatus.COMPLIANT: ("🔵", "notice"),
}


def _labels(language: str) -> Dict[str, str]:
    return dict(_LABELS.get(language, _LABELS["no"]))


def _type_icon(issue_type: str) -> str:
    if issue_type == ERROR_TYPE:
        return "🔴"
    if issue_type == WARNING_TYPE:
        return "🟡"
    return "🔵"


def _criterion_heading(bucket: CriterionBucket) -> str:
    reference = get_criterion(bucket.criterion)
    if reference is None:
        return bucket.criterion
    return f"{bucket.criterion} {reference.name} ({reference.level})"


def _render_violations(aggregate: AnalysisAggregate, t: Mapping[str, str]) -> List[str]:
    buckets = aggregate.sorted_buckets()
    if not buckets:
        return []
    lines = [
        f"## {t['violations_heading']}",
        "",
        f"{t['violated']} **{len(buckets)}** {t['criteria']}:",
        "",
    ]
    for bucket in buckets:
        icon, status_key = _STATUS_DISPLAY[bucket.status]
        lines.append(
            f"{icon} **{bucket.criterion}** - {t[status_key]} "
            f"({len(bucket.issues)} {t['issue_count']})"
        )
    lines.append("")
    return lines


def _render_impact(aggregate: AnalysisAggregate, t: Mapping[str, str]) -> List[str]:
    impact = aggregate.issues_by_impact
    return [
        f"## {t['severity_heading']}",
        "",
        f"| {t['severity']} | {t['count']} |",
        "|--------|-------|",
        f"| 🔴 {t['critical']} | {impact.critical} |",
        f"| 🟠 {t['serious']} | {impact.serious} |",
        f"| 🟡 {t['moderate']} | {impact.moderate} |",
        f"| 🔵 {t['minor']} | {impact.minor} |",
        "",
    ]


def _render_details(aggregate: AnalysisAggregate, t: Mapping[str, str]) -> List[str]:
    buckets = aggregate.sorted_buckets()
    if not buckets:
        return []
    lines = [f"## {t['details_heading']}", ""]
    for bucket in buckets:
        lines.append(f"### {_criterion_heading(bucket)}")
        lines.append("")
        seen: set[str] = set()
        for issue in bucket.issues:
            if issue.message in seen:
                continue
            seen.add(issue.message)
            lines.append(
                f"{_type_icon(issue.type)} {issue.message} "
                f"({t['affects']} {issue.affected_elements} {t['elements']})"
            )
        lines.append("")
    return lines


def _render_pages(analysis: WebsiteAnalysis, t: Mapping[str, str]) -> List[str]:
    lines = [f"## {t['page_results']}", ""]
    for page in analysis.page_analyses:
        lines.append(f"### {page.url}")
        lines.append("")
        lines.append(f"**{t['issues_found']}:** {len(page.issues)}")
        lines.append("")
        if page.issues:
            lines.append(f"{t['top_issues']}:")
            for issue in page.issues[:5]:
                lines.append(f"- {issue.message}")
            lines.append("")
    if analysis.failed_pages:
        lines.append(f"## {t['failed_pages']}")
        lines.append("")
        for failed in analysis.failed_pages:
            lines.append(f"- {failed.url}: {failed.error}")
        lines.append("")
    return lines


def render_website_report(
    analysis: WebsiteAnalysis,
    aggregate: AnalysisAggregate,
    *,
    language: str = "no",
) -> str:
    t = _labels(language)
    lines = [
        f"# {t['title']}",
        "",
        f"**{t['website']}:** {analysis.base_url}",
        f"**{t['timestamp']}:** {analysis.timestamp}",
        f"**{t['pages']}:** {analysis.pages_analyzed}",
        f"**{t['issues']}:** {analysis.total_issues}",
        "",
    ]
    lines.extend(_render_violations(aggregate, t))
    lines.extend(_render_impact(aggregate, t))
    lines.extend(_render_details(aggregate, t))
    lines.extend(_render_pages(analysis, t))
    lines.append("")
    lines.append("---")
    lines.append(f"*{t['footer']}*")
    return "\n".join(lines) + "\n"


def render_quick_report(page: PageAnalysis, *, language: str = "no") -> str:
    t = _labels(language)
    lines = [
        f"# {t['quick_title']}",
        "",
        f"**{t['url']}:** {page.url}",
        f"**{t['timestamp']}:** {page.timestamp}",
        f"**{t['issues_found']}:** {len(page.issues)}",
        "",
    ]
    if not page.issues:
        lines.append(f"✅ {t['no_issues']}")
        return "\n".join(lines) + "\n"

    lines.append(f"## {t['quick_issues']}")
    lines.append("")
    for issue in page.issues:
        lines.append(f"### {issue.code}")
        lines.append(issue.message)
        lines.append(f"- **{t['type']}:** {issue.type}")
        lines.append(f"- **{t['selector']}:** `{issue.selector}`")
        lines.append("")
    return "\n".join(lines) + "\n"
