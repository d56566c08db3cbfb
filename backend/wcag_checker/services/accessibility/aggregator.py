from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple

from .codes import CriterionCodeParser
from .models import (
    ERROR_TYPE,
    AnalysisAggregate,
    CriterionBucket,
    ImpactTally,
    IssueSummary,
    PageAnalysis,
    RawIssue,
    WARNING_TYPE,
)

logger = logging.getLogger(__name__)

__all__ = [
    "ImpactRule",
    "ImpactPolicy",
    "DEFAULT_IMPACT_POLICY",
    "ViolationAggregator",
    "group_page_issues",
    "tally_impact",
    "aggregate_issues",
]


@dataclass(frozen=True)
class ImpactRule:
    issue_type: str
    impact: str


@dataclass(frozen=True)
class ImpactPolicy:
    """Maps issue types onto the four impact levels.

    Types without a rule count as ``moderate``. The default table never
    produces ``minor``; a scanner adapter that tags notices can opt in with
    ``ImpactPolicy.with_minor_types({"notice"})``.
    """

    rules: Tuple[ImpactRule, ...] = (
        ImpactRule(ERROR_TYPE, "critical"),
        ImpactRule(WARNING_TYPE, "serious"),
    )
    default_impact: str = "moderate"

    def classify(self, issue_type: str) -> str:
        for rule in self.rules:
            if rule.issue_type == issue_type:
                return rule.impact
        return self.default_impact

    def with_minor_types(self, issue_types: Iterable[str]) -> ImpactPolicy:
        extra = tuple(ImpactRule(name.lower(), "minor") for name in issue_types)
        return ImpactPolicy(rules=self.rules + extra, default_impact=self.default_impact)


DEFAULT_IMPACT_POLICY = ImpactPolicy()


def _is_issue_like(item: Any) -> bool:
    return isinstance(item, (RawIssue, Mapping))


def _page_items(item: Any) -> List[Any] | None:
    if isinstance(item, PageAnalysis):
        return list(item.issues)
    if isinstance(item, (str, bytes)) or _is_issue_like(item):
        return None
    try:
        return list(item)
    except TypeError:
        return None


def _split_pages(source: Any) -> List[List[RawIssue]]:
    """Normalise flat or page-partitioned input into ordered pages.

    Each run of loose issues at the top level forms one implicit page at the
    position it appears. Iterating the input raises ``TypeError`` when the caller
    passes something that is not a collection.
    """

    pages: List[List[RawIssue]] = []
    loose: List[RawIssue] | None = None
    for item in iter(source):
        page_items = _page_items(item)
        if page_items is None:
            if loose is None:
                loose = []
                pages.append(loose)
            loose.append(RawIssue.from_payload(item))
            continue
        pages.append([RawIssue.from_payload(entry) for entry in page_items])
        loose = None
    return pages


def group_page_issues(issues: Iterable[Any]) -> List[IssueSummary]:
    """Merge the issues of one page sharing ``(code, type)``.

    The first occurrence keeps its message, selector and context; the merged
    entry's ``affected_elements`` is the sum over all occurrences, each of
    which counts 1 unless the scanner adapter already pre-aggregated it.
    """

    grouped: Dict[Tuple[str, str], IssueSummary] = {}
    for entry in issues:
        issue = RawIssue.from_payload(entry)
        key = (issue.code, issue.type)
        existing = grouped.get(key)
        if existing is None:
            grouped[key] = IssueSummary(
                code=issue.code,
                type=issue.type,
                message=issue.message,
                selector=issue.selector,
                affected_elements=issue.affected_elements,
                context=issue.context,
            )
            continue
        grouped[key] = IssueSummary(
            code=existing.code,
            type=existing.type,
            message=existing.message,
            selector=existing.selector,
            affected_elements=existing.affected_elements + issue.affected_elements,
            context=existing.context,
        )
    return list(grouped.values())


def tally_impact(
    issues: Iterable[RawIssue],
    policy: ImpactPolicy = DEFAULT_IMPACT_POLICY,
) -> ImpactTally:
    counts = {"critical": 0, "serious": 0, "moderate": 0, "minor": 0}
    for issue in issues:
        counts[policy.classify(issue.type)] += 1
    return ImpactTally(**counts)


class ViolationAggregator:
    """Fold scanner issues into per-criterion buckets.

    Instances hold configuration only, so a fresh one can be created per run
    and shared across threads.
    """

    def __init__(
        self,
        *,
        parser: CriterionCodeParser | None = None,
        impact_policy: ImpactPolicy = DEFAULT_IMPACT_POLICY,
        count_unmatched: bool = True,
    ) -> None:
        self._parser = parser or CriterionCodeParser()
        self._impact_policy = impact_policy
        self._count_unmatched = count_unmatched

    def aggregate(self, issues_by_page: Sequence[Any]) -> AnalysisAggregate:
        pages = _split_pages(issues_by_page)

        buckets: Dict[str, List[IssueSummary]] = {}
        tallied: List[RawIssue] = []
        total = 0
        unmatched = 0

        for page in pages:
            for issue in page:
                total += 1
                matched = self._parser.parse(issue.code) is not None
                if not matched:
                    unmatched += 1
                if matched or self._count_unmatched:
                    tallied.append(issue)

            for summary in group_page_issues(page):
                criterion = self._parser.parse(summary.code)
                if criterion is None:
                    continue
                buckets.setdefault(criterion, []).append(summary)

        logger.debug(
            "Aggregated %d issues into %d WCAG criteria (%d unmatched)",
            total,
            len(buckets),
            unmatched,
        )

        return AnalysisAggregate(
            by_criterion={
                criterion: CriterionBucket(criterion=criterion, issues=tuple(entries))
                for criterion, entries in buckets.items()
            },
            issues_by_impact=tally_impact(tallied, self._impact_policy),
            total_issues=total,
            unmatched_issues=unmatched,
        )


def aggregate_issues(issues_by_page: Sequence[Any]) -> AnalysisAggregate:
    return ViolationAggregator().aggregate(issues_by_page)
