from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest

BACKEND_ROOT = Path(__file__).resolve().parents[2]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from wcag_checker.services.accessibility import (
    DEFAULT_IMPACT_POLICY,
    ViolationAggregator,
    aggregate_issues,
)
from wcag_checker.services.accessibility.aggregator import group_page_issues, tally_impact
from wcag_checker.services.accessibility.models import (
    CriterionStatus,
    ImpactTally,
    PageAnalysis,
    RawIssue,
)

CONTRAST = "WCAG2AA.Principle1.Guideline1_4.1_4_3.G18.Fail"
NON_TEXT = "WCAG2AA.Principle1.Guideline1_1.1_1_1.H37"
TITLE = "WCAG2AA.Principle2.Guideline2_4.2_4_2.H25.1.NoTitleEl"


def _issue(code: str, issue_type: str, message: str = "", **extra: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"code": code, "type": issue_type, "message": message}
    payload.update(extra)
    return payload


def test_single_error_produces_not_compliant_bucket() -> None:
    result = aggregate_issues([_issue(CONTRAST, "error", "Low contrast")])

    assert list(result.by_criterion) == ["1.4.3"]
    bucket = result.by_criterion["1.4.3"]
    assert bucket.error_count == 1
    assert bucket.warning_count == 0
    assert bucket.status is CriterionStatus.NOT_COMPLIANT
    assert len(bucket.issues) == 1
    assert bucket.issues[0].message == "Low contrast"
    assert result.issues_by_impact == ImpactTally(critical=1)


def test_duplicates_on_one_page_merge_and_sum_affected_elements() -> None:
    result = aggregate_issues(
        [
            _issue(CONTRAST, "error", "first", selector="#a"),
            _issue(CONTRAST, "error", "second", selector="#b"),
        ]
    )

    bucket = result.by_criterion["1.4.3"]
    assert len(bucket.issues) == 1
    assert bucket.error_count == 1
    assert bucket.issues[0].affected_elements == 2
    assert bucket.issues[0].message == "first"
    assert bucket.issues[0].selector == "#a"
    assert result.issues_by_impact.critical == 2
    assert result.total_issues == 2


def test_same_code_on_two_pages_is_not_merged() -> None:
    result = aggregate_issues(
        [
            [_issue(CONTRAST, "error")],
            [_issue(CONTRAST, "error")],
        ]
    )

    bucket = result.by_criterion["1.4.3"]
    assert len(bucket.issues) == 2
    assert bucket.error_count == 2
    assert bucket.total_affected_elements == 2


def test_warning_only_bucket_has_warning_status() -> None:
    result = aggregate_issues([_issue(TITLE, "warning")])

    bucket = result.by_criterion["2.4.2"]
    assert bucket.status is CriterionStatus.WARNING
    assert bucket.warning_count == 1
    assert result.issues_by_impact == ImpactTally(serious=1)


def test_unmatched_code_is_tallied_but_never_bucketed() -> None:
    result = aggregate_issues([_issue("custom-rule-without-reference", "notice")])

    assert dict(result.by_criterion) == {}
    assert result.issues_by_impact == ImpactTally(moderate=1)
    assert result.unmatched_issues == 1


def test_unmatched_issues_can_be_excluded_from_tally() -> None:
    aggregator = ViolationAggregator(count_unmatched=False)
    result = aggregator.aggregate(
        [_issue("no-reference", "error"), _issue(CONTRAST, "error")]
    )

    assert result.issues_by_impact == ImpactTally(critical=1)
    assert result.unmatched_issues == 1
    assert result.total_issues == 2


def test_one_error_outweighs_many_warnings() -> None:
    issues = [_issue(CONTRAST, "error")]
    issues.extend(_issue(f"{CONTRAST}.W{index}", "warning") for index in range(5))

    bucket = aggregate_issues(issues).by_criterion["1.4.3"]

    assert bucket.error_count == 1
    assert bucket.warning_count == 5
    assert bucket.status is CriterionStatus.NOT_COMPLIANT


def test_empty_input_yields_empty_result() -> None:
    result = aggregate_issues([])

    assert dict(result.by_criterion) == {}
    assert result.issues_by_impact == ImpactTally()
    assert result.total_issues == 0


def test_non_iterable_input_raises_type_error() -> None:
    with pytest.raises(TypeError):
        aggregate_issues(42)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        aggregate_issues(None)  # type: ignore[arg-type]


def test_malformed_issues_are_tolerated() -> None:
    result = aggregate_issues(
        [
            {},
            {"code": None, "type": None},
            {"code": 123, "type": "ERROR"},
            "not-an-issue",
            _issue(CONTRAST, "Error"),
        ]
    )

    assert list(result.by_criterion) == ["1.4.3"]
    assert result.by_criterion["1.4.3"].error_count == 1
    assert result.issues_by_impact.critical == 2
    assert result.issues_by_impact.moderate == 3
    assert result.total_issues == 5


def test_every_tallied_issue_is_counted_exactly_once() -> None:
    pages: List[List[Dict[str, Any]]] = [
        [_issue(CONTRAST, "error"), _issue(CONTRAST, "error"), _issue(NON_TEXT, "warning")],
        [_issue("no-ref", "notice"), _issue(TITLE, "warning"), _issue(TITLE, "error")],
    ]
    result = aggregate_issues(pages)

    assert result.issues_by_impact.total == 6
    assert result.total_issues == 6
    assert result.issues_by_impact.minor == 0


def test_bucket_counts_match_issue_lists() -> None:
    result = aggregate_issues(
        [
            _issue(TITLE, "error"),
            _issue(TITLE, "warning"),
            _issue(TITLE, "notice"),
        ]
    )

    bucket = result.by_criterion["2.4.2"]
    assert len(bucket.issues) == 3
    assert bucket.error_count == 1
    assert bucket.warning_count == 1
    assert bucket.status is CriterionStatus.NOT_COMPLIANT


def test_notice_only_bucket_is_compliant() -> None:
    bucket = aggregate_issues([_issue(NON_TEXT, "notice")]).by_criterion["1.1.1"]

    assert bucket.status is CriterionStatus.COMPLIANT


def test_page_order_does_not_change_counts() -> None:
    first = [_issue(CONTRAST, "error"), _issue(CONTRAST, "error"), _issue(TITLE, "warning")]
    second = [_issue(CONTRAST, "error", affectedElements=3), _issue(NON_TEXT, "notice")]

    forward = aggregate_issues([first, second])
    backward = aggregate_issues([second, first])

    assert set(forward.by_criterion) == set(backward.by_criterion)
    assert forward.issues_by_impact == backward.issues_by_impact
    for criterion, bucket in forward.by_criterion.items():
        other = backward.by_criterion[criterion]
        assert bucket.error_count == other.error_count
        assert bucket.warning_count == other.warning_count
        assert len(bucket.issues) == len(other.issues)
        assert bucket.total_affected_elements == other.total_affected_elements


def test_aggregation_is_repeatable() -> None:
    pages = [[_issue(CONTRAST, "error")], [_issue(TITLE, "warning")]]

    assert aggregate_issues(pages).to_dict() == aggregate_issues(pages).to_dict()


def test_buckets_keep_first_seen_order() -> None:
    result = aggregate_issues(
        [
            [_issue(TITLE, "warning", "title"), _issue(CONTRAST, "error", "contrast")],
            [_issue(f"{TITLE}.Other", "error", "other title")],
        ]
    )

    assert [issue.message for issue in result.by_criterion["2.4.2"].issues] == [
        "title",
        "other title",
    ]


def test_loose_issues_around_a_page_stay_in_encounter_order() -> None:
    result = aggregate_issues(
        [
            _issue(TITLE, "error", "A"),
            [_issue(f"{TITLE}.X", "error", "B")],
            _issue(TITLE, "error", "C"),
        ]
    )

    issues = result.by_criterion["2.4.2"].issues
    assert [issue.message for issue in issues] == ["A", "B", "C"]
    assert [issue.affected_elements for issue in issues] == [1, 1, 1]


def test_per_page_results_merge_to_batch_result() -> None:
    page_a = [_issue(CONTRAST, "error", "a1"), _issue(CONTRAST, "error"), _issue(TITLE, "warning", "a2")]
    page_b = [_issue(CONTRAST, "error", "b1"), _issue("no-ref", "notice"), _issue(NON_TEXT, "warning", "b2")]

    batch = aggregate_issues([page_a, page_b])
    separate = [aggregate_issues([page_a]), aggregate_issues([page_b])]

    merged: Dict[str, List[Any]] = {}
    for partial in separate:
        for criterion, bucket in partial.by_criterion.items():
            merged.setdefault(criterion, []).extend(bucket.issues)

    assert list(merged) == list(batch.by_criterion)
    for criterion, issues in merged.items():
        assert tuple(issues) == batch.by_criterion[criterion].issues

    combined = ImpactTally(
        critical=sum(part.issues_by_impact.critical for part in separate),
        serious=sum(part.issues_by_impact.serious for part in separate),
        moderate=sum(part.issues_by_impact.moderate for part in separate),
        minor=sum(part.issues_by_impact.minor for part in separate),
    )
    assert combined == batch.issues_by_impact
    assert sum(part.total_issues for part in separate) == batch.total_issues


def test_bare_criterion_code_resolves_through_fallback() -> None:
    result = aggregate_issues([{"code": "2.4.2", "type": "warning"}])

    bucket = result.by_criterion["2.4.2"]
    assert bucket.warning_count == 1
    assert bucket.status is CriterionStatus.WARNING
    assert result.issues_by_impact == ImpactTally(serious=1)


def test_to_dict_sorts_criteria_numerically() -> None:
    result = aggregate_issues(
        [
            _issue("WCAG2AA.Principle1.Guideline1_4.1_4_10.C32", "error"),
            _issue(CONTRAST, "error"),
            _issue(NON_TEXT, "warning"),
        ]
    )

    payload = result.to_dict()
    assert list(payload["byCriterion"]) == ["1.1.1", "1.4.3", "1.4.10"]
    assert payload["byCriterion"]["1.4.3"]["status"] == "not compliant"
    assert payload["issuesByImpact"] == {"critical": 2, "serious": 1, "moderate": 0, "minor": 0}


def test_pre_aggregated_counts_are_summed() -> None:
    result = aggregate_issues(
        [
            _issue(CONTRAST, "error", affectedElements=3),
            _issue(CONTRAST, "error", affected_elements="2"),
            _issue(CONTRAST, "error", affectedElements=0),
        ]
    )

    assert result.by_criterion["1.4.3"].issues[0].affected_elements == 6


def test_page_analysis_objects_are_accepted() -> None:
    page = PageAnalysis(
        url="https://example.com",
        issues=(RawIssue(code=CONTRAST, type="error", affected_elements=4),),
        total_issues=4,
    )
    loose = _issue(TITLE, "warning")

    result = aggregate_issues([page, loose])

    assert result.by_criterion["1.4.3"].total_affected_elements == 4
    assert result.by_criterion["2.4.2"].warning_count == 1


def test_minor_types_opt_in() -> None:
    policy = DEFAULT_IMPACT_POLICY.with_minor_types(["Notice"])
    result = ViolationAggregator(impact_policy=policy).aggregate(
        [_issue(NON_TEXT, "notice"), _issue(CONTRAST, "error")]
    )

    assert result.issues_by_impact == ImpactTally(critical=1, minor=1)
    assert DEFAULT_IMPACT_POLICY.classify("notice") == "moderate"


def test_group_page_issues_keys_on_code_and_type() -> None:
    grouped = group_page_issues(
        [
            _issue(CONTRAST, "error"),
            _issue(CONTRAST, "warning"),
            _issue(CONTRAST, "error"),
        ]
    )

    assert [(item.type, item.affected_elements) for item in grouped] == [
        ("error", 2),
        ("warning", 1),
    ]


def test_tally_impact_uses_policy() -> None:
    issues = [RawIssue(type="error"), RawIssue(type="warning"), RawIssue(type="")]

    assert tally_impact(issues) == ImpactTally(critical=1, serious=1, moderate=1)
