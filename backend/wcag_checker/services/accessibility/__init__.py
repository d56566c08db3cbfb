from .aggregator import DEFAULT_IMPACT_POLICY, ImpactPolicy, ViolationAggregator, aggregate_issues
from .codes import CriterionCodeParser, PatternRule, parse_criterion_code
from .models import (
    AnalysisAggregate,
    CriterionBucket,
    CriterionStatus,
    ImpactTally,
    IssueSummary,
    PageAnalysis,
    RawIssue,
    WebsiteAnalysis,
)
from .scanner import CrawlerPort, ScannerPort
from .service import (
    AccessibilityAnalysisService,
    AccessibilityError,
    PageAnalysisError,
    PageDiscoveryError,
)

__all__ = [
    "AccessibilityAnalysisService",
    "AccessibilityError",
    "AnalysisAggregate",
    "CrawlerPort",
    "CriterionBucket",
    "CriterionCodeParser",
    "CriterionStatus",
    "DEFAULT_IMPACT_POLICY",
    "ImpactPolicy",
    "ImpactTally",
    "IssueSummary",
    "PageAnalysis",
    "PageAnalysisError",
    "PageDiscoveryError",
    "PatternRule",
    "RawIssue",
    "ScannerPort",
    "ViolationAggregator",
    "WebsiteAnalysis",
    "aggregate_issues",
    "parse_criterion_code",
]
