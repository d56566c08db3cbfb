from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

__all__ = [
    "PatternRule",
    "DEFAULT_PATTERN_RULES",
    "CriterionCodeParser",
    "parse_criterion_code",
]


@dataclass(frozen=True)
class PatternRule:
    """One way of locating a success criterion inside a scanner rule code."""

    name: str
    pattern: re.Pattern[str]
    extract: Callable[[re.Match[str]], str]
    precedence: int


def _success_criterion_segments(match: re.Match[str]) -> str:
    # Principle and guideline numerals are dropped; only the trailing
    # success-criterion triple identifies the criterion.
    return ".".join(match.group("sc1", "sc2", "sc3"))


def _bare_triple(match: re.Match[str]) -> str:
    return match.group(0)


# Example: "WCAG2AA.Principle1.Guideline1_4.1_4_3.G18.Fail" -> "1.4.3"
STRUCTURED_RULE = PatternRule(
    name="structured",
    pattern=re.compile(
        r"Principle(?P<principle>\d+)\.Guideline(?P<g1>\d+)_(?P<g2>\d+)"
        r"\.(?P<sc1>\d+)_(?P<sc2>\d+)_(?P<sc3>\d+)"
    ),
    extract=_success_criterion_segments,
    precedence=0,
)

FALLBACK_RULE = PatternRule(
    name="fallback",
    pattern=re.compile(r"\d+\.\d+\.\d+"),
    extract=_bare_triple,
    precedence=1,
)

DEFAULT_PATTERN_RULES: Tuple[PatternRule, ...] = (STRUCTURED_RULE, FALLBACK_RULE)


class CriterionCodeParser:
    """Resolve scanner rule codes to ``major.minor.item`` criterion ids."""

    def __init__(self, rules: Sequence[PatternRule] = DEFAULT_PATTERN_RULES) -> None:
        self._rules: Tuple[PatternRule, ...] = tuple(
            sorted(rules, key=lambda rule: rule.precedence)
        )

    @property
    def rules(self) -> Tuple[PatternRule, ...]:
        return self._rules

    def parse(self, code: Any) -> Optional[str]:
        resolved = self.parse_with_rule(code)
        if resolved is None:
            return None
        return resolved[0]

    def parse_with_rule(self, code: Any) -> Optional[Tuple[str, str]]:
        """Return ``(criterion, rule name)`` for the first rule that matches."""

        if not isinstance(code, str) or not code:
            return None
        for rule in self._rules:
            match = rule.pattern.search(code)
            if match:
                return rule.extract(match), rule.name
        logger.debug("Could not extract WCAG criterion from: %s", code)
        return None


def parse_criterion_code(code: Any) -> Optional[str]:
    return CriterionCodeParser().parse(code)
