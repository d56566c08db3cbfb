from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

import pytest

BACKEND_ROOT = Path(__file__).resolve().parents[2]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from wcag_checker.config import Settings
from wcag_checker.services.accessibility import (
    AccessibilityAnalysisService,
    CriterionStatus,
    PageAnalysisError,
    PageDiscoveryError,
)
from wcag_checker.services.accessibility.scanner import CACHE_BUST_PARAM

CONTRAST = "WCAG2AA.Principle1.Guideline1_4.1_4_3.G18.Fail"
TITLE = "WCAG2AA.Principle2.Guideline2_4.2_4_2.H25.1.NoTitleEl"


class _StubScanner:
    def __init__(self, responses: Dict[str, Any]) -> None:
        self._responses = responses
        self.calls: List[Dict[str, str]] = []

    async def scan(self, url: str, *, standard: str) -> Mapping[str, Any]:
        self.calls.append({"url": url, "standard": standard})
        base = url.split("?", 1)[0]
        response = self._responses.get(base)
        if isinstance(response, Exception):
            raise response
        return response or {"issues": []}


class _StubCrawler:
    def __init__(self, pages: Sequence[str] | Exception) -> None:
        self._pages = pages
        self.calls: List[Dict[str, Any]] = []

    async def discover(self, url: str, *, max_depth: int, max_pages: int) -> Sequence[str]:
        self.calls.append({"url": url, "max_depth": max_depth, "max_pages": max_pages})
        if isinstance(self._pages, Exception):
            raise self._pages
        return list(self._pages)


def _service(
    scanner: _StubScanner,
    crawler: _StubCrawler | None = None,
    **settings: Any,
) -> AccessibilityAnalysisService:
    return AccessibilityAnalysisService(
        scanner=scanner,
        crawler=crawler,
        settings=Settings(**settings),
        clock=lambda: "2024-05-01T12:00:00+00:00",
    )


def test_analyze_page_groups_issues_and_appends_affected_count() -> None:
    scanner = _StubScanner(
        {
            "https://example.com/": {
                "pageTitle": "Home",
                "issues": [
                    {"code": CONTRAST, "type": "error", "message": "Low contrast", "selector": "p"},
                    {"code": CONTRAST, "type": "error", "message": "Low contrast", "selector": "a"},
                    {"code": TITLE, "type": "warning", "message": "Missing title"},
                ],
            }
        }
    )
    service = _service(scanner)

    page = asyncio.run(service.analyze_page("https://example.com/"))

    assert page.url == "https://example.com/"
    assert page.page_title == "Home"
    assert page.total_issues == 3
    assert page.timestamp == "2024-05-01T12:00:00+00:00"
    assert [issue.message for issue in page.issues] == [
        "Low contrast (Affects 2 elements)",
        "Missing title (Affects 1 element)",
    ]
    assert page.issues[0].affected_elements == 2
    assert page.issues[0].selector == "p"

    call = scanner.calls[0]
    assert call["standard"] == "WCAG2AA"
    assert f"{CACHE_BUST_PARAM}=" in call["url"]


def test_analyze_page_uses_requested_standard() -> None:
    scanner = _StubScanner({})
    service = _service(scanner)

    asyncio.run(service.analyze_page("https://example.com/", standard="WCAG2AAA"))

    assert scanner.calls[0]["standard"] == "WCAG2AAA"


def test_analyze_page_wraps_scanner_failures() -> None:
    scanner = _StubScanner({"https://example.com/": RuntimeError("timeout")})
    service = _service(scanner)

    with pytest.raises(PageAnalysisError) as excinfo:
        asyncio.run(service.analyze_page("https://example.com/"))

    assert excinfo.value.reason == "timeout"
    assert excinfo.value.url == "https://example.com/"


def test_analyze_page_rewrites_localhost_when_enabled() -> None:
    scanner = _StubScanner({})
    service = _service(scanner, docker_localhost_rewrite=True)

    page = asyncio.run(service.analyze_page("http://localhost:3000/"))

    assert page.url == "http://host.docker.internal:3000/"
    assert scanner.calls[0]["url"].startswith("http://host.docker.internal:3000/")


def test_analyze_website_collects_failures_and_dedupes() -> None:
    scanner = _StubScanner(
        {
            "https://example.com/": {"issues": [{"code": CONTRAST, "type": "error"}]},
            "https://example.com/about": {"issues": [{"code": TITLE, "type": "warning"}]},
            "https://example.com/broken": RuntimeError("net::ERR_NAME_NOT_RESOLVED"),
        }
    )
    service = _service(scanner)

    analysis = asyncio.run(
        service.analyze_website(
            [
                "https://example.com/",
                "https://example.com/about",
                "https://example.com/",
                "https://example.com/broken",
            ]
        )
    )

    assert analysis.base_url == "https://example.com/"
    assert analysis.pages_analyzed == 2
    assert analysis.total_issues == 2
    assert len(scanner.calls) == 3
    assert [page.to_dict() for page in analysis.failed_pages] == [
        {"url": "https://example.com/broken", "error": "net::ERR_NAME_NOT_RESOLVED"}
    ]
    assert analysis.issues_by_impact.critical == 1
    assert analysis.issues_by_impact.serious == 1


def test_discover_pages_limits_and_falls_back_to_seed() -> None:
    crawler = _StubCrawler(
        ["https://example.com/", "https://example.com/a", "https://example.com/a", "https://example.com/b"]
    )
    service = _service(_StubScanner({}), crawler, max_crawl_pages=2)

    pages = asyncio.run(service.discover_pages("https://example.com/"))

    assert pages == ["https://example.com/", "https://example.com/a"]
    assert crawler.calls[0] == {"url": "https://example.com/", "max_depth": 2, "max_pages": 2}

    empty = _service(_StubScanner({}), _StubCrawler([]))
    assert asyncio.run(empty.discover_pages("https://example.com/")) == ["https://example.com/"]


def test_discover_pages_errors() -> None:
    without_crawler = _service(_StubScanner({}))
    with pytest.raises(PageDiscoveryError):
        asyncio.run(without_crawler.discover_pages("https://example.com/"))

    failing = _service(_StubScanner({}), _StubCrawler(RuntimeError("refused")))
    with pytest.raises(PageDiscoveryError) as excinfo:
        asyncio.run(failing.discover_pages("https://example.com/"))
    assert "refused" in str(excinfo.value)


def test_crawl_and_analyze_feeds_the_aggregator() -> None:
    scanner = _StubScanner(
        {
            "https://example.com/": {"issues": [{"code": CONTRAST, "type": "error"}]},
            "https://example.com/contact": {
                "issues": [
                    {"code": CONTRAST, "type": "error"},
                    {"code": CONTRAST, "type": "error"},
                ]
            },
        }
    )
    crawler = _StubCrawler(["https://example.com/", "https://example.com/contact"])
    service = _service(scanner, crawler)

    analysis = asyncio.run(service.crawl_and_analyze("https://example.com/", max_depth=1))
    aggregate = service.aggregate(analysis)

    assert crawler.calls[0]["max_depth"] == 1
    bucket = aggregate.by_criterion["1.4.3"]
    assert len(bucket.issues) == 2
    assert bucket.total_affected_elements == 3
    assert bucket.status is CriterionStatus.NOT_COMPLIANT
