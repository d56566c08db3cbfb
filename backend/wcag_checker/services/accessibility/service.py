from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Mapping, Sequence

from ...config import Settings
from .aggregator import ViolationAggregator, group_page_issues, tally_impact
from .models import AnalysisAggregate, FailedPage, PageAnalysis, RawIssue, WebsiteAnalysis
from .scanner import (
    CrawlerPort,
    ScannerPort,
    add_cache_buster,
    convert_localhost_url,
    dedupe_urls,
    normalize_raw_issues,
)

logger = logging.getLogger(__name__)


class AccessibilityError(Exception):
    """Base error for accessibility analysis."""


class PageAnalysisError(AccessibilityError):
    """Raised when a single page could not be scanned."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to analyze {url}: {reason}")
        self.url = url
        self.reason = reason


class PageDiscoveryError(AccessibilityError):
    """Raised when the crawler could not discover pages."""


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _affects_suffix(message: str, count: int) -> str:
    plural = "s" if count > 1 else ""
    return f"{message} (Affects {count} element{plural})"


class AccessibilityAnalysisService:
    def __init__(
        self,
        *,
        scanner: ScannerPort,
        crawler: CrawlerPort | None,
        settings: Settings,
        clock: Callable[[], str] = _utc_timestamp,
    ) -> None:
        self._scanner = scanner
        self._crawler = crawler
        self._settings = settings
        self._clock = clock

    def _prepare_url(self, url: str) -> str:
        if self._settings.docker_localhost_rewrite:
            return convert_localhost_url(url)
        return url

    async def analyze_page(self, url: str, *, standard: str | None = None) -> PageAnalysis:
        target = self._prepare_url(url)
        standard = standard or self._settings.wcag_standard
        logger.info("Analyzing page: %s (%s)", target, standard)

        try:
            result = await self._scanner.scan(add_cache_buster(target), standard=standard)
        except Exception as exc:
            logger.error("Analysis failed for %s: %s", target, exc)
            raise PageAnalysisError(target, str(exc)) from exc

        raw_issues = normalize_raw_issues(result)
        grouped = [
            RawIssue(
                code=summary.code,
                type=summary.type,
                message=_affects_suffix(summary.message, summary.affected_elements),
                selector=summary.selector,
                context=summary.context,
                affected_elements=summary.affected_elements,
            )
            for summary in group_page_issues(raw_issues)
        ]
        logger.info("Analysis complete: %d unique issue types found", len(grouped))

        page_title = ""
        if isinstance(result, Mapping):
            page_title = str(result.get("pageTitle") or result.get("page_title") or "")

        return PageAnalysis(
            url=target,
            issues=tuple(grouped),
            total_issues=len(raw_issues),
            page_title=page_title,
            timestamp=self._clock(),
        )

    async def analyze_website(
        self,
        urls: Iterable[str],
        *,
        standard: str | None = None,
    ) -> WebsiteAnalysis:
        requested = list(urls)
        unique_urls = dedupe_urls(requested)
        if len(unique_urls) < len(requested):
            logger.warning("Removed %d duplicate URLs", len(requested) - len(unique_urls))

        logger.info("Starting website analysis for %d pages", len(unique_urls))
        page_analyses: List[PageAnalysis] = []
        failed_pages: List[FailedPage] = []

        for index, url in enumerate(unique_urls, start=1):
            logger.info("[%d/%d] Analyzing: %s", index, len(unique_urls), url)
            try:
                analysis = await self.analyze_page(url, standard=standard)
            except PageAnalysisError as exc:
                failed_pages.append(FailedPage(url=url, error=exc.reason))
                continue
            page_analyses.append(analysis)

        all_issues = [issue for page in page_analyses for issue in page.issues]
        return WebsiteAnalysis(
            base_url=unique_urls[0] if unique_urls else "",
            page_analyses=tuple(page_analyses),
            issues_by_impact=tally_impact(all_issues),
            failed_pages=tuple(failed_pages),
            timestamp=self._clock(),
        )

    async def discover_pages(
        self,
        url: str,
        *,
        max_depth: int | None = None,
        max_pages: int | None = None,
    ) -> List[str]:
        if self._crawler is None:
            raise PageDiscoveryError("No crawler is configured")

        depth = max_depth if max_depth is not None else self._settings.max_crawl_depth
        limit = max_pages if max_pages is not None else self._settings.max_crawl_pages
        target = self._prepare_url(url)
        logger.info(
            "Discovering pages from %s (max_depth=%d, max_pages=%d)", target, depth, limit
        )
        try:
            pages: Sequence[str] = await self._crawler.discover(
                target, max_depth=depth, max_pages=limit
            )
        except Exception as exc:
            logger.error("Page discovery failed: %s", exc)
            raise PageDiscoveryError(f"Failed to discover pages: {exc}") from exc

        discovered = dedupe_urls(pages)[:limit] if limit > 0 else []
        if not discovered:
            discovered = [target]
        logger.info("Discovered %d pages", len(discovered))
        return discovered

    async def crawl_and_analyze(
        self,
        url: str,
        *,
        max_depth: int | None = None,
        max_pages: int | None = None,
        standard: str | None = None,
    ) -> WebsiteAnalysis:
        pages = await self.discover_pages(url, max_depth=max_depth, max_pages=max_pages)
        analysis = await self.analyze_website(pages, standard=standard)
        logger.info(
            "Total issues found: %d across %d pages",
            analysis.total_issues,
            analysis.pages_analyzed,
        )
        return analysis

    @staticmethod
    def aggregate(analysis: WebsiteAnalysis | PageAnalysis) -> AnalysisAggregate:
        if isinstance(analysis, PageAnalysis):
            return ViolationAggregator().aggregate([analysis])
        return ViolationAggregator().aggregate(list(analysis.page_analyses))
