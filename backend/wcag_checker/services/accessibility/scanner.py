from __future__ import annotations

import logging
import time
from typing import Any, Iterable, List, Mapping, Optional, Protocol, Sequence
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

from .models import RawIssue

logger = logging.getLogger(__name__)

CACHE_BUST_PARAM = "_wcag_cache_bust"
DOCKER_HOST_ALIAS = "host.docker.internal"

__all__ = [
    "CACHE_BUST_PARAM",
    "ScannerPort",
    "CrawlerPort",
    "normalize_raw_issues",
    "add_cache_buster",
    "convert_localhost_url",
    "dedupe_urls",
]


class ScannerPort(Protocol):
    """Runs the accessibility scanner against one URL."""

    async def scan(self, url: str, *, standard: str) -> Mapping[str, Any]:
        ...


class CrawlerPort(Protocol):
    """Discovers same-domain pages starting from a seed URL."""

    async def discover(self, url: str, *, max_depth: int, max_pages: int) -> Sequence[str]:
        ...


def normalize_raw_issues(payload: Any) -> List[RawIssue]:
    """Convert the ``issues`` list of a scanner response into ``RawIssue`` values."""

    if isinstance(payload, Mapping):
        payload = payload.get("issues") or []
    if payload is None:
        return []
    return [RawIssue.from_payload(item) for item in payload]


def add_cache_buster(url: str, *, now_ms: Optional[int] = None) -> str:
    try:
        parsed = urlparse(url)
    except (TypeError, ValueError):
        return url
    if not parsed.scheme or not parsed.netloc:
        return url

    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    query = [(key, value) for key, value in parse_qsl(parsed.query, keep_blank_values=True)]
    query = [(key, value) for key, value in query if key != CACHE_BUST_PARAM]
    query.append((CACHE_BUST_PARAM, str(stamp)))
    return urlunparse(parsed._replace(query=urlencode(query)))


def convert_localhost_url(url: str) -> str:
    if "localhost" not in url and "127.0.0.1" not in url:
        return url
    converted = url.replace("localhost", DOCKER_HOST_ALIAS, 1).replace(
        "127.0.0.1", DOCKER_HOST_ALIAS, 1
    )
    logger.info("Converted URL: %s -> %s", url, converted)
    return converted


def dedupe_urls(urls: Iterable[str]) -> List[str]:
    seen: set[str] = set()
    unique: List[str] = []
    for url in urls:
        if url in seen:
            continue
        seen.add(url)
        unique.append(url)
    return unique
