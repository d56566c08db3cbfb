from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

WCAG_STANDARDS = ("WCAG2A", "WCAG2AA", "WCAG2AAA")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "t", "on"}


@dataclass(frozen=True)
class Settings:
    """Application configuration loaded from environment variables."""

    log_level: str = "INFO"
    wcag_standard: str = "WCAG2AA"
    timeout_ms: int = 30000
    crawl_delay_ms: int = 1000
    user_agent: str = "WCAG-Analyzer/1.0 (pa11y)"
    max_crawl_depth: int = 2
    max_crawl_pages: int = 10
    docker_localhost_rewrite: bool = False
    frontend_origin: str = "*"
    checklist_template_root: Optional[Path] = None

    @property
    def allow_origins(self) -> list[str]:
        if not self.frontend_origin or self.frontend_origin == "*":
            return ["*"]
        return [origin.strip() for origin in self.frontend_origin.split(",") if origin.strip()]


def load_settings() -> Settings:
    standard = os.getenv("WCAG_STANDARD", "WCAG2AA").strip().upper()
    if standard not in WCAG_STANDARDS:
        standard = "WCAG2AA"

    template_root_env = os.getenv("CHECKLIST_TEMPLATE_ROOT")
    template_root = Path(template_root_env).expanduser() if template_root_env else None

    return Settings(
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        wcag_standard=standard,
        timeout_ms=_env_int("TIMEOUT", 30000),
        crawl_delay_ms=_env_int("CRAWL_DELAY", 1000),
        user_agent=os.getenv("USER_AGENT", "WCAG-Analyzer/1.0 (pa11y)"),
        max_crawl_depth=_env_int("MAX_CRAWL_DEPTH", 2),
        max_crawl_pages=_env_int("MAX_CRAWL_PAGES", 10),
        docker_localhost_rewrite=_env_bool("DOCKER_LOCALHOST_REWRITE", False),
        frontend_origin=os.getenv("FRONTEND_ORIGIN", "*"),
        checklist_template_root=template_root,
    )
