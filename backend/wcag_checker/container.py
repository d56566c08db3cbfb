from __future__ import annotations

from .config import Settings, load_settings
from .services.accessibility import AccessibilityAnalysisService, CrawlerPort, ScannerPort


class Container:
    """Application service container for dependency management.

    The scanner and crawler are external collaborators; without a scanner the
    live analysis endpoints are unavailable while report rendering still
    works on posted results.
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        scanner: ScannerPort | None = None,
        crawler: CrawlerPort | None = None,
    ) -> None:
        self._settings = settings or load_settings()
        self._analysis_service: AccessibilityAnalysisService | None = None
        if scanner is not None:
            self._analysis_service = AccessibilityAnalysisService(
                scanner=scanner,
                crawler=crawler,
                settings=self._settings,
            )

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def analysis_service(self) -> AccessibilityAnalysisService | None:
        return self._analysis_service
