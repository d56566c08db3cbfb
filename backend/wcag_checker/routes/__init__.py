from .analysis import router as analysis_router
from .criteria import router as criteria_router
from .reports import router as report_router

__all__ = ["analysis_router", "criteria_router", "report_router"]
