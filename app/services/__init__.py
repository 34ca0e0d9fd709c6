# app/services/__init__.py
"""
Shared services layer for report generation.
"""

from app.services.source_result import SourceResult, SourceUnavailable, fetch_source, fetch_with_fallback
from app.services.report_service import ReportService

__all__ = [
    "SourceResult",
    "SourceUnavailable",
    "fetch_source",
    "fetch_with_fallback",
    "ReportService",
]
