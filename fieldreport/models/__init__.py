"""SQLAlchemy models for the report store."""

from .base import Base
from .daily_report import DailyReport, ReportStatus  # noqa: F401

__all__ = [
    "Base",
    "DailyReport",
    "ReportStatus",
]
