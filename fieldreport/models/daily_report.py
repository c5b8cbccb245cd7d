"""SQLAlchemy model for daily construction reports."""

from __future__ import annotations

import enum
import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Column, Date, DateTime, Enum, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID

from fieldreport.models.base import Base


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class ReportStatus(str, enum.Enum):
    """Lifecycle of a report record: UPLOADING -> PROCESSING -> READY | FAILED."""

    UPLOADING = "UPLOADING"
    PROCESSING = "PROCESSING"
    READY = "READY"
    FAILED = "FAILED"


class DailyReport(Base):
    __tablename__ = "daily_reports"

    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )
    file_key = Column(String(512), nullable=False, unique=True)
    status = Column(
        Enum(ReportStatus, name="report_status"),
        nullable=False,
        default=ReportStatus.UPLOADING,
        index=True,
    )

    # Placeholder metadata written by the upload flow.
    project_name = Column(String(255), nullable=False, default="Pending")
    superintendent_name = Column(String(255), nullable=False, default="Pending")
    report_date = Column(Date, nullable=False, default=date.today)

    transcript_text = Column(Text, nullable=False, default="")
    extracted_json = Column(JSONB, nullable=True)
    markdown_content = Column(Text, nullable=False, default="")
    last_error = Column(Text, nullable=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )


__all__ = ["DailyReport", "ReportStatus", "utc_now"]
