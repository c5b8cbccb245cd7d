"""Request and response schemas for the daily report endpoints."""

from datetime import date, datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from fieldreport.models.daily_report import ReportStatus
from fieldreport.pipelines.report import ReportSnapshot


class ProcessReportRequest(BaseModel):
    """Request schema for starting background processing of a report."""

    reportId: UUID = Field(..., description="Identifier of the report to process")


class ProcessReportResponse(BaseModel):
    """Acknowledgement returned before the pipeline runs."""

    message: str = Field("Report processing started.")
    reportId: UUID = Field(..., description="Identifier of the queued report")


class ReportStatusResponse(BaseModel):
    """Poll view of a report record."""

    id: UUID
    status: ReportStatus
    fileKey: str
    projectName: str
    reportDate: date
    transcriptText: str = Field("", description="Transcript once processing succeeded")
    extracted: Optional[Any] = Field(
        None, description="Structured extraction as persisted"
    )
    summaryText: str = Field("", description="Canonical summary document")
    lastError: Optional[str] = Field(
        None, description="Stage and message of the last failed attempt"
    )
    createdAt: datetime
    updatedAt: datetime

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_snapshot(cls, report: ReportSnapshot) -> "ReportStatusResponse":
        return cls(
            id=report.id,
            status=report.status,
            fileKey=report.file_key,
            projectName=report.project_name,
            reportDate=report.report_date,
            transcriptText=report.transcript_text,
            extracted=report.extracted_json,
            summaryText=report.markdown_content,
            lastError=report.last_error,
            createdAt=report.created_at,
            updatedAt=report.updated_at,
        )


class PipelineStageResponse(BaseModel):
    """One processing stage as listed by ``GET /reports/pipeline``."""

    order: int
    name: str
    module: str
    summary: str
