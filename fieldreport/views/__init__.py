"""Pydantic schemas used as views in the MVC architecture."""

from .common import ErrorResponse
from .reports import (
    PipelineStageResponse,
    ProcessReportRequest,
    ProcessReportResponse,
    ReportStatusResponse,
)

__all__ = [
    "ErrorResponse",
    "PipelineStageResponse",
    "ProcessReportRequest",
    "ProcessReportResponse",
    "ReportStatusResponse",
]
