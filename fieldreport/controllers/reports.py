"""Daily report endpoints.

``POST /reports/process`` is the trigger for the processing pipeline. It only
confirms the record exists, hands the id to the background runner and
returns; clients poll ``GET /reports/{report_id}`` for the outcome.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from fieldreport.controllers.dependencies import ServicesDep
from fieldreport.pipelines.report import ReportNotFoundError, ReportPipeline
from fieldreport.views.common import ErrorResponse
from fieldreport.views.reports import (
    PipelineStageResponse,
    ProcessReportRequest,
    ProcessReportResponse,
    ReportStatusResponse,
)

router = APIRouter(prefix="/reports", tags=["reports"])

logger = logging.getLogger(__name__)


@router.post(
    "/process",
    response_model=ProcessReportResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={404: {"model": ErrorResponse}},
)
async def process_report(
    payload: ProcessReportRequest,
    services: ServicesDep,
) -> ProcessReportResponse:
    """Queue a report for processing without waiting for the pipeline."""

    try:
        await services.repository.get(payload.reportId)
    except ReportNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Report not found.",
        ) from None

    services.runner.submit(payload.reportId)
    logger.info("Report processing started report=%s", payload.reportId)

    return ProcessReportResponse(
        message="Report processing started.",
        reportId=payload.reportId,
    )


@router.get(
    "/pipeline",
    response_model=list[PipelineStageResponse],
)
async def describe_pipeline() -> list[PipelineStageResponse]:
    """List the processing stages in execution order."""

    return [
        PipelineStageResponse(
            order=stage.order,
            name=stage.name,
            module=stage.module,
            summary=stage.summary,
        )
        for stage in ReportPipeline.describe()
    ]


@router.get(
    "/{report_id}",
    response_model=ReportStatusResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_report(
    report_id: UUID,
    services: ServicesDep,
) -> ReportStatusResponse:
    """Return the current status and content of a report."""

    try:
        report = await services.repository.get(report_id)
    except ReportNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Report not found.",
        ) from None

    return ReportStatusResponse.from_snapshot(report)
