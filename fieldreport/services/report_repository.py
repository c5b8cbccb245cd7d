"""Repository for reading and writing daily report records."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Mapping
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from fieldreport.models.daily_report import DailyReport, ReportStatus, utc_now
from fieldreport.pipelines.report.errors import PersistenceError, ReportNotFoundError
from fieldreport.pipelines.report.types import JsonValue, ReportSnapshot

logger = logging.getLogger(__name__)


class ReportRepository(ABC):
    """Persistence contract for report records."""

    @abstractmethod
    async def get(self, report_id: UUID) -> ReportSnapshot:
        ...

    @abstractmethod
    async def create(
        self,
        file_key: str,
        *,
        project_name: str = "Pending",
        superintendent_name: str = "Pending",
        report_date: date | None = None,
        extracted_json: JsonValue = None,
    ) -> ReportSnapshot:
        ...

    @abstractmethod
    async def update_status(
        self,
        report_id: UUID,
        status: ReportStatus,
        *,
        last_error: str | None = None,
    ) -> None:
        ...

    @abstractmethod
    async def save_results(
        self,
        report_id: UUID,
        *,
        transcript_text: str,
        extracted: Mapping[str, Any],
        summary_text: str,
    ) -> None:
        """Write content and flip the record to READY in one update."""


def _snapshot(row: DailyReport) -> ReportSnapshot:
    return ReportSnapshot(
        id=row.id,
        file_key=row.file_key,
        status=ReportStatus(row.status),
        transcript_text=row.transcript_text or "",
        extracted_json=row.extracted_json,
        markdown_content=row.markdown_content or "",
        last_error=row.last_error,
        project_name=row.project_name,
        report_date=row.report_date,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlAlchemyReportRepository(ReportRepository):
    """SQLAlchemy implementation of the report repository."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, report_id: UUID) -> ReportSnapshot:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(DailyReport).where(DailyReport.id == report_id)
                )
                row = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not load report {report_id}: {exc}") from exc

        if row is None:
            raise ReportNotFoundError(f"Report {report_id} not found.")
        return _snapshot(row)

    async def create(
        self,
        file_key: str,
        *,
        project_name: str = "Pending",
        superintendent_name: str = "Pending",
        report_date: date | None = None,
        extracted_json: JsonValue = None,
    ) -> ReportSnapshot:
        row = DailyReport(
            file_key=file_key,
            status=ReportStatus.UPLOADING,
            project_name=project_name,
            superintendent_name=superintendent_name,
            report_date=report_date or date.today(),
            transcript_text="",
            extracted_json=extracted_json,
            markdown_content="",
        )
        try:
            async with self._session_factory() as session:
                session.add(row)
                await session.commit()
                await session.refresh(row)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not create report: {exc}") from exc

        logger.info("Created report id=%s file_key=%s", row.id, file_key)
        return _snapshot(row)

    async def update_status(
        self,
        report_id: UUID,
        status: ReportStatus,
        *,
        last_error: str | None = None,
    ) -> None:
        await self._update(
            report_id,
            status=status,
            last_error=last_error,
        )

    async def save_results(
        self,
        report_id: UUID,
        *,
        transcript_text: str,
        extracted: Mapping[str, Any],
        summary_text: str,
    ) -> None:
        await self._update(
            report_id,
            transcript_text=transcript_text,
            extracted_json=dict(extracted),
            markdown_content=summary_text,
            status=ReportStatus.READY,
            last_error=None,
        )

    async def _update(self, report_id: UUID, **values: Any) -> None:
        values["updated_at"] = utc_now()
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    update(DailyReport)
                    .where(DailyReport.id == report_id)
                    .values(**values)
                )
                await session.commit()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not update report {report_id}: {exc}") from exc

        if result.rowcount == 0:
            raise ReportNotFoundError(f"Report {report_id} not found.")


__all__ = ["ReportRepository", "SqlAlchemyReportRepository"]
