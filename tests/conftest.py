"""Shared fakes for the report pipeline tests.

External collaborators (object storage, Transcribe, Bedrock, Postgres) are
replaced by small in-memory classes with the same async methods.
"""

from __future__ import annotations

import dataclasses
import json
from datetime import date
from typing import Any, Mapping
from uuid import UUID, uuid4

import pytest

from fieldreport.models.daily_report import ReportStatus, utc_now
from fieldreport.pipelines.report import (
    ReportNotFoundError,
    ReportProcessor,
    ReportSnapshot,
)
from fieldreport.services.report_repository import ReportRepository

FOREMAN_TRANSCRIPT = (
    "4 guys from Southern Masonry laying brick, concrete delivery 2 hours late"
)

FOREMAN_EXTRACTION = json.dumps(
    {
        "workPerformed": [
            {"subcontractor": "Southern Masonry", "task": "Laying brick", "crewSize": "4"}
        ],
        "deliveries": [{"material": "Concrete", "status": "Delivered late"}],
        "delays": [{"reason": "Concrete delivery late", "duration": "2 hours"}],
        "safetyNotes": None,
    }
)


class InMemoryReportRepository(ReportRepository):
    """Dict-backed report store recording every write."""

    def __init__(self) -> None:
        self.records: dict[UUID, ReportSnapshot] = {}
        self.writes: list[tuple[str, UUID, dict[str, Any]]] = []
        self.fail_on: dict[tuple[str, Any], Exception] = {}

    def seed(self, file_key: str = "audio/2026-02-12/site-walk.webm", **fields: Any) -> ReportSnapshot:
        now = utc_now()
        report = ReportSnapshot(
            id=fields.pop("id", uuid4()),
            file_key=file_key,
            status=fields.pop("status", ReportStatus.UPLOADING),
            transcript_text=fields.pop("transcript_text", ""),
            extracted_json=fields.pop("extracted_json", {"fileKey": file_key, "fileType": "audio/webm"}),
            markdown_content=fields.pop("markdown_content", ""),
            last_error=fields.pop("last_error", None),
            project_name=fields.pop("project_name", "Pending"),
            report_date=fields.pop("report_date", date(2026, 2, 12)),
            created_at=now,
            updated_at=now,
        )
        self.records[report.id] = report
        return report

    def _check_failure(self, method: str, marker: Any = None) -> None:
        exc = self.fail_on.get((method, marker)) or self.fail_on.get((method, None))
        if exc is not None:
            raise exc

    async def get(self, report_id: UUID) -> ReportSnapshot:
        self._check_failure("get")
        try:
            return self.records[report_id]
        except KeyError:
            raise ReportNotFoundError(f"Report {report_id} not found.") from None

    async def create(self, file_key: str, **fields: Any) -> ReportSnapshot:
        return self.seed(file_key, **{k: v for k, v in fields.items() if k != "superintendent_name"})

    async def update_status(
        self,
        report_id: UUID,
        status: ReportStatus,
        *,
        last_error: str | None = None,
    ) -> None:
        self._check_failure("update_status", status)
        self._apply(report_id, "update_status", status=status, last_error=last_error)

    async def save_results(
        self,
        report_id: UUID,
        *,
        transcript_text: str,
        extracted: Mapping[str, Any],
        summary_text: str,
    ) -> None:
        self._check_failure("save_results")
        self._apply(
            report_id,
            "save_results",
            transcript_text=transcript_text,
            extracted_json=dict(extracted),
            markdown_content=summary_text,
            status=ReportStatus.READY,
            last_error=None,
        )

    def _apply(self, report_id: UUID, method: str, **values: Any) -> None:
        if report_id not in self.records:
            raise ReportNotFoundError(f"Report {report_id} not found.")
        self.writes.append((method, report_id, dict(values)))
        self.records[report_id] = dataclasses.replace(
            self.records[report_id], updated_at=utc_now(), **values
        )

    def statuses(self, report_id: UUID) -> list[ReportStatus]:
        return [values["status"] for _, rid, values in self.writes if rid == report_id]


class FakeAudioStore:
    def __init__(self, objects: dict[str, bytes] | None = None, error: Exception | None = None) -> None:
        self.objects = objects or {}
        self.error = error
        self.calls: list[str] = []

    async def fetch(self, key: str) -> bytes:
        self.calls.append(key)
        if self.error is not None:
            raise self.error
        return self.objects.get(key, b"fake-audio-bytes")


class FakeTranscriber:
    def __init__(self, text: str | None = FOREMAN_TRANSCRIPT, error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def transcribe(self, audio_bytes: bytes, *, content_type: str, filename: str) -> str:
        self.calls.append(
            {"audio_bytes": audio_bytes, "content_type": content_type, "filename": filename}
        )
        if self.error is not None:
            raise self.error
        return self.text


class FakeExtractor:
    def __init__(self, response: str | None = FOREMAN_EXTRACTION, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def invoke(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        temperature: float | None = None,
        response_prefix: str | None = None,
    ) -> str | None:
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "temperature": temperature,
                "response_prefix": response_prefix,
            }
        )
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def repository() -> InMemoryReportRepository:
    return InMemoryReportRepository()


@pytest.fixture
def audio_store() -> FakeAudioStore:
    return FakeAudioStore()


@pytest.fixture
def transcriber() -> FakeTranscriber:
    return FakeTranscriber()


@pytest.fixture
def extractor() -> FakeExtractor:
    return FakeExtractor()


@pytest.fixture
def processor(repository, audio_store, transcriber, extractor) -> ReportProcessor:
    return ReportProcessor(
        repository=repository,
        audio_store=audio_store,
        transcriber=transcriber,
        extractor=extractor,
    )

