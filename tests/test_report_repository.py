"""``SqlAlchemyReportRepository`` driven through a stand-in async session."""

from __future__ import annotations

import asyncio
from datetime import date
from uuid import uuid4

import pytest
from sqlalchemy import Update
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from fieldreport.models import DailyReport, ReportStatus
from fieldreport.models.daily_report import utc_now
from fieldreport.pipelines.report import PersistenceError, ReportNotFoundError
from fieldreport.services import SqlAlchemyReportRepository


class StubResult:
    def __init__(self, rowcount=1, row=None):
        self.rowcount = rowcount
        self.row = row

    def scalar_one_or_none(self):
        return self.row


class StubSession:
    """Records statements; mimics the parts of ``AsyncSession`` the repository uses."""

    def __init__(self, result=None, error=None):
        self.result = result or StubResult()
        self.error = error
        self.statements = []
        self.added = []
        self.commits = 0

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    async def execute(self, statement):
        self.statements.append(statement)
        if self.error is not None:
            raise self.error
        return self.result

    def add(self, row):
        self.added.append(row)

    async def commit(self):
        self.commits += 1

    async def refresh(self, row):
        row.id = row.id or uuid4()
        row.created_at = row.updated_at = utc_now()


def make_repository(session):
    return SqlAlchemyReportRepository(lambda: session)


def bound_values(statement):
    return statement.compile(dialect=postgresql.dialect()).params


def db_error():
    return OperationalError("UPDATE daily_reports", {}, Exception("connection refused"))


def make_row(**overrides):
    now = utc_now()
    values = dict(
        id=uuid4(),
        file_key="audio/2026-02-12/site-walk.webm",
        status=ReportStatus.FAILED,
        project_name="Pending",
        superintendent_name="Pending",
        report_date=date(2026, 2, 12),
        transcript_text="",
        extracted_json={"fileKey": "audio/2026-02-12/site-walk.webm"},
        markdown_content="",
        last_error="transcription: Transcription returned an empty transcript.",
        created_at=now,
        updated_at=now,
    )
    values.update(overrides)
    return DailyReport(**values)


def test_save_results_writes_content_and_ready_in_one_update():
    session = StubSession()
    report_id = uuid4()
    extracted = {"workPerformed": [], "deliveries": [], "delays": [], "safetyNotes": None}

    asyncio.run(
        make_repository(session).save_results(
            report_id,
            transcript_text="Quiet day.",
            extracted=extracted,
            summary_text="# DAILY CONSTRUCTION REPORT",
        )
    )

    assert len(session.statements) == 1
    assert session.commits == 1
    statement = session.statements[0]
    assert isinstance(statement, Update)
    values = bound_values(statement)
    assert values["status"] is ReportStatus.READY
    assert values["transcript_text"] == "Quiet day."
    assert values["extracted_json"] == extracted
    assert values["markdown_content"] == "# DAILY CONSTRUCTION REPORT"
    assert values["last_error"] is None
    assert values["updated_at"] is not None
    assert report_id in values.values()


def test_update_status_carries_last_error():
    session = StubSession()

    asyncio.run(
        make_repository(session).update_status(
            uuid4(), ReportStatus.FAILED, last_error="extraction: no content"
        )
    )

    values = bound_values(session.statements[0])
    assert values["status"] is ReportStatus.FAILED
    assert values["last_error"] == "extraction: no content"
    assert "markdown_content" not in values
    assert "extracted_json" not in values


def test_update_of_missing_row_is_not_found():
    session = StubSession(result=StubResult(rowcount=0))

    with pytest.raises(ReportNotFoundError) as exc_info:
        asyncio.run(make_repository(session).update_status(uuid4(), ReportStatus.PROCESSING))

    assert not isinstance(exc_info.value, PersistenceError)


def test_database_errors_become_persistence_errors():
    session = StubSession(error=db_error())

    with pytest.raises(PersistenceError) as exc_info:
        asyncio.run(
            make_repository(session).save_results(
                uuid4(), transcript_text="t", extracted={}, summary_text="s"
            )
        )

    assert isinstance(exc_info.value.__cause__, OperationalError)
    assert session.commits == 0


def test_get_returns_detached_snapshot():
    row = make_row()
    session = StubSession(result=StubResult(row=row))

    snapshot = asyncio.run(make_repository(session).get(row.id))

    assert snapshot.id == row.id
    assert snapshot.status is ReportStatus.FAILED
    assert snapshot.file_key == row.file_key
    assert snapshot.last_error.startswith("transcription:")


def test_get_missing_row_is_not_found():
    session = StubSession(result=StubResult(row=None))

    with pytest.raises(ReportNotFoundError):
        asyncio.run(make_repository(session).get(uuid4()))


def test_get_database_error_is_persistence_error():
    session = StubSession(error=db_error())

    with pytest.raises(PersistenceError):
        asyncio.run(make_repository(session).get(uuid4()))


def test_create_inserts_uploading_record():
    session = StubSession()

    snapshot = asyncio.run(
        make_repository(session).create(
            "audio/2026-02-12/new.m4a",
            project_name="North Tower",
            report_date=date(2026, 2, 12),
            extracted_json={"fileKey": "audio/2026-02-12/new.m4a", "fileType": "audio/mp4"},
        )
    )

    assert session.commits == 1
    assert session.added[0].file_key == "audio/2026-02-12/new.m4a"
    assert snapshot.status is ReportStatus.UPLOADING
    assert snapshot.project_name == "North Tower"
    assert snapshot.transcript_text == ""
    assert snapshot.markdown_content == ""
