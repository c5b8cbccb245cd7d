"""End-to-end smoke test against the real database and Bedrock.

Creates a throwaway report, runs the pipeline with a fixed foreman transcript
(skipping audio retrieval and transcription) and checks the extraction.

Usage: python scripts/process_sample.py
"""

import asyncio
import sys
from datetime import date
from uuid import uuid4

from fieldreport.config.dependencies import build_services
from fieldreport.config.settings import settings
from fieldreport.models import ReportStatus
from fieldreport.pipelines.report import REPORT_TITLE

SAMPLE_TRANSCRIPT = (
    "Today is Feb 12th. We had 4 guys from Southern Masonry laying brick on the "
    "north wall. No safety issues. Concrete delivery was 2 hours late because of "
    "traffic on I-24."
)


def check(condition, message):
    if not condition:
        raise AssertionError(message)


async def main():
    services = build_services(settings)
    await services.startup()
    try:
        report = await services.repository.create(
            f"test/mock-{uuid4()}.webm",
            project_name="Field Report Test Project",
            superintendent_name="Test Superintendent",
            report_date=date(2026, 2, 12),
        )
        print(f"[process-sample] Created report: {report.id}")

        await services.processor.process_report(
            report.id, transcript_override=SAMPLE_TRANSCRIPT
        )
        updated = await services.repository.get(report.id)

        check(updated.status is ReportStatus.READY, "Expected report status READY.")
        work = (updated.extracted_json or {}).get("workPerformed", [])
        check(
            any("southern masonry" in (row.get("subcontractor") or "").lower() for row in work),
            "Expected a Southern Masonry work entry.",
        )
        check(
            any(row.get("crewSize") == 4 for row in work),
            "Expected a work entry with crewSize = 4.",
        )
        check(REPORT_TITLE in updated.markdown_content, "Expected the report header.")
        check(
            "southern masonry" in updated.markdown_content.lower(),
            "Expected the summary to mention Southern Masonry.",
        )
    finally:
        await services.shutdown()

    print("[process-sample] PASS: extraction and summary verified.")
    print(f"[process-sample] Report ID: {updated.id}")
    return 0


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except AssertionError as exc:
        print(f"[process-sample] FAIL: {exc}")
        sys.exit(1)
