"""Canonical plain-text rendering of a processed daily report.

The output is a Markdown-flavoured document with fixed sections in a fixed
order. The PDF exporter consumes it verbatim, so the section grammar must not
drift: every table is always present and falls back to an empty row.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from .schema import ExtractedReport

REPORT_TITLE = "# DAILY CONSTRUCTION REPORT"
SUMMARY_SECTIONS: tuple[str, ...] = (
    "## Work Performed",
    "## Deliveries",
    "## Delays",
    "## Safety Notes",
    "## Transcript",
)
SAFETY_NOTES_PLACEHOLDER = "None"


def _cell(value: object) -> str:
    if value is None:
        return ""
    text = " ".join(str(value).split())
    return text.replace("|", "\\|")


def _table(headers: Sequence[str], rows: Iterable[Sequence[object]]) -> list[str]:
    lines = [
        "| " + " | ".join(headers) + " |",
        "| " + " | ".join("---" for _ in headers) + " |",
    ]
    body = ["| " + " | ".join(_cell(value) for value in row) + " |" for row in rows]
    # Keep the table shape even when nothing was reported.
    lines.extend(body or ["|" + " |" * len(headers)])
    return lines


def render_summary(
    report_id: object,
    extracted: ExtractedReport,
    transcript_text: str,
) -> str:
    """Render the canonical summary document for a report."""

    safety_notes: Optional[str] = extracted.safety_notes
    if not safety_notes or not safety_notes.strip():
        safety_notes = SAFETY_NOTES_PLACEHOLDER

    work, deliveries, delays, safety, transcript = SUMMARY_SECTIONS
    lines = [REPORT_TITLE, "", f"- Report ID: {report_id}", "", work]
    lines += _table(
        ("Subcontractor", "Task", "Crew Size"),
        ((row.subcontractor, row.task, row.crew_size) for row in extracted.work_performed),
    )
    lines += ["", deliveries]
    lines += _table(
        ("Material", "Status"),
        ((row.material, row.status) for row in extracted.deliveries),
    )
    lines += ["", delays]
    lines += _table(
        ("Reason", "Duration"),
        ((row.reason, row.duration) for row in extracted.delays),
    )
    lines += ["", safety, safety_notes, "", transcript, transcript_text]
    return "\n".join(lines)


__all__ = ["REPORT_TITLE", "SAFETY_NOTES_PLACEHOLDER", "SUMMARY_SECTIONS", "render_summary"]
