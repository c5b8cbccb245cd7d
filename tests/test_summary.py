from uuid import UUID

from fieldreport.pipelines.report import (
    REPORT_TITLE,
    SUMMARY_SECTIONS,
    render_summary,
    validate_extraction,
)

REPORT_ID = UUID("6f1c1f55-8a4e-4c39-9d43-1d2f4a0f7e21")


def _section_positions(document: str) -> list[int]:
    return [document.index(header) for header in (REPORT_TITLE, *SUMMARY_SECTIONS)]


def test_empty_extraction_renders_placeholders():
    document = render_summary(REPORT_ID, validate_extraction({}), "Quiet day on site.")

    assert document == "\n".join(
        [
            "# DAILY CONSTRUCTION REPORT",
            "",
            f"- Report ID: {REPORT_ID}",
            "",
            "## Work Performed",
            "| Subcontractor | Task | Crew Size |",
            "| --- | --- | --- |",
            "| | | |",
            "",
            "## Deliveries",
            "| Material | Status |",
            "| --- | --- |",
            "| | |",
            "",
            "## Delays",
            "| Reason | Duration |",
            "| --- | --- |",
            "| | |",
            "",
            "## Safety Notes",
            "None",
            "",
            "## Transcript",
            "Quiet day on site.",
        ]
    )


def test_rows_render_in_order_with_blank_nulls():
    extracted = validate_extraction(
        {
            "workPerformed": [
                {"subcontractor": "Southern Masonry", "task": "Laying brick", "crewSize": 4},
                {"subcontractor": "Delta Electric", "task": None, "crewSize": None},
            ],
            "deliveries": [{"material": "Rebar", "status": "On site"}],
            "delays": [{"reason": "Concrete truck late", "duration": "2 hours"}],
            "safetyNotes": "Hard hats checked at gate.",
        }
    )

    document = render_summary(REPORT_ID, extracted, "transcript")

    assert "| Southern Masonry | Laying brick | 4 |" in document
    assert "| Delta Electric |  |  |" in document
    assert document.index("Southern Masonry") < document.index("Delta Electric")
    assert "| Rebar | On site |" in document
    assert "| Concrete truck late | 2 hours |" in document
    assert "## Safety Notes\nHard hats checked at gate.\n" in document
    assert _section_positions(document) == sorted(_section_positions(document))


def test_zero_crew_size_is_rendered():
    extracted = validate_extraction({"workPerformed": [{"task": "Cleanup", "crewSize": -1}]})

    assert "|  | Cleanup | 0 |" in render_summary(REPORT_ID, extracted, "")


def test_blank_safety_notes_use_placeholder():
    extracted = validate_extraction({"safetyNotes": "   "})

    assert "## Safety Notes\nNone\n" in render_summary(REPORT_ID, extracted, "")


def test_cells_cannot_break_the_table():
    extracted = validate_extraction(
        {"deliveries": [{"material": "2x4 | 2x6\nstuds", "status": "partial"}]}
    )

    document = render_summary(REPORT_ID, extracted, "")

    assert "| 2x4 \\| 2x6 studs | partial |" in document


def test_transcript_is_kept_verbatim():
    transcript = "Line one.\n  Line two | with pipe."
    document = render_summary(REPORT_ID, validate_extraction({}), transcript)

    assert document.endswith("## Transcript\n" + transcript)


def test_rendering_is_deterministic():
    extracted = validate_extraction(
        {
            "workPerformed": [{"subcontractor": "Acme", "task": "Framing", "crewSize": "6"}],
            "delays": [{"reason": "Inspection", "duration": "1 hour"}],
        }
    )

    first = render_summary(REPORT_ID, extracted, "same transcript")
    second = render_summary(REPORT_ID, extracted, "same transcript")

    assert first.encode("utf-8") == second.encode("utf-8")
