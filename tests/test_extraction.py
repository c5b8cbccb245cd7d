import asyncio

import pytest

from conftest import FakeExtractor
from fieldreport.pipelines.report import ExtractionError, extract_structured_data, parse_json_object
from fieldreport.pipelines.report.prompts import EXTRACTION_SYSTEM_PROMPT

EMPTY_SECTIONS = {"workPerformed": [], "deliveries": [], "delays": [], "safetyNotes": None}


def test_parses_plain_json_object():
    assert parse_json_object('{"workPerformed": [], "deliveries": [], "delays": [], "safetyNotes": null}') == EMPTY_SECTIONS


def test_recovers_object_wrapped_in_prose():
    raw = 'Here you go: {"workPerformed":[],"deliveries":[],"delays":[],"safetyNotes":null} Thanks!'

    assert parse_json_object(raw) == EMPTY_SECTIONS


def test_strips_markdown_code_fences():
    raw = '```json\n{"safetyNotes": "Harness check done"}\n```'

    assert parse_json_object(raw) == {"safetyNotes": "Harness check done"}


def test_non_object_json_is_returned_for_validation():
    assert parse_json_object("[1, 2, 3]") == [1, 2, 3]


@pytest.mark.parametrize(
    "raw",
    [
        "not json at all",
        "} backwards {",
        "Result: {workPerformed: []}",
    ],
)
def test_unrecoverable_output_raises(raw):
    with pytest.raises(ExtractionError):
        parse_json_object(raw)


def test_extraction_call_uses_fixed_prompt_zero_temperature_and_object_prefix():
    extractor = FakeExtractor(response='{"delays": []}')

    result = asyncio.run(extract_structured_data(extractor, "Framing crew on level 2"))

    assert result == {"delays": []}
    assert extractor.calls == [
        {
            "system_prompt": EXTRACTION_SYSTEM_PROMPT,
            "user_prompt": "Framing crew on level 2",
            "temperature": 0.0,
            "response_prefix": "{",
        }
    ]


def test_system_prompt_names_every_section():
    for section in ("workPerformed", "deliveries", "delays", "safetyNotes", "crewSize"):
        assert section in EXTRACTION_SYSTEM_PROMPT


@pytest.mark.parametrize("response", [None, "", "   "])
def test_empty_model_response_raises(response):
    extractor = FakeExtractor(response=response)

    with pytest.raises(ExtractionError, match="no content"):
        asyncio.run(extract_structured_data(extractor, "transcript"))
