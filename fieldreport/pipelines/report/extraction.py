"""Structured extraction stage (Stage 04) of the report pipeline."""

from __future__ import annotations

import json
import logging

from .errors import ExtractionError
from .prompts import build_extraction_request
from .types import JsonValue, StructuredExtractor

logger = logging.getLogger("fieldreport.pipeline")


def _truncate(value: str, max_length: int = 500) -> str:
    if len(value) <= max_length:
        return value
    return value[: max_length - 3] + "..."


def _strip_code_fences(payload: str) -> str:
    cleaned = payload.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def parse_json_object(raw: str) -> JsonValue:
    """Parse model output, falling back to the outermost ``{...}`` span."""

    cleaned = _strip_code_fences(raw)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass

    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start != -1 and end > start:
        try:
            return json.loads(cleaned[start : end + 1])
        except json.JSONDecodeError as exc:
            raise ExtractionError(f"Extraction output was not valid JSON: {exc}") from exc
    raise ExtractionError("Extraction output was not valid JSON.")


async def extract_structured_data(
    extractor: StructuredExtractor,
    transcript: str,
    *,
    report_id: object = None,
) -> JsonValue:
    """Ask the model for the four report sections and return the parsed JSON."""

    request = build_extraction_request(transcript)
    raw_response = await extractor.invoke(
        system_prompt=request.system_prompt,
        user_prompt=request.user_prompt,
        temperature=request.temperature,
        response_prefix=request.response_prefix,
    )
    if not raw_response or not raw_response.strip():
        raise ExtractionError("Extraction model returned no content.")

    logger.info("Raw extraction report=%s: %s", report_id, _truncate(raw_response))
    return parse_json_object(raw_response)


__all__ = ["extract_structured_data", "parse_json_object"]
