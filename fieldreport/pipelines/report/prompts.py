"""Prompt construction for the structured extraction stage."""

from __future__ import annotations

from .types import ExtractionRequest

EXTRACTION_SYSTEM_PROMPT = (
    "You are an expert Construction Foreman. Extract the following from the "
    "transcript into a valid JSON object: workPerformed (subcontractor, task, "
    "crewSize), deliveries (material, status), delays (reason, duration), and "
    "safetyNotes. If a field is not mentioned, return an empty array or null. "
    "Return ONLY raw JSON: a single object, no prose and no code fences."
)


def build_extraction_request(transcript: str) -> ExtractionRequest:
    """Pair the fixed foreman instruction with the transcript as user content."""

    return ExtractionRequest(
        system_prompt=EXTRACTION_SYSTEM_PROMPT,
        user_prompt=transcript,
        temperature=0.0,
        response_prefix="{",
    )


__all__ = ["EXTRACTION_SYSTEM_PROMPT", "build_extraction_request"]
