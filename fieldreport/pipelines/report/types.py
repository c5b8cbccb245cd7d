"""Typed containers shared across the report pipeline.

These live in their own module so the stages, the repository and the
controllers can import them without creating circular dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Protocol, Union
from uuid import UUID

from fieldreport.models.daily_report import ReportStatus

JsonValue = Union[None, bool, int, float, str, list[Any], dict[str, Any]]
"""Any value ``json.loads`` can return."""


@dataclass(frozen=True)
class ReportSnapshot:
    """Detached, read-only view of a persisted report record."""

    id: UUID
    file_key: str
    status: ReportStatus
    transcript_text: str
    extracted_json: JsonValue
    markdown_content: str
    last_error: str | None
    project_name: str
    report_date: date
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class ExtractionRequest:
    """Normalized payload handed to the structured extraction model."""

    system_prompt: str
    user_prompt: str
    temperature: float = 0.0
    response_prefix: str | None = "{"


class AudioStore(Protocol):
    """Capability: fetch raw audio bytes by storage key."""

    async def fetch(self, key: str) -> bytes:
        ...


class Transcriber(Protocol):
    """Capability: turn audio bytes into best-effort transcript text."""

    async def transcribe(
        self,
        audio_bytes: bytes,
        *,
        content_type: str,
        filename: str,
    ) -> str:
        ...


class StructuredExtractor(Protocol):
    """Capability: run a text-generation call and return its raw text."""

    async def invoke(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        temperature: float | None = None,
        response_prefix: str | None = None,
    ) -> str | None:
        """Return the raw model text, or ``None`` when the model said nothing.

        ``response_prefix`` is text the reply must start with; adapters that
        support it pre-seed the reply so the model continues from there.
        """


__all__ = [
    "AudioStore",
    "ExtractionRequest",
    "JsonValue",
    "ReportSnapshot",
    "StructuredExtractor",
    "Transcriber",
]
