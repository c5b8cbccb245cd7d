"""Pydantic models and coercion rules for model-produced report data.

The language model returns loosely typed JSON. Rather than rejecting
imperfect output, each field is walked through an explicit coercion rule:

* ``coerce_text`` turns any scalar into a display string (or ``None``).
* ``coerce_crew_size`` turns numbers and numeric strings into a
  non-negative ``int`` (or ``None`` when nothing sensible can be read).
* ``coerce_entries`` turns a collection field into a list of objects.

Only a non-object top level is a hard failure.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ExtractionValidationError
from .types import JsonValue

_LEADING_INT = re.compile(r"^[+-]?\d+")


def coerce_text(value: JsonValue) -> Optional[str]:
    """Return ``value`` as a display string, keeping ``None`` as ``None``."""

    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        if value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, int):
        return str(value)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def coerce_crew_size(value: JsonValue) -> Optional[int]:
    """Normalize a crew size to a non-negative integer.

    Numbers are rounded half up, strings are read up to the first non-digit
    (``"4 guys"`` is 4). Negative counts clamp to zero. Anything else,
    including booleans and spelled-out numbers, yields ``None``.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return max(0, value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return max(0, math.floor(value + 0.5))
    if isinstance(value, str):
        match = _LEADING_INT.match(value.strip())
        if not match:
            return None
        return max(0, int(match.group(0)))
    return None


def coerce_entries(value: JsonValue) -> list[dict[str, Any]]:
    """Return the object items of a collection field.

    A missing or null collection is empty, a lone object is treated as a
    one-item list, and non-object items are dropped.
    """

    if value is None:
        return []
    if isinstance(value, dict):
        return [value]
    if isinstance(value, list):
        return [item for item in value if isinstance(item, dict)]
    return []


class _Entry(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class WorkPerformedEntry(_Entry):
    subcontractor: Optional[str] = None
    task: Optional[str] = None
    crew_size: Optional[int] = Field(default=None, alias="crewSize")

    @field_validator("subcontractor", "task", mode="before")
    @classmethod
    def _text(cls, value: JsonValue) -> Optional[str]:
        return coerce_text(value)

    @field_validator("crew_size", mode="before")
    @classmethod
    def _crew_size(cls, value: JsonValue) -> Optional[int]:
        return coerce_crew_size(value)


class DeliveryEntry(_Entry):
    material: Optional[str] = None
    status: Optional[str] = None

    @field_validator("material", "status", mode="before")
    @classmethod
    def _text(cls, value: JsonValue) -> Optional[str]:
        return coerce_text(value)


class DelayEntry(_Entry):
    reason: Optional[str] = None
    duration: Optional[str] = None

    @field_validator("reason", "duration", mode="before")
    @classmethod
    def _text(cls, value: JsonValue) -> Optional[str]:
        return coerce_text(value)


class ExtractedReport(BaseModel):
    """Normalized four-section extraction of a field recording."""

    work_performed: list[WorkPerformedEntry] = Field(
        default_factory=list, alias="workPerformed"
    )
    deliveries: list[DeliveryEntry] = Field(default_factory=list)
    delays: list[DelayEntry] = Field(default_factory=list)
    safety_notes: Optional[str] = Field(default=None, alias="safetyNotes")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("work_performed", "deliveries", "delays", mode="before")
    @classmethod
    def _entries(cls, value: JsonValue) -> list[dict[str, Any]]:
        return coerce_entries(value)

    @field_validator("safety_notes", mode="before")
    @classmethod
    def _safety_notes(cls, value: JsonValue) -> Optional[str]:
        return coerce_text(value)

    def to_payload(self) -> dict[str, Any]:
        """Serialize with the camelCase keys stored on the record."""

        return self.model_dump(by_alias=True)


def validate_extraction(value: JsonValue) -> ExtractedReport:
    """Coerce a parsed JSON value into an :class:`ExtractedReport`."""

    if not isinstance(value, dict):
        raise ExtractionValidationError(
            f"Extraction output must be a JSON object, got {type(value).__name__}."
        )
    try:
        return ExtractedReport.model_validate(value)
    except ValidationError as exc:
        raise ExtractionValidationError(f"Extraction output failed validation: {exc}") from exc


__all__ = [
    "DelayEntry",
    "DeliveryEntry",
    "ExtractedReport",
    "WorkPerformedEntry",
    "coerce_crew_size",
    "coerce_entries",
    "coerce_text",
    "validate_extraction",
]
