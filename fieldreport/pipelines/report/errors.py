"""Error taxonomy shared by the report pipeline and its adapters.

Every error carries the name of the stage that raised it so the orchestrator
can label metrics and leave a short diagnostic on the failed record.
"""

from __future__ import annotations


class ReportProcessingError(RuntimeError):
    """Base class for failures raised while processing a daily report."""

    stage = "pipeline"

    def __init__(self, message: str, *, stage: str | None = None) -> None:
        super().__init__(message)
        if stage is not None:
            self.stage = stage

    def describe(self) -> str:
        return f"{self.stage}: {self}"


class ReportNotFoundError(ReportProcessingError):
    """Raised when the referenced report record does not exist."""

    stage = "lookup"


class AudioRetrievalError(ReportProcessingError):
    """Raised when the raw recording cannot be fetched from object storage."""

    stage = "retrieval"


class TranscriptionError(ReportProcessingError):
    """Raised when speech-to-text fails or yields a blank transcript."""

    stage = "transcription"


class ExtractionError(ReportProcessingError):
    """Raised when the model output cannot be turned into a JSON object."""

    stage = "extraction"


class ExtractionValidationError(ReportProcessingError):
    """Raised when recovered JSON does not have an object at the top level."""

    stage = "validation"


class PersistenceError(ReportProcessingError):
    """Raised when the report store is unreachable or rejects a write."""

    stage = "persistence"


__all__ = [
    "ReportProcessingError",
    "ReportNotFoundError",
    "AudioRetrievalError",
    "TranscriptionError",
    "ExtractionError",
    "ExtractionValidationError",
    "PersistenceError",
]
