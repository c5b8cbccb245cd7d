"""High-level orchestration map for the report processing pipeline.

``ReportProcessor`` executes these stages in order; this module keeps the
canonical list so logs, metrics and the ``/reports/pipeline`` endpoint all
agree on stage names:

1. ``processing`` – flip the record to PROCESSING.
2. ``retrieval`` – fetch the raw recording from object storage.
3. ``transcription`` – speech-to-text, rejecting blank transcripts.
4. ``extraction`` – prompt the model and recover a JSON object.
5. ``validation`` – coerce the JSON into the four report sections.
6. ``rendering`` – produce the canonical summary document.
7. ``persistence`` – write content and READY in one update.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List


@dataclass(frozen=True)
class PipelineStage:
    """Human-readable description of one stage in the report pipeline."""

    order: int
    name: str
    module: str
    summary: str


class ReportPipeline:
    """Ordered description of the ``ReportProcessor`` stages."""

    _STAGES: List[PipelineStage] = [
        PipelineStage(
            1,
            "processing",
            "fieldreport.services.report_repository",
            "Mark the record PROCESSING and clear any previous failure note.",
        ),
        PipelineStage(
            2,
            "retrieval",
            "fieldreport.services.storage",
            "Fetch the raw recording by file key from S3/R2.",
        ),
        PipelineStage(
            3,
            "transcription",
            "fieldreport.services.transcribe",
            "Stream the recording to Amazon Transcribe; blank output fails the attempt.",
        ),
        PipelineStage(
            4,
            "extraction",
            "fieldreport.pipelines.report.extraction",
            "Call Bedrock with the foreman prompt and recover a JSON object.",
        ),
        PipelineStage(
            5,
            "validation",
            "fieldreport.pipelines.report.schema",
            "Coerce loose JSON into work performed, deliveries, delays and safety notes.",
        ),
        PipelineStage(
            6,
            "rendering",
            "fieldreport.pipelines.report.summary",
            "Render the fixed-section summary document.",
        ),
        PipelineStage(
            7,
            "persistence",
            "fieldreport.services.report_repository",
            "Store transcript, extraction and summary together with READY.",
        ),
    ]

    @classmethod
    def describe(cls) -> Iterable[PipelineStage]:
        """Expose the ordered list of stages for debugging and documentation."""

        return tuple(cls._STAGES)

    @classmethod
    def stage_names(cls) -> tuple[str, ...]:
        return tuple(stage.name for stage in cls._STAGES)


__all__ = ["ReportPipeline", "PipelineStage"]
