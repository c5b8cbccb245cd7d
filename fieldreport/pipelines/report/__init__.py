"""Daily report processing pipeline package.

Modules are organised by the order in which ``ReportProcessor`` executes:

1. `ingestion` – infer mime type and filename hint from the storage key.
2. `prompts` – the fixed foreman instruction for the extraction model.
3. `extraction` – call the model and recover a JSON object from its text.
4. `schema` – coerce loose JSON into the four report sections.
5. `summary` – render the canonical summary document.
6. `processor` – the state machine tying the stages to the record store.
7. `dispatch` – background hand-off used by the HTTP trigger.
"""

from .dispatch import ReportTaskRunner
from .errors import (
    AudioRetrievalError,
    ExtractionError,
    ExtractionValidationError,
    PersistenceError,
    ReportNotFoundError,
    ReportProcessingError,
    TranscriptionError,
)
from .extraction import extract_structured_data, parse_json_object
from .flow import PipelineStage, ReportPipeline
from .ingestion import resolve_content_type, resolve_filename
from .processor import ReportProcessor
from .schema import ExtractedReport, validate_extraction
from .summary import REPORT_TITLE, SUMMARY_SECTIONS, render_summary
from .types import ReportSnapshot

__all__ = [
    "AudioRetrievalError",
    "ExtractedReport",
    "ExtractionError",
    "ExtractionValidationError",
    "PersistenceError",
    "PipelineStage",
    "ReportNotFoundError",
    "ReportPipeline",
    "ReportProcessingError",
    "ReportProcessor",
    "ReportSnapshot",
    "ReportTaskRunner",
    "REPORT_TITLE",
    "SUMMARY_SECTIONS",
    "TranscriptionError",
    "extract_structured_data",
    "parse_json_object",
    "render_summary",
    "resolve_content_type",
    "resolve_filename",
    "validate_extraction",
]
