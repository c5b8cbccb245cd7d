"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    REPORT_PROCESSING_SECONDS,
    REPORT_STAGE_FAILURES,
    REPORTS_PROCESSED,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    observe_report,
    observe_request,
)

__all__ = [
    "ERROR_COUNTER",
    "REPORT_PROCESSING_SECONDS",
    "REPORT_STAGE_FAILURES",
    "REPORTS_PROCESSED",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "observe_report",
    "observe_request",
]
