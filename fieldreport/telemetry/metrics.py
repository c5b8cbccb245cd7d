"""Prometheus metrics definitions and helpers."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests processed",
    ("method", "route", "status"),
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ("method", "route"),
    buckets=(
        0.005,
        0.01,
        0.025,
        0.05,
        0.1,
        0.25,
        0.5,
        1.0,
        2.5,
        5.0,
        10.0,
    ),
)

ERROR_COUNTER = Counter(
    "app_internal_errors_total",
    "Number of requests ending in internal server error responses",
    ("method", "route"),
)

REPORTS_PROCESSED = Counter(
    "reports_processed_total",
    "Report processing attempts by final outcome",
    ("outcome",),
)

REPORT_STAGE_FAILURES = Counter(
    "report_stage_failures_total",
    "Failed report processing attempts by pipeline stage",
    ("stage",),
)

REPORT_PROCESSING_SECONDS = Histogram(
    "report_processing_duration_seconds",
    "Wall-clock duration of one report processing attempt",
    ("outcome",),
    buckets=(0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0),
)


def observe_request(
    method: str,
    route: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record metrics for a completed HTTP request."""

    safe_route = route or "unknown"
    safe_method = method or "UNKNOWN"
    status_label = str(status_code)
    observed_duration = duration_seconds if duration_seconds >= 0 else 0

    REQUEST_COUNT.labels(
        method=safe_method,
        route=safe_route,
        status=status_label,
    ).inc()
    REQUEST_LATENCY.labels(
        method=safe_method,
        route=safe_route,
    ).observe(observed_duration)

    if status_code >= 500:
        ERROR_COUNTER.labels(
            method=safe_method,
            route=safe_route,
        ).inc()


def observe_report(
    outcome: str,
    duration_seconds: float,
    *,
    failed_stage: str | None = None,
) -> None:
    """Record metrics for a finished report processing attempt."""

    REPORTS_PROCESSED.labels(outcome=outcome).inc()
    REPORT_PROCESSING_SECONDS.labels(outcome=outcome).observe(max(duration_seconds, 0))
    if failed_stage:
        REPORT_STAGE_FAILURES.labels(stage=failed_stage).inc()
