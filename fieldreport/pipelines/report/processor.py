"""Report processing orchestrator.

``ReportProcessor.process_report`` turns an uploaded field recording into a
READY report record, or leaves it FAILED with a short diagnostic. Stage order
is documented in :mod:`fieldreport.pipelines.report.flow`.

Failure contract: any error after the record is found triggers a best-effort
FAILED write and is then re-raised unchanged. Cancellation is treated the same
way, so an interrupted attempt never stays in PROCESSING. If that FAILED write fails too,
the secondary error is logged and dropped so callers always see the original
cause. Content fields are only ever written together with READY.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from fieldreport.models.daily_report import ReportStatus
from fieldreport.telemetry import observe_report

from .errors import (
    AudioRetrievalError,
    ExtractionError,
    ReportProcessingError,
    TranscriptionError,
)
from .extraction import extract_structured_data
from .ingestion import resolve_content_type, resolve_filename
from .schema import ExtractedReport, validate_extraction
from .summary import render_summary
from .types import AudioStore, ReportSnapshot, StructuredExtractor, Transcriber

if TYPE_CHECKING:
    from fieldreport.services.report_repository import ReportRepository

logger = logging.getLogger("fieldreport.pipeline")
transcript_logger = logging.getLogger("fieldreport.logs.transcript")

_MAX_ERROR_LENGTH = 500


def _describe_failure(exc: BaseException) -> str:
    if isinstance(exc, ReportProcessingError):
        message = exc.describe()
    elif isinstance(exc, asyncio.CancelledError):
        message = "cancelled: processing attempt was cancelled."
    else:
        message = f"unexpected: {type(exc).__name__}: {exc}"
    if len(message) > _MAX_ERROR_LENGTH:
        message = message[: _MAX_ERROR_LENGTH - 3] + "..."
    return message


def _failed_stage(exc: BaseException) -> str:
    return exc.stage if isinstance(exc, ReportProcessingError) else "unexpected"


class ReportProcessor:
    """Sequence retrieval, transcription, extraction and rendering for one report."""

    def __init__(
        self,
        repository: "ReportRepository",
        audio_store: AudioStore,
        transcriber: Transcriber,
        extractor: StructuredExtractor,
    ) -> None:
        self._repository = repository
        self._audio_store = audio_store
        self._transcriber = transcriber
        self._extractor = extractor

    async def process_report(
        self,
        report_id: UUID,
        *,
        transcript_override: Optional[str] = None,
    ) -> None:
        """Run one processing attempt for ``report_id``.

        Raises ``ReportNotFoundError`` without touching the store when the
        record does not exist. ``transcript_override`` skips retrieval and
        transcription; it is meant for replays and deterministic testing.
        """

        report = await self._repository.get(report_id)
        started = time.perf_counter()
        logger.info(
            "Processing report=%s status=%s file_key=%s",
            report_id,
            report.status.value,
            report.file_key,
        )

        try:
            await self._repository.update_status(report_id, ReportStatus.PROCESSING)

            transcript = await self._obtain_transcript(report, transcript_override)
            transcript_logger.info("report=%s | text=%s", report_id, transcript)

            try:
                payload = await extract_structured_data(
                    self._extractor, transcript, report_id=report_id
                )
            except ReportProcessingError:
                raise
            except Exception as exc:
                raise ExtractionError(f"Extraction call failed: {exc}") from exc

            extracted: ExtractedReport = validate_extraction(payload)
            summary = render_summary(report.id, extracted, transcript)

            await self._repository.save_results(
                report_id,
                transcript_text=transcript,
                extracted=extracted.to_payload(),
                summary_text=summary,
            )
        except asyncio.CancelledError as exc:
            logger.warning("Report processing cancelled report=%s", report_id)
            # Shielded so a second cancel cannot leave the record in PROCESSING.
            await asyncio.shield(self._mark_failed(report_id, exc))
            observe_report(
                "cancelled",
                time.perf_counter() - started,
                failed_stage="cancelled",
            )
            raise
        except Exception as exc:
            stage = _failed_stage(exc)
            logger.error(
                "Report processing failed report=%s stage=%s: %s",
                report_id,
                stage,
                exc,
            )
            await self._mark_failed(report_id, exc)
            observe_report(
                "failed",
                time.perf_counter() - started,
                failed_stage=stage,
            )
            raise

        duration = time.perf_counter() - started
        observe_report("ready", duration)
        logger.info(
            "Report ready report=%s work=%s deliveries=%s delays=%s duration=%.2fs",
            report_id,
            len(extracted.work_performed),
            len(extracted.deliveries),
            len(extracted.delays),
            duration,
        )

    async def _obtain_transcript(
        self,
        report: ReportSnapshot,
        transcript_override: Optional[str],
    ) -> str:
        override = (transcript_override or "").strip()
        if override:
            logger.info("Using transcript override report=%s", report.id)
            return override

        try:
            audio_bytes = await self._audio_store.fetch(report.file_key)
        except ReportProcessingError:
            raise
        except Exception as exc:
            raise AudioRetrievalError(f"Audio fetch failed: {exc}") from exc

        content_type = resolve_content_type(report.file_key)
        filename = resolve_filename(report.file_key)
        try:
            transcript = await self._transcriber.transcribe(
                audio_bytes,
                content_type=content_type,
                filename=filename,
            )
        except ReportProcessingError:
            raise
        except Exception as exc:
            raise TranscriptionError(f"Transcription call failed: {exc}") from exc

        transcript = (transcript or "").strip()
        if not transcript:
            raise TranscriptionError("Transcription returned an empty transcript.")
        return transcript

    async def _mark_failed(self, report_id: UUID, exc: BaseException) -> None:
        try:
            await self._repository.update_status(
                report_id,
                ReportStatus.FAILED,
                last_error=_describe_failure(exc),
            )
        except Exception as secondary:
            logger.warning(
                "Could not mark report=%s FAILED (original error kept): %s",
                report_id,
                secondary,
            )


__all__ = ["ReportProcessor"]
