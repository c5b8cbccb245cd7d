"""Background hand-off for report processing.

The HTTP trigger never awaits the pipeline. It submits the report id here and
returns; completion is observable only through the record's status.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from .processor import ReportProcessor

logger = logging.getLogger("fieldreport.pipeline")


class ReportTaskRunner:
    """Spawn and supervise one asyncio task per processing attempt."""

    def __init__(self, processor: "ReportProcessor") -> None:
        self._processor = processor
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def submit(self, report_id: UUID) -> asyncio.Task[None]:
        """Start processing ``report_id`` in the background and return at once."""

        task = asyncio.create_task(
            self._processor.process_report(report_id),
            name=f"process-report-{report_id}",
        )
        # The event loop only keeps weak references to tasks.
        self._tasks.add(task)
        task.add_done_callback(lambda done: self._on_done(report_id, done))
        logger.info("Queued background processing report=%s", report_id)
        return task

    def _on_done(self, report_id: UUID, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning("Background processing cancelled report=%s", report_id)
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Background processing failed report=%s",
                report_id,
                exc_info=exc,
            )

    async def drain(self) -> None:
        """Wait for every in-flight attempt to finish."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


__all__ = ["ReportTaskRunner"]
