"""Process-wide service wiring.

Clients are created once here, from explicit configuration, and handed to the
FastAPI app through its lifespan. Nothing else in the package builds an AWS or
database client on its own.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from fieldreport.database import create_engine, create_session_factory, dispose_engine, init_models
from fieldreport.pipelines.report import ReportProcessor, ReportTaskRunner
from fieldreport.services import (
    BedrockLlmClient,
    ReportRepository,
    S3AudioStore,
    SqlAlchemyReportRepository,
    TranscribeService,
)

from .settings import Settings


@dataclass
class ReportServices:
    """Everything the HTTP layer needs to look up and process reports."""

    repository: ReportRepository
    processor: ReportProcessor
    runner: ReportTaskRunner
    engine: Optional[AsyncEngine] = None

    async def startup(self) -> None:
        if self.engine is not None:
            await init_models(self.engine)

    async def shutdown(self) -> None:
        await self.runner.drain()
        if self.engine is not None:
            await dispose_engine(self.engine)


def build_services(settings: Settings) -> ReportServices:
    """Construct the production adapters, processor and task runner."""

    engine = create_engine(settings)
    repository = SqlAlchemyReportRepository(create_session_factory(engine))
    processor = ReportProcessor(
        repository=repository,
        audio_store=S3AudioStore.from_config(settings.s3),
        transcriber=TranscribeService(
            settings.transcribe,
            access_key=settings.s3.access_key,
            secret_key=settings.s3.secret_key,
        ),
        extractor=BedrockLlmClient.from_config(
            settings.bedrock,
            access_key=settings.s3.access_key,
            secret_key=settings.s3.secret_key,
        ),
    )
    return ReportServices(
        repository=repository,
        processor=processor,
        runner=ReportTaskRunner(processor),
        engine=engine,
    )


__all__ = ["ReportServices", "build_services"]
