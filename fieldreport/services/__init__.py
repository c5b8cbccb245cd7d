"""Service layer helpers for external integrations."""

from .llm_client import BedrockLlmClient, LlmInvocationError
from .report_repository import ReportRepository, SqlAlchemyReportRepository
from .storage import S3AudioStore
from .transcribe import TranscribeService

__all__ = [
    "BedrockLlmClient",
    "LlmInvocationError",
    "ReportRepository",
    "S3AudioStore",
    "SqlAlchemyReportRepository",
    "TranscribeService",
]
