"""Audio ingestion helpers (Stage 02 of the report pipeline)."""

from __future__ import annotations

from typing import Final

DEFAULT_CONTENT_TYPE: Final[str] = "audio/webm"
DEFAULT_FILENAME: Final[str] = "report.webm"

_CONTENT_TYPES_BY_EXTENSION: Final[dict[str, str]] = {
    ".mp3": "audio/mpeg",
    ".mpeg": "audio/mpeg",
    ".wav": "audio/wav",
    ".m4a": "audio/mp4",
    ".ogg": "audio/ogg",
    ".webm": "audio/webm",
}


def resolve_content_type(file_key: str) -> str:
    """Infer the recording's mime type from the storage key's extension."""

    lower = file_key.lower()
    for extension, content_type in _CONTENT_TYPES_BY_EXTENSION.items():
        if lower.endswith(extension):
            return content_type
    return DEFAULT_CONTENT_TYPE


def resolve_filename(file_key: str) -> str:
    """Return the last path segment of the key as a filename hint."""

    return file_key.rsplit("/", 1)[-1] or DEFAULT_FILENAME


__all__ = [
    "DEFAULT_CONTENT_TYPE",
    "DEFAULT_FILENAME",
    "resolve_content_type",
    "resolve_filename",
]
