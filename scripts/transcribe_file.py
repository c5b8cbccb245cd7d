import asyncio
import os
import sys

from fieldreport.config.settings import settings
from fieldreport.pipelines.report import (
    TranscriptionError,
    resolve_content_type,
    resolve_filename,
)
from fieldreport.services import TranscribeService


async def main():
    if len(sys.argv) < 2:
        print("Usage: python scripts/transcribe_file.py path/to/recording.webm")
        return 1

    file_path = sys.argv[1]
    if not os.path.exists(file_path):
        print(f"File '{file_path}' not found.")
        return 1

    with open(file_path, "rb") as f:
        audio_bytes = f.read()

    service = TranscribeService(
        settings.transcribe,
        access_key=settings.s3.access_key,
        secret_key=settings.s3.secret_key,
    )
    content_type = resolve_content_type(file_path)
    print(f"Transcribing {len(audio_bytes)} bytes ({content_type}) with Amazon Transcribe Streaming...")
    try:
        transcript = await service.transcribe(
            audio_bytes,
            content_type=content_type,
            filename=resolve_filename(file_path),
        )
    except TranscriptionError as e:
        print(f"\nTranscription Error: {e}")
        return 1

    print("\n--- Transcript Result ---")
    print(transcript or "<empty>")
    print("-------------------------")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
