"""Amazon Transcribe integration helpers using Streaming API."""

from __future__ import annotations

import asyncio
import logging
import os
import subprocess
import tempfile
from pathlib import PurePosixPath

from amazon_transcribe.auth import StaticCredentialResolver
from amazon_transcribe.client import TranscribeStreamingClient
from amazon_transcribe.handlers import TranscriptResultStreamHandler
from amazon_transcribe.model import TranscriptEvent
from fastapi.concurrency import run_in_threadpool

from fieldreport.config.settings import TranscribeConfig
from fieldreport.pipelines.report.errors import TranscriptionError

logger = logging.getLogger(__name__)


class TranscribeService:
    """High-level facade for streaming field recordings to Amazon Transcribe."""

    def __init__(
        self,
        config: TranscribeConfig,
        *,
        access_key: str | None = None,
        secret_key: str | None = None,
    ) -> None:
        self._language_code = config.language_code
        self._media_sample_rate_hz = config.media_sample_rate_hz
        self._media_encoding = config.media_encoding
        self._chunk_size = config.chunk_size

        resolver = None
        if access_key and secret_key:
            resolver = StaticCredentialResolver(
                access_key_id=access_key,
                secret_access_key=secret_key,
            )
        self._client = TranscribeStreamingClient(
            region=config.region,
            credential_resolver=resolver,
        )

    async def transcribe(
        self,
        audio_bytes: bytes,
        *,
        content_type: str,
        filename: str,
    ) -> str:
        """Stream audio to Transcribe and return the best-effort transcript."""

        if not audio_bytes:
            raise TranscriptionError("The recorded audio file is empty.")

        logger.info(
            "Transcribing %s bytes content_type=%s filename=%s",
            len(audio_bytes),
            content_type,
            filename,
        )

        # Convert to PCM via ffmpeg
        try:
            pcm_data = await run_in_threadpool(
                self._convert_to_pcm_sync, audio_bytes, filename
            )
        except TranscriptionError:
            raise
        except Exception as exc:
            raise TranscriptionError(f"Audio conversion failed: {exc}") from exc

        try:
            stream = await self._client.start_stream_transcription(
                language_code=self._language_code,
                media_sample_rate_hz=self._media_sample_rate_hz,
                media_encoding=self._media_encoding,
            )
        except Exception as exc:
            raise TranscriptionError(f"Could not open transcription stream: {exc}") from exc

        handler = _SimpleTranscriptHandler(stream.output_stream)

        async def write_chunks() -> None:
            chunk_size = self._chunk_size
            bytes_per_sec = self._media_sample_rate_hz * 2  # 16-bit = 2 bytes
            sleep_time = chunk_size / bytes_per_sec

            logger.debug(
                "Starting stream. Total bytes: %s. Chunk size: %s. Sleep: %.4fs",
                len(pcm_data),
                chunk_size,
                sleep_time,
            )
            for i in range(0, len(pcm_data), chunk_size):
                await stream.input_stream.send_audio_event(
                    audio_chunk=pcm_data[i : i + chunk_size]
                )
                # Transcribe expects audio no faster than real time.
                await asyncio.sleep(sleep_time)

            await stream.input_stream.end_stream()

        try:
            await asyncio.gather(write_chunks(), handler.handle_events())
        except Exception as exc:
            logger.error("Streaming loop failed: %s", exc)
            raise TranscriptionError(f"Streaming transcription failed: {exc}") from exc

        transcript = handler.transcript.strip()
        logger.info("Transcription complete. Length: %s", len(transcript))
        return transcript

    def _convert_to_pcm_sync(self, audio_bytes: bytes, filename: str) -> bytes:
        """Convert to raw PCM s16le using a temporary file so ffmpeg can seek."""

        suffix = PurePosixPath(filename).suffix or ".tmp"
        with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp_file:
            tmp_file.write(audio_bytes)
            tmp_path = tmp_file.name

        try:
            process = subprocess.run(
                [
                    "ffmpeg",
                    "-y",
                    "-i", tmp_path,
                    "-f", "s16le",
                    "-ac", "1",
                    "-ar", str(self._media_sample_rate_hz),
                    "pipe:1",
                ],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True,
            )
            if not process.stdout:
                logger.warning(
                    "ffmpeg produced empty output. stderr: %s",
                    process.stderr.decode("utf-8", errors="replace"),
                )
            return process.stdout
        except subprocess.CalledProcessError as exc:
            error_msg = exc.stderr.decode("utf-8", errors="replace") if exc.stderr else "No stderr"
            logger.error("ffmpeg failed. stderr: %s", error_msg)
            raise TranscriptionError(f"ffmpeg failed to convert audio to PCM: {error_msg}") from exc
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)


class _SimpleTranscriptHandler(TranscriptResultStreamHandler):
    def __init__(self, transcript_result_stream):
        super().__init__(transcript_result_stream)
        self.transcript = ""

    async def handle_transcript_event(self, transcript_event: TranscriptEvent):
        for result in transcript_event.transcript.results:
            if result.is_partial or not result.alternatives:
                continue
            self.transcript += result.alternatives[0].transcript + " "


__all__ = ["TranscribeService"]
