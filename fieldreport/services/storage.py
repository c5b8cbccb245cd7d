"""S3 helpers for reading raw field recordings."""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from fieldreport.config.settings import S3Config
from fieldreport.pipelines.report.errors import AudioRetrievalError
from fieldreport.services.aws import create_boto3_client

logger = logging.getLogger(__name__)

_MISSING_KEY_CODES = frozenset({"NoSuchKey", "404", "NotFound"})


class S3AudioStore:
    """Fetch raw audio bytes by storage key from an S3-compatible bucket."""

    def __init__(self, client: Any, bucket: str) -> None:
        if not bucket:
            raise ValueError("S3 bucket name is not configured.")
        self._client = client
        self._bucket = bucket

    @classmethod
    def from_config(cls, config: S3Config) -> "S3AudioStore":
        client = create_boto3_client(
            "s3",
            region_name=config.region,
            aws_access_key_id=config.access_key,
            aws_secret_access_key=config.secret_key,
            endpoint_url=config.endpoint_url,
        )
        return cls(client, config.bucket_name)

    async def fetch(self, key: str) -> bytes:
        """Return the object body for ``key``."""

        try:
            response = await run_in_threadpool(
                self._client.get_object,
                Bucket=self._bucket,
                Key=key,
            )
        except ClientError as exc:
            code = str(exc.response.get("Error", {}).get("Code", ""))
            if code in _MISSING_KEY_CODES:
                raise AudioRetrievalError(
                    f"Audio object not found for key: {key}"
                ) from exc
            raise AudioRetrievalError(f"Failed to fetch audio {key}: {exc}") from exc
        except BotoCoreError as exc:
            raise AudioRetrievalError(f"Failed to fetch audio {key}: {exc}") from exc

        body = response.get("Body") if isinstance(response, dict) else None
        if body is None:
            raise AudioRetrievalError(f"No body returned from storage for key: {key}")
        if not hasattr(body, "read"):
            raise AudioRetrievalError("Unsupported storage response body type.")

        try:
            data = await run_in_threadpool(body.read)
        except (BotoCoreError, OSError) as exc:
            raise AudioRetrievalError(f"Failed to read audio {key}: {exc}") from exc
        finally:
            close = getattr(body, "close", None)
            if close is not None:
                close()

        logger.debug("Fetched %s bytes for key=%s", len(data), key)
        return bytes(data)


__all__ = ["S3AudioStore"]
