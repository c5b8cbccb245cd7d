import asyncio
import io

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from fieldreport.pipelines.report import AudioRetrievalError
from fieldreport.services import S3AudioStore


class StubS3Client:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get_object(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


class ClosingBody(io.BytesIO):
    closed_by_store = False

    def close(self):
        self.closed_by_store = True
        super().close()


def client_error(code):
    return ClientError({"Error": {"Code": code, "Message": "boom"}}, "GetObject")


def test_fetch_returns_body_bytes_and_closes_stream():
    body = ClosingBody(b"RIFF....WAVE")
    client = StubS3Client(response={"Body": body})
    store = S3AudioStore(client, "field-audio")

    data = asyncio.run(store.fetch("audio/2026-02-12/walk.wav"))

    assert data == b"RIFF....WAVE"
    assert body.closed_by_store
    assert client.calls == [{"Bucket": "field-audio", "Key": "audio/2026-02-12/walk.wav"}]


@pytest.mark.parametrize("code", ["NoSuchKey", "404", "NotFound"])
def test_missing_object_is_reported_by_key(code):
    store = S3AudioStore(StubS3Client(error=client_error(code)), "field-audio")

    with pytest.raises(AudioRetrievalError, match="not found for key: audio/missing.webm"):
        asyncio.run(store.fetch("audio/missing.webm"))


def test_access_denied_is_retrieval_error():
    store = S3AudioStore(StubS3Client(error=client_error("AccessDenied")), "field-audio")

    with pytest.raises(AudioRetrievalError, match="Failed to fetch audio"):
        asyncio.run(store.fetch("audio/walk.webm"))


def test_transport_error_is_retrieval_error():
    error = EndpointConnectionError(endpoint_url="https://r2.example.com")
    store = S3AudioStore(StubS3Client(error=error), "field-audio")

    with pytest.raises(AudioRetrievalError):
        asyncio.run(store.fetch("audio/walk.webm"))


def test_response_without_body_fails():
    store = S3AudioStore(StubS3Client(response={"ContentLength": 0}), "field-audio")

    with pytest.raises(AudioRetrievalError, match="No body returned"):
        asyncio.run(store.fetch("audio/walk.webm"))


def test_unreadable_body_fails():
    store = S3AudioStore(StubS3Client(response={"Body": b"raw-bytes"}), "field-audio")

    with pytest.raises(AudioRetrievalError, match="Unsupported storage response body type"):
        asyncio.run(store.fetch("audio/walk.webm"))


def test_bucket_is_required():
    with pytest.raises(ValueError):
        S3AudioStore(StubS3Client(), "")
