"""Thin Bedrock client wrapper for structured extraction calls."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any, Optional

from fastapi.concurrency import run_in_threadpool

from fieldreport.config.settings import BedrockConfig
from fieldreport.pipelines.report.errors import ExtractionError
from fieldreport.services.aws import create_boto3_client

logger = logging.getLogger(__name__)


class LlmInvocationError(ExtractionError):
    """Raised when the Bedrock invocation fails."""


def _decode_bedrock_api_key(secret_value: Optional[str]) -> tuple[str, str] | None:
    """Decode the BEDROCK_API_KEY secret into access/secret key components."""

    if not secret_value:
        return None

    try:
        decoded_bytes = base64.b64decode(secret_value.strip(), validate=True)
    except (binascii.Error, ValueError):
        decoded_bytes = secret_value.encode("utf-8", "ignore")

    filtered = "".join(chr(b) for b in decoded_bytes if 31 < b < 127)
    if ":" not in filtered:
        return None
    access_key, secret_key = filtered.split(":", 1)
    return access_key, secret_key


class BedrockLlmClient:
    """Invoke Amazon Bedrock models through the ``converse`` API."""

    def __init__(self, client: Any, config: BedrockConfig) -> None:
        self._client = client
        self._config = config

    @classmethod
    def from_config(
        cls,
        config: BedrockConfig,
        *,
        access_key: str | None = None,
        secret_key: str | None = None,
    ) -> "BedrockLlmClient":
        api_key_tuple = None
        if config.api_key:
            api_key_tuple = _decode_bedrock_api_key(config.api_key.get_secret_value())
        if api_key_tuple:
            access_key, secret_key = api_key_tuple

        client = create_boto3_client(
            "bedrock-runtime",
            region_name=config.region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
        )
        return cls(client, config)

    async def invoke(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
        top_p: float | None = None,
        model_id: str | None = None,
        response_prefix: str | None = None,
    ) -> str | None:
        """Run a Bedrock ``converse`` call and return the aggregate text output.

        A ``response_prefix`` is sent as a partial assistant turn, so the model
        continues from it; the prefix is restored on the returned text.
        """

        target_model_id = model_id or self._config.model_id
        inference_cfg = {
            "maxTokens": max_tokens or self._config.max_tokens,
            "temperature": (
                temperature
                if temperature is not None
                else self._config.temperature
            ),
            "topP": top_p if top_p is not None else self._config.top_p,
        }

        messages = [{"role": "user", "content": [{"text": user_prompt}]}]
        if response_prefix:
            messages.append({"role": "assistant", "content": [{"text": response_prefix}]})

        def _call() -> str:
            response = self._client.converse(
                modelId=target_model_id,
                system=[{"text": system_prompt}],
                messages=messages,
                inferenceConfig=inference_cfg,
            )
            content_blocks = (
                response.get("output", {})
                .get("message", {})
                .get("content", [])
            )
            texts = [block.get("text", "") for block in content_blocks if block.get("text")]
            return "\n".join(texts).strip()

        try:
            result = await run_in_threadpool(_call)
        except Exception as exc:
            raise LlmInvocationError(f"Bedrock converse failed: {exc}") from exc

        if not result:
            return None
        if response_prefix and not result.startswith(response_prefix):
            result = response_prefix + result
        return result


__all__ = ["BedrockLlmClient", "LlmInvocationError"]
