"""
Bedrock runtime transport.

Invokes a model with a raw JSON request body and returns the raw response
bytes; envelope decoding is the caller's job. Throttling is retried with
exponential backoff and jitter.

Dependencies: boto3, tenacity
System role: LLM transport boundary
"""

import asyncio
import logging

import boto3
from botocore.exceptions import ClientError
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from rfp_backend.core.exceptions import ModelInvocationError

logger = logging.getLogger(__name__)

THROTTLING_CODES = frozenset(
    {
        "ThrottlingException",
        "TooManyRequestsException",
        "ServiceUnavailableException",
        "ModelNotReadyException",
    }
)


def _is_throttling(exc: BaseException) -> bool:
    if not isinstance(exc, ClientError):
        return False
    return exc.response.get("Error", {}).get("Code", "") in THROTTLING_CODES


class BedrockRuntimeClient:
    """Thin wrapper over bedrock-runtime InvokeModel."""

    def __init__(self, region: str = "us-east-1", client=None) -> None:
        """
        Initialize Bedrock runtime client.

        Args:
            region: AWS region for Bedrock
            client: Optional preconfigured boto3 bedrock-runtime client
        """
        self._region = region
        self._client = client or boto3.client("bedrock-runtime", region_name=region)

    @retry(
        retry=retry_if_exception(_is_throttling),
        stop=stop_after_attempt(5),
        wait=wait_exponential_jitter(initial=1, max=30, jitter=5),
        before_sleep=lambda retry_state: logger.warning(
            "invoke_model - Retry %d/5 after throttling", retry_state.attempt_number
        ),
        reraise=True,
    )
    def _invoke_with_retry(self, model_id: str, body: str) -> bytes:
        response = self._client.invoke_model(
            modelId=model_id,
            body=body,
            contentType="application/json",
            accept="application/json",
        )
        return response["body"].read()

    def invoke_model(self, model_id: str, body: str) -> bytes:
        """
        Invoke a model synchronously.

        Args:
            model_id: Bedrock model ID
            body: JSON request body

        Returns:
            bytes: Raw response envelope

        Raises:
            ModelInvocationError: Transport failure after retries
        """
        try:
            return self._invoke_with_retry(model_id, body)
        except ClientError as e:
            raise ModelInvocationError(f"Bedrock InvokeModel failed: {e}", model_id) from e

    async def invoke(self, model_id: str, body: str) -> bytes:
        """Async wrapper around invoke_model."""
        return await asyncio.to_thread(self.invoke_model, model_id, body)
