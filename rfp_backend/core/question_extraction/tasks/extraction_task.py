"""
Bedrock question extraction task.

Sends one chunk to an Anthropic model on Bedrock and turns the response
envelope into validated sections. Every failure is raised as an
ExtractionError tagged with its ErrorKind and the chunk ordinal, so the
pipeline can isolate it.

Dependencies: pydantic, rfp_backend.boundary.aws
System role: Second stage of question extraction
"""

import json
import logging

from pydantic import ValidationError

from rfp_backend.boundary.aws import BedrockRuntimeClient
from rfp_backend.core.exceptions import ErrorKind, ExtractionError
from rfp_backend.observability.log_utils import safe_log_value

from ..json_extractor import extract_json_object
from ..models import ChunkExtraction, TextChunk
from ..prompts import SYSTEM_PROMPT, build_user_prompt

logger = logging.getLogger(__name__)

TRUNCATED_STOP_REASON = "max_tokens"


class ExtractionTask:
    """Extract structured candidate questions from a chunk."""

    def __init__(
        self,
        llm_client: BedrockRuntimeClient,
        model_id: str,
        max_tokens: int = 32768,
        temperature: float = 0.1,
        anthropic_version: str = "bedrock-2023-05-31",
    ) -> None:
        """
        Initialize extraction task.

        Args:
            llm_client: Bedrock transport
            model_id: Bedrock model ID
            max_tokens: Output token bound per call
            temperature: Sampling temperature
            anthropic_version: Messages API version string

        Raises:
            ValueError: When model_id is empty
        """
        if not model_id:
            raise ValueError("model_id cannot be empty")

        self._llm_client = llm_client
        self._model_id = model_id
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._anthropic_version = anthropic_version

    def build_request_body(self, chunk: TextChunk) -> str:
        """Serialize the InvokeModel request for a chunk."""
        body = {
            "anthropic_version": self._anthropic_version,
            "system": SYSTEM_PROMPT,
            "messages": [
                {
                    "role": "user",
                    "content": build_user_prompt(chunk.content, chunk.ordinal, chunk.total_chunks),
                }
            ],
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
        }
        return json.dumps(body)

    async def extract(self, chunk: TextChunk) -> ChunkExtraction:
        """
        Run extraction for one chunk.

        Args:
            chunk: Chunk to analyze

        Returns:
            ChunkExtraction: Validated sections

        Raises:
            ExtractionError: Malformed envelope, empty output, or schema violation
            ModelInvocationError: Transport failure
        """
        response_body = await self._llm_client.invoke(self._model_id, self.build_request_body(chunk))
        return self.parse_response(response_body, chunk.ordinal)

    def parse_response(self, response_body: bytes, chunk_ordinal: int | None = None) -> ChunkExtraction:
        """
        Decode a Bedrock envelope into sections.

        Args:
            response_body: Raw InvokeModel response body
            chunk_ordinal: Chunk ordinal for error context

        Returns:
            ChunkExtraction: Validated sections

        Raises:
            ExtractionError: On any decoding or validation failure
        """
        try:
            envelope = json.loads(response_body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(
                "parse_response - Bad response JSON from Bedrock: %s",
                safe_log_value(response_body, 2000),
            )
            raise ExtractionError(
                ErrorKind.INVALID_ENVELOPE, "Invalid JSON envelope from Bedrock", chunk_ordinal
            ) from e

        if not isinstance(envelope, dict):
            raise ExtractionError(
                ErrorKind.INVALID_ENVELOPE, "Bedrock envelope is not a JSON object", chunk_ordinal
            )

        logger.debug("parse_response - Bedrock envelope: %s", safe_log_value(json.dumps(envelope), 2000))

        stop_reason = envelope.get("stop_reason") or envelope.get("stopReason")
        logger.info(
            "parse_response - stop_reason=%s usage=%s",
            stop_reason,
            envelope.get("usage"),
            extra={"chunk_ordinal": chunk_ordinal},
        )
        if stop_reason == TRUNCATED_STOP_REASON:
            logger.warning(
                "parse_response - Response was truncated, consider smaller chunks",
                extra={"chunk_ordinal": chunk_ordinal},
            )

        assistant_text = self._assistant_text(envelope)
        if not assistant_text:
            raise ExtractionError(
                ErrorKind.EMPTY_MODEL_OUTPUT, "Model returned no text content", chunk_ordinal
            )

        parsed = extract_json_object(assistant_text)
        if parsed is None:
            raise ExtractionError(
                ErrorKind.SCHEMA_VIOLATION,
                "Model output contains no complete JSON object",
                chunk_ordinal,
                {"stop_reason": stop_reason},
            )

        sections = parsed.get("sections")
        if not isinstance(sections, list):
            raise ExtractionError(
                ErrorKind.SCHEMA_VIOLATION, "Response missing required sections[]", chunk_ordinal
            )

        try:
            return ChunkExtraction.model_validate({"sections": sections})
        except ValidationError as e:
            raise ExtractionError(
                ErrorKind.SCHEMA_VIOLATION,
                f"Response sections failed validation: {e.error_count()} errors",
                chunk_ordinal,
            ) from e

    @staticmethod
    def _assistant_text(envelope: dict) -> str | None:
        content = envelope.get("content")
        if not isinstance(content, list) or not content:
            return None
        first = content[0]
        if not isinstance(first, dict):
            return None
        text = first.get("text")
        if not isinstance(text, str) or not text.strip():
            return None
        return text
