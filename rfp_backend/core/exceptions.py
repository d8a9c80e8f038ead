"""
Exception hierarchy for the RFP processing pipelines.

Fatal errors carry enough context (field names, chunk ordinal, storage key)
for the orchestrator to decide whether to retry the whole unit of work.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across both pipelines
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Machine-readable failure categories."""

    INVALID_ENVELOPE = "InvalidEnvelope"
    EMPTY_MODEL_OUTPUT = "EmptyModelOutput"
    SCHEMA_VIOLATION = "SchemaViolation"
    EMPTY_CHUNK_SOURCE = "EmptyChunkSource"
    MISSING_FIELDS = "MissingFields"


class RfpPipelineException(Exception):
    """Base exception for all pipeline errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class MissingFieldsError(RfpPipelineException):
    """Raised when a pipeline event lacks required fields."""

    kind = ErrorKind.MISSING_FIELDS

    def __init__(self, missing: list[str], received: dict[str, Any] | None = None) -> None:
        """
        Initialize missing fields error.

        Args:
            missing: Names of the absent fields, in declaration order
            received: Values actually received for the required fields
        """
        self.missing = list(missing)
        received = received or {}
        received_str = ", ".join(f"{key}={received.get(key)!r}" for key in received)
        message = f"Missing required fields: {', '.join(self.missing)}."
        if received_str:
            message = f"{message} Received: {received_str}"
        super().__init__(message, {"missing_fields": self.missing})


class ExtractionError(RfpPipelineException):
    """Raised when question extraction fails for a single chunk."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        chunk_ordinal: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize extraction error.

        Args:
            kind: Failure category
            message: Error message
            chunk_ordinal: Zero-based ordinal of the failing chunk
            details: Additional context
        """
        self.kind = kind
        self.chunk_ordinal = chunk_ordinal
        details = details or {}
        details["kind"] = kind.value
        if chunk_ordinal is not None:
            details["chunk_ordinal"] = chunk_ordinal
        super().__init__(message, details)


class ModelInvocationError(RfpPipelineException):
    """Raised when the Bedrock runtime call itself fails."""

    def __init__(self, message: str, model_id: str | None = None) -> None:
        details = {"model_id": model_id} if model_id else {}
        super().__init__(message, details)


class ChunkSourceError(RfpPipelineException):
    """Raised when text cannot be loaded from object storage."""

    def __init__(
        self,
        message: str,
        bucket: str | None = None,
        key: str | None = None,
        kind: ErrorKind = ErrorKind.EMPTY_CHUNK_SOURCE,
    ) -> None:
        """
        Initialize chunk source error.

        Args:
            message: Error message
            bucket: S3 bucket that was read
            key: S3 object key that was read
            kind: Failure category
        """
        self.kind = kind
        self.bucket = bucket
        self.key = key
        details: dict[str, Any] = {"kind": kind.value}
        if bucket:
            details["bucket"] = bucket
        if key:
            details["key"] = key
        super().__init__(message, details)


class QuestionPersistenceError(RfpPipelineException):
    """Raised when a question write fails for a reason other than a duplicate."""

    def __init__(
        self,
        message: str,
        project_id: str | None = None,
        question_hash: str | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if project_id:
            details["project_id"] = project_id
        if question_hash:
            details["question_hash"] = question_hash
        super().__init__(message, details)


class VectorStoreError(RfpPipelineException):
    """Raised when vector store operations fail."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize vector store error.

        Args:
            message: Error message
            operation: Operation that failed (upsert, delete)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)
