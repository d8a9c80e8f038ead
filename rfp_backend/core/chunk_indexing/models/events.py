"""
Chunk indexing event schema.

Upstream producers do not always send well-typed payloads: `text` may arrive
as null, a number, a list or an object, and the counters may be missing.
Such values are accepted and treated as absent rather than rejected.

Dependencies: pydantic
System role: Input contract for the indexing Lambda
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

REQUIRED_EVENT_FIELDS = ("orgId", "documentId", "chunkKey")


def _as_count(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


class ChunkIndexingEvent(BaseModel):
    """One chunk fanned out by the document pipeline."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    org_id: str = Field(alias="orgId")
    document_id: str = Field(alias="documentId")
    chunk_key: str = Field(alias="chunkKey")
    knowledge_base_id: str | None = Field(default=None, alias="knowledgeBaseId")
    bucket: str | None = None
    text: Any = None
    index: int | None = Field(default=None, description="Chunks completed so far (not a position)")
    total_chunks: int | None = Field(default=None, alias="totalChunks")

    @field_validator("index", "total_chunks", mode="before")
    @classmethod
    def _coerce_count(cls, value: Any) -> int | None:
        return _as_count(value)

    @field_validator("knowledge_base_id", "bucket", mode="before")
    @classmethod
    def _coerce_optional_str(cls, value: Any) -> str | None:
        return value if isinstance(value, str) and value else None

    @property
    def inline_text(self) -> str | None:
        """Inline chunk text when it is a non-blank string, else None."""
        if isinstance(self.text, str) and self.text.strip():
            return self.text
        return None

    @property
    def is_final_chunk(self) -> bool:
        """True only when both counters are present and equal."""
        if self.index is None or self.total_chunks is None:
            return False
        return self.index == self.total_chunks
