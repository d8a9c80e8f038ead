"""
Chunk indexing result model.

Dependencies: pydantic
System role: Return type for ChunkIndexingPipeline.index()
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SkipReason(str, Enum):
    """Why a chunk was acknowledged without being indexed."""

    DOCUMENT_DELETED = "document_deleted"


class IndexChunkResult(BaseModel):
    """Outcome of indexing one chunk."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    skipped: bool = False
    skip_reason: SkipReason | None = Field(default=None, alias="skipReason")
    document_id: str = Field(alias="documentId")
    chunk_key: str = Field(alias="chunkKey")
    vector_index: str = Field(alias="vectorIndex")
    vector_id: str | None = Field(default=None, alias="vectorId")
    marked_indexed: bool = Field(default=False, alias="markedIndexed")

    def to_response(self) -> dict:
        """Camel-cased payload returned to the orchestrator."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
