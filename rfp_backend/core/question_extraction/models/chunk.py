"""
Text chunk model for question extraction.

Dependencies: pydantic
System role: Ephemeral chunk produced by ChunkingTask
"""

from pydantic import BaseModel, Field


class TextChunk(BaseModel):
    """Bounded, possibly overlapping substring of a source document."""

    content: str = Field(description="Chunk text")
    ordinal: int = Field(ge=0, description="Zero-based position within the document")
    total_chunks: int = Field(ge=1, description="Number of chunks the document was split into")
