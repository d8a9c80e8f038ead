"""
Result models for the question extraction pipeline.

Dependencies: pydantic
System role: Return types for PersistingTask and QuestionExtractionPipeline
"""

from pydantic import BaseModel, Field


class PersistResult(BaseModel):
    """Counts reported by the persister."""

    inserted: int = Field(default=0, ge=0)
    skipped_duplicates: int = Field(default=0, ge=0)


class ExtractionRunResult(BaseModel):
    """Outcome of one extraction run."""

    count: int = Field(default=0, ge=0, description="Questions inserted by this run")
    cancelled: bool = False
    chunk_count: int = Field(default=0, ge=0)
    failed_chunks: list[int] = Field(default_factory=list, description="Ordinals of chunks that failed")
    skipped_duplicates: int = Field(default=0, ge=0)

    def to_response(self) -> dict:
        """Payload returned to the orchestrator."""
        return {"count": self.count, "cancelled": self.cancelled}
