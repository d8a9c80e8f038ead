"""
Persisted question record.

Identity is (project_id, question_hash); question_id equals question_hash.

Dependencies: pydantic
System role: Row shape for the questions table
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class WriteOutcome(str, Enum):
    """Result of a conditional question insert."""

    INSERTED = "inserted"
    DUPLICATE = "duplicate"


class QuestionRecord(BaseModel):
    """Deduplicated vendor-facing question stored once per project."""

    project_id: str
    opportunity_id: str
    question_file_id: str
    question_id: str = Field(description="Same value as question_hash")
    question_hash: str = Field(description="SHA-256 hex of the normalized text")
    section_id: str
    section_title: str
    section_description: str | None = None
    question_original_text: str
    question_normalized: str
    created_at: datetime
    updated_at: datetime
