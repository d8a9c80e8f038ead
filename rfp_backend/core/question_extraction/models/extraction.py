"""
Structured extraction output models.

The model answers in camelCase JSON with the question text under "question";
fields are aliased so both that shape and snake_case construction validate.
Optional fields are tolerant: a malformed value becomes the documented
default instead of failing the whole chunk.

Dependencies: pydantic
System role: Contract between ExtractionTask, MergingTask and PersistingTask
"""

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class RequiredStatus(str, Enum):
    """Whether the solicitation requires a response to the item."""

    REQUIRED = "required"
    OPTIONAL = "optional"
    UNKNOWN = "unknown"


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


class ExtractedQuestionCandidate(BaseModel):
    """One vendor-facing requirement extracted from a chunk."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    question_text: str = Field(
        default="",
        validation_alias=AliasChoices("question", "questionText", "question_text"),
    )
    type: str = Field(default="")
    is_explicit_question: bool = Field(
        default=False,
        validation_alias=AliasChoices("isExplicitQuestion", "is_explicit_question"),
    )
    is_required: RequiredStatus = Field(
        default=RequiredStatus.UNKNOWN,
        validation_alias=AliasChoices("isRequired", "is_required"),
    )
    deliverable: str = Field(default="")
    response_format: str = Field(
        default="",
        validation_alias=AliasChoices("responseFormat", "response_format"),
    )
    constraints: list[str] = Field(default_factory=list)

    @field_validator("question_text", "type", "deliverable", "response_format", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("is_explicit_question", mode="before")
    @classmethod
    def _coerce_explicit(cls, value: Any) -> bool:
        return value is True

    @field_validator("is_required", mode="before")
    @classmethod
    def _coerce_required(cls, value: Any) -> RequiredStatus:
        # Anything other than an explicit required/optional is reported as unknown
        if isinstance(value, RequiredStatus):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized == RequiredStatus.REQUIRED.value:
                return RequiredStatus.REQUIRED
            if normalized == RequiredStatus.OPTIONAL.value:
                return RequiredStatus.OPTIONAL
        return RequiredStatus.UNKNOWN

    @field_validator("constraints", mode="before")
    @classmethod
    def _coerce_constraints(cls, value: Any) -> list[str]:
        if isinstance(value, str):
            return [value] if value.strip() else []
        if not isinstance(value, list):
            return []
        return [text for text in (_as_text(item) for item in value) if text]


class ExtractedSection(BaseModel):
    """A titled group of candidate questions from one chunk."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str
    description: str | None = None
    location_hint: str | None = Field(
        default=None,
        validation_alias=AliasChoices("locationHint", "location_hint"),
    )
    questions: list[ExtractedQuestionCandidate] = Field(default_factory=list)

    @field_validator("description", "location_hint", mode="before")
    @classmethod
    def _coerce_optional_text(cls, value: Any) -> str | None:
        if value is None:
            return None
        return _as_text(value)

    @field_validator("questions", mode="before")
    @classmethod
    def _coerce_questions(cls, value: Any) -> list:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, (dict, ExtractedQuestionCandidate))]

    @property
    def merge_key(self) -> str:
        return self.title.strip().lower()


class MergedSection(ExtractedSection):
    """Section combined across chunks with deduplicated questions."""


class ChunkExtraction(BaseModel):
    """Validated extraction output for a single chunk."""

    sections: list[ExtractedSection] = Field(default_factory=list)
