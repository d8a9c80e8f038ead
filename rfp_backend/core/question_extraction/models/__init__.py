"""
Models for the question extraction pipeline.

Exports: TextChunk, ExtractedQuestionCandidate, ExtractedSection, MergedSection,
ChunkExtraction, RequiredStatus, QuestionRecord, WriteOutcome, PersistResult,
ExtractionRunResult, ExtractQuestionsEvent
"""

from .chunk import TextChunk
from .events import ExtractQuestionsEvent
from .extraction import (
    ChunkExtraction,
    ExtractedQuestionCandidate,
    ExtractedSection,
    MergedSection,
    RequiredStatus,
)
from .pipeline_result import ExtractionRunResult, PersistResult
from .question_record import QuestionRecord, WriteOutcome

__all__ = [
    "TextChunk",
    "ExtractedQuestionCandidate",
    "ExtractedSection",
    "MergedSection",
    "ChunkExtraction",
    "RequiredStatus",
    "QuestionRecord",
    "WriteOutcome",
    "PersistResult",
    "ExtractionRunResult",
    "ExtractQuestionsEvent",
]
