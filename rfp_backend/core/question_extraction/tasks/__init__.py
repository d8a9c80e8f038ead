"""
Task modules for the question extraction pipeline.

Exports: ChunkingTask, ExtractionTask, MergingTask, PersistingTask
"""

from .chunking_task import ChunkingTask, split_text
from .extraction_task import ExtractionTask
from .merging_task import MergingTask, merge_sections
from .persisting_task import PersistingTask, normalize_question_text, question_hash

__all__ = [
    "ChunkingTask",
    "split_text",
    "ExtractionTask",
    "MergingTask",
    "merge_sections",
    "PersistingTask",
    "normalize_question_text",
    "question_hash",
]
