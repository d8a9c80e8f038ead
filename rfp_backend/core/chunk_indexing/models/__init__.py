"""
Models for the chunk indexing pipeline.

Exports: ChunkIndexingEvent, IndexChunkResult, SkipReason
"""

from .events import REQUIRED_EVENT_FIELDS, ChunkIndexingEvent
from .index_result import IndexChunkResult, SkipReason

__all__ = [
    "ChunkIndexingEvent",
    "REQUIRED_EVENT_FIELDS",
    "IndexChunkResult",
    "SkipReason",
]
