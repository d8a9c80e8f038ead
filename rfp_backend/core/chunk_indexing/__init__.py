"""
Chunk indexing pipeline.

Embeds one chunk per invocation into S3 Vectors and flags the parent document
as indexed once the final chunk lands.

Dependencies: boto3, langchain_aws, pydantic_settings, sqlalchemy
System role: Chunk indexing step of the document pipeline
"""

from .configs import ChunkIndexingSettings, get_chunk_indexing_settings
from .entrypoint import ChunkIndexingPipeline
from .models import IndexChunkResult, SkipReason

__all__ = [
    "ChunkIndexingPipeline",
    "ChunkIndexingSettings",
    "get_chunk_indexing_settings",
    "IndexChunkResult",
    "SkipReason",
]
