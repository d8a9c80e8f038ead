"""
Task modules for the chunk indexing pipeline.

Exports: ChunkTextResolverTask, VectorStoreTask
"""

from .text_resolver_task import ChunkTextResolverTask
from .vector_store_task import VectorStoreTask

__all__ = ["ChunkTextResolverTask", "VectorStoreTask"]
