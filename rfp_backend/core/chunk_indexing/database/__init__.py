"""
Storage access for the chunk indexing pipeline.

Exports: DocumentRepository
"""

from .document_repository import DocumentRepository

__all__ = ["DocumentRepository"]
