"""
Chunk indexing pipeline orchestrator.

Runs one chunk event through: existence check -> resolve text -> embed and
upsert -> completion check. A document deleted while its chunks are still
fanned out is acknowledged as skipped without touching the vector store.

Dependencies: tasks, database, boundary.aws
System role: Pipeline orchestration (coordinates only)
"""

import logging
import time
from typing import Any, Mapping

from sqlalchemy.ext.asyncio import async_sessionmaker

from rfp_backend.boundary.aws import S3TextClient
from rfp_backend.core.lambda_utils import require_fields

from .configs import ChunkIndexingSettings, get_chunk_indexing_settings
from .database import DocumentRepository
from .models import REQUIRED_EVENT_FIELDS, ChunkIndexingEvent, IndexChunkResult, SkipReason
from .tasks import ChunkTextResolverTask, VectorStoreTask

logger = logging.getLogger(__name__)


class ChunkIndexingPipeline:
    """Index a single document chunk into S3 Vectors."""

    def __init__(
        self,
        document_repository: DocumentRepository,
        text_resolver: ChunkTextResolverTask,
        vector_store_task: VectorStoreTask,
    ) -> None:
        self._documents = document_repository
        self._text_resolver = text_resolver
        self._vector_store_task = vector_store_task

    @classmethod
    def from_settings(
        cls,
        session_factory: async_sessionmaker,
        settings: ChunkIndexingSettings | None = None,
        text_client: S3TextClient | None = None,
        vector_store_task: VectorStoreTask | None = None,
    ) -> "ChunkIndexingPipeline":
        """
        Build a pipeline from configuration.

        Args:
            session_factory: Database session factory for this invocation
            settings: Indexing settings (uses environment if None)
            text_client: Reusable S3 client (created if None)
            vector_store_task: Reusable vector store task (created if None)

        Returns:
            ChunkIndexingPipeline: Ready-to-run pipeline
        """
        settings = settings or get_chunk_indexing_settings()
        text_client = text_client or S3TextClient(settings.documents_bucket, settings.region)
        vector_store_task = vector_store_task or VectorStoreTask(
            vectors_bucket=settings.vectors_bucket,
            index_name=settings.vectors_index,
            region=settings.region,
            embedding_region=settings.embedding_region,
            embedding_model_id=settings.embedding_model_id,
        )

        return cls(
            document_repository=DocumentRepository(session_factory),
            text_resolver=ChunkTextResolverTask(text_client),
            vector_store_task=vector_store_task,
        )

    async def index(self, event: Mapping[str, Any]) -> IndexChunkResult:
        """
        Index one chunk event.

        Args:
            event: {orgId, documentId, chunkKey, knowledgeBaseId?, text?, index?, totalChunks?}

        Returns:
            IndexChunkResult: Upsert outcome and whether the document was marked indexed

        Raises:
            MissingFieldsError: orgId, documentId, or chunkKey is absent
            ChunkSourceError: No inline text and the stored chunk is missing or empty
            VectorStoreError: Embedding or upsert failed
        """
        require_fields(event, REQUIRED_EVENT_FIELDS)
        request = ChunkIndexingEvent.model_validate(event)
        index_name = self._vector_store_task.index_name
        context = {
            "org_id": request.org_id,
            "document_id": request.document_id,
            "chunk_key": request.chunk_key,
        }

        document = await self._documents.get_document(request.document_id, request.knowledge_base_id)
        if document is None:
            logger.warning("index - Document not found, skipping chunk", extra=context)
            return IndexChunkResult(
                success=True,
                skipped=True,
                skip_reason=SkipReason.DOCUMENT_DELETED,
                document_id=request.document_id,
                chunk_key=request.chunk_key,
                vector_index=index_name,
                marked_indexed=False,
            )

        start_time = time.perf_counter()

        text = await self._text_resolver.resolve(request)
        metadata = {
            "org_id": request.org_id,
            "document_id": request.document_id,
            "knowledge_base_id": request.knowledge_base_id or document.get("knowledge_base_id"),
            "chunk_key": request.chunk_key,
            "document_name": document.get("name"),
        }
        vector_id = await self._vector_store_task.upsert(request.chunk_key, text, metadata)

        marked_indexed = False
        if request.is_final_chunk:
            marked_indexed = await self._documents.mark_indexed(
                request.document_id, request.knowledge_base_id
            )
            logger.info(
                "index - Final chunk %s/%s processed",
                request.index,
                request.total_chunks,
                extra={**context, "marked_indexed": marked_indexed},
            )

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info("index - Chunk indexed in %.0fms", elapsed_ms, extra=context)

        return IndexChunkResult(
            success=True,
            skipped=False,
            document_id=request.document_id,
            chunk_key=request.chunk_key,
            vector_index=index_name,
            vector_id=vector_id,
            marked_indexed=marked_indexed,
        )
