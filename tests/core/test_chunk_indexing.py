"""Comprehensive tests for the chunk indexing pipeline.

Tests all components:
- Event model coercion and completion detection
- Chunk text resolution (inline vs S3 fallback)
- S3 Vectors upsert task
- Document repository against SQLite
- Pipeline orchestration and Lambda handler
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from langchain_core.documents import Document
from sqlalchemy import select

from rfp_backend.boundary.db.schema import documents
from rfp_backend.core.chunk_indexing.configs import ChunkIndexingSettings
from rfp_backend.core.chunk_indexing.database import DocumentRepository
from rfp_backend.core.chunk_indexing.entrypoint import ChunkIndexingPipeline
from rfp_backend.core.chunk_indexing.models import ChunkIndexingEvent, IndexChunkResult, SkipReason
from rfp_backend.core.chunk_indexing.tasks import ChunkTextResolverTask, VectorStoreTask
from rfp_backend.core.exceptions import ChunkSourceError, MissingFieldsError, VectorStoreError

STORED_TEXT = "Stored chunk text from S3."

_MISSING = object()


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def text_client() -> MagicMock:
    """Provide S3 text client returning stored chunk text."""
    client = MagicMock()
    client.get_text = AsyncMock(return_value=STORED_TEXT)
    return client


@pytest.fixture
def document_repository() -> MagicMock:
    """Provide repository where the document exists."""
    repository = MagicMock()
    repository.get_document = AsyncMock(
        return_value={"id": "doc-1", "knowledge_base_id": "kb-1", "name": "SOW.pdf"}
    )
    repository.mark_indexed = AsyncMock(return_value=True)
    return repository


@pytest.fixture
def vector_store_task() -> MagicMock:
    """Provide vector store task that echoes the chunk key."""
    task = MagicMock()
    task.index_name = "documents"
    task.upsert = AsyncMock(side_effect=lambda chunk_key, text, metadata: chunk_key)
    return task


@pytest.fixture
def pipeline(document_repository, text_client, vector_store_task) -> ChunkIndexingPipeline:
    """Provide pipeline with mocked boundaries."""
    return ChunkIndexingPipeline(
        document_repository=document_repository,
        text_resolver=ChunkTextResolverTask(text_client),
        vector_store_task=vector_store_task,
    )


# ============================================================================
# Event Model Tests
# ============================================================================


class TestChunkIndexingEvent:
    """Test event parsing tolerance."""

    @pytest.mark.parametrize(
        "index,total,expected",
        [(5, 5, True), (3, 5, False), (None, 5, False), (5, None, False), (None, None, False)],
    )
    def test_is_final_chunk(self, indexing_event, index, total, expected) -> None:
        """Should signal completion only when both counters are present and equal."""
        indexing_event["index"] = index
        indexing_event["totalChunks"] = total

        assert ChunkIndexingEvent.model_validate(indexing_event).is_final_chunk is expected

    def test_non_numeric_counters_are_absent(self, indexing_event) -> None:
        """Should treat malformed counters as missing."""
        indexing_event["index"] = "5"
        indexing_event["totalChunks"] = True

        event = ChunkIndexingEvent.model_validate(indexing_event)

        assert event.index is None
        assert event.total_chunks is None

    @pytest.mark.parametrize("text", [None, 42, ["a"], {"text": "a"}, "", "   "])
    def test_inline_text_absent_for_non_strings(self, indexing_event, text) -> None:
        """Should expose inline text only for non-blank strings."""
        indexing_event["text"] = text

        assert ChunkIndexingEvent.model_validate(indexing_event).inline_text is None


# ============================================================================
# Text Resolver Tests
# ============================================================================


class TestChunkTextResolverTask:
    """Test inline text vs S3 fallback."""

    @pytest.mark.asyncio
    async def test_uses_inline_text(self, indexing_event, text_client) -> None:
        """Should not read S3 when inline text is present."""
        resolver = ChunkTextResolverTask(text_client)

        text = await resolver.resolve(ChunkIndexingEvent.model_validate(indexing_event))

        assert text == indexing_event["text"]
        text_client.get_text.assert_not_called()

    @pytest.mark.asyncio
    async def test_falls_back_to_s3_with_event_bucket(self, indexing_event, text_client) -> None:
        """Should read the chunk key from the event's bucket."""
        indexing_event.pop("text")
        indexing_event["bucket"] = "chunks-bucket"
        resolver = ChunkTextResolverTask(text_client)

        text = await resolver.resolve(ChunkIndexingEvent.model_validate(indexing_event))

        assert text == STORED_TEXT
        text_client.get_text.assert_awaited_once_with(
            indexing_event["chunkKey"], bucket="chunks-bucket"
        )

    @pytest.mark.asyncio
    async def test_empty_storage_object_is_fatal(self, indexing_event, text_client) -> None:
        """Should propagate an empty S3 object."""
        indexing_event["text"] = None
        text_client.get_text.side_effect = ChunkSourceError("S3 object is empty", "bucket", "key")
        resolver = ChunkTextResolverTask(text_client)

        with pytest.raises(ChunkSourceError):
            await resolver.resolve(ChunkIndexingEvent.model_validate(indexing_event))


# ============================================================================
# Vector Store Task Tests
# ============================================================================


class TestVectorStoreTask:
    """Test S3 Vectors upsert behaviour."""

    def test_init_validates_bucket(self) -> None:
        """Should reject an empty bucket name."""
        with pytest.raises(ValueError):
            VectorStoreTask(vectors_bucket="")

    def test_init_validates_index(self) -> None:
        """Should reject an empty index name."""
        with pytest.raises(ValueError):
            VectorStoreTask(vectors_bucket="vectors", index_name="")

    def test_upsert_keys_vector_by_chunk_key(self) -> None:
        """Should write a single document under the chunk key."""
        store = MagicMock()
        store.add_documents.return_value = ["org-1/doc-1/chunk-1"]
        task = VectorStoreTask(vectors_bucket="vectors", vector_store=store)

        vector_id = task.upsert_chunk(
            "org-1/doc-1/chunk-1",
            "chunk text",
            {
                "org_id": "org-1",
                "document_id": "doc-1",
                "knowledge_base_id": None,
                "chunk_key": "org-1/doc-1/chunk-1",
                "document_name": "",
                "raw_payload": "x" * 5000,
            },
        )

        assert vector_id == "org-1/doc-1/chunk-1"
        kwargs = store.add_documents.call_args.kwargs
        assert kwargs["ids"] == ["org-1/doc-1/chunk-1"]
        (document,) = kwargs["documents"]
        assert isinstance(document, Document)
        assert document.page_content == "chunk text"
        assert document.metadata == {
            "org_id": "org-1",
            "document_id": "doc-1",
            "chunk_key": "org-1/doc-1/chunk-1",
        }

    def test_reupsert_uses_same_id(self) -> None:
        """Should reuse the chunk key so a retry overwrites the vector."""
        store = MagicMock()
        store.add_documents.return_value = []
        task = VectorStoreTask(vectors_bucket="vectors", vector_store=store)

        first = task.upsert_chunk("chunk-1", "text", {})
        second = task.upsert_chunk("chunk-1", "text", {})

        assert first == second == "chunk-1"
        assert [c.kwargs["ids"] for c in store.add_documents.call_args_list] == [["chunk-1"], ["chunk-1"]]

    def test_upsert_failure_raises_vector_store_error(self) -> None:
        """Should wrap store failures."""
        store = MagicMock()
        store.add_documents.side_effect = RuntimeError("AccessDenied")
        task = VectorStoreTask(vectors_bucket="vectors", vector_store=store)

        with pytest.raises(VectorStoreError) as exc_info:
            task.upsert_chunk("chunk-1", "text", {})

        assert exc_info.value.details["operation"] == "upsert"

    @pytest.mark.asyncio
    async def test_async_upsert(self) -> None:
        """Should run the upsert off the event loop and return the ID."""
        store = MagicMock()
        store.add_documents.return_value = ["chunk-1"]
        task = VectorStoreTask(vectors_bucket="vectors", vector_store=store)

        assert await task.upsert("chunk-1", "text", {}) == "chunk-1"

    def test_lazy_store_construction(self) -> None:
        """Should build embeddings and the store on first use only."""
        task = VectorStoreTask(
            vectors_bucket="vectors",
            index_name="documents",
            region="us-west-2",
            embedding_region="us-east-1",
        )

        with patch(
            "rfp_backend.core.chunk_indexing.tasks.vector_store_task.BedrockEmbeddings"
        ) as embeddings_cls, patch(
            "rfp_backend.core.chunk_indexing.tasks.vector_store_task.AmazonS3Vectors"
        ) as store_cls:
            first = task._get_vector_store()
            second = task._get_vector_store()

        assert first is second
        embeddings_cls.assert_called_once_with(
            model_id="amazon.titan-embed-text-v2:0", region_name="us-east-1"
        )
        store_cls.assert_called_once_with(
            vector_bucket_name="vectors",
            index_name="documents",
            embedding=embeddings_cls.return_value,
            region_name="us-west-2",
        )


# ============================================================================
# Document Repository Tests
# ============================================================================


class TestDocumentRepository:
    """Test document lookups and the indexed flag."""

    @pytest.mark.asyncio
    async def test_get_existing_document(self, seeded_session_factory) -> None:
        """Should return the document row."""
        repository = DocumentRepository(seeded_session_factory)

        document = await repository.get_document("doc-1", "kb-1")

        assert document["id"] == "doc-1"
        assert document["name"] == "Statement of Work.pdf"

    @pytest.mark.asyncio
    async def test_get_document_without_kb_scope(self, seeded_session_factory) -> None:
        """Should find the document by ID alone."""
        repository = DocumentRepository(seeded_session_factory)

        assert (await repository.get_document("doc-1")) is not None

    @pytest.mark.asyncio
    async def test_get_document_in_other_kb(self, seeded_session_factory) -> None:
        """Should not find a document outside the given knowledge base."""
        repository = DocumentRepository(seeded_session_factory)

        assert await repository.get_document("doc-1", "kb-other") is None

    @pytest.mark.asyncio
    async def test_get_missing_document(self, seeded_session_factory) -> None:
        """Should return None for a deleted document."""
        repository = DocumentRepository(seeded_session_factory)

        assert await repository.get_document("doc-gone") is None

    @pytest.mark.asyncio
    async def test_mark_indexed_is_idempotent(self, seeded_session_factory) -> None:
        """Should set the flag and tolerate repeats."""
        repository = DocumentRepository(seeded_session_factory)

        assert await repository.mark_indexed("doc-1", "kb-1") is True
        assert await repository.mark_indexed("doc-1", "kb-1") is True

        async with seeded_session_factory() as session:
            row = (
                await session.execute(select(documents).where(documents.c.id == "doc-1"))
            ).mappings().one()
        assert row["indexed"] is True
        assert row["index_status"] == "INDEXED"

    @pytest.mark.asyncio
    async def test_mark_indexed_missing_document(self, seeded_session_factory) -> None:
        """Should return False when the document is gone."""
        repository = DocumentRepository(seeded_session_factory)

        assert await repository.mark_indexed("doc-gone") is False


# ============================================================================
# Pipeline Tests
# ============================================================================


class TestChunkIndexingPipeline:
    """Test index() orchestration."""

    @pytest.mark.asyncio
    async def test_indexes_inline_chunk(self, pipeline, indexing_event, vector_store_task, text_client) -> None:
        """Should upsert inline text with document metadata."""
        result = await pipeline.index(indexing_event)

        assert result.success is True
        assert result.skipped is False
        assert result.marked_indexed is False
        assert result.vector_id == indexing_event["chunkKey"]
        chunk_key, text, metadata = vector_store_task.upsert.await_args.args
        assert chunk_key == indexing_event["chunkKey"]
        assert text == indexing_event["text"]
        assert metadata["document_name"] == "SOW.pdf"
        assert metadata["knowledge_base_id"] == "kb-1"
        text_client.get_text.assert_not_called()

    @pytest.mark.asyncio
    async def test_deleted_document_is_skipped(
        self, pipeline, indexing_event, document_repository, vector_store_task, text_client
    ) -> None:
        """Should skip without any embedding or vector store call."""
        document_repository.get_document.return_value = None
        indexing_event["index"] = 5

        result = await pipeline.index(indexing_event)

        assert result.to_response() == {
            "success": True,
            "skipped": True,
            "skipReason": "document_deleted",
            "documentId": "doc-1",
            "chunkKey": indexing_event["chunkKey"],
            "vectorIndex": "documents",
            "markedIndexed": False,
        }
        assert result.skip_reason is SkipReason.DOCUMENT_DELETED
        vector_store_task.upsert.assert_not_called()
        text_client.get_text.assert_not_called()
        document_repository.mark_indexed.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "index,total,expected",
        [(5, 5, True), (3, 5, False), (_MISSING, _MISSING, False), (5, _MISSING, False)],
    )
    async def test_completion_signal(
        self, pipeline, indexing_event, document_repository, index, total, expected
    ) -> None:
        """Should mark the document indexed only on the final chunk."""
        for field, value in (("index", index), ("totalChunks", total)):
            if value is _MISSING:
                indexing_event.pop(field)
            else:
                indexing_event[field] = value

        result = await pipeline.index(indexing_event)

        assert result.marked_indexed is expected
        if expected:
            document_repository.mark_indexed.assert_awaited_once_with("doc-1", "kb-1")
        else:
            document_repository.mark_indexed.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", [None, _MISSING, 42, 3.5, ["a", "b"], {"body": "a"}, "   "])
    async def test_non_string_text_falls_back_to_storage(
        self, pipeline, indexing_event, text_client, vector_store_task, text
    ) -> None:
        """Should resolve text from S3 instead of raising."""
        if text is _MISSING:
            indexing_event.pop("text")
        else:
            indexing_event["text"] = text

        result = await pipeline.index(indexing_event)

        assert result.success is True
        text_client.get_text.assert_awaited_once()
        assert vector_store_task.upsert.await_args.args[1] == STORED_TEXT

    @pytest.mark.asyncio
    async def test_empty_storage_fallback_is_fatal(
        self, pipeline, indexing_event, text_client, vector_store_task
    ) -> None:
        """Should raise when neither inline nor stored text exists."""
        indexing_event["text"] = None
        text_client.get_text.side_effect = ChunkSourceError("S3 object is empty", "bucket", "key")

        with pytest.raises(ChunkSourceError):
            await pipeline.index(indexing_event)

        vector_store_task.upsert.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", [["orgId"], ["documentId", "chunkKey"]])
    async def test_missing_required_fields(
        self, pipeline, indexing_event, document_repository, missing
    ) -> None:
        """Should raise naming the missing fields before any lookup."""
        for field in missing:
            indexing_event.pop(field)

        with pytest.raises(MissingFieldsError) as exc_info:
            await pipeline.index(indexing_event)

        assert exc_info.value.missing == missing
        document_repository.get_document.assert_not_called()

    @pytest.mark.asyncio
    async def test_vector_store_failure_propagates(
        self, pipeline, indexing_event, vector_store_task, document_repository
    ) -> None:
        """Should not mark the document indexed when the upsert fails."""
        indexing_event["index"] = 5
        vector_store_task.upsert.side_effect = VectorStoreError("boom", operation="upsert")

        with pytest.raises(VectorStoreError):
            await pipeline.index(indexing_event)

        document_repository.mark_indexed.assert_not_called()

    def test_from_settings(self) -> None:
        """Should wire repository, resolver, and vector store from settings."""
        settings = ChunkIndexingSettings(documents_bucket="docs", vectors_bucket="vectors")

        pipeline = ChunkIndexingPipeline.from_settings(
            session_factory=MagicMock(),
            settings=settings,
            text_client=MagicMock(),
        )

        assert pipeline._vector_store_task.vectors_bucket == "vectors"
        assert pipeline._vector_store_task.index_name == "documents"


class TestLambdaHandler:
    """Test the Lambda entry point."""

    def test_handler_returns_camel_case_payload(self, indexing_event, monkeypatch) -> None:
        """Should return the serialized result."""
        from rfp_backend.core.chunk_indexing import lambda_handler

        monkeypatch.setenv("CHUNK_INDEXING_DOCUMENTS_BUCKET", "docs")
        monkeypatch.setenv("CHUNK_INDEXING_VECTORS_BUCKET", "vectors")
        monkeypatch.setenv("CHUNK_INDEXING_DATABASE_URL", "postgresql://u:p@localhost/db")
        monkeypatch.delenv("DB_SECRET_ARN", raising=False)
        result = IndexChunkResult(
            document_id="doc-1",
            chunk_key=indexing_event["chunkKey"],
            vector_index="documents",
            vector_id=indexing_event["chunkKey"],
            marked_indexed=True,
        )

        with patch.object(lambda_handler, "_index_chunk", new=AsyncMock(return_value=result)):
            response = lambda_handler.handler(indexing_event, None)

        assert response["success"] is True
        assert response["skipped"] is False
        assert response["markedIndexed"] is True
        assert response["documentId"] == "doc-1"
        assert "skipReason" not in response

    def test_handler_requires_environment(self, indexing_event, monkeypatch) -> None:
        """Should name the missing environment variables."""
        from rfp_backend.core.chunk_indexing import lambda_handler

        monkeypatch.setenv("CHUNK_INDEXING_DOCUMENTS_BUCKET", "docs")
        monkeypatch.delenv("CHUNK_INDEXING_VECTORS_BUCKET", raising=False)
        monkeypatch.delenv("CHUNK_INDEXING_DATABASE_URL", raising=False)

        with pytest.raises(ValueError, match="CHUNK_INDEXING_VECTORS_BUCKET, CHUNK_INDEXING_DATABASE_URL"):
            lambda_handler.handler(indexing_event, None)
