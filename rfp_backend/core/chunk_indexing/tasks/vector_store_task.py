"""
S3 Vectors upsert task.

Embeds a chunk with Bedrock and writes it to Amazon S3 Vectors under the
chunk key, so reprocessing a chunk overwrites its vector instead of adding
a second one.

Dependencies: langchain_aws, langchain_core
System role: Final stage of chunk indexing
"""

import asyncio
import logging

from langchain_aws import BedrockEmbeddings
from langchain_aws.vectorstores import AmazonS3Vectors
from langchain_core.documents import Document

from rfp_backend.core.exceptions import VectorStoreError

logger = logging.getLogger(__name__)


class VectorStoreTask:
    """Upload chunk embeddings to S3 Vectors."""

    def __init__(
        self,
        vectors_bucket: str,
        index_name: str = "documents",
        region: str = "us-east-1",
        embedding_region: str = "us-east-1",
        embedding_model_id: str = "amazon.titan-embed-text-v2:0",
        vector_store: AmazonS3Vectors | None = None,
    ) -> None:
        """
        Initialize vector store task with S3 Vectors and Bedrock embeddings.

        Args:
            vectors_bucket: S3 Vectors bucket name
            index_name: Index name within the bucket
            region: AWS region for S3 Vectors
            embedding_region: AWS region for Bedrock embeddings
            embedding_model_id: Bedrock embedding model ID
            vector_store: Preconfigured store (skips lazy construction)

        Raises:
            ValueError: When vectors_bucket or index_name is empty
        """
        if not vectors_bucket:
            raise ValueError("vectors_bucket cannot be empty")
        if not index_name:
            raise ValueError("index_name cannot be empty")

        self.vectors_bucket = vectors_bucket
        self.index_name = index_name
        self.region = region
        self.embedding_region = embedding_region
        self.embedding_model_id = embedding_model_id
        self._vector_store = vector_store

    def _get_vector_store(self) -> AmazonS3Vectors:
        """
        Get or create S3 Vectors store instance.

        Returns:
            AmazonS3Vectors: Initialized vector store with embeddings
        """
        if self._vector_store is None:
            embeddings = BedrockEmbeddings(
                model_id=self.embedding_model_id,
                region_name=self.embedding_region,
            )
            self._vector_store = AmazonS3Vectors(
                vector_bucket_name=self.vectors_bucket,
                index_name=self.index_name,
                embedding=embeddings,
                region_name=self.region,
            )
        return self._vector_store

    def _sanitize_metadata(self, metadata: dict) -> dict:
        """
        Keep only short, filterable fields to stay under the 2048 byte limit.

        Args:
            metadata: Candidate metadata

        Returns:
            dict: Non-empty string/number values for known keys
        """
        allowed = ("org_id", "document_id", "knowledge_base_id", "chunk_key", "document_name")
        return {
            key: metadata[key]
            for key in allowed
            if metadata.get(key) not in (None, "")
        }

    def upsert_chunk(self, chunk_key: str, text: str, metadata: dict) -> str:
        """
        Embed and write one chunk.

        Args:
            chunk_key: Vector key (the chunk's S3 key)
            text: Chunk text to embed
            metadata: Chunk metadata

        Returns:
            str: Vector ID

        Raises:
            VectorStoreError: When the upsert fails
        """
        document = Document(page_content=text, metadata=self._sanitize_metadata(metadata))

        try:
            ids = self._get_vector_store().add_documents(documents=[document], ids=[chunk_key])
        except Exception as e:
            logger.exception(
                "Failed to upsert chunk to S3 Vectors",
                extra={"chunk_key": chunk_key, "error": str(e)},
            )
            raise VectorStoreError(
                f"Failed to upsert to S3 Vectors: {e}",
                operation="upsert",
                details={"chunk_key": chunk_key, "index": self.index_name},
            ) from e

        logger.info(
            "Upserted chunk to S3 Vectors",
            extra={"chunk_key": chunk_key, "bucket": self.vectors_bucket, "index": self.index_name},
        )
        return ids[0] if ids else chunk_key

    async def upsert(self, chunk_key: str, text: str, metadata: dict) -> str:
        """Async wrapper around upsert_chunk."""
        return await asyncio.to_thread(self.upsert_chunk, chunk_key, text, metadata)
