"""
Lambda handler for the chunk indexing step.

Invoked by a Step Functions Map state once per chunk. Errors propagate so
the orchestrator retries; a deleted parent document is not an error.

Environment variables:
- CHUNK_INDEXING_DOCUMENTS_BUCKET: Default S3 bucket for chunk text
- CHUNK_INDEXING_VECTORS_BUCKET: S3 Vectors bucket name
- CHUNK_INDEXING_VECTORS_INDEX: S3 Vectors index name
- CHUNK_INDEXING_DATABASE_URL: PostgreSQL connection string
- DB_SECRET_ARN: Optional secret holding the database password
- LOG_LEVEL: Logging level

Dependencies: entrypoint, boundary.db, lambda_utils
System role: Lambda entry point for chunk indexing
"""

import asyncio
import logging
import os
from typing import Any, Dict

from dotenv import load_dotenv

load_dotenv()

from rfp_backend.boundary.aws import S3TextClient
from rfp_backend.boundary.db import get_async_engine, get_async_session_factory
from rfp_backend.core.lambda_utils import configure_secrets, validate_environment
from rfp_backend.observability import configure_logging, safe_log_value

from .configs import get_chunk_indexing_settings
from .entrypoint import ChunkIndexingPipeline
from .models import IndexChunkResult
from .tasks import VectorStoreTask

configure_logging(os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

REQUIRED_ENV_VARS = (
    "CHUNK_INDEXING_DOCUMENTS_BUCKET",
    "CHUNK_INDEXING_VECTORS_BUCKET",
    "CHUNK_INDEXING_DATABASE_URL",
)


async def _index_chunk(event: Dict[str, Any]) -> IndexChunkResult:
    settings = get_chunk_indexing_settings()

    # Reuse clients across warm invocations
    if not hasattr(handler, "_text_client"):
        handler._text_client = S3TextClient(settings.documents_bucket, settings.region)
        handler._vector_store_task = VectorStoreTask(
            vectors_bucket=settings.vectors_bucket,
            index_name=settings.vectors_index,
            region=settings.region,
            embedding_region=settings.embedding_region,
            embedding_model_id=settings.embedding_model_id,
        )

    engine = get_async_engine(settings.database_url)
    try:
        pipeline = ChunkIndexingPipeline.from_settings(
            session_factory=get_async_session_factory(engine=engine),
            settings=settings,
            text_client=handler._text_client,
            vector_store_task=handler._vector_store_task,
        )
        return await pipeline.index(event)
    finally:
        await engine.dispose()


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda handler for chunk indexing events.

    Args:
        event: {orgId, documentId, chunkKey, knowledgeBaseId?, text?, index?, totalChunks?}
        context: Lambda context object

    Returns:
        Dict with success, skipped, skipReason, documentId, markedIndexed
    """
    logger.info(
        "handler - index-chunk event: %s",
        safe_log_value({key: value for key, value in event.items() if key != "text"}, 1000),
    )

    configure_secrets("CHUNK_INDEXING_DATABASE_URL")
    validate_environment(REQUIRED_ENV_VARS)

    result = asyncio.run(_index_chunk(event))

    logger.info(
        "handler - Indexing finished",
        extra={"skipped": result.skipped, "marked_indexed": result.marked_indexed},
    )
    return result.to_response()
