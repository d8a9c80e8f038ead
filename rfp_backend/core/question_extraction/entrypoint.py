"""
Question extraction pipeline orchestrator.

Runs one question file through: cancel check -> load text -> chunk ->
extract (per chunk, failures isolated) -> merge -> persist -> status update.

Dependencies: All task modules, database, boundary.aws
System role: Pipeline orchestration (coordinates only)
"""

import logging
import time
from typing import Any, Mapping

from sqlalchemy.ext.asyncio import async_sessionmaker

from rfp_backend.boundary.aws import BedrockRuntimeClient, S3TextClient
from rfp_backend.core.lambda_utils import require_fields

from .configs import QuestionPipelineSettings, get_question_pipeline_settings
from .database import QuestionFileStatusStore, QuestionRepository
from .models import ExtractedSection, ExtractionRunResult, ExtractQuestionsEvent
from .models.events import REQUIRED_EVENT_FIELDS
from .tasks import ChunkingTask, ExtractionTask, MergingTask, PersistingTask

logger = logging.getLogger(__name__)


class QuestionExtractionPipeline:
    """Orchestrate question extraction for a single question file."""

    def __init__(
        self,
        text_client: S3TextClient,
        chunking_task: ChunkingTask,
        extraction_task: ExtractionTask,
        merging_task: MergingTask,
        persisting_task: PersistingTask,
        status_store: QuestionFileStatusStore,
    ) -> None:
        self._text_client = text_client
        self._chunking_task = chunking_task
        self._extraction_task = extraction_task
        self._merging_task = merging_task
        self._persisting_task = persisting_task
        self._status_store = status_store

    @classmethod
    def from_settings(
        cls,
        session_factory: async_sessionmaker,
        settings: QuestionPipelineSettings | None = None,
        text_client: S3TextClient | None = None,
        llm_client: BedrockRuntimeClient | None = None,
    ) -> "QuestionExtractionPipeline":
        """
        Build a pipeline from configuration.

        Args:
            session_factory: Database session factory for this invocation
            settings: Pipeline settings (uses environment if None)
            text_client: Reusable S3 client (created if None)
            llm_client: Reusable Bedrock client (created if None)

        Returns:
            QuestionExtractionPipeline: Ready-to-run pipeline
        """
        settings = settings or get_question_pipeline_settings()
        text_client = text_client or S3TextClient(settings.documents_bucket, settings.region)
        llm_client = llm_client or BedrockRuntimeClient(settings.region)

        return cls(
            text_client=text_client,
            chunking_task=ChunkingTask(
                max_chars=settings.max_chars_per_chunk,
                overlap=settings.chunk_overlap,
            ),
            extraction_task=ExtractionTask(
                llm_client=llm_client,
                model_id=settings.bedrock_model_id,
                max_tokens=settings.max_tokens,
                temperature=settings.temperature,
                anthropic_version=settings.anthropic_version,
            ),
            merging_task=MergingTask(),
            persisting_task=PersistingTask(QuestionRepository(session_factory)),
            status_store=QuestionFileStatusStore(session_factory),
        )

    async def run(self, event: Mapping[str, Any]) -> ExtractionRunResult:
        """
        Process one extraction event.

        Args:
            event: {questionFileId, projectId, opportunityId, textFileKey}

        Returns:
            ExtractionRunResult: Inserted count, or cancelled with no side effects

        Raises:
            MissingFieldsError: Any required field is absent
            ChunkSourceError: Document text could not be loaded
            QuestionPersistenceError: A question write failed
        """
        require_fields(event, REQUIRED_EVENT_FIELDS)
        request = ExtractQuestionsEvent.model_validate(event)
        context = {
            "project_id": request.project_id,
            "opportunity_id": request.opportunity_id,
            "question_file_id": request.question_file_id,
        }

        if await self._status_store.is_cancelled(
            request.project_id, request.opportunity_id, request.question_file_id
        ):
            logger.info("run - Pipeline cancelled, skipping processing", extra=context)
            return ExtractionRunResult(count=0, cancelled=True)

        start_time = time.perf_counter()

        text = await self._text_client.get_text(request.text_file_key)
        logger.info("run - Loaded text: %d characters", len(text), extra=context)

        chunks = self._chunking_task.chunk(text)
        logger.info("run - Split into %d chunks", len(chunks), extra=context)

        all_sections: list[ExtractedSection] = []
        failed_chunks: list[int] = []

        for chunk in chunks:
            logger.info("run - Processing chunk %d/%d", chunk.ordinal + 1, chunk.total_chunks)
            try:
                extraction = await self._extraction_task.extract(chunk)
            except Exception as e:  # pylint: disable=broad-except
                logger.error(
                    "run - Failed to extract from chunk %d: %s: %s",
                    chunk.ordinal + 1,
                    type(e).__name__,
                    e,
                    extra={**context, "chunk_ordinal": chunk.ordinal},
                )
                failed_chunks.append(chunk.ordinal)
                continue

            all_sections.extend(extraction.sections)
            logger.info(
                "run - Chunk %d extracted %d sections", chunk.ordinal + 1, len(extraction.sections)
            )

        merged_sections = self._merging_task.merge(all_sections)
        logger.info("run - After merging: %d sections", len(merged_sections), extra=context)

        persist_result = await self._persisting_task.persist(
            request.project_id,
            request.opportunity_id,
            request.question_file_id,
            merged_sections,
        )

        await self._status_store.mark_processed(
            request.project_id,
            request.opportunity_id,
            request.question_file_id,
            total_questions=persist_result.inserted,
        )

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "run - Extraction complete in %.0fms",
            elapsed_ms,
            extra={
                **context,
                "inserted": persist_result.inserted,
                "skipped_duplicates": persist_result.skipped_duplicates,
                "failed_chunks": len(failed_chunks),
            },
        )

        return ExtractionRunResult(
            count=persist_result.inserted,
            cancelled=False,
            chunk_count=len(chunks),
            failed_chunks=failed_chunks,
            skipped_duplicates=persist_result.skipped_duplicates,
        )
