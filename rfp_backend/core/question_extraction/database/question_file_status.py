"""
Question file status access.

Reads the cancellation flag before a run and records the terminal status
after it. A question file that no longer exists is treated as cancelled on
read and reported as deleted on write.

Dependencies: sqlalchemy
System role: External status record for question files
"""

import logging
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import DateTime, bindparam, text
from sqlalchemy.ext.asyncio import async_sessionmaker

logger = logging.getLogger(__name__)


class QuestionFileStatus(str, Enum):
    """Question file lifecycle states (mirrors the question_files table)."""

    UPLOADED = "UPLOADED"
    PROCESSING = "PROCESSING"
    PROCESSED = "PROCESSED"
    CANCELLED = "CANCELLED"
    FAILED = "FAILED"


SELECT_STATUS_SQL = text(
    """
    SELECT status FROM question_files
    WHERE project_id = :project_id
      AND opportunity_id = :opportunity_id
      AND question_file_id = :question_file_id
    """
)

UPDATE_STATUS_SQL = text(
    """
    UPDATE question_files
    SET status = :status, total_questions = :total_questions, updated_at = :updated_at
    WHERE project_id = :project_id
      AND opportunity_id = :opportunity_id
      AND question_file_id = :question_file_id
    RETURNING question_file_id
    """
).bindparams(bindparam("updated_at", type_=DateTime(timezone=True)))


class QuestionFileStatusStore:
    """Cancellation flag provider and status writer."""

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    async def is_cancelled(self, project_id: str, opportunity_id: str, question_file_id: str) -> bool:
        """
        Check whether the question file was cancelled or removed.

        Returns:
            bool: True when status is CANCELLED or the file no longer exists
        """
        key = {
            "project_id": project_id,
            "opportunity_id": opportunity_id,
            "question_file_id": question_file_id,
        }
        async with self._session_factory() as session:
            result = await session.execute(SELECT_STATUS_SQL, key)
            row = result.fetchone()

        if row is None:
            logger.warning("is_cancelled - Question file not found, treating as cancelled", extra=key)
            return True
        return row[0] == QuestionFileStatus.CANCELLED.value

    async def mark_processed(
        self,
        project_id: str,
        opportunity_id: str,
        question_file_id: str,
        total_questions: int,
    ) -> bool:
        """
        Mark the question file PROCESSED with its question count.

        Returns:
            bool: False when the question file was deleted mid-run

        Raises:
            Exception: Database errors (after rollback)
        """
        params = {
            "status": QuestionFileStatus.PROCESSED.value,
            "total_questions": total_questions,
            "updated_at": datetime.now(timezone.utc),
            "project_id": project_id,
            "opportunity_id": opportunity_id,
            "question_file_id": question_file_id,
        }
        async with self._session_factory() as session:
            try:
                result = await session.execute(UPDATE_STATUS_SQL, params)
                row = result.fetchone()
                await session.commit()
            except Exception as e:
                logger.error("mark_processed - %s: %s", type(e).__name__, e)
                await session.rollback()
                raise

        if row is None:
            logger.info(
                "mark_processed - Question file not found (likely deleted): %s", question_file_id
            )
            return False

        logger.info(
            "mark_processed - Question file marked as PROCESSED",
            extra={"question_file_id": question_file_id, "total_questions": total_questions},
        )
        return True
