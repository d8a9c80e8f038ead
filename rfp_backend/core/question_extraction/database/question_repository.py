"""
Question storage with conditional inserts.

Every insert runs in its own session so concurrent writes never share a
connection. A conflict on (project_id, question_hash) returns no row, which
is reported as WriteOutcome.DUPLICATE rather than raised.

Dependencies: sqlalchemy
System role: Persistence layer for extracted questions
"""

import logging

from sqlalchemy import DateTime, bindparam, text
from sqlalchemy.ext.asyncio import async_sessionmaker

from rfp_backend.core.exceptions import QuestionPersistenceError

from ..models import QuestionRecord, WriteOutcome

logger = logging.getLogger(__name__)

INSERT_QUESTION_SQL = text(
    """
    INSERT INTO questions (
        project_id, question_hash, question_id, opportunity_id, question_file_id,
        section_id, section_title, section_description,
        question, question_normalized, created_at, updated_at
    ) VALUES (
        :project_id, :question_hash, :question_id, :opportunity_id, :question_file_id,
        :section_id, :section_title, :section_description,
        :question, :question_normalized, :created_at, :updated_at
    )
    ON CONFLICT (project_id, question_hash) DO NOTHING
    RETURNING question_hash
    """
).bindparams(
    bindparam("created_at", type_=DateTime(timezone=True)),
    bindparam("updated_at", type_=DateTime(timezone=True)),
)


class QuestionRepository:
    """Conditional-insert access to the questions table."""

    def __init__(self, session_factory: async_sessionmaker) -> None:
        """
        Initialize with a session factory.

        Args:
            session_factory: Factory producing one AsyncSession per write
        """
        self._session_factory = session_factory

    async def insert_if_absent(self, record: QuestionRecord) -> WriteOutcome:
        """
        Insert a question unless one already exists for its hash.

        Args:
            record: Question to store

        Returns:
            WriteOutcome: INSERTED if this call created the row, DUPLICATE otherwise

        Raises:
            QuestionPersistenceError: Any storage failure other than the conflict
        """
        params = {
            "project_id": record.project_id,
            "question_hash": record.question_hash,
            "question_id": record.question_id,
            "opportunity_id": record.opportunity_id,
            "question_file_id": record.question_file_id,
            "section_id": record.section_id,
            "section_title": record.section_title,
            "section_description": record.section_description,
            "question": record.question_original_text,
            "question_normalized": record.question_normalized,
            "created_at": record.created_at,
            "updated_at": record.updated_at,
        }

        async with self._session_factory() as session:
            try:
                result = await session.execute(INSERT_QUESTION_SQL, params)
                row = result.fetchone()
                await session.commit()
            except Exception as e:
                logger.error("insert_if_absent - %s: %s", type(e).__name__, e)
                await session.rollback()
                raise QuestionPersistenceError(
                    f"Failed to write question: {e}",
                    project_id=record.project_id,
                    question_hash=record.question_hash,
                ) from e

        return WriteOutcome.INSERTED if row is not None else WriteOutcome.DUPLICATE
