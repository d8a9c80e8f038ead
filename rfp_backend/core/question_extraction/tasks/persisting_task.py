"""
Question persistence task.

Each question's identity is the SHA-256 of its normalized text, so the same
requirement maps to the same row no matter which run or chunk found it.
Writes are conditional inserts issued concurrently; the storage layer's
ON CONFLICT clause is the only guard against duplicates across runs.

Dependencies: hashlib, asyncio
System role: Final stage of question extraction
"""

import asyncio
import hashlib
import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable

from ..database.question_repository import QuestionRepository
from ..models import MergedSection, PersistResult, QuestionRecord, WriteOutcome

logger = logging.getLogger(__name__)


def normalize_question_text(text: str) -> str:
    """Trim, collapse internal whitespace, and lowercase."""
    return " ".join(text.split()).lower()


def question_hash(normalized: str) -> str:
    """SHA-256 hex digest of normalized question text."""
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()


class PersistingTask:
    """Persist merged sections as deduplicated question records."""

    def __init__(self, repository: QuestionRepository) -> None:
        """
        Initialize persisting task.

        Args:
            repository: Conditional-insert question storage
        """
        self._repository = repository

    def build_records(
        self,
        project_id: str,
        opportunity_id: str,
        question_file_id: str,
        sections: Iterable[MergedSection],
    ) -> tuple[list[QuestionRecord], int]:
        """
        Build one record per unique normalized question.

        Args:
            project_id: Project scope for question identity
            opportunity_id: Opportunity the file belongs to
            question_file_id: Source question file
            sections: Merged sections

        Returns:
            tuple: (records to write, duplicates dropped within this run)
        """
        now = datetime.now(timezone.utc)
        seen_in_run: set[str] = set()
        records: list[QuestionRecord] = []
        duplicates = 0

        for section in sections:
            section_id = str(uuid.uuid4())

            for question in section.questions:
                normalized = normalize_question_text(question.question_text)
                if not normalized:
                    continue
                if normalized in seen_in_run:
                    duplicates += 1
                    continue
                seen_in_run.add(normalized)

                digest = question_hash(normalized)
                records.append(
                    QuestionRecord(
                        project_id=project_id,
                        opportunity_id=opportunity_id,
                        question_file_id=question_file_id,
                        question_id=digest,
                        question_hash=digest,
                        section_id=section_id,
                        section_title=section.title,
                        section_description=section.description,
                        question_original_text=question.question_text.strip(),
                        question_normalized=normalized,
                        created_at=now,
                        updated_at=now,
                    )
                )

        return records, duplicates

    async def persist(
        self,
        project_id: str,
        opportunity_id: str,
        question_file_id: str,
        sections: Iterable[MergedSection],
    ) -> PersistResult:
        """
        Write questions, counting inserts and duplicates.

        All writes are awaited before returning. A lost conditional write is a
        duplicate; any other failure is raised after every write has settled.

        Returns:
            PersistResult: inserted and skipped_duplicates counts

        Raises:
            QuestionPersistenceError: A write failed for a non-duplicate reason
        """
        records, in_run_duplicates = self.build_records(
            project_id, opportunity_id, question_file_id, sections
        )

        outcomes = await asyncio.gather(
            *(self._repository.insert_if_absent(record) for record in records),
            return_exceptions=True,
        )

        errors = [outcome for outcome in outcomes if isinstance(outcome, BaseException)]
        inserted = sum(1 for outcome in outcomes if outcome is WriteOutcome.INSERTED)
        skipped = in_run_duplicates + sum(
            1 for outcome in outcomes if outcome is WriteOutcome.DUPLICATE
        )

        if errors:
            logger.error(
                "persist - %d of %d question writes failed",
                len(errors),
                len(records),
                extra={"project_id": project_id, "question_file_id": question_file_id},
            )
            raise errors[0]

        logger.info(
            "persist - Questions write result: inserted=%d, skippedDuplicates=%d",
            inserted,
            skipped,
            extra={"project_id": project_id, "question_file_id": question_file_id},
        )
        return PersistResult(inserted=inserted, skipped_duplicates=skipped)
