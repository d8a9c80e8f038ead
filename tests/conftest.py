"""
Shared test fixtures and configuration for the entire test suite.

Provides: In-memory SQLite session factory, seeded rows, sample events
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import asyncio
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from rfp_backend.boundary.db.schema import documents, metadata, question_files
from rfp_backend.core.question_extraction.models import QuestionRecord, WriteOutcome


@pytest_asyncio.fixture
async def sqlite_session_factory():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        async_sessionmaker: Session factory bound to a fresh schema
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    yield factory

    async with engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def seeded_session_factory(sqlite_session_factory):
    """Session factory with one question file and one document row."""
    now = datetime.now(timezone.utc)
    async with sqlite_session_factory() as session:
        await session.execute(
            insert(question_files).values(
                project_id="proj-1",
                opportunity_id="opp-1",
                question_file_id="qf-1",
                status="PROCESSING",
                text_file_key="org/proj-1/qf-1.txt",
                updated_at=now,
            )
        )
        await session.execute(
            insert(question_files).values(
                project_id="proj-1",
                opportunity_id="opp-1",
                question_file_id="qf-cancelled",
                status="CANCELLED",
                updated_at=now,
            )
        )
        await session.execute(
            insert(documents).values(
                id="doc-1",
                knowledge_base_id="kb-1",
                org_id="org-1",
                name="Statement of Work.pdf",
                indexed=False,
                index_status="PROCESSING",
                updated_at=now,
            )
        )
        await session.commit()
    return sqlite_session_factory


@pytest.fixture
def extraction_event() -> dict:
    """Provide a complete extraction event."""
    return {
        "projectId": "proj-1",
        "questionFileId": "qf-1",
        "textFileKey": "org/proj-1/qf-1.txt",
        "opportunityId": "opp-1",
    }


@pytest.fixture
def indexing_event() -> dict:
    """Provide a complete chunk indexing event with inline text."""
    return {
        "orgId": "org-1",
        "documentId": "doc-1",
        "knowledgeBaseId": "kb-1",
        "chunkKey": "org-1/kb-1/doc-1/chunks/chunk-0001.txt",
        "text": "Offerors shall describe their staffing plan.",
        "index": 1,
        "totalChunks": 5,
    }


class InMemoryQuestionRepository:
    """Conditional-insert store that yields between check and set."""

    def __init__(self) -> None:
        self.rows: dict[tuple[str, str], QuestionRecord] = {}
        self._lock = asyncio.Lock()

    async def insert_if_absent(self, record: QuestionRecord) -> WriteOutcome:
        await asyncio.sleep(0)
        async with self._lock:
            key = (record.project_id, record.question_hash)
            if key in self.rows:
                return WriteOutcome.DUPLICATE
            self.rows[key] = record
            return WriteOutcome.INSERTED


@pytest.fixture
def question_repository() -> InMemoryQuestionRepository:
    """Provide in-memory question storage."""
    return InMemoryQuestionRepository()
