"""
Document lookups and indexed-flag updates.

Dependencies: sqlalchemy
System role: External document record for chunk indexing
"""

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, bindparam, text
from sqlalchemy.ext.asyncio import async_sessionmaker

logger = logging.getLogger(__name__)

INDEXED_STATUS = "INDEXED"

_SELECT_DOCUMENT = """
    SELECT id, knowledge_base_id, org_id, name, indexed
    FROM documents
    WHERE id = :doc_id
"""

_MARK_INDEXED = """
    UPDATE documents
    SET indexed = TRUE, index_status = :index_status, updated_at = :updated_at
    WHERE id = :doc_id
"""

_KB_FILTER = "  AND knowledge_base_id = :kb_id\n"

SELECT_DOCUMENT_SQL = text(_SELECT_DOCUMENT)
SELECT_DOCUMENT_IN_KB_SQL = text(_SELECT_DOCUMENT + _KB_FILTER)

MARK_INDEXED_SQL = text(_MARK_INDEXED + "RETURNING id").bindparams(
    bindparam("updated_at", type_=DateTime(timezone=True))
)
MARK_INDEXED_IN_KB_SQL = text(_MARK_INDEXED + _KB_FILTER + "RETURNING id").bindparams(
    bindparam("updated_at", type_=DateTime(timezone=True))
)


class DocumentRepository:
    """Read and flag documents in RDS."""

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    async def get_document(
        self, document_id: str, knowledge_base_id: str | None = None
    ) -> dict[str, Any] | None:
        """
        Look up a document.

        Args:
            document_id: Document ID
            knowledge_base_id: Optional knowledge base scope

        Returns:
            Document row as a dict, or None when it does not exist
        """
        statement = SELECT_DOCUMENT_SQL
        params = {"doc_id": document_id}
        if knowledge_base_id:
            statement = SELECT_DOCUMENT_IN_KB_SQL
            params["kb_id"] = knowledge_base_id

        async with self._session_factory() as session:
            result = await session.execute(statement, params)
            row = result.mappings().fetchone()
        return dict(row) if row is not None else None

    async def mark_indexed(self, document_id: str, knowledge_base_id: str | None = None) -> bool:
        """
        Set the document's indexed flag.

        Idempotent: repeating the update leaves the row unchanged apart from
        updated_at.

        Returns:
            bool: False when the document no longer exists
        """
        params = {
            "index_status": INDEXED_STATUS,
            "updated_at": datetime.now(timezone.utc),
            "doc_id": document_id,
        }
        statement = MARK_INDEXED_SQL
        if knowledge_base_id:
            statement = MARK_INDEXED_IN_KB_SQL
            params["kb_id"] = knowledge_base_id

        async with self._session_factory() as session:
            try:
                result = await session.execute(statement, params)
                row = result.fetchone()
                await session.commit()
            except Exception as e:
                logger.error("mark_indexed - %s: %s", type(e).__name__, e)
                await session.rollback()
                raise

        if row is None:
            logger.warning("mark_indexed - Document %s not found", document_id)
            return False

        logger.info("mark_indexed - Document marked as indexed", extra={"document_id": document_id})
        return True
