"""
Chunk text resolution.

Uses the inline text carried on the event when it is a usable string and
falls back to the chunk object in S3 otherwise. A missing inline payload is
expected; a missing or empty S3 object is not.

Dependencies: rfp_backend.boundary.aws
System role: First stage of chunk indexing
"""

import logging

from rfp_backend.boundary.aws import S3TextClient

from ..models import ChunkIndexingEvent

logger = logging.getLogger(__name__)


class ChunkTextResolverTask:
    """Resolve a chunk's text from the event or object storage."""

    def __init__(self, text_client: S3TextClient) -> None:
        self._text_client = text_client

    async def resolve(self, event: ChunkIndexingEvent) -> str:
        """
        Resolve chunk text.

        Args:
            event: Validated indexing event

        Returns:
            str: Chunk text

        Raises:
            ChunkSourceError: Fallback object is missing or empty
        """
        inline = event.inline_text
        if inline is not None:
            return inline

        if event.text is not None:
            logger.info(
                "resolve - Ignoring non-string inline text of type %s",
                type(event.text).__name__,
                extra={"chunk_key": event.chunk_key},
            )

        return await self._text_client.get_text(event.chunk_key, bucket=event.bucket)
