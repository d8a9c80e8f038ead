"""
S3 text object reader.

Loads extracted document text and chunk text written by upstream pipeline
steps. boto3 is blocking, so the async entry point runs it in a worker thread.

Dependencies: boto3
System role: Object storage boundary for both pipelines
"""

import asyncio
import logging

import boto3
from botocore.exceptions import ClientError

from rfp_backend.core.exceptions import ChunkSourceError

logger = logging.getLogger(__name__)


class S3TextClient:
    """Read UTF-8 text objects from S3."""

    def __init__(self, bucket: str, region: str = "us-east-1", s3_client=None) -> None:
        """
        Initialize S3 text client.

        Args:
            bucket: Default bucket for reads
            region: AWS region for the bucket
            s3_client: Optional preconfigured boto3 S3 client
        """
        if not bucket:
            raise ValueError("bucket cannot be empty")

        self._bucket = bucket
        self._region = region
        self._s3_client = s3_client or boto3.client("s3", region_name=region)

    @property
    def bucket(self) -> str:
        return self._bucket

    def read_text(self, key: str, bucket: str | None = None) -> str:
        """
        Read an object and decode it as UTF-8.

        Args:
            key: S3 object key
            bucket: Bucket override (defaults to the configured bucket)

        Returns:
            str: Object body

        Raises:
            ChunkSourceError: Object missing, unreadable, or empty
        """
        bucket = bucket or self._bucket
        if not key:
            raise ChunkSourceError("S3 key is required", bucket, key)

        try:
            response = self._s3_client.get_object(Bucket=bucket, Key=key)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code in ("404", "NoSuchKey"):
                raise ChunkSourceError(f"Object not found: s3://{bucket}/{key}", bucket, key) from e
            raise ChunkSourceError(f"Failed to read s3://{bucket}/{key}: {e}", bucket, key) from e

        body = response.get("Body")
        if body is None:
            raise ChunkSourceError(f"S3 GetObject returned empty body. s3://{bucket}/{key}", bucket, key)

        text = body.read().decode("utf-8")
        if not text:
            raise ChunkSourceError(f"S3 object is empty. s3://{bucket}/{key}", bucket, key)

        logger.debug("read_text - Loaded %d characters from s3://%s/%s", len(text), bucket, key)
        return text

    async def get_text(self, key: str, bucket: str | None = None) -> str:
        """Async wrapper around read_text."""
        return await asyncio.to_thread(self.read_text, key, bucket)
