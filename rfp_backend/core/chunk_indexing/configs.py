"""
Configuration settings for the chunk indexing pipeline.

Dependencies: pydantic, pydantic_settings
System role: Centralized indexing configuration
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ChunkIndexingSettings(BaseSettings):
    """Settings for per-chunk indexing."""

    model_config = SettingsConfigDict(
        env_prefix="CHUNK_INDEXING_",
        case_sensitive=False,
        extra="ignore",
    )

    region: str = Field(
        default="us-east-1",
        description="AWS region for S3 and S3 Vectors",
    )
    documents_bucket: str = Field(
        default="",
        description="Default S3 bucket holding chunk text",
    )

    # S3 Vectors settings
    vectors_bucket: str = Field(
        default="",
        description="S3 Vectors bucket name",
    )
    vectors_index: str = Field(
        default="documents",
        description="S3 Vectors index name within the bucket",
    )

    # Bedrock embedding settings
    embedding_region: str = Field(
        default="us-east-1",
        description="AWS region for Bedrock embeddings",
    )
    embedding_model_id: str = Field(
        default="amazon.titan-embed-text-v2:0",
        description="Bedrock embedding model ID",
    )

    database_url: str = Field(
        default="",
        description="PostgreSQL connection string",
    )


@lru_cache
def get_chunk_indexing_settings() -> ChunkIndexingSettings:
    """
    Get cached indexing settings instance.

    Returns:
        ChunkIndexingSettings: Singleton settings loaded from environment
    """
    return ChunkIndexingSettings()
