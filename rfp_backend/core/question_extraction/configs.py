"""
Configuration settings for the question extraction pipeline.

Dependencies: pydantic, pydantic_settings
System role: Centralized extraction configuration
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class QuestionPipelineSettings(BaseSettings):
    """Settings for question extraction."""

    model_config = SettingsConfigDict(
        env_prefix="QUESTION_PIPELINE_",
        case_sensitive=False,
        extra="ignore",
    )

    region: str = Field(
        default="us-east-1",
        description="AWS region for S3 and Bedrock",
    )
    documents_bucket: str = Field(
        default="",
        description="S3 bucket holding extracted solicitation text",
    )

    # Bedrock settings
    bedrock_model_id: str = Field(
        default="anthropic.claude-3-5-sonnet-20240620-v1:0",
        description="Bedrock model used for extraction",
    )
    anthropic_version: str = Field(
        default="bedrock-2023-05-31",
        description="Anthropic messages API version for Bedrock",
    )
    max_tokens: int = Field(
        default=32768,
        description="Maximum output tokens per chunk",
    )
    temperature: float = Field(
        default=0.1,
        description="Sampling temperature (kept low for stable extraction)",
    )

    # Chunking settings (~7500 tokens per chunk)
    max_chars_per_chunk: int = Field(
        default=30000,
        description="Maximum chunk size in characters",
    )
    chunk_overlap: int = Field(
        default=500,
        description="Overlap between consecutive chunks",
    )

    database_url: str = Field(
        default="",
        description="PostgreSQL connection string",
    )


@lru_cache
def get_question_pipeline_settings() -> QuestionPipelineSettings:
    """
    Get cached extraction settings instance.

    Returns:
        QuestionPipelineSettings: Singleton settings loaded from environment
    """
    return QuestionPipelineSettings()
