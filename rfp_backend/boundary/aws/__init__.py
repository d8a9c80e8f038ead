"""
AWS adapters.

Exports: S3TextClient, BedrockRuntimeClient
"""

from .bedrock_client import BedrockRuntimeClient
from .s3_client import S3TextClient

__all__ = ["S3TextClient", "BedrockRuntimeClient"]
