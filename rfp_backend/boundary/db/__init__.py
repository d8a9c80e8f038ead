"""
Database connection helpers.

Exports: get_async_engine, get_async_session_factory, metadata
"""

from .connection import get_async_engine, get_async_session_factory
from .schema import metadata

__all__ = ["get_async_engine", "get_async_session_factory", "metadata"]
