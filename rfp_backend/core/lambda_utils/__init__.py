"""
Shared Lambda utilities.

Exports: validate_environment, configure_secrets, find_missing_fields, require_fields
"""

from .config import configure_secrets, validate_environment
from .event_fields import find_missing_fields, require_fields

__all__ = [
    "validate_environment",
    "configure_secrets",
    "find_missing_fields",
    "require_fields",
]
