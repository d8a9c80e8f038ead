"""
Observability helpers.

Exports: configure_logging, safe_log_value
"""

from .log_utils import safe_log_value
from .logger import configure_logging

__all__ = ["configure_logging", "safe_log_value"]
