"""
Bounded rendering of payloads for log lines.

Lambda events, model envelopes and chunk bodies can run to megabytes; log
lines carry at most `max_length` characters of them.

Dependencies: json (stdlib)
System role: Logging helper functions
"""

import json
from typing import Any


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Render a value for logging, truncated to max_length characters.

    Mappings and sequences are rendered as JSON so event payloads stay
    readable; bytes are decoded as UTF-8 with replacement.

    Args:
        value: Value to render
        max_length: Maximum length before truncating

    Returns:
        str: Safe string representation
    """
    if value is None:
        return "None"

    if isinstance(value, str):
        rendered = value
    elif isinstance(value, (bytes, bytearray)):
        rendered = bytes(value).decode("utf-8", errors="replace")
    elif isinstance(value, (dict, list, tuple)):
        try:
            rendered = json.dumps(value, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            rendered = f"{type(value).__name__}({len(value)} items)"
    else:
        rendered = str(value)

    if len(rendered) > max_length:
        return rendered[:max_length] + f"... (truncated, {len(rendered)} total)"
    return rendered
