"""
JSON extraction from free-form model output.

Models sometimes wrap the requested JSON in prose or markdown fences, and a
truncated response may contain no complete object at all. Extraction returns
None in that case instead of raising.
"""

import json
import re
from typing import Any, Optional

_CODE_FENCE = re.compile(r"```(?:json)?\s*(\{.*\})\s*```", re.DOTALL)


def _loads_object(candidate: str) -> Optional[dict[str, Any]]:
    try:
        value = json.loads(candidate)
    except json.JSONDecodeError:
        return None
    return value if isinstance(value, dict) else None


def extract_json_object(text: str) -> Optional[dict[str, Any]]:
    """
    Extract the first JSON object embedded in text.

    Looks for:
    1. The whole text as a JSON object
    2. ```json ... ``` fenced blocks
    3. The span from the first "{" to the last "}"
    4. The first position from which a complete object decodes

    Args:
        text: Raw assistant text

    Returns:
        Parsed object, or None when no complete object is present
    """
    if not text:
        return None

    stripped = text.strip()
    parsed = _loads_object(stripped)
    if parsed is not None:
        return parsed

    fence_match = _CODE_FENCE.search(stripped)
    if fence_match:
        parsed = _loads_object(fence_match.group(1))
        if parsed is not None:
            return parsed

    first, last = stripped.find("{"), stripped.rfind("}")
    if first != -1 and last > first:
        parsed = _loads_object(stripped[first : last + 1])
        if parsed is not None:
            return parsed

    decoder = json.JSONDecoder()
    position = stripped.find("{")
    while position != -1:
        try:
            value, _ = decoder.raw_decode(stripped, position)
        except json.JSONDecodeError:
            value = None
        if isinstance(value, dict):
            return value
        position = stripped.find("{", position + 1)

    return None
