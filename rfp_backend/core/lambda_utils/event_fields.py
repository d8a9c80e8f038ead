"""
Required-field checks for orchestrator events.

A field counts as missing when absent, None, or an empty string; any other
value (including 0) is present.
"""

from typing import Any, Mapping, Sequence

from rfp_backend.core.exceptions import MissingFieldsError


def find_missing_fields(event: Mapping[str, Any], required: Sequence[str]) -> list[str]:
    """Return required field names that are absent from the event, in order."""
    missing = []
    for field in required:
        value = event.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    return missing


def require_fields(event: Mapping[str, Any], required: Sequence[str]) -> None:
    """
    Ensure all required fields are present.

    Raises:
        MissingFieldsError: Naming exactly the absent fields
    """
    missing = find_missing_fields(event, required)
    if missing:
        raise MissingFieldsError(missing, {field: event.get(field) for field in required})
