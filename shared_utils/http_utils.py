"""
Small HTTP helpers shared by the REST client, uploader and CLI.
"""

import json
from typing import Any, Dict, Mapping, Optional

from shared_utils.error_handler import ValidationError


def find_header_ci(headers: Mapping[str, str], name: str) -> Optional[str]:
    """Case-insensitive header lookup over a plain mapping.

    Used for ``ETag`` on part uploads and ``X-RestLi-Id`` on create responses.
    """
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def strip_quotes(value: str) -> str:
    """``"abc123"`` -> ``abc123``."""
    return value.strip('"')


def parse_response_body(text: str) -> Any:
    """Parse a response body.

    Empty or whitespace-only bodies become ``None``; anything that is not
    JSON is returned as the raw string. Never raises.
    """
    if not text.strip():
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text


def json_value_to_string(value: Any) -> str:
    """Strings pass through; everything else is JSON-encoded."""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"))


def json_object_to_string_map(raw: str, flag: str) -> Dict[str, str]:
    """Parse a JSON object CLI argument into a ``str -> str`` map.

    Raises:
        ValidationError: If ``raw`` is not a JSON object
    """
    try:
        value = json.loads(raw)
    except ValueError as exc:
        raise ValidationError(f"invalid JSON for {flag}", context={"flag": flag}) from exc
    if not isinstance(value, dict):
        raise ValidationError(f"{flag} must be a JSON object", context={"flag": flag})
    return {k: json_value_to_string(v) for k, v in value.items()}
