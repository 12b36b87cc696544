"""Header set helpers.

A header set is a plain ``dict[str, str]``: one value per name, later writes
win. This module turns the textual forms accepted by configuration into that
shape:

- ``parse_headers_string`` for the flat ``"Key: Value, Key2: Value2"`` form
- ``normalize_headers`` for any supported source (mapping, JSON object string,
  flat string or ``None``)

``canonicalize_header_name`` is only used for display; stored keys keep the
casing they were configured with.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any


# Common header casing overrides for non-trivial capitalization
_SPECIAL_CASES: dict[str, str] = {
    "www-authenticate": "WWW-Authenticate",
    "etag": "ETag",
    "dnt": "DNT",
    "te": "TE",
}

MASKED_VALUE = "***"


def canonicalize_header_name(name: str) -> str:
    """Return a canonical HTTP-style header name.

    Examples:
    - "content-type" -> "Content-Type"
    - "x-request-id" -> "X-Request-Id"
    - Applies overrides for known special cases like "ETag".
    """
    key = name.strip().lower()
    if key in _SPECIAL_CASES:
        return _SPECIAL_CASES[key]

    parts = [p for p in key.split("-") if p]
    return "-".join(p.capitalize() for p in parts)


def parse_headers_string(value: str) -> dict[str, str]:
    """Parse a ``"Key1: Value1, Key2: Value2"`` string into a header set.

    Pairs are split on ``,`` and each pair on its first ``:`` only, so values
    may contain colons (``"Authorization: Bearer abc:def"``) but not commas.
    Keys and values are stripped. Pairs without a colon or with an empty key
    are dropped silently; a repeated key keeps its last value.

    Args:
        value: The delimited header string

    Returns:
        The parsed headers, empty for an empty string
    """
    headers: dict[str, str] = {}
    if not value:
        return headers

    for pair in value.split(","):
        key, sep, val = pair.strip().partition(":")
        if not sep:
            continue
        key = key.strip()
        if key:
            headers[key] = val.strip()
    return headers


def normalize_headers(value: Any) -> dict[str, str]:
    """Coerce a configured header source into a header set.

    Accepts ``None``, a mapping, a JSON object string or a delimited string.

    Raises:
        ValueError: If a JSON string does not decode to an object, or the
            value has an unsupported type
    """
    if value is None:
        return {}

    if isinstance(value, Mapping):
        return {str(k): str(v) for k, v in value.items()}

    if isinstance(value, bytes):
        value = value.decode("utf-8")

    if isinstance(value, str):
        text = value.strip()
        if text.startswith("{"):
            try:
                decoded = json.loads(text)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON header object: {e}") from e
            if not isinstance(decoded, dict):
                raise ValueError("JSON headers must be an object")
            nested = [k for k, v in decoded.items() if isinstance(v, dict | list)]
            if nested:
                raise ValueError(f"JSON header values must be scalars: {nested}")
            return {str(k): str(v) for k, v in decoded.items()}
        return parse_headers_string(text)

    raise ValueError(f"Unsupported header value type: {type(value).__name__}")


def mask_header_values(headers: Mapping[str, str]) -> dict[str, str]:
    """Return a copy safe for display: canonical names, masked values."""
    return {canonicalize_header_name(name): MASKED_VALUE for name in headers}
