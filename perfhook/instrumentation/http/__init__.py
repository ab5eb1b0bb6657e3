"""Shared helpers for HTTP client instrumentations."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ...core.types import find_header

TEXT_CONTENT_TYPES = (
    "application/json",
    "application/xml",
    "application/x-www-form-urlencoded",
    "application/javascript",
)


def get_content_type_header(headers: Mapping[str, Any]) -> Optional[str]:
    """Get content-type header (case-insensitive lookup)."""
    return find_header(headers, "content-type")


def is_text_content_type(content_type: Optional[str]) -> bool:
    if not content_type:
        return False
    main_type = content_type.lower().split(";")[0].strip()
    return main_type.startswith("text/") or main_type.endswith("+json") or main_type in TEXT_CONTENT_TYPES


def decode_text_body(body: Any, content_type: Optional[str]) -> Any:
    """Decode ``bytes`` bodies with a textual content type; leave other bodies as they are.

    Empty bodies become None. Binary payloads stay ``bytes``; the size
    estimators report both as unknown.
    """
    if not isinstance(body, (bytes, bytearray)):
        return body
    if not body:
        return None
    if not is_text_content_type(content_type):
        return body
    try:
        return bytes(body).decode("utf-8")
    except UnicodeDecodeError:
        return body
