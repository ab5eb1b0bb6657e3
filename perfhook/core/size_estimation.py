"""Best-effort payload size estimation.

The HTTP clients do not expose the number of bytes actually written to or
read from the wire at the point where the interceptor runs, so sizes are
approximated as the length of a JSON serialization of the headers and the
body. The result is an estimate, not a byte count.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Callable, Optional

from .types import RequestDescriptor, ResponseDescriptor

logger = logging.getLogger(__name__)

RequestSizeEstimator = Callable[[RequestDescriptor], Optional[int]]
ResponseSizeEstimator = Callable[[ResponseDescriptor], Optional[int]]


def is_serializable_body(body: Any) -> bool:
    """Text, mapping or sequence of values."""
    return isinstance(body, (str, Mapping, list, tuple))


def _encoded_length(value: Any) -> int:
    if isinstance(value, Mapping) and not isinstance(value, dict):
        value = dict(value)
    return len(json.dumps(value))


def estimate_request_size(request: RequestDescriptor) -> Optional[int]:
    """Estimate request size from headers and body; None if unknown."""
    if not is_serializable_body(request.body):
        return None
    try:
        return _encoded_length(request.headers) + _encoded_length(request.body)
    except Exception as e:
        logger.debug(f"Could not estimate request size for {request.normalized_url}: {e}")
        return None


def estimate_response_size(response: ResponseDescriptor) -> Optional[int]:
    """Estimate response size from body and headers; None if unknown."""
    if not is_serializable_body(response.body):
        return None
    try:
        return _encoded_length(response.body) + _encoded_length(response.headers)
    except Exception as e:
        logger.debug(f"Could not estimate response size: {e}")
        return None
