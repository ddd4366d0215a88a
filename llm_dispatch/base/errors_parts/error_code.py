"""
Normalized dispatch error codes (taxonomy).

Defines the `ErrorCode` enumeration used across the payload, provider, stream
and render layers. Values are lowercase snake_case and are considered a stable
public contract for logging.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    CONFIG = "config"
    AUTH = "auth"
    HANDLER_CONTRACT = "handler_contract"
    STREAM_IO = "stream_io"
    EMPTY_RESPONSE = "empty_response"
    INTERNAL = "internal"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
