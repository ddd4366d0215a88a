"""Unified dispatch error taxonomy public surface.

This module re-exports the implementations under
``llm_dispatch.base.errors_parts`` to keep a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.dispatch_error import (
    DispatchError,
    ConfigError,
    AuthError,
    HandlerContractError,
    StreamIOError,
    EmptyResponseError,
)

__all__ = [
    "ErrorCode",
    "DispatchError",
    "ConfigError",
    "AuthError",
    "HandlerContractError",
    "StreamIOError",
    "EmptyResponseError",
]
