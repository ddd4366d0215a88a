"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `llm_dispatch.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .dispatch_error import (
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
