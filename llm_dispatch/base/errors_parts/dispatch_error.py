"""
Structured dispatch error exception types.

`DispatchError` carries a normalized `ErrorCode` plus the provider and query
that were involved. The subclasses pin the code for each failure category so
call sites only describe what went wrong.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class DispatchError(Exception):
    """Represents a structured dispatch error with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable error message suitable for logging.
        provider: Provider key involved in the failure (e.g., ``"openai"``).
        query_id: Identifier of the query the failure belongs to, if any.
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    provider: Optional[str] = None
    query_id: Optional[str] = None
    raw: Optional[BaseException] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Return a compact string combining provider, code, and message."""
        return f"{self.provider or '-'} {self.code.value}: {self.message}"


class _CodedError(DispatchError):
    _code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        query_id: Optional[str] = None,
        raw: Optional[BaseException] = None,
    ) -> None:
        super().__init__(self._code, message, provider, query_id, raw)


class ConfigError(_CodedError):
    """Provider profile is unusable (e.g. missing endpoint or unknown name)."""

    _code = ErrorCode.CONFIG


class AuthError(_CodedError):
    """No secret is available for the provider's secret key."""

    _code = ErrorCode.AUTH


class HandlerContractError(_CodedError):
    """The response handler passed to a query is not callable."""

    _code = ErrorCode.HANDLER_CONTRACT


class StreamIOError(_CodedError):
    """The external process reported an error on its output channel."""

    _code = ErrorCode.STREAM_IO


class EmptyResponseError(_CodedError):
    """The stream ended without any decoded content."""

    _code = ErrorCode.EMPTY_RESPONSE


__all__ = [
    "DispatchError",
    "ConfigError",
    "AuthError",
    "HandlerContractError",
    "StreamIOError",
    "EmptyResponseError",
]
