"""
Dispatch Base Package

Exports the provider-neutral building blocks of the dispatcher: payload DTOs,
provider resolution, the stream decoder, query records and registry, runners,
the main loop and the document renderer.

Layering:
- Models (DTOs): payload, messages, model specs
- Providers: profiles, provider table, per-provider request resolution
- Streaming: line classification, decoder, usage reports
- Session: query record, lifecycle, registry, stream wiring
- Collaborators: secret store, runners, main loop, in-memory document
"""

from .errors import (
    AuthError,
    ConfigError,
    DispatchError,
    EmptyResponseError,
    ErrorCode,
    HandlerContractError,
    StreamIOError,
)
from .loop import MainLoop
from .models import Message, ModelSpec, Payload, Role
from .payload import prepare_payload
from .providers import ProviderProfile, ResolvedProvider, build_provider_table, resolve_provider
from .query_session import QuerySession, launch_query
from .render import RenderHandler, TextDocument, TextViewport, TrackedPosition
from .repositories import CopilotBearerRefresher, SecretStore
from .runners import CurlProcessRunner, HttpxStreamRunner, StreamRequest
from .session import Query, QueryEvent, QueryRegistry, QueryState
from .streaming import DecodedLine, LineKind, StreamDecoder, UsageReport

__all__ = [
    # Errors
    "ErrorCode",
    "DispatchError",
    "ConfigError",
    "AuthError",
    "HandlerContractError",
    "StreamIOError",
    "EmptyResponseError",
    # Models
    "Role",
    "Message",
    "ModelSpec",
    "Payload",
    "prepare_payload",
    # Providers
    "ProviderProfile",
    "ResolvedProvider",
    "build_provider_table",
    "resolve_provider",
    # Streaming
    "DecodedLine",
    "LineKind",
    "StreamDecoder",
    "UsageReport",
    # Session
    "Query",
    "QueryEvent",
    "QueryState",
    "QueryRegistry",
    "QuerySession",
    "launch_query",
    # Collaborators
    "SecretStore",
    "CopilotBearerRefresher",
    "StreamRequest",
    "CurlProcessRunner",
    "HttpxStreamRunner",
    "MainLoop",
    "RenderHandler",
    "TextDocument",
    "TextViewport",
    "TrackedPosition",
]
