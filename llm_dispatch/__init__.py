"""llm_dispatch package

Streaming dispatch and incremental rendering for editor-integrated LLM
clients.

Purpose:
    Send chat payloads to OpenAI-compatible (and a few non-compatible)
    providers through a streaming transfer, decode the incremental answer,
    and render it into a document as it arrives.

Public API (re-exported):
    - Version: ``__version__``
    - Facade: :class:`Dispatcher`
    - Exceptions: :class:`DispatchError`, :class:`ErrorCode`
    - Collaborators: :class:`MainLoop`, :class:`SecretStore`,
      :class:`QueryRegistry`, :class:`CurlProcessRunner`,
      :class:`HttpxStreamRunner`, :class:`TextDocument`, :class:`TextViewport`
    - Configuration: :func:`get_dispatch_config`
"""

from .base.errors import DispatchError, ErrorCode
from .base.loop import MainLoop
from .base.models import Message, ModelSpec, Payload
from .base.render import TextDocument, TextViewport
from .base.repositories import SecretStore
from .base.runners import CurlProcessRunner, HttpxStreamRunner
from .base.session import QueryRegistry
from .base.streaming import UsageReport
from .config import get_dispatch_config
from .dispatcher import Dispatcher

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Dispatcher",
    "DispatchError",
    "ErrorCode",
    "MainLoop",
    "Message",
    "ModelSpec",
    "Payload",
    "TextDocument",
    "TextViewport",
    "SecretStore",
    "QueryRegistry",
    "CurlProcessRunner",
    "HttpxStreamRunner",
    "UsageReport",
    "get_dispatch_config",
]
