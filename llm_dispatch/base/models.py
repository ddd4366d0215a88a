"""
Provider-agnostic request models public surface.

Re-exports the implementations under ``llm_dispatch.base.models_parts``.
"""

from .models_parts.message import Message, Role, coerce_message
from .models_parts.model_spec import ModelSpec
from .models_parts.payload import Payload

__all__ = [
    "Message",
    "Role",
    "coerce_message",
    "ModelSpec",
    "Payload",
]
