"""Provider-neutral chat-completion request body.

`Payload` is what gets written to the per-request JSON artifact. Streaming is
always on and usage reporting is always requested; generation parameters are
``None`` unless a structured model descriptor supplied them, and ``None``
fields are omitted on serialization.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation and ``model_dump``.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Payload(BaseModel):
    """Streaming chat-completion request body.

    Attributes
    ----------
    stream:
        Always ``True``.
    stream_options:
        Always ``{"include_usage": True}`` so the final line carries usage.
    messages:
        Wire-format message mappings.
    model:
        Model identifier; removed for providers that carry it in the URL.
    max_tokens, temperature, top_p:
        Present only when set by a structured model descriptor.
    """

    model_config = ConfigDict(protected_namespaces=(), validate_assignment=True)

    stream: bool = True
    stream_options: Dict[str, Any] = Field(default_factory=lambda: {"include_usage": True})
    messages: List[Dict[str, Any]] = Field(default_factory=list)
    model: Optional[str] = None
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON-serializable body with unset fields omitted."""
        return self.model_dump(exclude_none=True)


__all__ = ["Payload"]
