"""Payload builder.

Turns a message list and a model specification into the provider-neutral
`Payload`. A bare model name sets only ``model``; a structured descriptor
(``ModelSpec`` or a mapping with the same keys) also carries whichever of
``max_tokens`` / ``temperature`` / ``top_p`` it sets.
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Union

from .models import Message, ModelSpec, Payload, coerce_message


ModelLike = Union[str, ModelSpec, Mapping[str, Any]]


def prepare_payload(
    messages: Iterable[Union[Message, Mapping[str, Any]]],
    model: ModelLike,
    provider: Optional[str] = None,
) -> Payload:
    """Build the streaming request body.

    ``provider`` is accepted for call-site symmetry with the query API; the
    body itself is provider-neutral and provider-specific mutation happens at
    resolution time.
    """
    payload = Payload(messages=[coerce_message(m) for m in messages])
    if isinstance(model, str):
        payload.model = model
        return payload

    spec = model if isinstance(model, ModelSpec) else ModelSpec.model_validate(dict(model))
    payload.model = spec.model
    payload.max_tokens = spec.max_tokens
    payload.temperature = spec.temperature
    payload.top_p = spec.top_p
    return payload


__all__ = ["prepare_payload", "ModelLike"]
