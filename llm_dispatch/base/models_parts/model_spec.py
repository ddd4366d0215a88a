"""Structured model descriptor.

A model may be named by a bare string or described by a `ModelSpec` carrying
generation parameters. Only parameters that were actually set reach the
payload; nothing is defaulted.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class ModelSpec(BaseModel):
    """Model name plus optional generation parameters.

    Attributes
    ----------
    model:
        Model identifier sent as the payload's ``model`` field.
    max_tokens:
        Completion token cap.
    temperature:
        Sampling temperature.
    top_p:
        Nucleus sampling cutoff.
    """

    model_config = ConfigDict(extra="ignore", protected_namespaces=())

    model: str
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None


__all__ = ["ModelSpec"]
