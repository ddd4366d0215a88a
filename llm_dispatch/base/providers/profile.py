"""Provider profile DTO.

A profile is the configuration for one LLM backend: its endpoint (possibly
templated with ``{{secret}}`` / ``{{model}}``), a disabled flag and the secret
source. The secret is handed to the secret store at setup and stripped from the
profile so it never travels with the provider table.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation.
"""
from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict


SecretSource = Union[str, List[str]]


class ProviderProfile(BaseModel):
    """Configuration for one provider.

    Attributes
    ----------
    endpoint:
        Chat-completions URL. May contain ``{{secret}}`` and ``{{model}}``.
    disable:
        Disabled profiles are dropped from the provider table at setup.
    secret:
        Literal secret, or an argv list whose stdout yields the secret.
        ``None`` defers to the environment (see ``config.env``).
    """

    model_config = ConfigDict(extra="allow")

    endpoint: Optional[str] = None
    disable: bool = False
    secret: Optional[SecretSource] = None


__all__ = ["ProviderProfile", "SecretSource"]
