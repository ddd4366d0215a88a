"""Provider table construction.

Builds the name → :class:`ProviderProfile` table used for the lifetime of a
dispatcher from the configured defaults and the caller's setup options:

* a provider named in the options is enabled and its keys overlay the default
  profile, except that an empty mapping disables the provider;
* disabled profiles are dropped;
* profiles without an endpoint are dropped with a logged :class:`ConfigError`.
"""
from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from ..errors import ConfigError
from ..logging import get_logger, log_error
from .profile import ProviderProfile

_logger = get_logger("dispatch.providers")


def merge_provider_options(
    defaults: Mapping[str, Mapping[str, Any]],
    options: Optional[Mapping[str, Optional[Mapping[str, Any]]]],
) -> Dict[str, Dict[str, Any]]:
    """Overlay user provider options on the default profiles (raw mappings)."""
    merged: Dict[str, Dict[str, Any]] = copy.deepcopy({k: dict(v) for k, v in defaults.items()})
    for name, overrides in (options or {}).items():
        profile = merged.setdefault(name, {})
        profile["disable"] = False
        for key, value in (overrides or {}).items():
            profile[key] = value
        if not overrides:
            profile["disable"] = True
    return merged


def build_provider_table(
    defaults: Mapping[str, Mapping[str, Any]],
    options: Optional[Mapping[str, Optional[Mapping[str, Any]]]] = None,
    logger: logging.Logger = _logger,
) -> Dict[str, ProviderProfile]:
    """Return the validated table of enabled providers."""
    table: Dict[str, ProviderProfile] = {}
    for name, raw in merge_provider_options(defaults, options).items():
        try:
            profile = ProviderProfile.model_validate(raw)
        except ValidationError as exc:
            log_error(logger, ConfigError(f"Provider {name} is invalid", provider=name, raw=exc), level=logging.WARNING)
            continue
        if profile.disable:
            continue
        if not profile.endpoint:
            log_error(logger, ConfigError(f"Provider {name} is missing endpoint", provider=name), level=logging.WARNING)
            continue
        table[name] = profile
    return table


__all__ = ["merge_provider_options", "build_provider_table"]
