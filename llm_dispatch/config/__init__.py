"""Unified configuration layer for the dispatcher.

Goals
-----
* Centralize defaults (provider profiles, curl params, cache location, batch size).
* Merge sources in a predictable order:
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) pointed to by DISPATCH_CONFIG_FILE
    3. Environment variables (DISPATCH_QUERY_DIR, DISPATCH_CURL_PARAMS,
       DISPATCH_RENDER_BATCH_SIZE)
    4. In-code overrides passed to the helper
* Provide a single call site: ``get_dispatch_config(overrides=None)``.

External Config File
--------------------
JSON is tried first, YAML second. Structure example:

```
query_dir: ~/.cache/llm_dispatch/query
curl_params: ["--proxy", "http://127.0.0.1:3128"]
providers:
  anthropic:
    endpoint: https://api.anthropic.com/v1/messages
    secret: ["pass", "show", "anthropic"]
```

Provider sections are merged per provider (a file section overlays the
default profile's keys) rather than replacing the whole provider table. A
non-empty section enables its provider unless it sets ``disable`` itself; an
empty section disables it.
"""
from __future__ import annotations

import copy
import json
import os
import shlex
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .defaults import (
    CURL_EXECUTABLE,
    DEFAULT_CURL_PARAMS,
    DEFAULT_PROVIDERS,
    DEFAULT_QUERY_DIR,
    RENDER_BATCH_SIZE,
)


DEFAULTS: Dict[str, Any] = {
    "providers": DEFAULT_PROVIDERS,
    "curl_executable": CURL_EXECUTABLE,
    "curl_params": DEFAULT_CURL_PARAMS,
    "query_dir": DEFAULT_QUERY_DIR,
    "render_batch_size": RENDER_BATCH_SIZE,
}

_FILE_CACHE: Dict[str, Dict[str, Any]] = {}


def _load_external_config() -> Dict[str, Any]:
    """Load the optional config file named by ``DISPATCH_CONFIG_FILE``.

    Missing files and unparsable content yield an empty mapping.
    """
    path = os.getenv("DISPATCH_CONFIG_FILE")
    if not path:
        return {}
    if path in _FILE_CACHE:
        return _FILE_CACHE[path]
    p = Path(path).expanduser()
    if not p.is_file():
        return {}
    text = p.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except ValueError:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError:
            data = {}
    if not isinstance(data, dict):
        data = {}
    _FILE_CACHE[path] = data
    return data


def _env_overrides() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if query_dir := os.getenv("DISPATCH_QUERY_DIR"):
        out["query_dir"] = query_dir
    if curl_params := os.getenv("DISPATCH_CURL_PARAMS"):
        out["curl_params"] = shlex.split(curl_params)
    batch = os.getenv("DISPATCH_RENDER_BATCH_SIZE")
    if batch:
        try:
            value = int(batch)
        except ValueError:
            value = 0
        if value > 0:
            out["render_batch_size"] = value
    return out


def _merge(cfg: Dict[str, Any], layer: Dict[str, Any]) -> None:
    for key, value in layer.items():
        if value is None:
            continue
        if key == "providers" and isinstance(value, dict):
            providers = cfg.setdefault("providers", {})
            for name, profile in value.items():
                if isinstance(profile, dict):
                    providers[name] = {
                        **providers.get(name, {}),
                        "disable": not profile,
                        **profile,
                    }
            continue
        cfg[key] = value


def get_dispatch_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return the merged dispatcher configuration.

    Merge order (later wins): defaults -> external config -> env vars -> overrides.
    The returned mapping is a fresh deep copy; callers may mutate it.
    """
    cfg: Dict[str, Any] = copy.deepcopy(DEFAULTS)
    _merge(cfg, _load_external_config())
    _merge(cfg, _env_overrides())
    if overrides:
        _merge(cfg, overrides)
    cfg["query_dir"] = os.path.expanduser(cfg["query_dir"])
    return cfg


def clear_config_cache() -> None:
    """Forget previously loaded config files (used by tests and reloads)."""
    _FILE_CACHE.clear()


__all__ = [
    "get_dispatch_config",
    "clear_config_cache",
    "DEFAULTS",
]
