"""
Secret Store

Purpose
- Hold provider credentials for the dispatcher and resolve them lazily.
- Keep resolution order explicit and side-effect free apart from running a
  configured secret command.

Design
- Non-throwing accessors that return None if a secret is not resolved.
- Resolution priority per name:
    1) Literal string registered with ``add_secret``
    2) Command argv registered with ``add_secret`` (stdout, stripped)
    3) Environment variables (``config.env`` map, alias-aware)
    4) None
- Refreshable credentials (e.g. a short-lived copilot bearer derived from a
  long-lived token) register a refresher that ``refresh`` runs before the
  continuation.

Usage
- store = SecretStore()
- store.add_secret("openai", ["pass", "show", "openai"])
- store.run_with_secret("openai", lambda: ...)
"""

from __future__ import annotations

import logging
import subprocess
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from ...config.env import resolve_provider_key
from ..errors import AuthError
from ..logging import get_logger, log_error, log_event
from ..providers.profile import SecretSource

_logger = get_logger("dispatch.secrets")

Refresher = Callable[["SecretStore"], Optional[str]]


@dataclass
class SecretResolution:
    name: str
    value: Optional[str]
    source: str  # "literal", "command", "env", "refresh", "none"
    extra: Dict[str, Any] = field(default_factory=dict)


class SecretStore:
    """
    Thread-safe in-memory secret store with lazy resolution.

    Secrets are cached once resolved; ``add_secret`` replaces the source and
    drops any cached value for that name.
    """

    def __init__(
        self,
        env_resolver: Callable[[str], Any] = resolve_provider_key,
        command_runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ) -> None:
        self._env_resolver = env_resolver
        self._command_runner = command_runner
        self._sources: Dict[str, Optional[SecretSource]] = {}
        self._values: Dict[str, str] = {}
        self._refreshers: Dict[str, tuple[Refresher, str]] = {}
        self._lock = threading.RLock()

    # -------------------- registration --------------------

    def add_secret(self, name: str, secret: Optional[SecretSource]) -> None:
        """Register the source for ``name`` (literal, argv list or None)."""
        with self._lock:
            self._sources[name] = secret
            self._values.pop(name, None)

    def set_secret(self, name: str, value: str) -> None:
        """Store an already-resolved value (used by refreshers)."""
        with self._lock:
            self._values[name] = value

    def register_refresher(self, name: str, refresher: Refresher, target: Optional[str] = None) -> None:
        """Run ``refresher`` on ``refresh(name, ...)``; store its result under ``target``."""
        with self._lock:
            self._refreshers[name] = (refresher, target or name)

    # -------------------- access --------------------

    def get_secret(self, name: str) -> Optional[str]:
        """Return the loaded value for ``name`` or None (never resolves)."""
        with self._lock:
            return self._values.get(name)

    def load(self, name: str) -> SecretResolution:
        """Resolve ``name`` through the priority chain and cache a hit."""
        with self._lock:
            cached = self._values.get(name)
            if cached:
                return SecretResolution(name=name, value=cached, source="cache")
            source = self._sources.get(name)
        resolution = self._resolve(name, source)
        if resolution.value:
            self.set_secret(name, resolution.value)
        return resolution

    def run_with_secret(self, name: str, fn: Callable[[], Any]) -> Any:
        """Invoke ``fn`` once the secret for ``name`` is loaded.

        When no secret can be resolved an :class:`AuthError` is logged and
        ``fn`` is not called.
        """
        resolution = self.load(name)
        if not resolution.value:
            log_error(_logger, AuthError(f"secret for {name} is missing", provider=name), level=logging.WARNING)
            return None
        return fn()

    def refresh(self, name: str, fn: Callable[[], Any]) -> Any:
        """Run the refresher registered for ``name`` (if any), then ``fn``.

        A refresher returning nothing drops the previously stored value so
        ``fn`` cannot use a stale credential.
        """
        with self._lock:
            entry = self._refreshers.get(name)
        if entry is not None:
            refresher, target = entry
            value = refresher(self)
            if value:
                self.set_secret(target, value)
                log_event(_logger, "secrets.refreshed", name=name, target=target)
            else:
                with self._lock:
                    self._values.pop(target, None)
                log_event(_logger, "secrets.refresh_failed", level=logging.WARNING, name=name, target=target)
        return fn()

    # -------------------- internal helpers --------------------

    def _resolve(self, name: str, source: Optional[SecretSource]) -> SecretResolution:
        if isinstance(source, str) and source:
            return SecretResolution(name=name, value=source, source="literal")
        if isinstance(source, list) and source:
            value = self._run_command(name, source)
            return SecretResolution(name=name, value=value, source="command" if value else "none")
        value, env_var = self._env_resolver(name)
        if value:
            return SecretResolution(name=name, value=value, source="env", extra={"env_var": env_var})
        return SecretResolution(name=name, value=None, source="none")

    def _run_command(self, name: str, argv: list) -> Optional[str]:
        try:
            proc = self._command_runner(argv, capture_output=True, text=True, check=False)
        except OSError as exc:
            log_event(_logger, "secrets.command_failed", level=logging.WARNING, name=name, error=str(exc))
            return None
        if proc.returncode != 0:
            log_event(
                _logger,
                "secrets.command_failed",
                level=logging.WARNING,
                name=name,
                returncode=proc.returncode,
                stderr=(proc.stderr or "").strip() or None,
            )
            return None
        return (proc.stdout or "").strip() or None


__all__ = ["SecretStore", "SecretResolution", "Refresher"]
