"""Copilot bearer exchange.

GitHub Copilot accepts short-lived bearer tokens only. The long-lived token
stored under the ``copilot`` secret is exchanged at the Copilot token endpoint;
the result is stored under ``copilot_bearer`` and reused until shortly before
it expires.
"""
from __future__ import annotations

import logging
import time
from typing import Optional

import httpx

from ...config.defaults import COPILOT_EDITOR_VERSION
from ..errors import AuthError
from ..http import get_httpx_client
from ..logging import get_logger, log_error
from .secrets import SecretStore

_logger = get_logger("dispatch.secrets.copilot")

COPILOT_TOKEN_URL = "https://api.github.com/copilot_internal/v2/token"
EXPIRY_MARGIN_SECONDS = 60


class CopilotBearerRefresher:
    """Callable refresher for :meth:`SecretStore.register_refresher`."""

    def __init__(
        self,
        source: str = "copilot",
        url: str = COPILOT_TOKEN_URL,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.source = source
        self.url = url
        self._client = client
        self._bearer: Optional[str] = None
        self._expires_at = 0.0

    def __call__(self, store: SecretStore) -> Optional[str]:
        if self._bearer and time.time() < self._expires_at - EXPIRY_MARGIN_SECONDS:
            return self._bearer
        token = store.get_secret(self.source)
        if not token:
            return None
        client = self._client if self._client is not None else get_httpx_client("auth")
        try:
            response = client.get(
                self.url,
                headers={"Authorization": f"token {token}", "editor-version": COPILOT_EDITOR_VERSION},
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            log_error(_logger, AuthError(f"copilot bearer refresh failed: {exc}", provider="copilot", raw=exc), level=logging.WARNING)
            return None
        self._bearer = data.get("token") or None
        self._expires_at = float(data.get("expires_at") or 0)
        return self._bearer


__all__ = ["CopilotBearerRefresher", "COPILOT_TOKEN_URL"]
