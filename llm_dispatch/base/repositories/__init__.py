"""Repositories used by the dispatcher (credential storage)."""

from .copilot import COPILOT_TOKEN_URL, CopilotBearerRefresher
from .secrets import Refresher, SecretResolution, SecretStore

__all__ = [
    "SecretStore",
    "SecretResolution",
    "Refresher",
    "CopilotBearerRefresher",
    "COPILOT_TOKEN_URL",
]
