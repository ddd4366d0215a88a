"""Provider profiles, setup-time table construction and per-request resolution."""

from .profile import ProviderProfile, SecretSource
from .resolver import ResolvedProvider, resolve_provider, secret_key_for
from .table import build_provider_table, merge_provider_options

__all__ = [
    "ProviderProfile",
    "SecretSource",
    "ResolvedProvider",
    "resolve_provider",
    "secret_key_for",
    "build_provider_table",
    "merge_provider_options",
]
