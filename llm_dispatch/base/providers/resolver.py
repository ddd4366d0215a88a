"""Provider resolver.

Maps a provider id to its secret lookup key, request headers and any endpoint
or payload mutation. Each provider's policy is a small function registered in
``_POLICIES``; unknown providers fall back to OpenAI-compatible bearer auth.

Failure semantics:
    A missing secret raises :class:`AuthError`; the session logs it and aborts
    before any process is started. The caller's payload is never mutated.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Tuple

from ...config.defaults import (
    ANTHROPIC_BETA,
    ANTHROPIC_VERSION,
    COPILOT_EDITOR_VERSION,
    COPILOT_SECRET_NAME,
)
from ..errors import AuthError
from ..interfaces import SecretProvider
from ..models import Payload
from ..utils.template import template_render, template_replace


@dataclass
class ResolvedProvider:
    """Everything the runner needs to address one provider for one request."""

    provider: str
    endpoint: str
    headers: Dict[str, str] = field(default_factory=dict)
    payload: Payload = field(default_factory=Payload)


_Policy = Callable[[str, Payload, str], Tuple[str, Dict[str, str]]]


def _copilot(endpoint: str, payload: Payload, bearer: str):
    return endpoint, {
        "editor-version": COPILOT_EDITOR_VERSION,
        "Authorization": f"Bearer {bearer}",
    }


def _openai(endpoint: str, payload: Payload, bearer: str):
    # api-key duplicates the bearer for older OpenAI-compatible gateways
    return endpoint, {
        "Authorization": f"Bearer {bearer}",
        "api-key": bearer,
    }


def _googleai(endpoint: str, payload: Payload, bearer: str):
    endpoint = template_render(endpoint, {"{{secret}}": bearer, "{{model}}": payload.model})
    payload.model = None
    return endpoint, {}


def _anthropic(endpoint: str, payload: Payload, bearer: str):
    return endpoint, {
        "x-api-key": bearer,
        "anthropic-version": ANTHROPIC_VERSION,
        "anthropic-beta": ANTHROPIC_BETA,
    }


def _azure(endpoint: str, payload: Payload, bearer: str):
    return template_replace(endpoint, "{{model}}", payload.model), {"api-key": bearer}


def _default(endpoint: str, payload: Payload, bearer: str):
    return endpoint, {"Authorization": f"Bearer {bearer}"}


_POLICIES: Dict[str, _Policy] = {
    "copilot": _copilot,
    "openai": _openai,
    "googleai": _googleai,
    "anthropic": _anthropic,
    "azure": _azure,
}


def secret_key_for(provider: str) -> str:
    """Return the secret-store key holding the credential for ``provider``."""
    return COPILOT_SECRET_NAME if provider == "copilot" else provider


def resolve_provider(
    provider: str,
    endpoint: str,
    payload: Payload,
    secrets: SecretProvider,
) -> ResolvedProvider:
    """Resolve endpoint, headers and payload for one request.

    Raises:
        AuthError: when the secret store has no value for the provider's key.
    """
    bearer = secrets.get_secret(secret_key_for(provider))
    if not bearer:
        raise AuthError(f"{provider} bearer token is missing", provider=provider)

    body = payload.model_copy(deep=True)
    policy = _POLICIES.get(provider, _default)
    endpoint, headers = policy(endpoint, body, bearer)
    return ResolvedProvider(provider=provider, endpoint=endpoint, headers=headers, payload=body)


__all__ = ["ResolvedProvider", "resolve_provider", "secret_key_for"]
