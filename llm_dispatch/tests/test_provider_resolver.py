"""Per-provider headers, endpoint templating and payload mutation."""

from __future__ import annotations

import pytest

from llm_dispatch.base.errors import AuthError, ErrorCode
from llm_dispatch.base.models import Payload
from llm_dispatch.base.providers import resolve_provider, secret_key_for


@pytest.fixture()
def payload() -> Payload:
    return Payload(messages=[{"role": "user", "content": "hi"}], model="gemini")


def _store(secrets, **values):
    for name, value in values.items():
        secrets.set_secret(name, value)
    return secrets


def test_googleai_substitutes_model_and_secret(secrets, payload):
    _store(secrets, googleai="abc")
    resolved = resolve_provider("googleai", "https://x/{{model}}?key={{secret}}", payload, secrets)
    assert resolved.endpoint == "https://x/gemini?key=abc"  # nosec B101
    assert resolved.headers == {}  # nosec B101
    assert "model" not in resolved.payload.to_dict()  # nosec B101
    assert payload.model == "gemini"  # nosec B101 - caller payload untouched


def test_openai_sends_bearer_and_api_key(secrets, payload):
    _store(secrets, openai="sk-1")
    resolved = resolve_provider("openai", "https://api.openai.com/v1/chat/completions", payload, secrets)
    assert resolved.headers == {"Authorization": "Bearer sk-1", "api-key": "sk-1"}  # nosec B101
    assert resolved.payload.model == "gemini"  # nosec B101


def test_copilot_uses_refreshed_bearer(secrets, payload):
    _store(secrets, copilot="gh-long-lived", copilot_bearer="short")
    resolved = resolve_provider("copilot", "https://api.githubcopilot.com/chat/completions", payload, secrets)
    assert resolved.headers == {  # nosec B101
        "editor-version": "vscode/1.85.1",
        "Authorization": "Bearer short",
    }
    assert secret_key_for("copilot") == "copilot_bearer"  # nosec B101


def test_anthropic_headers(secrets, payload):
    _store(secrets, anthropic="ak")
    resolved = resolve_provider("anthropic", "https://api.anthropic.com/v1/messages", payload, secrets)
    assert resolved.headers == {  # nosec B101
        "x-api-key": "ak",
        "anthropic-version": "2023-06-01",
        "anthropic-beta": "messages-2023-12-15",
    }


def test_azure_substitutes_model_only(secrets, payload):
    _store(secrets, azure="az")
    resolved = resolve_provider("azure", "https://h/deployments/{{model}}/chat", payload, secrets)
    assert resolved.endpoint == "https://h/deployments/gemini/chat"  # nosec B101
    assert resolved.headers == {"api-key": "az"}  # nosec B101
    assert resolved.payload.model == "gemini"  # nosec B101


def test_unknown_provider_defaults_to_bearer(secrets, payload):
    _store(secrets, ollama="dummy_secret")
    resolved = resolve_provider("ollama", "http://localhost:11434/v1/chat/completions", payload, secrets)
    assert resolved.headers == {"Authorization": "Bearer dummy_secret"}  # nosec B101


def test_missing_secret_raises_auth_error(secrets, payload):
    with pytest.raises(AuthError) as info:
        resolve_provider("openai", "https://x", payload, secrets)
    assert info.value.code is ErrorCode.AUTH  # nosec B101
    assert info.value.provider == "openai"  # nosec B101
