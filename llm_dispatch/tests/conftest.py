"""Shared fixtures for the dispatch test suite.

Provides the default collaborators (registry, main loop, in-memory document,
secret store) plus a scripted runner that records each started request and
lets a test replay stdout deliveries by hand.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, Iterator, List

import pytest

from llm_dispatch.base.loop import MainLoop
from llm_dispatch.base.models import Payload
from llm_dispatch.base.render import TextDocument, TextViewport
from llm_dispatch.base.repositories import SecretStore
from llm_dispatch.base.session import Query, QueryRegistry
from llm_dispatch.config import clear_config_cache, get_dispatch_config
from llm_dispatch.tests.helpers import ScriptedRunner


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep host configuration and credentials out of every test."""
    for name in (
        "DISPATCH_CONFIG_FILE",
        "DISPATCH_QUERY_DIR",
        "DISPATCH_CURL_PARAMS",
        "DISPATCH_RENDER_BATCH_SIZE",
        "DISPATCH_LOG_LEVEL",
        "OPENAI_API_KEY",
        "AZURE_API_KEY",
        "ANTHROPIC_API_KEY",
        "GOOGLEAI_API_KEY",
        "GEMINI_API_KEY",
        "GOOGLE_API_KEY",
        "PPLX_API_KEY",
        "GITHUB_COPILOT_TOKEN",
    ):
        monkeypatch.delenv(name, raising=False)
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture()
def registry() -> QueryRegistry:
    return QueryRegistry()


@pytest.fixture()
def loop() -> MainLoop:
    return MainLoop()


@pytest.fixture()
def document() -> TextDocument:
    return TextDocument(["# chat", ""], name="chat.md")


@pytest.fixture()
def viewport(document: TextDocument) -> TextViewport:
    return TextViewport(document)


@pytest.fixture()
def secrets() -> SecretStore:
    return SecretStore(env_resolver=lambda name: (None, None))


@pytest.fixture()
def runner() -> ScriptedRunner:
    return ScriptedRunner()


@pytest.fixture()
def config(tmp_path) -> Dict[str, Any]:
    return get_dispatch_config({"query_dir": str(tmp_path / "query")})


@pytest.fixture()
def make_query(registry: QueryRegistry) -> Callable[..., Query]:
    """Register a bare query record and return it."""

    def _make(qid: str = "q1", provider: str = "openai", handler=None, **kwargs: Any) -> Query:
        record = Query(
            id=qid,
            provider=provider,
            payload=Payload(model="gpt-4o"),
            handler=handler or (lambda *args: None),
            **kwargs,
        )
        return registry.create(qid, record)

    return _make


@pytest.fixture()
def log_events(caplog: pytest.LogCaptureFixture) -> Callable[[str], List[Dict[str, Any]]]:
    """Return a helper listing the structured payloads for one event name."""
    caplog.set_level(logging.DEBUG, logger="dispatch")

    def _events(event: str) -> List[Dict[str, Any]]:
        out: List[Dict[str, Any]] = []
        for record in caplog.records:
            try:
                payload = json.loads(record.getMessage())
            except ValueError:
                continue
            if isinstance(payload, dict) and payload.get("event") == event:
                out.append(payload)
        return out

    return _events
