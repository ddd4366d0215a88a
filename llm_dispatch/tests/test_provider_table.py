"""Provider table construction from defaults and setup options."""

from __future__ import annotations

import logging

from llm_dispatch.base.providers import build_provider_table, merge_provider_options
from llm_dispatch.config.defaults import DEFAULT_PROVIDERS


def test_defaults_keep_only_enabled_providers():
    table = build_provider_table(DEFAULT_PROVIDERS)
    assert sorted(table) == ["openai"]  # nosec B101


def test_named_provider_is_enabled_and_overlaid():
    table = build_provider_table(DEFAULT_PROVIDERS, {"ollama": {"endpoint": "http://gpu:11434/v1/chat/completions"}})
    assert "ollama" in table  # nosec B101
    assert table["ollama"].endpoint == "http://gpu:11434/v1/chat/completions"  # nosec B101
    assert table["ollama"].secret == "dummy_secret"  # nosec B101


def test_empty_mapping_disables_provider():
    table = build_provider_table(DEFAULT_PROVIDERS, {"openai": {}, "anthropic": {"secret": "k"}})
    assert "openai" not in table  # nosec B101
    assert "anthropic" in table  # nosec B101


def test_missing_endpoint_is_dropped_with_warning(log_events):
    table = build_provider_table({}, {"custom": {"secret": "x"}})
    assert table == {}  # nosec B101
    errors = log_events("dispatch.error")
    assert errors and errors[0]["error_code"] == "config"  # nosec B101
    assert errors[0]["provider"] == "custom"  # nosec B101


def test_merge_does_not_mutate_defaults():
    defaults = {"openai": {"endpoint": "https://x", "disable": False}}
    merged = merge_provider_options(defaults, {"openai": {"endpoint": "https://y"}})
    assert merged["openai"]["endpoint"] == "https://y"  # nosec B101
    assert defaults["openai"]["endpoint"] == "https://x"  # nosec B101


def test_invalid_profile_is_dropped(caplog):
    caplog.set_level(logging.WARNING, logger="dispatch")
    table = build_provider_table({}, {"weird": {"endpoint": "https://x", "disable": "not-a-bool"}})
    assert "weird" not in table  # nosec B101
