"""llm_dispatch.config.defaults
============================

Central place for small, stable default values used across the llm_dispatch
package. These defaults can be overridden via environment variables, an
external config file or explicit overrides (see ``llm_dispatch.config``), but
provide sensible fallbacks for local development and tests.

This module intentionally avoids importing from other dispatch packages to
prevent circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

import os

# ---- Provider profiles ----
# Only openai is enabled out of the box; the rest are enabled by passing a
# non-empty profile for them to ``Dispatcher.setup``.
DEFAULT_PROVIDERS = {
    "openai": {
        "disable": False,
        "endpoint": "https://api.openai.com/v1/chat/completions",
    },
    "azure": {
        "disable": True,
        "endpoint": "https://$URL.openai.azure.com/openai/deployments/{{model}}/chat/completions",
    },
    "copilot": {
        "disable": True,
        "endpoint": "https://api.githubcopilot.com/chat/completions",
    },
    "ollama": {
        "disable": True,
        "endpoint": "http://localhost:11434/v1/chat/completions",
        "secret": "dummy_secret",
    },
    "lmstudio": {
        "disable": True,
        "endpoint": "http://localhost:1234/v1/chat/completions",
        "secret": "dummy_secret",
    },
    "googleai": {
        "disable": True,
        "endpoint": "https://generativelanguage.googleapis.com/v1beta/models/{{model}}:streamGenerateContent?key={{secret}}",
    },
    "pplx": {
        "disable": True,
        "endpoint": "https://api.perplexity.ai/chat/completions",
    },
    "anthropic": {
        "disable": True,
        "endpoint": "https://api.anthropic.com/v1/messages",
    },
}

# ---- Transport ----
CURL_EXECUTABLE = "curl"
# Extra curl arguments placed before the request arguments (e.g. proxies).
DEFAULT_CURL_PARAMS: list[str] = []
# httpx connect timeout; reads stay unbounded since streams have no deadline.
HTTP_CONNECT_TIMEOUT_SECONDS = 30.0

# ---- Query cache ----
DEFAULT_QUERY_DIR = os.path.join(
    os.getenv("XDG_CACHE_HOME") or os.path.join(os.path.expanduser("~"), ".cache"),
    "llm_dispatch",
    "query",
)
# Prune once the directory holds more than this many payload files...
QUERY_CACHE_MAX_FILES = 200
# ...keeping this many of the newest.
QUERY_CACHE_KEEP_FILES = 100

# ---- Query registry ----
# Finished records kept for hosts reading line ranges after completion.
QUERY_REGISTRY_KEEP_FINISHED = 20
QUERY_REGISTRY_MAX_AGE_SECONDS = 600.0

# ---- Rendering ----
RENDER_BATCH_SIZE = 100
REASONING_LINE_PREFIX = "> "

# ---- Reasoning block framing ----
REASONING_CLOSE_MIDSTREAM = "\n</details>\n</think>\n\n"
REASONING_CLOSE_AT_END = "\n</details>\n</think>\n"

# ---- Usage cost estimate (per 1000 tokens) ----
PROMPT_COST_PER_1K = 0.01225
COMPLETION_COST_PER_1K = 0.098
COST_CURRENCY = "¥"

# ---- Provider protocol constants ----
COPILOT_SECRET_NAME = "copilot_bearer"
COPILOT_EDITOR_VERSION = "vscode/1.85.1"
ANTHROPIC_VERSION = "2023-06-01"
ANTHROPIC_BETA = "messages-2023-12-15"


__all__ = [
    "DEFAULT_PROVIDERS",
    "CURL_EXECUTABLE",
    "DEFAULT_CURL_PARAMS",
    "HTTP_CONNECT_TIMEOUT_SECONDS",
    "DEFAULT_QUERY_DIR",
    "QUERY_CACHE_MAX_FILES",
    "QUERY_CACHE_KEEP_FILES",
    "QUERY_REGISTRY_KEEP_FINISHED",
    "QUERY_REGISTRY_MAX_AGE_SECONDS",
    "RENDER_BATCH_SIZE",
    "REASONING_LINE_PREFIX",
    "REASONING_CLOSE_MIDSTREAM",
    "REASONING_CLOSE_AT_END",
    "PROMPT_COST_PER_1K",
    "COMPLETION_COST_PER_1K",
    "COST_CURRENCY",
    "COPILOT_SECRET_NAME",
    "COPILOT_EDITOR_VERSION",
    "ANTHROPIC_VERSION",
    "ANTHROPIC_BETA",
]
