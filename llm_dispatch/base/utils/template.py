"""Minimal ``{{key}}`` template substitution.

Endpoints carry ``{{secret}}`` / ``{{model}}`` placeholders that are filled
per request. Substitution is literal (no regex, no escaping rules) so secrets
containing special characters pass through unchanged.
"""
from __future__ import annotations

from typing import Any, Mapping


def template_replace(template: str, key: str, value: Any) -> str:
    """Replace every occurrence of ``key`` in ``template`` with ``value``.

    ``None`` becomes an empty string and list values are joined with newlines.
    """
    if value is None:
        value = ""
    elif isinstance(value, (list, tuple)):
        value = "\n".join(str(v) for v in value)
    return template.replace(key, str(value))


def template_render(template: str, values: Mapping[str, Any]) -> str:
    """Apply ``template_replace`` for each ``key -> value`` pair in order."""
    for key, value in values.items():
        template = template_replace(template, key, value)
    return template


__all__ = ["template_replace", "template_render"]
