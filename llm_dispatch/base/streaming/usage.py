"""Token usage and cost estimation.

Usage lines arrive as ``{"usage": {"prompt_tokens": .., "completion_tokens":
.., "total_tokens": ..}}``. Counts are coerced defensively: non-integer or
negative values become 0, and a missing total is derived from its parts.
Cost uses fixed per-1000-token rates from ``config.defaults``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from ...config.defaults import COMPLETION_COST_PER_1K, COST_CURRENCY, PROMPT_COST_PER_1K


@dataclass(frozen=True)
class UsageReport:
    """Token counts and estimated cost for one completed request."""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int
    cost: float
    currency: str = COST_CURRENCY

    def message(self) -> str:
        """Return the one-line human summary shown to the user."""
        return (
            f"Tokens usage: prompt={self.prompt_tokens}, completion={self.completion_tokens}, "
            f"total={self.total_tokens}, cost≈{self.currency}{self.cost:.4f}"
        )

    def tokens(self) -> Dict[str, int]:
        """Return the canonical ``prompt/completion/total`` mapping for logs."""
        return {"prompt": self.prompt_tokens, "completion": self.completion_tokens, "total": self.total_tokens}


def _coerce_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        iv = int(value)
    except (TypeError, ValueError):
        return None
    return iv if iv >= 0 else None


def compute_cost(
    prompt_tokens: int,
    completion_tokens: int,
    *,
    prompt_rate: float = PROMPT_COST_PER_1K,
    completion_rate: float = COMPLETION_COST_PER_1K,
) -> float:
    """Return the estimated cost using per-1000-token rates."""
    return prompt_tokens * prompt_rate / 1000 + completion_tokens * completion_rate / 1000


def usage_report_from(
    usage: Mapping[str, Any],
    *,
    prompt_rate: float = PROMPT_COST_PER_1K,
    completion_rate: float = COMPLETION_COST_PER_1K,
    currency: str = COST_CURRENCY,
) -> UsageReport:
    """Build a :class:`UsageReport` from a provider ``usage`` object."""
    prompt = _coerce_int(usage.get("prompt_tokens")) or 0
    completion = _coerce_int(usage.get("completion_tokens")) or 0
    total = _coerce_int(usage.get("total_tokens"))
    if total is None:
        total = prompt + completion
    return UsageReport(
        prompt_tokens=prompt,
        completion_tokens=completion,
        total_tokens=total,
        cost=compute_cost(prompt, completion, prompt_rate=prompt_rate, completion_rate=completion_rate),
        currency=currency,
    )


__all__ = ["UsageReport", "compute_cost", "usage_report_from"]
