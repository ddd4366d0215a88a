"""Streaming package: line classification, usage accounting and the
incremental decoder that drives response handlers."""

from .line_parser import DecodedLine, LineKind, classify_line, strip_sse_prefix
from .usage import UsageReport, compute_cost, usage_report_from
from .decoder import StreamDecoder, UsageListener

__all__ = [
    "DecodedLine",
    "LineKind",
    "classify_line",
    "strip_sse_prefix",
    "UsageReport",
    "compute_cost",
    "usage_report_from",
    "StreamDecoder",
    "UsageListener",
]
