"""Runner-neutral description of one streaming request."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class StreamRequest:
    """Endpoint, headers and body location for a single streamed POST.

    ``payload_file`` is the JSON artifact written for the request; ``body``
    carries the same object in memory for runners that do not read the file.
    """

    endpoint: str
    headers: Dict[str, str] = field(default_factory=dict)
    payload_file: Optional[str] = None
    body: Optional[Dict[str, Any]] = None
    curl_params: List[str] = field(default_factory=list)
    provider: Optional[str] = None
    query_id: Optional[str] = None

    def header_args(self) -> List[str]:
        args: List[str] = []
        for name, value in self.headers.items():
            args.extend(["-H", f"{name}: {value}"])
        return args

    def to_curl_args(self) -> List[str]:
        """Return curl arguments: configured params, transfer flags, headers."""
        args = list(self.curl_params)
        args.extend(["--no-buffer", "-s", self.endpoint, "-H", "Content-Type: application/json"])
        if self.payload_file:
            args.extend(["-d", f"@{self.payload_file}"])
        args.extend(self.header_args())
        return args


__all__ = ["StreamRequest"]
