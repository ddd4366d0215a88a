"""Stream runners: deliver a provider's response bytes to the decoder."""

from .http import HttpxStreamRunner
from .process import CurlProcessRunner
from .request import StreamRequest

__all__ = ["StreamRequest", "CurlProcessRunner", "HttpxStreamRunner"]
