"""Dispatcher facade.

Purpose
-------
Single entry point for hosts: configure providers once with :meth:`setup`,
build payloads, submit streaming queries, and create render handlers that
write the streamed answer into a document.

Collaborators
-------------
All collaborators are injectable; defaults are the in-process
implementations shipped with the package:

- ``registry``: :class:`QueryRegistry` (cancellation = deleting a record)
- ``secrets``: :class:`SecretStore`
- ``runner``: :class:`CurlProcessRunner` (or :class:`HttpxStreamRunner`)
- ``loop``: :class:`MainLoop`, drained by the host with ``run_pending``

Failure semantics
-----------------
``query`` never raises for expected failures. A non-callable handler, an
unknown provider or a missing secret are logged through the error taxonomy
and the call returns ``None`` without starting a transfer.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from .base.errors import ConfigError, HandlerContractError
from .base.interfaces import CompletionCallback, ExitHandler, ResponseHandler, Scheduler, StreamRunner
from .base.logging import LogContext, get_logger, log_error, log_event
from .base.loop import MainLoop
from .base.models import Message, Payload
from .base.payload import ModelLike, prepare_payload
from .base.providers import ProviderProfile, build_provider_table
from .base.query_session import launch_query
from .base.render import RenderHandler
from .base.repositories import CopilotBearerRefresher, SecretStore
from .base.runners import CurlProcessRunner
from .base.session import Query, QueryRegistry
from .base.streaming import UsageListener
from .base.utils import prepare_dir, prune_dir
from .config import get_dispatch_config
from .config.defaults import COPILOT_SECRET_NAME, QUERY_CACHE_KEEP_FILES, QUERY_CACHE_MAX_FILES

_logger = get_logger("dispatch.dispatcher")


class Dispatcher:
    """Routes chat payloads to providers and streams answers back."""

    def __init__(
        self,
        *,
        registry: Optional[QueryRegistry] = None,
        secrets: Optional[SecretStore] = None,
        runner: Optional[StreamRunner] = None,
        loop: Optional[Scheduler] = None,
        config: Optional[Dict[str, Any]] = None,
        on_usage: Optional[UsageListener] = None,
    ) -> None:
        self.config = config if config is not None else get_dispatch_config()
        self.registry = registry if registry is not None else QueryRegistry()
        self.secrets = secrets if secrets is not None else SecretStore()
        self.loop = loop if loop is not None else MainLoop()
        self.runner = runner if runner is not None else CurlProcessRunner(self.config["curl_executable"])
        self.on_usage = on_usage
        self.providers: Dict[str, ProviderProfile] = {}
        self.curl_params = list(self.config["curl_params"])
        self.query_dir = self.config["query_dir"]
        self.render_batch_size = int(self.config["render_batch_size"])

    # -------------------- setup --------------------

    def setup(self, opts: Optional[Mapping[str, Any]] = None) -> "Dispatcher":
        """Build the provider table, register secrets and prepare the query cache.

        ``opts`` keys: ``providers`` (name -> profile overrides; an empty
        mapping disables a provider), ``curl_params`` and ``query_dir``.
        """
        opts = dict(opts or {})
        user_providers = opts.get("providers") or {}
        log_event(_logger, "dispatch.setup.started", level=logging.DEBUG, providers=sorted(user_providers) or None)

        curl_params = opts.get("curl_params")
        self.curl_params = list(curl_params) if curl_params is not None else list(self.config["curl_params"])

        self.providers = build_provider_table(self.config["providers"], user_providers)
        for name, profile in self.providers.items():
            self.secrets.add_secret(name, profile.secret)
            profile.secret = None
        if "copilot" in self.providers:
            self.secrets.register_refresher("copilot", CopilotBearerRefresher(), target=COPILOT_SECRET_NAME)

        self.query_dir = prepare_dir(opts.get("query_dir") or self.query_dir, "query store")
        pruned = prune_dir(self.query_dir, "*.json", QUERY_CACHE_MAX_FILES, QUERY_CACHE_KEEP_FILES)

        log_event(
            _logger,
            "dispatch.setup.finished",
            level=logging.DEBUG,
            providers=sorted(self.providers),
            query_dir=self.query_dir,
            pruned=len(pruned) or None,
        )
        return self

    # -------------------- payloads --------------------

    def prepare_payload(
        self,
        messages: Iterable[Union[Message, Mapping[str, Any]]],
        model: ModelLike,
        provider: Optional[str] = None,
    ) -> Payload:
        return prepare_payload(messages, model, provider)

    # -------------------- queries --------------------

    def query(
        self,
        document: Any,
        provider: str,
        payload: Payload,
        handler: ResponseHandler,
        on_exit: Optional[ExitHandler] = None,
        callback: Optional[CompletionCallback] = None,
        is_reasoning: bool = False,
    ) -> Optional[str]:
        """Submit one streaming query.

        Returns the query id once a transfer was started, otherwise ``None``.
        For ``copilot`` the short-lived bearer is refreshed first.
        """
        ctx = LogContext(provider=provider, model=getattr(payload, "model", None))
        if not callable(handler):
            log_error(
                _logger,
                HandlerContractError(
                    f"query() expects a handler function, but got {type(handler).__name__}",
                    provider=provider,
                ),
                ctx,
            )
            return None

        profile = self.providers.get(provider)
        if profile is None:
            log_error(_logger, ConfigError(f"Provider {provider} is not configured", provider=provider), ctx)
            return None

        def send() -> Optional[str]:
            return launch_query(
                document=document,
                provider=provider,
                profile=profile,
                payload=payload,
                handler=handler,
                registry=self.registry,
                secrets=self.secrets,
                runner=self.runner,
                loop=self.loop,
                query_dir=self.query_dir,
                curl_params=self.curl_params,
                on_exit=on_exit,
                callback=callback,
                is_reasoning=is_reasoning,
                on_usage=self.on_usage,
            )

        if provider == "copilot":
            return self.secrets.run_with_secret(provider, lambda: self.secrets.refresh(provider, send))
        return self.secrets.run_with_secret(provider, send)

    def get_query(self, qid: str) -> Optional[Query]:
        return self.registry.get(qid)

    def cancel(self, qid: str) -> bool:
        """Evict ``qid``; later stream events for it are ignored.

        The underlying transfer is not interrupted. Returns whether a record
        was removed.
        """
        removed = self.registry.delete(qid) is not None
        if removed:
            log_event(_logger, "query.cancel_requested", LogContext(query_id=qid))
        return removed

    # -------------------- rendering --------------------

    def create_handler(
        self,
        document: Any,
        viewport: Any = None,
        line: Optional[int] = None,
        first_undojoin: bool = False,
        prefix: str = "",
        cursor: bool = False,
    ) -> ResponseHandler:
        """Return a main-loop-scheduled handler rendering into ``document``.

        The response starts at ``line`` (0-based) or, when omitted, at the
        viewport's cursor line. The underlying :class:`RenderHandler` is
        available as ``handler.__wrapped__``.
        """
        render = RenderHandler(
            document,
            self.registry,
            viewport=viewport,
            line=line,
            first_undojoin=first_undojoin,
            prefix=prefix,
            cursor=cursor,
            batch_size=self.render_batch_size,
        )
        return self.loop.wrap(render)


__all__ = ["Dispatcher"]
