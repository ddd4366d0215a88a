"""Query session: wires one submitted query to its runner and decoder.

Submission (:func:`launch_query`)
    register the :class:`Query`, resolve the provider, write the payload
    artifact, build the :class:`StreamRequest` and start the runner. An
    :class:`AuthError` aborts before any transfer: it is logged at WARNING and
    the record is removed.

Streaming (:meth:`QuerySession.on_stdout`, runner thread)
    bytes go to the decoder; transport errors are logged as
    :class:`StreamIOError` and decoding continues.

Draining (end-of-stream)
    decoder close, then ``on_exit(query_id)``, then, on the main loop,
    clearing the handler's anchor group (if the query is still registered)
    followed by the completion callback with the full response text.

Cancellation
    deleting the record from the registry. Every later event for the query is
    a silent no-op; the completion callback is not invoked.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional

from .errors import AuthError, StreamIOError
from .interfaces import Scheduler, SecretProvider, StreamRunner
from .logging import LogContext, get_logger, log_error, log_event
from .models import Payload
from .providers import ProviderProfile, resolve_provider
from .runners.request import StreamRequest
from .session.lifecycle import QueryEvent, QueryState
from .session.query import Query
from .session.registry import QueryRegistry
from .streaming.decoder import StreamDecoder, UsageListener
from .streaming.usage import UsageReport
from .utils.files import new_uuid, payload_file_name, write_json

_logger = get_logger("dispatch.session")


class QuerySession:
    """Stream-side state of one query (decoder plus lifecycle bookkeeping)."""

    def __init__(
        self,
        query: Query,
        registry: QueryRegistry,
        loop: Scheduler,
        *,
        reasoning: bool = False,
        on_usage: Optional[UsageListener] = None,
    ) -> None:
        self.query = query
        self._registry = registry
        self._loop = loop
        self._on_usage = on_usage
        self.decoder = StreamDecoder(
            query.id,
            registry,
            query.handler,
            reasoning=reasoning,
            on_usage=self._usage,
        )

    @property
    def query_id(self) -> str:
        return self.query.id

    def _ctx(self) -> LogContext:
        return LogContext.for_query(self.query)

    # -------------------- runner callbacks --------------------

    def on_stdout(self, err: Optional[BaseException], chunk: Optional[bytes]) -> None:
        """Runner stdout reader; never raises into the runner thread."""
        try:
            self._on_stdout(err, chunk)
        except Exception as exc:
            log_event(
                _logger,
                "stream.consumer_error",
                self._ctx(),
                level=logging.ERROR,
                error=str(exc),
                error_type=type(exc).__name__,
            )

    def on_process_exit(self, returncode: int) -> None:
        log_event(
            _logger,
            "query.process_exit",
            self._ctx(),
            level=logging.DEBUG if returncode in (0, 200) else logging.WARNING,
            returncode=returncode,
        )

    # -------------------- internals --------------------

    def _on_stdout(self, err: Optional[BaseException], chunk: Optional[bytes]) -> None:
        query = self._registry.get(self.query.id)
        if query is None:
            self._cancelled()
            return
        if query.done:
            return
        if err is not None:
            log_error(
                _logger,
                StreamIOError(
                    f"{query.provider} query stdout error: {err}",
                    provider=query.provider,
                    query_id=query.id,
                    raw=err,
                ),
            )
            return
        if chunk is None:
            self._drain(query)
            return
        query.apply(QueryEvent.BYTES_RECEIVED)
        self.decoder.feed(chunk)

    def _drain(self, query: Query) -> None:
        query.apply(QueryEvent.STREAM_CLOSED)
        if not self.decoder.close():
            self._cancelled()
            return
        if query.on_exit is not None:
            query.on_exit(query.id)
        self._loop.schedule(self._clear_anchors, query.id)
        if query.callback is not None:
            self._loop.schedule(query.callback, query.response)
        query.apply(QueryEvent.FINISHED)
        log_event(
            _logger,
            "query.finished",
            self._ctx(),
            response_chars=len(query.response),
            first_line=query.first_line,
            last_line=query.last_line,
        )

    def _clear_anchors(self, query_id: str) -> None:
        query = self._registry.get(query_id)
        if query is None or query.anchor_group is None or query.document is None:
            return
        if query.document.is_valid():
            query.document.clear_anchor_group(query.anchor_group)

    def _cancelled(self) -> None:
        if self.query.state is QueryState.DONE:
            return
        self.query.apply(QueryEvent.CANCELLED)
        log_event(_logger, "query.cancelled", self._ctx(), level=logging.DEBUG)

    def _usage(self, report: UsageReport) -> None:
        if self._on_usage is not None:
            self._loop.schedule(self._on_usage, report)


def launch_query(
    *,
    document: Any,
    provider: str,
    profile: ProviderProfile,
    payload: Payload,
    handler: Any,
    registry: QueryRegistry,
    secrets: SecretProvider,
    runner: StreamRunner,
    loop: Scheduler,
    query_dir: str,
    curl_params: Optional[List[str]] = None,
    on_exit: Any = None,
    callback: Any = None,
    is_reasoning: bool = False,
    on_usage: Optional[UsageListener] = None,
) -> Optional[str]:
    """Register and start one query; returns its id, or None if aborted."""
    qid = new_uuid()
    query = registry.create(
        qid,
        Query(
            id=qid,
            provider=provider,
            payload=payload,
            handler=handler,
            document=document,
            on_exit=on_exit,
            callback=callback,
        ),
    )
    ctx = LogContext.for_query(query)

    try:
        resolved = resolve_provider(provider, profile.endpoint or "", payload, secrets)
    except AuthError as exc:
        exc.query_id = qid
        log_error(_logger, exc, ctx, level=logging.WARNING)
        registry.delete(qid)
        return None

    body = resolved.payload.to_dict()
    try:
        payload_file = write_json(body, payload_file_name(query_dir))
    except OSError as exc:
        log_error(_logger, StreamIOError(f"cannot write payload for {provider}: {exc}", provider=provider, query_id=qid, raw=exc), ctx)
        registry.delete(qid)
        return None
    request = StreamRequest(
        endpoint=resolved.endpoint,
        headers=resolved.headers,
        payload_file=payload_file,
        body=body,
        curl_params=list(curl_params or []),
        provider=provider,
        query_id=qid,
    )
    session = QuerySession(query, registry, loop, reasoning=is_reasoning, on_usage=on_usage)
    log_event(_logger, "query.started", ctx, payload_file=payload_file, reasoning=is_reasoning or None)
    runner.start(document, request, session.on_stdout, session.on_process_exit)
    return qid


__all__ = ["QuerySession", "launch_query"]
