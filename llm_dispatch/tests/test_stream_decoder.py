"""Stream decoder: buffering, reasoning blocks, usage side-channel, eviction."""

from __future__ import annotations

import pytest

from llm_dispatch.base.streaming import StreamDecoder
from llm_dispatch.config.defaults import REASONING_CLOSE_AT_END, REASONING_CLOSE_MIDSTREAM
from llm_dispatch.tests.helpers import Recorder, sse_delta, sse_usage

STREAM = (
    sse_delta(reasoning="Let me ")
    + sse_delta(reasoning="think.")
    + sse_delta(content="Hello ")
    + sse_delta(content="wörld")
    + sse_usage(5, 7)
    + "data: [DONE]\n"
)


def _decode(registry, make_query, chunks, *, reasoning=False, on_usage=None):
    query = make_query()
    recorder = Recorder()
    decoder = StreamDecoder(query.id, registry, recorder, reasoning=reasoning, on_usage=on_usage)
    for chunk in chunks:
        decoder.feed(chunk)
    decoder.close()
    return query, recorder


def _summary(events):
    reasoning = "".join(e[1] for e in events if e[2] and not e[3])
    content = "".join(e[1] for e in events if not e[2] and not e[3])
    stops = [e for e in events if e[3]]
    return reasoning, content, stops


def test_event_sequence_is_independent_of_chunk_boundaries(registry, make_query):
    data = STREAM.encode("utf-8")
    _, whole = _decode(registry, make_query, [data], reasoning=True)
    registry.delete("q1")
    _, bytewise = _decode(registry, make_query, [data[i:i + 1] for i in range(len(data))], reasoning=True)

    assert _summary(whole.events) == _summary(bytewise.events)  # nosec B101
    reasoning, content, stops = _summary(whole.events)
    assert reasoning == "Let me think."  # nosec B101
    assert content == "Hello wörld"  # nosec B101
    assert stops == [  # nosec B101
        ("q1", "", True, True),
        ("q1", REASONING_CLOSE_MIDSTREAM, False, True),
        ("q1", "", False, True),
    ]


def test_reasoning_block_closes_once_at_end_of_stream(registry, make_query):
    _, recorder = _decode(registry, make_query, [sse_delta(reasoning="hmm")], reasoning=True)
    assert recorder.events == [  # nosec B101
        ("q1", "hmm", True, False),
        ("q1", "", True, True),
        ("q1", "\n", False, True),
        ("q1", REASONING_CLOSE_AT_END, False, True),
    ]


def test_without_reasoning_a_single_stop_sentinel_is_emitted(registry, make_query):
    query, recorder = _decode(registry, make_query, [sse_delta(content="a") + sse_delta(content="b")])
    assert recorder.events == [("q1", "ab", False, False), ("q1", "", False, True)]  # nosec B101
    assert query.response == "ab"  # nosec B101


def test_partial_line_waits_for_newline_and_is_flushed_on_close(registry, make_query):
    query = make_query()
    recorder = Recorder()
    decoder = StreamDecoder(query.id, registry, recorder)
    decoder.feed(sse_delta(content="tail").rstrip("\n"))
    assert recorder.events == []  # nosec B101
    assert decoder.pending  # nosec B101
    assert decoder.close() is True  # nosec B101
    assert recorder.content() == "tail"  # nosec B101


def test_raw_response_keeps_non_blank_lines(registry, make_query):
    query, _ = _decode(registry, make_query, ["\n\n" + sse_delta(content="x") + "data: [DONE]\n"])
    assert query.raw_response.count("\n") == 2  # nosec B101
    assert query.raw_response.endswith("data: [DONE]\n")  # nosec B101


def test_usage_is_reported_not_rendered(registry, make_query, log_events):
    reports = []
    _, recorder = _decode(
        registry,
        make_query,
        [sse_delta(content="ok") + sse_usage(1000, 1000, 2000)],
        on_usage=reports.append,
    )
    assert recorder.content() == "ok"  # nosec B101
    assert len(reports) == 1  # nosec B101
    assert reports[0].total_tokens == 2000  # nosec B101
    assert reports[0].cost == pytest.approx(0.01225 + 0.098)  # nosec B101
    usage = log_events("stream.usage")
    assert usage and usage[0]["tokens"] == {"prompt": 1000, "completion": 1000, "total": 2000}  # nosec B101


def test_malformed_delta_is_logged_and_skipped(registry, make_query, log_events):
    _, recorder = _decode(
        registry,
        make_query,
        ['data: {"choices":[{"delta":{"content":"lost"\n' + sse_delta(content="kept")],
    )
    assert recorder.content() == "kept"  # nosec B101
    assert len(log_events("stream.line_malformed")) == 1  # nosec B101


def test_empty_response_is_logged_once(registry, make_query, log_events):
    _decode(registry, make_query, ["data: [DONE]\n"])
    errors = [e for e in log_events("dispatch.error") if e["error_code"] == "empty_response"]
    assert len(errors) == 1  # nosec B101
    assert errors[0]["query_id"] == "q1"  # nosec B101
    assert "[DONE]" in errors[0]["raw_response"]  # nosec B101


def test_evicted_query_makes_every_entry_point_a_no_op(registry, make_query):
    query = make_query()
    recorder = Recorder()
    decoder = StreamDecoder(query.id, registry, recorder, reasoning=True)
    decoder.feed(sse_delta(content="first"))
    registry.delete(query.id)

    decoder.feed(sse_delta(content="second"))
    assert decoder.close() is False  # nosec B101
    assert recorder.content() == "first"  # nosec B101
    assert recorder.events[-1] == ("q1", "first", False, False)  # nosec B101


def test_close_is_idempotent(registry, make_query):
    query = make_query()
    recorder = Recorder()
    decoder = StreamDecoder(query.id, registry, recorder)
    assert decoder.close() is True  # nosec B101
    assert decoder.close() is False  # nosec B101
    assert recorder.events == [("q1", "", False, True)]  # nosec B101
