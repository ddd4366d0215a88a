"""Main loop scheduling from worker threads."""

from __future__ import annotations

import logging
import threading

from llm_dispatch.base.loop import MainLoop


def test_schedule_runs_in_fifo_order_on_drain(loop):
    seen = []
    loop.schedule(seen.append, 1)
    loop.schedule(seen.append, 2)
    assert seen == [] and loop.pending() == 2  # nosec B101
    assert loop.run_pending() == 2  # nosec B101
    assert seen == [1, 2]  # nosec B101


def test_wrap_defers_calls_and_exposes_target(loop):
    seen = []

    def target(a, b):
        seen.append((a, b))

    wrapped = loop.wrap(target)
    wrapped("x", "y")
    assert seen == []  # nosec B101
    assert wrapped.__wrapped__ is target  # nosec B101
    loop.run_pending()
    assert seen == [("x", "y")]  # nosec B101


def test_callbacks_scheduled_during_drain_run_in_same_drain(loop):
    seen = []
    loop.schedule(lambda: loop.schedule(seen.append, "inner"))
    assert loop.run_pending() == 2  # nosec B101
    assert seen == ["inner"]  # nosec B101


def test_limit_bounds_one_drain(loop):
    for i in range(5):
        loop.schedule(lambda: None)
    assert loop.run_pending(limit=3) == 3  # nosec B101
    assert loop.run_pending() == 2  # nosec B101


def test_failing_callback_is_logged_and_drain_continues(loop, caplog):
    caplog.set_level(logging.ERROR, logger="dispatch")
    seen = []

    def boom():
        raise RuntimeError("bad callback")

    loop.schedule(boom)
    loop.schedule(seen.append, "after")
    loop.run_pending()
    assert seen == ["after"]  # nosec B101
    assert any(r.exc_info and "bad callback" in str(r.exc_info[1]) for r in caplog.records)  # nosec B101


def test_schedule_is_thread_safe():
    loop = MainLoop()
    threads = [threading.Thread(target=lambda: [loop.schedule(int) for _ in range(500)]) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert loop.run_pending() == 2000  # nosec B101
