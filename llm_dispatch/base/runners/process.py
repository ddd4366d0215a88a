"""
Subprocess stream runner.

Purpose
- Start one external process per query (``curl`` by default) and deliver its
  stdout incrementally, as it arrives, to the query's stdout reader.

Contract
- ``on_stdout(None, chunk)`` for every read, ``on_stdout(err, None)`` when
  reading fails, and exactly one ``on_stdout(None, None)`` at end-of-stream.
- ``on_exit(returncode)`` after end-of-stream, once the process is reaped.
- stderr is drained concurrently on its own thread and logged on exit.
- Both callbacks run on the reader thread; the consumer marshals document
  work onto the main loop itself.

Failure semantics
- A failure to spawn the process is reported through ``on_stdout(err, None)``
  followed by end-of-stream, so the query still drains and completes.
"""
from __future__ import annotations

import logging
import subprocess
import threading
from typing import Any, Callable, List, Optional, Sequence

from ...config.defaults import CURL_EXECUTABLE
from ..interfaces import StdoutReader
from ..logging import get_logger, log_event
from .request import StreamRequest

_logger = get_logger("dispatch.runner.process")

READ_SIZE = 4096


class CurlProcessRunner:
    """Runs each request as a child process and streams its stdout."""

    def __init__(self, executable: str = CURL_EXECUTABLE) -> None:
        self.executable = executable
        self._processes: List[subprocess.Popen] = []
        self._lock = threading.Lock()

    def start(
        self,
        document: Any,
        request: StreamRequest,
        on_stdout: StdoutReader,
        on_exit: Optional[Callable[[int], None]] = None,
    ) -> Optional[subprocess.Popen]:
        """Start ``curl`` for ``request``."""
        return self.run(document, self.executable, request.to_curl_args(), None, on_stdout, on_exit)

    def run(
        self,
        document: Any,
        executable: str,
        args: Sequence[str],
        stdin: Optional[bytes],
        on_stdout: StdoutReader,
        on_exit: Optional[Callable[[int], None]] = None,
    ) -> Optional[subprocess.Popen]:
        """Spawn ``executable args`` and pump its stdout on a daemon thread.

        ``document`` is carried for hosts that tie process lifetime to a
        document; it is not used here. Returns the process, or None if it
        could not be started.
        """
        argv = [executable, *args]
        try:
            proc = subprocess.Popen(
                argv,
                stdin=subprocess.PIPE if stdin is not None else subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as exc:
            log_event(_logger, "runner.spawn_failed", level=logging.ERROR, executable=executable, error=str(exc))
            on_stdout(exc, None)
            on_stdout(None, None)
            if on_exit is not None:
                on_exit(-1)
            return None

        with self._lock:
            self._processes.append(proc)
        log_event(_logger, "runner.started", level=logging.DEBUG, executable=executable, pid=proc.pid)

        thread = threading.Thread(
            target=self._pump,
            args=(proc, stdin, on_stdout, on_exit),
            name=f"dispatch-runner-{proc.pid}",
            daemon=True,
        )
        thread.start()
        return proc

    def running(self) -> List[subprocess.Popen]:
        """Processes that have not exited yet."""
        with self._lock:
            self._processes = [p for p in self._processes if p.poll() is None]
            return list(self._processes)

    # -------------------- internals --------------------

    def _pump(
        self,
        proc: subprocess.Popen,
        stdin: Optional[bytes],
        on_stdout: StdoutReader,
        on_exit: Optional[Callable[[int], None]],
    ) -> None:
        stderr_chunks: List[bytes] = []
        stderr_reader = threading.Thread(
            target=self._drain_stderr,
            args=(proc, stderr_chunks),
            name=f"dispatch-runner-{proc.pid}-stderr",
            daemon=True,
        )
        stderr_reader.start()

        if stdin is not None and proc.stdin is not None:
            try:
                proc.stdin.write(stdin)
            except OSError as exc:
                on_stdout(exc, None)
            finally:
                proc.stdin.close()

        assert proc.stdout is not None  # nosec B101 - Popen was given stdout=PIPE
        try:
            while True:
                chunk = proc.stdout.read1(READ_SIZE)  # type: ignore[attr-defined]
                if not chunk:
                    break
                on_stdout(None, chunk)
        except OSError as exc:
            on_stdout(exc, None)
        finally:
            proc.stdout.close()

        on_stdout(None, None)
        returncode = proc.wait()
        stderr_reader.join()
        with self._lock:
            self._processes = [p for p in self._processes if p is not proc]
        log_event(
            _logger,
            "runner.exited",
            level=logging.DEBUG if returncode == 0 else logging.WARNING,
            pid=proc.pid,
            returncode=returncode,
            stderr=b"".join(stderr_chunks).decode("utf-8", errors="replace").strip() or None,
        )
        if on_exit is not None:
            on_exit(returncode)

    @staticmethod
    def _drain_stderr(proc: subprocess.Popen, sink: List[bytes]) -> None:
        if proc.stderr is None:
            return
        try:
            for chunk in iter(lambda: proc.stderr.read1(READ_SIZE), b""):  # type: ignore[union-attr]
                sink.append(chunk)
        except OSError as exc:
            sink.append(str(exc).encode("utf-8"))
        finally:
            proc.stderr.close()


__all__ = ["CurlProcessRunner", "READ_SIZE"]
