"""Filesystem helpers for the query cache.

Purpose:
    Small, side-effect-explicit helpers used by the dispatcher: unique id
    generation, payload artifact writing, directory preparation and pruning of
    the bounded query cache.

Failure semantics:
    ``prepare_dir`` and ``write_json`` propagate ``OSError``; pruning logs and
    skips files it cannot delete so one locked file does not stop setup.
"""
from __future__ import annotations

import glob
import json
import os
import random
import uuid
from datetime import datetime
from typing import Any, List

from ..logging import get_logger, log_event

_logger = get_logger("dispatch.files")


def new_uuid() -> str:
    """Return a random hex identifier suitable for query ids."""
    return uuid.uuid4().hex


def timestamp() -> str:
    """Return a sortable local timestamp used in payload file names."""
    return datetime.now().strftime("%Y-%m-%d.%H-%M-%S")


def payload_file_name(directory: str) -> str:
    """Return a fresh ``<timestamp>.<hex>.json`` path inside ``directory``."""
    return os.path.join(directory, f"{timestamp()}.{random.randint(0, 0xFFFFFF):x}.json")


def prepare_dir(path: str, name: str = "") -> str:
    """Create ``path`` (and parents) if missing and return its absolute form."""
    abs_path = os.path.abspath(os.path.expanduser(path))
    if not os.path.isdir(abs_path):
        os.makedirs(abs_path, exist_ok=True)
        log_event(_logger, "files.dir_created", path=abs_path, purpose=name or None)
    return abs_path


def write_json(obj: Any, path: str) -> str:
    """Serialize ``obj`` as JSON into ``path``; returns the path."""
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(obj, fh, ensure_ascii=False)
    return path


def prune_dir(path: str, pattern: str, max_files: int, keep: int) -> List[str]:
    """Delete the oldest files once ``path`` holds more than ``max_files``.

    File names are expected to sort chronologically (timestamp prefix); the
    ``keep`` lexically greatest names survive. Returns the deleted paths.
    """
    files = glob.glob(os.path.join(path, pattern))
    if len(files) <= max_files:
        return []
    files.sort(reverse=True)
    deleted: List[str] = []
    for stale in files[keep:]:
        try:
            os.remove(stale)
        except OSError as exc:
            log_event(_logger, "files.prune_failed", path=stale, error=str(exc))
            continue
        deleted.append(stale)
    log_event(_logger, "files.pruned", path=path, deleted=len(deleted), kept=keep)
    return deleted


__all__ = [
    "new_uuid",
    "timestamp",
    "payload_file_name",
    "prepare_dir",
    "write_json",
    "prune_dir",
]
