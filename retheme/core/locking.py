"""Advisory per-project lock serializing apply and rollback."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from retheme.core.project import ProjectLayout
from retheme.errors import ErrorCode, RethemeError, classify_exception

try:
    import fcntl  # type: ignore

    _HAS_FCNTL = True
except ImportError:  # pragma: no cover - Windows/fallback path
    fcntl = None
    _HAS_FCNTL = False

logger = logging.getLogger(__name__)

_PROJECT_LOCKS: dict[str, threading.Lock] = {}
_PROJECT_LOCKS_GUARD = threading.Lock()


def _process_lock(layout: ProjectLayout) -> threading.Lock:
    key = str(layout.lock_path)
    with _PROJECT_LOCKS_GUARD:
        lock = _PROJECT_LOCKS.get(key)
        if lock is None:
            lock = threading.Lock()
            _PROJECT_LOCKS[key] = lock
        return lock


def _locked_error(layout: ProjectLayout) -> RethemeError:
    return RethemeError(ErrorCode.PROJECT_LOCKED, path=layout.lock_path)


@contextmanager
def project_lock(layout: ProjectLayout) -> Iterator[None]:
    """Hold the project lock for the duration of the block; never waits."""
    try:
        layout.design_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise classify_exception(exc, layout.design_dir) from exc

    if _HAS_FCNTL:
        with open(layout.lock_path, "a+", encoding="utf-8") as lock_file:
            try:
                fcntl.flock(lock_file, fcntl.LOCK_EX | fcntl.LOCK_NB)
            except BlockingIOError as exc:
                raise _locked_error(layout) from exc
            logger.debug("Acquired project lock %s", layout.lock_path)
            try:
                yield
            finally:
                fcntl.flock(lock_file, fcntl.LOCK_UN)
    else:  # pragma: no cover - fallback on platforms without fcntl
        lock = _process_lock(layout)
        if not lock.acquire(blocking=False):
            raise _locked_error(layout)
        try:
            yield
        finally:
            lock.release()
