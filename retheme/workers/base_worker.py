"""Shared plumbing for workers that drive the retheme engine off-thread."""

from __future__ import annotations

from threading import Event

from PySide6.QtCore import QObject, Signal

from retheme.errors import ErrorCode, RethemeError, format_error_for_user


class BaseWorker(QObject):
    """QObject wrapper around one engine call.

    Hosts move the worker to a ``QThread`` and connect ``thread.started`` to
    ``run``; tests call ``run()`` inline with signals connected to plain
    callables. The engine polls ``cancel_event`` between files and stages.
    """

    started = Signal()
    progress = Signal(int, int, str)    # current, total, message
    finished = Signal(object)           # ScanResult / RebuildResult / RollbackResult
    error = Signal(str)                 # format_error_for_user() text
    cancelled = Signal()

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._cancel_event = Event()

    def cancel(self) -> None:
        self._cancel_event.set()

    @property
    def cancel_event(self) -> Event:
        return self._cancel_event

    @property
    def _is_cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def _report_failure(self, error: RethemeError | Exception) -> None:
        """Emit ``cancelled`` for a cancellation, ``error`` for anything else."""
        if isinstance(error, RethemeError) and error.code is ErrorCode.OPERATION_CANCELLED:
            self.cancelled.emit()
        else:
            self.error.emit(format_error_for_user(error))

    def run(self) -> None:
        """Override in subclass. Called when thread starts."""
        raise NotImplementedError
