"""Worker for scanning a project for hardcoded colors."""

from __future__ import annotations

from pathlib import Path
from time import monotonic

from retheme.config.engine import EngineConfig
from retheme.core.scanner import ProjectScanner
from retheme.core.taxonomy import MODE_STANDARD
from retheme.workers.base_worker import BaseWorker


class ScanWorker(BaseWorker):
    """Runs a project scan in a background thread; emits the ScanResult."""

    def __init__(
        self,
        root_dir: str | Path,
        mode: str = MODE_STANDARD,
        config: EngineConfig | None = None,
    ) -> None:
        super().__init__()
        self._root_dir = Path(root_dir)
        self._mode = mode
        self._config = config or EngineConfig()
        self._last_emit = 0.0

    def _on_progress(self, current: int, total: int, name: str) -> None:
        now = monotonic()
        # Throttle progress events to avoid flooding the UI event queue.
        if current in (1, total) or current % 25 == 0 or (now - self._last_emit) >= 0.05:
            self.progress.emit(current, total, name)
            self._last_emit = now

    def run(self) -> None:
        self.started.emit()
        try:
            scanner = ProjectScanner(self._config)
            result = scanner.scan(
                self._root_dir,
                self._mode,
                progress_cb=self._on_progress,
                cancel_event=self._cancel_event,
            )
        except Exception as e:
            self._report_failure(e)
            return
        self.finished.emit(result)
