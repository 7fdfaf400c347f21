"""Workers for rebuild and rollback."""

from __future__ import annotations

from PySide6.QtCore import Signal

from retheme.core.rebuild import RebuildOrchestrator, RebuildStage
from retheme.core.taxonomy import MODE_STANDARD
from retheme.workers.base_worker import BaseWorker

_STAGE_ORDER = [stage for stage in RebuildStage if stage is not RebuildStage.ROLLBACK]


class RebuildWorker(BaseWorker):
    """Runs ``RebuildOrchestrator.rebuild`` and relays stage changes."""

    stage = Signal(str, str)  # stage name, message

    def __init__(
        self,
        orchestrator: RebuildOrchestrator,
        theme_id: str,
        *,
        dry_run: bool = False,
        fix_colors: bool = True,
        mode: str = MODE_STANDARD,
    ) -> None:
        super().__init__()
        self._orchestrator = orchestrator
        self._theme_id = theme_id
        self._dry_run = dry_run
        self._fix_colors = fix_colors
        self._mode = mode

    def _on_stage(self, stage: RebuildStage, message: str) -> None:
        self.stage.emit(stage.value, message)
        if stage in _STAGE_ORDER:
            self.progress.emit(_STAGE_ORDER.index(stage) + 1, len(_STAGE_ORDER), message)

    def run(self) -> None:
        self.started.emit()
        result = self._orchestrator.rebuild(
            self._theme_id,
            dry_run=self._dry_run,
            fix_colors=self._fix_colors,
            mode=self._mode,
            cancel_event=self._cancel_event,
            progress_cb=self._on_stage,
        )
        if result.error is not None:
            self._report_failure(result.error)
            return
        self.finished.emit(result)


class RollbackWorker(BaseWorker):
    """Restores a backup (newest when ``backup_id`` is None)."""

    def __init__(self, orchestrator: RebuildOrchestrator, backup_id: str | None = None) -> None:
        super().__init__()
        self._orchestrator = orchestrator
        self._backup_id = backup_id

    def run(self) -> None:
        self.started.emit()
        if self._is_cancelled:
            self.cancelled.emit()
            return
        outcome = self._orchestrator.rollback(self._backup_id)
        if not outcome.success:
            self._report_failure(outcome.error)
            return
        self.finished.emit(outcome.result)
