"""Drive a full theme migration: backup, apply, wire up, scan and rewrite."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from retheme.config.engine import EngineConfig, load_project_config
from retheme.core.backup import BackupManager, BackupManifest, RollbackResult
from retheme.core.locking import project_lock
from retheme.core.mapping import ColorMapper
from retheme.core.project import (
    ProjectLayout,
    apply_theme_to_project,
    ensure_stylesheet_import,
    find_globals_stylesheet,
    needs_stylesheet_import,
    plan_artifact_changes,
    require_project,
    resolve_tailwind_config,
    update_tailwind_config,
)
from retheme.core.rewriter import ColorRewriter, Replacement
from retheme.core.scanner import ProjectScanner, ScanResult
from retheme.core.taxonomy import MODE_STANDARD, SCAN_MODES
from retheme.errors import ErrorCode, RethemeError, classify_exception
from retheme.themes.loader import validate_theme
from retheme.themes.models import Theme
from retheme.themes.registry import ThemeRegistry

logger = logging.getLogger(__name__)


class RebuildStage(Enum):
    START = "start"
    VALIDATE = "validate"
    BACKUP = "backup"
    APPLY = "apply"
    TAILWIND = "tailwind"
    IMPORT = "import"
    SCAN = "scan"
    REWRITE = "rewrite"
    WARNINGS = "warnings"
    ROLLBACK = "rollback"
    DONE = "done"


StageCallback = Callable[[RebuildStage, str], None]


@dataclass
class FileFix:
    file: str
    replacements: list[Replacement] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"file": self.file, "changes": [r.to_dict() for r in self.replacements]}


@dataclass
class RebuildResult:
    success: bool
    theme_id: str
    dry_run: bool = False
    mode: str = MODE_STANDARD
    backup_id: str | None = None
    changed_files: list[str] = field(default_factory=list)
    fixed_colors: list[FileFix] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    error: RethemeError | None = None
    rolled_back: bool = False
    scan: ScanResult | None = None

    def ledger(self) -> set[tuple[str, str, str, int]]:
        """``{(file, from, to, count)}`` for comparing runs."""
        return {
            (fix.file, r.from_, r.to, r.count)
            for fix in self.fixed_colors
            for r in fix.replacements
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "themeId": self.theme_id,
            "dryRun": self.dry_run,
            "mode": self.mode,
            "backupId": self.backup_id,
            "changedFiles": list(self.changed_files),
            "fixedColors": [f.to_dict() for f in self.fixed_colors],
            "warnings": list(self.warnings),
            "rolledBack": self.rolled_back,
            "error": self.error.to_dict() if self.error else None,
        }


@dataclass
class RollbackOutcome:
    success: bool
    result: RollbackResult | None = None
    error: RethemeError | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "result": self.result.to_dict() if self.result else None,
            "error": self.error.to_dict() if self.error else None,
        }


class _Journal:
    """Original bytes of every file a run touches, for undo after a failure."""

    def __init__(self) -> None:
        self._originals: dict[Path, bytes | None] = {}

    def track(self, path: Path) -> None:
        if path in self._originals:
            return
        self._originals[path] = path.read_bytes() if path.is_file() else None

    def restore(self) -> None:
        for path, data in reversed(list(self._originals.items())):
            try:
                if data is None:
                    path.unlink(missing_ok=True)
                else:
                    path.write_bytes(data)
            except OSError as exc:
                logger.error("Could not restore %s: %s", path, exc)


def _check_cancel(cancel_event: threading.Event | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise RethemeError(ErrorCode.OPERATION_CANCELLED)


class RebuildOrchestrator:
    """Public entry point for rebuild and rollback.

    Both operations return structured results and never raise.
    """

    def __init__(
        self,
        registry: ThemeRegistry,
        layout: ProjectLayout,
        config: EngineConfig | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._registry = registry
        self._layout = layout
        self._config = config or EngineConfig()
        mapper = ColorMapper(self._config.extra_mappings)
        self._scanner = ProjectScanner(self._config, mapper)
        self._rewriter = ColorRewriter(self._config, mapper)
        self._backups = BackupManager(layout, clock=clock)

    @classmethod
    def for_project(
        cls,
        registry: ThemeRegistry,
        root: str | Path,
        base_config: EngineConfig | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> "RebuildOrchestrator":
        """Build an orchestrator with the project's ``config.yaml`` applied."""
        root = Path(root).resolve()
        config = load_project_config(root, base_config)
        return cls(registry, ProjectLayout.for_root(root, config), config, clock=clock)

    @property
    def layout(self) -> ProjectLayout:
        return self._layout

    @property
    def backups(self) -> BackupManager:
        return self._backups

    @property
    def scanner(self) -> ProjectScanner:
        return self._scanner

    def rebuild(
        self,
        theme_id: str,
        *,
        dry_run: bool = False,
        fix_colors: bool = True,
        mode: str = MODE_STANDARD,
        cancel_event: threading.Event | None = None,
        progress_cb: StageCallback | None = None,
    ) -> RebuildResult:
        result = RebuildResult(success=False, theme_id=theme_id, dry_run=dry_run, mode=mode)

        def emit(stage: RebuildStage, message: str) -> None:
            logger.info("[%s] %s", stage.value, message)
            if progress_cb is not None:
                progress_cb(stage, message)

        emit(RebuildStage.START, f"Rebuilding with theme {theme_id}{' (dry run)' if dry_run else ''}")
        try:
            if mode not in SCAN_MODES:
                raise RethemeError(ErrorCode.CONFIG_INVALID, message=f"Unknown scan mode: {mode}")
            require_project(self._layout)
            theme = self._registry.get_theme(theme_id)
            if theme is None:
                raise RethemeError(ErrorCode.THEME_NOT_FOUND, details={"id": theme_id})

            emit(RebuildStage.VALIDATE, f"Validating {theme.id}")
            report = validate_theme(theme)
            if not report.valid:
                raise RethemeError(ErrorCode.THEME_INVALID, details={"errors": list(report.errors)})

            if dry_run:
                self._preview(result, fix_colors, mode, cancel_event, emit)
            else:
                with project_lock(self._layout):
                    self._apply(theme, result, fix_colors, mode, cancel_event, emit)
        except RethemeError as exc:
            result.error = exc
            logger.warning("Rebuild with %s failed: %s", theme_id, exc.message)
            return result
        except Exception as exc:
            result.error = classify_exception(exc)
            logger.exception("Rebuild with %s failed unexpectedly", theme_id)
            return result

        result.success = True
        emit(
            RebuildStage.DONE,
            f"{len(result.changed_files)} files changed, {len(result.warnings)} warnings",
        )
        return result

    def _preview(self, result, fix_colors, mode, cancel_event, emit) -> None:
        layout = self._layout
        emit(RebuildStage.APPLY, "Planning design artifacts")
        result.changed_files.extend(layout.relative(p) for p in plan_artifact_changes(layout))
        self._warn_missing_globals(result)
        _check_cancel(cancel_event)
        if fix_colors:
            self._fix_colors(result, mode, None, cancel_event, emit)

    def _apply(self, theme: Theme, result, fix_colors, mode, cancel_event, emit) -> None:
        layout = self._layout
        emit(RebuildStage.BACKUP, "Backing up design artifacts")
        manifest = self._backups.backup(theme.id)
        result.backup_id = manifest.id

        journal = _Journal()
        try:
            _check_cancel(cancel_event)
            emit(RebuildStage.APPLY, f"Writing palette and stylesheet for {theme.id}")
            journal.track(layout.palette_path)
            journal.track(layout.stylesheet_path)
            for path in apply_theme_to_project(theme, layout):
                result.changed_files.append(layout.relative(path))

            _check_cancel(cancel_event)
            emit(RebuildStage.TAILWIND, "Updating Tailwind config")
            journal.track(resolve_tailwind_config(layout)[0])
            result.changed_files.append(layout.relative(update_tailwind_config(theme, layout)))

            _check_cancel(cancel_event)
            emit(RebuildStage.IMPORT, "Linking stylesheet")
            pending = needs_stylesheet_import(layout)
            if pending is not None:
                journal.track(pending)
                ensure_stylesheet_import(layout)
                result.changed_files.append(layout.relative(pending))
            self._warn_missing_globals(result)

            _check_cancel(cancel_event)
            if fix_colors:
                self._fix_colors(result, mode, journal, cancel_event, emit)
        except Exception:
            emit(RebuildStage.ROLLBACK, f"Restoring backup {manifest.id}")
            self._undo(manifest, journal, result)
            raise

    def _undo(self, manifest: BackupManifest, journal: _Journal, result: RebuildResult) -> None:
        journal.restore()
        try:
            self._backups.rollback(manifest.id)
        except RethemeError as exc:
            logger.error("Automatic rollback to %s failed: %s", manifest.id, exc.message)
            return
        result.rolled_back = True

    def _warn_missing_globals(self, result: RebuildResult) -> None:
        if find_globals_stylesheet(self._layout) is None:
            stylesheet = self._layout.relative(self._layout.stylesheet_path)
            result.warnings.append(f"No globals.css found; import {stylesheet} manually")

    def _fix_colors(self, result, mode, journal: _Journal | None, cancel_event, emit) -> None:
        """Scan and rewrite; writes only when a journal is given."""
        root = self._layout.root
        emit(RebuildStage.SCAN, f"Scanning project ({mode} mode)")
        scan = self._scanner.scan(root, mode, cancel_event=cancel_event)
        result.scan = scan

        targets = [entry for entry in scan.files if entry.fixable]
        emit(RebuildStage.REWRITE, f"Rewriting {len(targets)} files")
        for entry in targets:
            _check_cancel(cancel_event)
            path = root / entry.path
            try:
                rewrite = self._rewriter.rewrite(path, mode, project_root=root)
                if rewrite.changed and journal is not None:
                    journal.track(path)
                    self._rewriter.write(path, rewrite)
            except RethemeError as exc:
                logger.warning("Could not rewrite %s: %s", entry.path, exc.message)
                result.warnings.append(f"{entry.path}: {exc.message}")
                continue
            if rewrite.changed:
                result.changed_files.append(entry.path)
                result.fixed_colors.append(FileFix(file=entry.path, replacements=rewrite.replacements))

        emit(RebuildStage.WARNINGS, "Collecting unfixable colors")
        for entry in scan.files:
            for mapping in entry.unfixable:
                result.warnings.append(
                    f"{entry.path}:{mapping.token.line_number} - {mapping.token.raw_text} (manual review needed)"
                )

    def rollback(self, backup_id: str | None = None) -> RollbackOutcome:
        try:
            require_project(self._layout)
            with project_lock(self._layout):
                result = self._backups.rollback(backup_id)
        except RethemeError as exc:
            logger.warning("Rollback failed: %s", exc.message)
            return RollbackOutcome(success=False, error=exc)
        except Exception as exc:
            logger.exception("Rollback failed unexpectedly")
            return RollbackOutcome(success=False, error=classify_exception(exc))
        return RollbackOutcome(success=True, result=result)
