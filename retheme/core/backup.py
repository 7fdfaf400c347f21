"""Snapshot design artifacts before a change and restore them on rollback."""

from __future__ import annotations

import json
import logging
import re
import shutil
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from retheme.core.project import ProjectLayout, read_project_theme_id
from retheme.errors import ErrorCode, RethemeError, classify_exception

logger = logging.getLogger(__name__)

MANIFEST_NAME = "manifest.json"
BACKUP_SUFFIX = ".bak"
NO_PREVIOUS_THEME = "none"

ORIGIN_APPLY = "apply"
ORIGIN_ROLLBACK = "rollback"

_ID_UNSAFE_RE = re.compile(r"[^A-Za-z0-9._-]+")
_MAX_ID_ATTEMPTS = 1000


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class CapturedFile:
    """A project file (relative to the root) and its copy inside the snapshot."""

    project_path: str
    backup_path: str

    def to_dict(self) -> dict[str, str]:
        return {"path": self.project_path, "backup": self.backup_path}


@dataclass(frozen=True)
class BackupManifest:
    id: str
    previous_theme_id: str
    new_theme_id: str
    timestamp: datetime
    captured_files: tuple[CapturedFile, ...] = ()
    origin: str = ORIGIN_APPLY
    directory: Path | None = field(default=None, compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "previousTheme": self.previous_theme_id,
            "newTheme": self.new_theme_id,
            "timestamp": _format_timestamp(self.timestamp),
            "origin": self.origin,
            "changedFiles": [c.to_dict() for c in self.captured_files],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], directory: Path | None = None) -> "BackupManifest":
        """Build a manifest from its JSON form; raises ValueError on bad shape."""
        if not isinstance(data, dict):
            raise ValueError("manifest must be an object")
        try:
            files = tuple(
                CapturedFile(project_path=str(entry["path"]), backup_path=str(entry["backup"]))
                for entry in data.get("changedFiles") or []
            )
            return cls(
                id=str(data["id"]),
                previous_theme_id=str(data.get("previousTheme") or NO_PREVIOUS_THEME),
                new_theme_id=str(data["newTheme"]),
                timestamp=_parse_timestamp(str(data["timestamp"])),
                captured_files=files,
                origin=str(data.get("origin") or ORIGIN_APPLY),
                directory=directory,
            )
        except (KeyError, TypeError) as exc:
            raise ValueError(f"manifest missing field: {exc}") from exc


@dataclass
class RollbackResult:
    restored_theme_id: str
    restored_files: list[str] = field(default_factory=list)
    backup_used: str = ""
    safety_backup_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "restoredTheme": self.restored_theme_id,
            "restoredFiles": list(self.restored_files),
            "backupUsed": self.backup_used,
            "safetyBackupId": self.safety_backup_id,
        }


class BackupManager:
    """Owns ``<design dir>/backups``.

    ``clock`` returns an aware ``datetime``; tests inject a fake one to get
    deterministic ids and ordering.
    """

    def __init__(self, layout: ProjectLayout, clock: Callable[[], datetime] | None = None) -> None:
        self._layout = layout
        self._clock = clock or _utcnow

    @property
    def layout(self) -> ProjectLayout:
        return self._layout

    def _reserve_directory(self, now: datetime, theme_id: str) -> tuple[str, Path]:
        stamp = now.astimezone(timezone.utc)
        base = stamp.strftime("%Y-%m-%dT%H-%M-%S")
        millis = f"{stamp.microsecond // 1000:03d}"
        slug = _ID_UNSAFE_RE.sub("-", theme_id).strip("-") or "theme"

        candidates = [f"{base}-{slug}", f"{base}-{millis}-{slug}"]
        candidates.extend(f"{base}-{millis}-{slug}-{n}" for n in range(2, _MAX_ID_ATTEMPTS))
        for backup_id in candidates:
            path = self._layout.backups_dir / backup_id
            try:
                path.mkdir()
            except FileExistsError:
                continue
            except OSError as exc:
                raise RethemeError(
                    ErrorCode.BACKUP_IO_ERROR, path=path, details={"original": str(exc)}
                ) from exc
            return backup_id, path
        raise RethemeError(
            ErrorCode.BACKUP_IO_ERROR,
            message="Could not allocate a unique backup id",
            path=self._layout.backups_dir,
        )

    def backup(self, new_theme_id: str, origin: str = ORIGIN_APPLY) -> BackupManifest:
        """Snapshot every existing design artifact and write its manifest."""
        now = self._clock()
        try:
            self._layout.backups_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise RethemeError(
                ErrorCode.BACKUP_IO_ERROR,
                path=self._layout.backups_dir,
                details={"original": str(exc)},
            ) from exc

        backup_id, directory = self._reserve_directory(now, new_theme_id)
        try:
            previous = read_project_theme_id(self._layout) or NO_PREVIOUS_THEME
            captured: list[CapturedFile] = []
            for artifact in self._layout.captured_artifacts():
                if not artifact.is_file():
                    continue
                name = artifact.name + BACKUP_SUFFIX
                shutil.copy2(artifact, directory / name)
                captured.append(CapturedFile(project_path=self._layout.relative(artifact), backup_path=name))

            manifest = BackupManifest(
                id=backup_id,
                previous_theme_id=previous,
                new_theme_id=new_theme_id,
                timestamp=now,
                captured_files=tuple(captured),
                origin=origin,
                directory=directory,
            )
            (directory / MANIFEST_NAME).write_text(
                json.dumps(manifest.to_dict(), indent=2) + "\n", encoding="utf-8"
            )
        except OSError as exc:
            shutil.rmtree(directory, ignore_errors=True)
            raise RethemeError(
                ErrorCode.BACKUP_IO_ERROR,
                path=directory,
                details={"original": str(exc)},
            ) from exc

        logger.info("Created backup %s (%d files, previous theme %s)", backup_id, len(captured), previous)
        return manifest

    def list_backups(self) -> list[BackupManifest]:
        """All readable manifests, newest first."""
        root = self._layout.backups_dir
        if not root.is_dir():
            return []

        manifests: list[BackupManifest] = []
        for directory in sorted(root.iterdir()):
            manifest_path = directory / MANIFEST_NAME
            if not manifest_path.is_file():
                continue
            try:
                data = json.loads(manifest_path.read_text(encoding="utf-8"))
                manifests.append(BackupManifest.from_dict(data, directory=directory))
            except (OSError, UnicodeDecodeError, ValueError) as exc:
                logger.warning("Skipping unreadable manifest %s: %s", manifest_path, exc)
        manifests.sort(key=lambda m: (m.timestamp, m.id), reverse=True)
        return manifests

    def get_backup(self, backup_id: str) -> BackupManifest | None:
        for manifest in self.list_backups():
            if manifest.id == backup_id:
                return manifest
        return None

    def rollback(self, backup_id: str | None = None) -> RollbackResult:
        """Restore a snapshot (newest by default) after taking a safety backup."""
        backups = self.list_backups()
        if not backups:
            raise RethemeError(ErrorCode.NO_BACKUPS, path=self._layout.backups_dir)

        if backup_id is None:
            target = backups[0]
        else:
            target = next((m for m in backups if m.id == backup_id), None)
            if target is None:
                raise RethemeError(ErrorCode.BACKUP_NOT_FOUND, details={"id": backup_id})

        safety = self.backup(f"rollback-from-{target.new_theme_id}", origin=ORIGIN_ROLLBACK)

        restored: list[str] = []
        for captured in target.captured_files:
            source = target.directory / captured.backup_path
            dest = self._layout.root / captured.project_path
            if not self._layout.contains(dest) or not self._layout.contains(source):
                logger.warning("Refusing to restore %s outside the project", captured.project_path)
                continue
            if not source.is_file():
                logger.warning("Backup %s is missing %s", target.id, captured.backup_path)
                continue
            try:
                dest.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(source, dest)
            except OSError as exc:
                error = classify_exception(exc, dest)
                error.details.update(
                    restored=list(restored),
                    backup=target.id,
                    safety_backup=safety.id,
                )
                raise error from exc
            restored.append(captured.project_path)

        logger.info("Rolled back to %s (theme %s)", target.id, target.previous_theme_id)
        return RollbackResult(
            restored_theme_id=target.previous_theme_id,
            restored_files=restored,
            backup_used=target.id,
            safety_backup_id=safety.id,
        )
