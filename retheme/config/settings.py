"""User preferences via QSettings."""

from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import QSettings

from retheme.runtime_paths import user_data_dir

_MODES = {"standard", "full"}


class AppSettings:
    """Wraps QSettings for persistent user preferences.

    Pass ``path`` to keep the settings in a specific INI file (used by tests
    and by ``--settings`` on the command line).
    """

    def __init__(self, path: str | Path | None = None) -> None:
        if path is None:
            self._qs = QSettings("retheme", "retheme")
        else:
            self._qs = QSettings(str(path), QSettings.Format.IniFormat)

    # -- theme library --

    @property
    def user_themes_dir(self) -> str:
        return self._qs.value("themes/user_dir", "", type=str)

    @user_themes_dir.setter
    def user_themes_dir(self, value: str) -> None:
        self._qs.setValue("themes/user_dir", (value or "").strip())

    # -- scanning --

    @property
    def default_mode(self) -> str:
        raw = self._qs.value("scan/default_mode", "standard", type=str)
        mode = (raw or "").strip().lower()
        return mode if mode in _MODES else "standard"

    @default_mode.setter
    def default_mode(self, value: str) -> None:
        mode = (value or "").strip().lower()
        if mode not in _MODES:
            mode = "standard"
        self._qs.setValue("scan/default_mode", mode)

    @property
    def scan_workers(self) -> int:
        value = self._qs.value("scan/workers", 1, type=int)
        return min(max(int(value or 1), 1), 32)

    @scan_workers.setter
    def scan_workers(self, value: int) -> None:
        self._qs.setValue("scan/workers", min(max(int(value), 1), 32))

    @property
    def extra_assertion_calls(self) -> list[str]:
        raw = self._qs.value("scan/assertion_calls", "", type=str)
        return [item.strip() for item in (raw or "").split(",") if item.strip()]

    @extra_assertion_calls.setter
    def extra_assertion_calls(self, value: list[str]) -> None:
        cleaned = [item.strip() for item in value if isinstance(item, str) and item.strip()]
        self._qs.setValue("scan/assertion_calls", ",".join(cleaned))

    # -- helpers --

    @property
    def app_data_dir(self) -> Path:
        path = user_data_dir()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def log_dir(self) -> Path:
        path = self.app_data_dir / "logs"
        path.mkdir(parents=True, exist_ok=True)
        return path

    def sync(self) -> None:
        self._qs.sync()
