"""Runtime path helpers for source and frozen executable modes."""

from __future__ import annotations

import os
from pathlib import Path
import sys


def is_frozen() -> bool:
    """Return True when running from a PyInstaller bundle."""
    return bool(getattr(sys, "frozen", False))


def package_root() -> Path:
    """Return the directory that holds the `retheme` package resources."""
    if is_frozen():
        meipass = getattr(sys, "_MEIPASS", None)
        if meipass:
            candidate = Path(meipass) / "retheme"
            return candidate if candidate.exists() else Path(meipass)
    return Path(__file__).resolve().parent


def builtin_themes_root() -> Path:
    """Resolve the bundled theme template library."""
    return package_root() / "themes" / "builtin"


def user_data_dir() -> Path:
    """Per-user data directory; ``RETHEME_HOME`` overrides the platform default."""
    override = os.environ.get("RETHEME_HOME")
    if override:
        return Path(override)
    base = Path(os.environ.get("APPDATA", Path.home() / ".config"))
    return base / "retheme"
