"""Project layout and the design artifacts written into it."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from retheme.config.engine import EngineConfig
from retheme.errors import ErrorCode, RethemeError, classify_exception
from retheme.themes.compiler import render_palette_json, render_stylesheet, render_tailwind_config
from retheme.themes.loader import load_document, parse_theme
from retheme.themes.models import Theme, ThemeValidationError

logger = logging.getLogger(__name__)

PALETTE_FILE = "theme.json"
STYLESHEET_FILE = "theme.css"
BACKUPS_DIR = "backups"
LOCK_FILE = ".lock"

TAILWIND_CONFIG_TS = "tailwind.config.ts"
TAILWIND_CONFIG_JS = "tailwind.config.js"

GLOBALS_CANDIDATES: tuple[str, ...] = (
    "app/globals.css",
    "src/app/globals.css",
    "styles/globals.css",
    "src/styles/globals.css",
)


@dataclass(frozen=True)
class ProjectLayout:
    """Where every artifact lives for one project root."""

    root: Path
    marker_dir: str = ".retheme"
    design_dir_name: str = "design"

    @classmethod
    def for_root(cls, root: str | Path, config: EngineConfig | None = None) -> "ProjectLayout":
        config = config or EngineConfig()
        return cls(
            root=Path(root).resolve(),
            marker_dir=config.marker_dir,
            design_dir_name=config.design_dir_name,
        )

    @property
    def marker_path(self) -> Path:
        return self.root / self.marker_dir

    @property
    def design_dir(self) -> Path:
        return self.marker_path / self.design_dir_name

    @property
    def palette_path(self) -> Path:
        return self.design_dir / PALETTE_FILE

    @property
    def stylesheet_path(self) -> Path:
        return self.design_dir / STYLESHEET_FILE

    @property
    def backups_dir(self) -> Path:
        return self.design_dir / BACKUPS_DIR

    @property
    def lock_path(self) -> Path:
        return self.design_dir / LOCK_FILE

    @property
    def tailwind_ts(self) -> Path:
        return self.root / TAILWIND_CONFIG_TS

    @property
    def tailwind_js(self) -> Path:
        return self.root / TAILWIND_CONFIG_JS

    def is_initialized(self) -> bool:
        return self.marker_path.is_dir()

    def relative(self, path: Path) -> str:
        return Path(path).relative_to(self.root).as_posix()

    def captured_artifacts(self) -> list[Path]:
        """Files a backup snapshots, in manifest order."""
        return [self.palette_path, self.stylesheet_path, self.tailwind_ts, self.tailwind_js]

    def contains(self, path: Path) -> bool:
        try:
            Path(path).resolve().relative_to(self.root)
        except ValueError:
            return False
        return True


def _write(path: Path, content: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise classify_exception(exc, path) from exc


def apply_theme_to_project(theme: Theme, layout: ProjectLayout) -> list[Path]:
    """Write the palette JSON and the compiled stylesheet."""
    _write(layout.palette_path, render_palette_json(theme))
    _write(layout.stylesheet_path, render_stylesheet(theme))
    logger.info("Applied theme %s to %s", theme.id, layout.design_dir)
    return [layout.palette_path, layout.stylesheet_path]


def read_project_theme_id(layout: ProjectLayout) -> str | None:
    """Id recorded in the live palette, even when the rest of it no longer validates."""
    if not layout.palette_path.is_file():
        return None
    try:
        data = json.loads(layout.palette_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning("Unreadable palette %s: %s", layout.palette_path, exc)
        return None
    theme_id = data.get("id") if isinstance(data, dict) else None
    return theme_id if isinstance(theme_id, str) and theme_id else None


def get_project_theme(layout: ProjectLayout) -> Theme | None:
    """Load the theme currently applied to the project, if any."""
    if not layout.palette_path.is_file():
        return None
    try:
        return parse_theme(load_document(layout.palette_path))
    except ThemeValidationError as exc:
        logger.warning("Applied palette %s is invalid: %s", layout.palette_path, exc)
        return None


def resolve_tailwind_config(layout: ProjectLayout) -> tuple[Path, bool]:
    """Pick the config file to write: existing ``.ts``, else existing ``.js``, else a new ``.ts``."""
    if layout.tailwind_ts.exists():
        return layout.tailwind_ts, True
    if layout.tailwind_js.exists():
        return layout.tailwind_js, False
    return layout.tailwind_ts, True


def update_tailwind_config(theme: Theme, layout: ProjectLayout) -> Path:
    path, typescript = resolve_tailwind_config(layout)
    _write(path, render_tailwind_config(theme, typescript=typescript))
    return path


def find_globals_stylesheet(layout: ProjectLayout) -> Path | None:
    for candidate in GLOBALS_CANDIDATES:
        path = layout.root / candidate
        if path.is_file():
            return path
    return None


def stylesheet_import_line(layout: ProjectLayout, globals_path: Path) -> str:
    rel = os.path.relpath(layout.stylesheet_path, globals_path.parent)
    return f"@import '{Path(rel).as_posix()}';"


def _has_stylesheet_import(layout: ProjectLayout, content: str) -> bool:
    return layout.relative(layout.stylesheet_path) in content


def _read_globals(layout: ProjectLayout) -> tuple[Path, str] | None:
    """Globals file and its content, or None if there is nothing to do."""
    globals_path = find_globals_stylesheet(layout)
    if globals_path is None:
        return None
    try:
        content = globals_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise classify_exception(exc, globals_path) from exc
    if _has_stylesheet_import(layout, content):
        return None
    return globals_path, content


def needs_stylesheet_import(layout: ProjectLayout) -> Path | None:
    """Globals file that would receive the import, or None if there is nothing to do."""
    found = _read_globals(layout)
    return found[0] if found else None


def ensure_stylesheet_import(layout: ProjectLayout) -> Path | None:
    """Prepend the stylesheet ``@import`` to the globals file.

    Returns the modified file, or None when no globals file exists or the
    import is already present. ``@charset`` must stay first, so the import
    goes right after it when present.
    """
    found = _read_globals(layout)
    if found is None:
        return None
    globals_path, content = found
    line = stylesheet_import_line(layout, globals_path)
    if content.startswith("@charset"):
        head, _sep, rest = content.partition("\n")
        new_content = head + "\n" + line + "\n" + rest
    else:
        new_content = f"{line}\n{content}"
    _write(globals_path, new_content)
    return globals_path


def plan_artifact_changes(layout: ProjectLayout) -> list[Path]:
    """Files an apply would write, without writing them."""
    planned = [layout.palette_path, layout.stylesheet_path, resolve_tailwind_config(layout)[0]]
    globals_path = needs_stylesheet_import(layout)
    if globals_path is not None:
        planned.append(globals_path)
    return planned


def require_project(layout: ProjectLayout) -> None:
    if not layout.is_initialized():
        raise RethemeError(
            ErrorCode.PROJECT_NOT_FOUND,
            path=layout.root,
            details={"marker": layout.marker_dir},
        )
