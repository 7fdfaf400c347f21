"""Theme template discovery and registry."""

from __future__ import annotations

import logging
from pathlib import Path

from retheme.themes.constants import THEME_CATEGORIES
from retheme.themes.loader import THEME_FILE_SUFFIXES, load_theme_file
from retheme.themes.models import Theme, ThemeSummary, ThemeValidationError

logger = logging.getLogger(__name__)

_MAX_THEME_FILES_PER_CATEGORY = 512


class ThemeRegistry:
    """Loads theme templates from builtin and user libraries.

    Both libraries are laid out as ``<root>/<category>/<theme-id>.json``.
    A user theme with the same id as a builtin one replaces it.
    """

    def __init__(self, builtin_root: Path, user_root: Path | None = None) -> None:
        self._builtin_root = builtin_root
        self._user_root = user_root
        self._themes: dict[str, Theme] = {}
        self._builtin_ids: set[str] = set()
        self._sources: dict[str, Path] = {}
        self._load_errors: list[str] = []
        self._loaded = False

    @property
    def builtin_root(self) -> Path:
        return self._builtin_root

    @property
    def user_root(self) -> Path | None:
        return self._user_root

    def set_user_root(self, path: Path | None) -> None:
        self._user_root = path
        self._loaded = False

    def reload(self) -> None:
        self._themes = {}
        self._builtin_ids = set()
        self._sources = {}
        self._load_errors = []
        self._load_from_root(self._builtin_root, is_builtin=True)
        if self._user_root is not None:
            self._load_from_root(self._user_root, is_builtin=False)
        self._loaded = True

    def load_all(self) -> dict[str, list[Theme]]:
        """Return every loaded theme grouped by category, sorted by name."""
        self._ensure_loaded()
        grouped: dict[str, list[Theme]] = {category: [] for category in THEME_CATEGORIES}
        for theme in self._themes.values():
            grouped[theme.category].append(theme)
        for themes in grouped.values():
            themes.sort(key=lambda theme: theme.name.lower())
        return grouped

    def get_theme(self, theme_id: str) -> Theme | None:
        self._ensure_loaded()
        return self._themes.get(theme_id)

    def theme_ids(self) -> list[str]:
        return [theme.id for themes in self.load_all().values() for theme in themes]

    def list_themes(self) -> list[ThemeSummary]:
        rows: list[ThemeSummary] = []
        for category, themes in self.load_all().items():
            for theme in themes:
                rows.append(
                    ThemeSummary(
                        theme_id=theme.id,
                        name=theme.name,
                        description=theme.description,
                        category=category,
                        primary_light=theme.light["primary"],
                        primary_dark=theme.dark["primary"],
                        background_light=theme.light["background"],
                        background_dark=theme.dark["background"],
                        is_builtin=theme.id in self._builtin_ids,
                        source_path=str(self._sources.get(theme.id, "")),
                    )
                )
        return rows

    def load_errors(self) -> list[str]:
        return list(self._load_errors)

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.reload()

    def _load_from_root(self, root: Path, *, is_builtin: bool) -> None:
        if not root.exists():
            return
        for category in THEME_CATEGORIES:
            category_dir = root / category
            if not category_dir.is_dir():
                continue
            try:
                candidates = sorted(
                    path for path in category_dir.iterdir()
                    if path.is_file() and path.suffix.lower() in THEME_FILE_SUFFIXES
                )
            except OSError as exc:
                self._record_error(f"Failed to list themes in {category_dir}: {exc}")
                continue
            if len(candidates) > _MAX_THEME_FILES_PER_CATEGORY:
                self._record_error(
                    f"Theme file limit exceeded in {category_dir}; "
                    f"only first {_MAX_THEME_FILES_PER_CATEGORY} files were loaded."
                )
                candidates = candidates[:_MAX_THEME_FILES_PER_CATEGORY]

            for path in candidates:
                self._load_one(path, category, is_builtin=is_builtin)

    def _load_one(self, path: Path, category: str, *, is_builtin: bool) -> None:
        try:
            theme = load_theme_file(path)
        except ThemeValidationError as exc:
            self._record_error(f"Failed to load theme {path.name}: {exc}")
            return

        if theme.category != category:
            self._record_error(
                f"Theme {theme.id!r} declares category {theme.category!r} "
                f"but lives in {category!r}; skipping {path}"
            )
            return

        existing = theme.id in self._themes
        if existing and is_builtin:
            self._record_error(f"Duplicate builtin theme id {theme.id!r} at {path}; skipping.")
            return
        if existing:
            logger.info("user theme %r overrides built-in theme", theme.id)
            self._builtin_ids.discard(theme.id)
        elif is_builtin:
            self._builtin_ids.add(theme.id)

        self._themes[theme.id] = theme
        self._sources[theme.id] = path

    def _record_error(self, message: str) -> None:
        logger.warning(message)
        self._load_errors.append(message)
