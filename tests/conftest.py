"""Shared fixtures: throwaway projects, the builtin theme library, a fake clock."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from retheme.core.project import ProjectLayout
from retheme.runtime_paths import builtin_themes_root
from retheme.themes.registry import ThemeRegistry

BUTTON_TSX = """\
export function Button({ children }) {
  return (
    <button className="bg-blue-500 hover:bg-blue-600 text-white px-4">
      {children}
    </button>
  );
}
"""

CARD_TSX = """\
export const Card = () => (
  <div className="bg-gray-100 border-gray-200 text-gray-900" style={{ color: '#ff00aa' }}>
    <span className="text-emerald-400">ok</span>
  </div>
);
"""

GLOBALS_CSS = """\
@tailwind base;
@tailwind components;
@tailwind utilities;
"""


def write_file(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class FakeClock:
    """Deterministic UTC clock; every call advances by ``step``."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(seconds=1)) -> None:
        self.now = start or datetime(2026, 3, 14, 9, 26, 53, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + self.step
        return current


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def registry() -> ThemeRegistry:
    return ThemeRegistry(builtin_root=builtin_themes_root())


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A minimal Next.js-style project already initialised for retheme."""
    root = tmp_path / "webapp"
    (root / ".retheme").mkdir(parents=True)
    write_file(root / "app" / "globals.css", GLOBALS_CSS)
    write_file(root / "components" / "Button.tsx", BUTTON_TSX)
    write_file(root / "components" / "Card.tsx", CARD_TSX)
    return root


@pytest.fixture
def layout(project: Path) -> ProjectLayout:
    return ProjectLayout.for_root(project)
