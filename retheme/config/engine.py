"""Engine configuration threaded into every component."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

from retheme.errors import ErrorCode, RethemeError

SCAN_DIRECTORIES: tuple[str, ...] = ("app", "components", "src", "pages")

FULL_SCAN_DIRECTORIES: tuple[str, ...] = (
    "app", "components", "src", "pages",
    "tests", "test", "__tests__",
    "lib", "utils", "hooks",
    "styles", "features", "modules",
    "layouts", "views", "screens",
)

SCAN_EXTENSIONS: tuple[str, ...] = (".tsx", ".jsx", ".ts", ".js")

EXCLUDE_DIRS: frozenset[str] = frozenset(
    {"node_modules", ".git", ".retheme", "dist", "build", ".next", "out"}
)

ASSERTION_CALLS: tuple[str, ...] = (
    "expect(",
    "toBe(",
    "toEqual(",
    "toContain(",
    "toMatch(",
    "toHaveClass(",
)

TEST_PATH_MARKERS: tuple[str, ...] = ("test", "spec", "__tests__")

HEX_CONTEXT_KEYWORDS: tuple[str, ...] = ("className", "style", "bg-[", "text-[")

PROJECT_MARKER_DIR = ".retheme"
DESIGN_DIR_NAME = "design"
PROJECT_CONFIG_NAME = "config.yaml"

_MAX_SCAN_WORKERS = 32
_PROJECT_CONFIG_KEYS = {
    "extra_scan_dirs",
    "extra_exclude_dirs",
    "extra_extensions",
    "assertion_calls",
    "scan_workers",
    "mappings",
}


@dataclass(frozen=True)
class EngineConfig:
    """Immutable knobs for scanning and rewriting.

    Built once per invocation and passed to the scanner, rewriter and
    orchestrator; nothing reads module-level state at run time.
    """

    scan_dirs: tuple[str, ...] = SCAN_DIRECTORIES
    full_scan_dirs: tuple[str, ...] = FULL_SCAN_DIRECTORIES
    extensions: tuple[str, ...] = SCAN_EXTENSIONS
    exclude_dirs: frozenset[str] = EXCLUDE_DIRS
    assertion_calls: tuple[str, ...] = ASSERTION_CALLS
    test_path_markers: tuple[str, ...] = TEST_PATH_MARKERS
    hex_context_keywords: tuple[str, ...] = HEX_CONTEXT_KEYWORDS
    scan_workers: int = 1
    marker_dir: str = PROJECT_MARKER_DIR
    design_dir_name: str = DESIGN_DIR_NAME
    extra_mappings: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def directories_for(self, mode: str) -> tuple[str, ...]:
        return self.full_scan_dirs if mode == "full" else self.scan_dirs

    def merged(self, overrides: Mapping[str, Any]) -> "EngineConfig":
        """Return a copy with project-level overrides applied."""
        extra_dirs = tuple(overrides.get("extra_scan_dirs") or ())
        changes: dict[str, Any] = {
            "scan_dirs": _dedupe(self.scan_dirs + extra_dirs),
            "full_scan_dirs": _dedupe(self.full_scan_dirs + extra_dirs),
            "extensions": _dedupe(self.extensions + tuple(overrides.get("extra_extensions") or ())),
            "exclude_dirs": self.exclude_dirs | frozenset(overrides.get("extra_exclude_dirs") or ()),
            "assertion_calls": _dedupe(self.assertion_calls + tuple(overrides.get("assertion_calls") or ())),
        }
        if overrides.get("scan_workers") is not None:
            changes["scan_workers"] = overrides["scan_workers"]
        if overrides.get("mappings"):
            changes["extra_mappings"] = MappingProxyType(
                {**self.extra_mappings, **overrides["mappings"]}
            )
        return replace(self, **changes)


def _dedupe(items: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(items))


def load_project_config(project_root: Path, base: EngineConfig | None = None) -> EngineConfig:
    """Apply ``.retheme/config.yaml`` on top of ``base`` (defaults when omitted)."""
    base = base or EngineConfig()
    config_path = project_root / PROJECT_MARKER_DIR / PROJECT_CONFIG_NAME
    if not config_path.is_file():
        return base

    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise RethemeError(
            ErrorCode.CONFIG_INVALID, path=config_path, details={"original": str(exc)}
        ) from exc
    if raw is None:
        return base
    if not isinstance(raw, dict):
        raise RethemeError(ErrorCode.CONFIG_INVALID, message="Config must be a mapping", path=config_path)

    unknown = sorted(key for key in raw if key not in _PROJECT_CONFIG_KEYS)
    if unknown:
        raise RethemeError(
            ErrorCode.CONFIG_INVALID,
            message=f"Unsupported config keys: {', '.join(unknown)}",
            path=config_path,
        )

    for key in ("extra_scan_dirs", "extra_exclude_dirs", "extra_extensions", "assertion_calls"):
        value = raw.get(key)
        if value is None:
            continue
        if not isinstance(value, list) or not all(isinstance(item, str) and item for item in value):
            raise RethemeError(
                ErrorCode.CONFIG_INVALID,
                message=f"{key} must be a list of non-empty strings",
                path=config_path,
            )

    workers = raw.get("scan_workers")
    if workers is not None and (
        isinstance(workers, bool) or not isinstance(workers, int) or not 1 <= workers <= _MAX_SCAN_WORKERS
    ):
        raise RethemeError(
            ErrorCode.CONFIG_INVALID,
            message=f"scan_workers must be an integer between 1 and {_MAX_SCAN_WORKERS}",
            path=config_path,
        )

    mappings = raw.get("mappings")
    if mappings is not None and (
        not isinstance(mappings, dict)
        or not all(isinstance(k, str) and isinstance(v, str) and k and v for k, v in mappings.items())
    ):
        raise RethemeError(
            ErrorCode.CONFIG_INVALID,
            message="mappings must map class names to replacement class names",
            path=config_path,
        )

    return base.merged(raw)
