"""Walk a project and collect hardcoded color usages."""

from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator

from retheme.config.engine import ASSERTION_CALLS, TEST_PATH_MARKERS, EngineConfig
from retheme.core.mapping import (
    COLOR_CLASS_RE,
    HEX_COLOR_RE,
    KIND_HEX,
    KIND_UTILITY,
    ColorMapper,
    ColorMapping,
    ColorToken,
)
from retheme.core.taxonomy import MODE_STANDARD, SCAN_MODES
from retheme.errors import ErrorCode, RethemeError

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


def is_test_file(path: str | Path, markers: tuple[str, ...] = TEST_PATH_MARKERS) -> bool:
    """True when the project-relative path looks like a test or spec module."""
    text = Path(path).as_posix() if isinstance(path, Path) else str(path)
    return any(marker in text for marker in markers)


@dataclass(frozen=True)
class AssertionPolicy:
    """Decides which lines of a test file must never be rewritten."""

    calls: tuple[str, ...] = ASSERTION_CALLS
    test_markers: tuple[str, ...] = TEST_PATH_MARKERS

    @classmethod
    def from_config(cls, config: EngineConfig) -> "AssertionPolicy":
        return cls(calls=config.assertion_calls, test_markers=config.test_path_markers)

    def is_test_file(self, path: str | Path) -> bool:
        return is_test_file(path, self.test_markers)

    def is_assertion_line(self, line: str) -> bool:
        return any(call in line for call in self.calls)

    def protects(self, path: str | Path, line: str) -> bool:
        return self.is_test_file(path) and self.is_assertion_line(line)


@dataclass
class FileMatches:
    """All color findings for one source file."""

    path: str
    mappings: list[ColorMapping] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.mappings)

    @property
    def non_compliant(self) -> list[ColorMapping]:
        return [m for m in self.mappings if not m.token.protected]

    @property
    def fixable(self) -> list[ColorMapping]:
        return [m for m in self.mappings if m.fixable]

    @property
    def unfixable(self) -> list[ColorMapping]:
        return [m for m in self.mappings if not m.fixable and not m.token.protected]

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "matches": [
                {
                    "line": m.token.line_number,
                    "column": m.token.column,
                    "match": m.token.raw_text,
                    "suggestion": m.suggestion,
                    "fixable": m.fixable,
                    "kind": m.token.kind,
                    "origin": m.origin,
                    "protected": m.token.protected,
                }
                for m in self.mappings
            ],
        }


@dataclass
class ScanResult:
    """Aggregate of a project scan.

    ``compliant_count`` is derived, so the identity
    ``compliant_count == total_references - non_compliant_count`` always holds.
    """

    mode: str = MODE_STANDARD
    files_scanned: int = 0  # every candidate file, readable or not
    files: list[FileMatches] = field(default_factory=list)
    total_references: int = 0
    non_compliant_count: int = 0
    skipped_files: list[str] = field(default_factory=list)

    @property
    def compliant_count(self) -> int:
        return self.total_references - self.non_compliant_count

    @property
    def fixable_count(self) -> int:
        return sum(len(f.fixable) for f in self.files)

    def file(self, path: str) -> FileMatches | None:
        for entry in self.files:
            if entry.path == path:
                return entry
        return None

    def to_dict(self) -> dict:
        return {
            "mode": self.mode,
            "filesScanned": self.files_scanned,
            "totalReferences": self.total_references,
            "nonCompliantCount": self.non_compliant_count,
            "compliantCount": self.compliant_count,
            "fixableCount": self.fixable_count,
            "skippedFiles": list(self.skipped_files),
            "files": [f.to_dict() for f in self.files],
        }


class ProjectScanner:
    """Finds utility-class and hex color tokens in a project's source tree."""

    def __init__(self, config: EngineConfig | None = None, mapper: ColorMapper | None = None) -> None:
        self._config = config or EngineConfig()
        self._mapper = mapper or ColorMapper(self._config.extra_mappings)
        self._policy = AssertionPolicy.from_config(self._config)

    @property
    def policy(self) -> AssertionPolicy:
        return self._policy

    def iter_files(self, root: str | Path, mode: str = MODE_STANDARD) -> Iterator[Path]:
        """Yield candidate source files, each real path once, in directory order."""
        root = Path(root)
        extensions = {ext.lower() for ext in self._config.extensions}
        excluded = self._config.exclude_dirs
        seen: set[Path] = set()
        for dirname in self._config.directories_for(mode):
            base = root / dirname
            if not base.is_dir():
                continue
            for dirpath, dirnames, filenames in os.walk(base):
                dirnames[:] = sorted(d for d in dirnames if d not in excluded)
                for fname in sorted(filenames):
                    p = Path(dirpath) / fname
                    if p.suffix.lower() not in extensions:
                        continue
                    try:
                        real = p.resolve()
                    except OSError:
                        real = p
                    if real in seen:
                        continue
                    seen.add(real)
                    yield p

    def collect_files(self, root: str | Path, mode: str = MODE_STANDARD) -> list[Path]:
        root = Path(root)
        return sorted(self.iter_files(root, mode), key=lambda p: p.relative_to(root).as_posix())

    def scan_text(self, rel_path: str, content: str, mode: str = MODE_STANDARD) -> FileMatches:
        """Scan already-loaded file content; ``rel_path`` is used for reporting and test detection."""
        entry = FileMatches(path=rel_path)
        test_file = self._policy.is_test_file(rel_path)
        keywords = self._config.hex_context_keywords

        for index, line in enumerate(content.split("\n"), start=1):
            protected = test_file and self._policy.is_assertion_line(line)
            for match in COLOR_CLASS_RE.finditer(line):
                token = ColorToken(
                    file_path=rel_path,
                    line_number=index,
                    column=match.start(),
                    raw_text=match.group(0),
                    kind=KIND_UTILITY,
                    protected=protected,
                )
                entry.mappings.append(self._mapper.resolve(token, mode))
            for match in HEX_COLOR_RE.finditer(line):
                before = line[: match.start()]
                if not any(keyword in before for keyword in keywords):
                    continue
                token = ColorToken(
                    file_path=rel_path,
                    line_number=index,
                    column=match.start(),
                    raw_text=match.group(0),
                    kind=KIND_HEX,
                    protected=protected,
                )
                entry.mappings.append(self._mapper.resolve(token, mode))
        return entry

    def scan_file(self, root: Path, path: Path, mode: str = MODE_STANDARD) -> FileMatches | None:
        """Scan one file; returns None when it cannot be read."""
        rel_path = path.relative_to(root).as_posix()
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping unreadable file %s: %s", rel_path, exc)
            return None
        return self.scan_text(rel_path, content, mode)

    def scan(
        self,
        root: str | Path,
        mode: str = MODE_STANDARD,
        *,
        progress_cb: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ScanResult:
        """Scan every candidate file under ``root``.

        Files are read by a bounded thread pool when ``scan_workers > 1``;
        results are folded in path order once all of them are back.
        """
        if mode not in SCAN_MODES:
            raise RethemeError(ErrorCode.CONFIG_INVALID, message=f"Unknown scan mode: {mode}")
        root = Path(root)
        files = self.collect_files(root, mode)
        total = len(files)
        result = ScanResult(mode=mode, files_scanned=total)

        def _scan_one(path: Path) -> FileMatches | None:
            if cancel_event is not None and cancel_event.is_set():
                return None
            return self.scan_file(root, path, mode)

        workers = max(1, int(self._config.scan_workers))
        if workers > 1 and total > 1:
            with ThreadPoolExecutor(max_workers=min(workers, total)) as pool:
                scanned = list(pool.map(_scan_one, files))
        else:
            scanned = []
            for path in files:
                scanned.append(_scan_one(path))
                if progress_cb is not None:
                    progress_cb(len(scanned), total, path.name)

        if cancel_event is not None and cancel_event.is_set():
            raise RethemeError(ErrorCode.OPERATION_CANCELLED)

        for path, entry in zip(files, scanned):
            if entry is None:
                result.skipped_files.append(path.relative_to(root).as_posix())
                continue
            result.total_references += entry.total
            result.non_compliant_count += len(entry.non_compliant)
            if entry.mappings:
                result.files.append(entry)

        if workers > 1 and total > 1 and progress_cb is not None:
            progress_cb(total, total, "")

        logger.info(
            "Scanned %d files (%s mode): %d references, %d non-compliant",
            result.files_scanned,
            mode,
            result.total_references,
            result.non_compliant_count,
        )
        return result
