"""Tests for retheme.core.scanner."""

import os
import threading
from pathlib import Path

import pytest

from retheme.config.engine import EngineConfig
from retheme.core.mapping import KIND_HEX
from retheme.core.scanner import AssertionPolicy, ProjectScanner, ScanResult, is_test_file
from retheme.core.taxonomy import MODE_FULL, MODE_STANDARD
from retheme.errors import ErrorCode, RethemeError

from conftest import write_file

ASSERTION_TEST = """\
import { render } from '@testing-library/react';
const cls = 'bg-red-500';
expect(el).toHaveClass('bg-red-500');
"""


class TestPolicies:
    @pytest.mark.parametrize(
        "path",
        ["components/__tests__/Button.tsx", "src/Button.test.tsx", "src/Button.spec.ts", "tests/util.js"],
    )
    def test_test_files(self, path):
        assert is_test_file(path) is True

    def test_regular_file(self):
        assert is_test_file("components/Button.tsx") is False
        assert is_test_file(Path("app") / "page.tsx") is False

    def test_assertion_lines(self):
        policy = AssertionPolicy()
        assert policy.is_assertion_line("expect(cls).toBe('bg-red-500')")
        assert policy.is_assertion_line("  .toContain('text-white')")
        assert not policy.is_assertion_line("const cls = 'bg-red-500'")

    def test_custom_calls(self):
        policy = AssertionPolicy(calls=("assert.equal(",))
        assert policy.is_assertion_line("assert.equal(cls, 'bg-red-500')")
        assert not policy.is_assertion_line("expect(cls)")

    def test_protects_only_assertions_in_test_files(self):
        policy = AssertionPolicy()
        line = "expect(cls).toBe('bg-red-500')"
        assert policy.protects("src/a.test.ts", line)
        assert not policy.protects("src/a.ts", line)


class TestScanResult:
    def test_compliant_count_is_derived(self):
        result = ScanResult(total_references=10, non_compliant_count=7)
        assert result.compliant_count == 3


class TestProjectScanner:
    def test_counts(self, project):
        result = ProjectScanner().scan(project)
        assert result.mode == MODE_STANDARD
        assert result.files_scanned == 2
        assert [f.path for f in result.files] == ["components/Button.tsx", "components/Card.tsx"]
        assert result.total_references == 8
        assert result.non_compliant_count == 8
        assert result.compliant_count == 0
        assert result.fixable_count == 6

    def test_token_positions(self, project):
        button = ProjectScanner().scan(project).file("components/Button.tsx")
        first = button.mappings[0]
        assert first.token.raw_text == "bg-blue-500"
        assert first.token.line_number == 3
        assert first.token.column == 23
        assert [m.suggestion for m in button.mappings] == ["bg-primary", "hover:bg-primary/90", "text-background"]

    def test_hex_only_after_context_keyword(self, project):
        write_file(project / "app" / "colors.ts", "export const brand = '#ffffff';\n")
        result = ProjectScanner().scan(project)
        assert result.file("app/colors.ts") is None
        card = result.file("components/Card.tsx")
        hexes = [m for m in card.mappings if m.token.kind == KIND_HEX]
        assert [m.token.raw_text for m in hexes] == ["#ff00aa"]
        assert hexes[0].fixable is False

    def test_full_mode_infers(self, project):
        result = ProjectScanner().scan(project, MODE_FULL)
        card = result.file("components/Card.tsx")
        emerald = next(m for m in card.mappings if m.token.raw_text == "text-emerald-400")
        assert emerald.suggestion == "text-success/70"
        assert result.fixable_count == 7

    def test_full_mode_adds_directories(self, project):
        write_file(project / "lib" / "tone.ts", "export const tone = 'text-gray-900';\n")
        assert ProjectScanner().scan(project).file("lib/tone.ts") is None
        assert ProjectScanner().scan(project, MODE_FULL).file("lib/tone.ts") is not None

    def test_excluded_dirs_and_extensions(self, project):
        write_file(project / "components" / "node_modules" / "lib.js", "'bg-blue-500'\n")
        write_file(project / "components" / "styles.css", ".x { color: red }\n")
        write_file(project / "components" / "README.md", "bg-blue-500\n")
        result = ProjectScanner().scan(project)
        assert result.files_scanned == 2

    def test_protected_assertion_lines(self, project):
        write_file(project / "components" / "__tests__" / "Button.test.tsx", ASSERTION_TEST)
        result = ProjectScanner().scan(project)
        entry = result.file("components/__tests__/Button.test.tsx")
        assert len(entry.mappings) == 2
        free, protected = entry.mappings
        assert free.token.protected is False and free.fixable is True
        assert protected.token.protected is True and protected.fixable is False
        assert result.total_references == 10
        assert result.non_compliant_count == 9
        assert result.compliant_count == 1

    def test_configured_assertion_calls(self, project):
        write_file(project / "src" / "theme.spec.ts", "assert.equal(cls, 'bg-red-500');\n")
        config = EngineConfig(assertion_calls=("assert.equal(",))
        entry = ProjectScanner(config).scan(project).file("src/theme.spec.ts")
        assert entry.mappings[0].token.protected is True

    def test_idempotent(self, project):
        scanner = ProjectScanner()
        assert scanner.scan(project).to_dict() == scanner.scan(project).to_dict()

    def test_worker_pool_matches_sequential(self, project):
        for index in range(12):
            write_file(project / "app" / f"page{index:02d}.tsx", f"<p className='text-gray-{(index % 9 + 1) * 100}'/>\n")
        sequential = ProjectScanner(EngineConfig(scan_workers=1)).scan(project, MODE_FULL)
        pooled = ProjectScanner(EngineConfig(scan_workers=4)).scan(project, MODE_FULL)
        assert pooled.to_dict() == sequential.to_dict()
        paths = [f.path for f in pooled.files]
        assert paths == sorted(paths)

    def test_unreadable_file_skipped(self, project):
        bad = project / "components" / "Broken.tsx"
        bad.write_bytes(b"\xff\xfe\x00bg-blue-500")
        result = ProjectScanner().scan(project)
        assert result.skipped_files == ["components/Broken.tsx"]
        assert result.files_scanned == 3
        assert result.file("components/Broken.tsx") is None
        assert result.total_references == 8

    def test_symlinked_directory_scanned_once(self, project):
        try:
            os.symlink(project / "components", project / "src", target_is_directory=True)
        except (OSError, NotImplementedError):
            pytest.skip("symlinks unavailable")
        result = ProjectScanner().scan(project)
        assert result.files_scanned == 2
        assert result.total_references == 8

    def test_unknown_mode(self, project):
        with pytest.raises(RethemeError) as excinfo:
            ProjectScanner().scan(project, "exhaustive")
        assert excinfo.value.code is ErrorCode.CONFIG_INVALID

    def test_cancelled(self, project):
        event = threading.Event()
        event.set()
        with pytest.raises(RethemeError) as excinfo:
            ProjectScanner().scan(project, cancel_event=event)
        assert excinfo.value.code is ErrorCode.OPERATION_CANCELLED

    def test_progress_callback(self, project):
        calls = []
        ProjectScanner().scan(project, progress_cb=lambda c, t, name: calls.append((c, t, name)))
        assert calls == [(1, 2, "Button.tsx"), (2, 2, "Card.tsx")]

    def test_empty_project(self, tmp_path):
        result = ProjectScanner().scan(tmp_path)
        assert result.files_scanned == 0
        assert result.files == []
        assert result.to_dict()["compliantCount"] == 0

    def test_to_dict_shape(self, project):
        data = ProjectScanner().scan(project).to_dict()
        match = data["files"][0]["matches"][0]
        assert set(match) == {"line", "column", "match", "suggestion", "fixable", "kind", "origin", "protected"}
        assert data["totalReferences"] == data["compliantCount"] + data["nonCompliantCount"]
