"""Tests for project config loading and user settings."""

import pytest

from retheme.config import EngineConfig, load_project_config
from retheme.config.engine import ASSERTION_CALLS
from retheme.config.settings import AppSettings
from retheme.errors import ErrorCode, RethemeError

from conftest import write_file


def _write_config(project, text):
    return write_file(project / ".retheme" / "config.yaml", text)


class TestEngineConfig:
    def test_directories_for_mode(self):
        config = EngineConfig()
        assert "lib" not in config.directories_for("standard")
        assert "lib" in config.directories_for("full")

    def test_merged_appends_and_dedupes(self):
        merged = EngineConfig().merged(
            {"extra_scan_dirs": ["packages", "app"], "extra_exclude_dirs": ["vendor"]}
        )
        assert merged.scan_dirs[-1] == "packages"
        assert merged.scan_dirs.count("app") == 1
        assert "vendor" in merged.exclude_dirs
        assert "node_modules" in merged.exclude_dirs


class TestLoadProjectConfig:
    def test_missing_file_returns_base(self, project):
        base = EngineConfig(scan_workers=3)
        assert load_project_config(project, base) is base

    def test_empty_file_returns_base(self, project):
        _write_config(project, "")
        assert load_project_config(project) == EngineConfig()

    def test_overrides(self, project):
        _write_config(
            project,
            "extra_scan_dirs: [packages]\n"
            "extra_extensions: [.vue]\n"
            "assertion_calls: ['assert.equal(']\n"
            "scan_workers: 4\n"
            "mappings:\n"
            "  bg-blue-500: bg-brand\n",
        )
        config = load_project_config(project)
        assert "packages" in config.scan_dirs
        assert ".vue" in config.extensions
        assert config.assertion_calls == ASSERTION_CALLS + ("assert.equal(",)
        assert config.scan_workers == 4
        assert dict(config.extra_mappings) == {"bg-blue-500": "bg-brand"}

    @pytest.mark.parametrize(
        "text",
        [
            "- just\n- a list\n",
            "colour_mode: dark\n",
            "extra_scan_dirs: packages\n",
            "extra_scan_dirs: ['']\n",
            "scan_workers: 0\n",
            "scan_workers: 99\n",
            "scan_workers: true\n",
            "mappings: [bg-blue-500]\n",
            "mappings:\n  bg-blue-500: 7\n",
            "key: [unclosed\n",
        ],
    )
    def test_invalid(self, project, text):
        _write_config(project, text)
        with pytest.raises(RethemeError) as excinfo:
            load_project_config(project)
        assert excinfo.value.code is ErrorCode.CONFIG_INVALID
        assert excinfo.value.path == project / ".retheme" / "config.yaml"


class TestAppSettings:
    @pytest.fixture
    def settings(self, tmp_path, monkeypatch):
        monkeypatch.setenv("RETHEME_HOME", str(tmp_path / "home"))
        return AppSettings(tmp_path / "settings.ini")

    def test_defaults(self, settings):
        assert settings.user_themes_dir == ""
        assert settings.default_mode == "standard"
        assert settings.scan_workers == 1
        assert settings.extra_assertion_calls == []

    def test_default_mode_validated(self, settings):
        settings.default_mode = "FULL"
        assert settings.default_mode == "full"
        settings.default_mode = "everything"
        assert settings.default_mode == "standard"

    def test_scan_workers_clamped(self, settings):
        settings.scan_workers = 500
        assert settings.scan_workers == 32
        settings.scan_workers = -2
        assert settings.scan_workers == 1

    def test_assertion_calls_round_trip(self, settings):
        settings.extra_assertion_calls = [" assert.equal( ", "", "should.have("]
        assert settings.extra_assertion_calls == ["assert.equal(", "should.have("]

    def test_persisted_to_ini(self, settings, tmp_path):
        settings.user_themes_dir = " /srv/themes "
        settings.sync()
        reopened = AppSettings(tmp_path / "settings.ini")
        assert reopened.user_themes_dir == "/srv/themes"

    def test_log_dir_under_home(self, settings, tmp_path):
        assert settings.log_dir == tmp_path / "home" / "logs"
        assert settings.log_dir.is_dir()
