from __future__ import annotations

from pathlib import Path

from retheme import runtime_paths


def test_source_package_root_points_to_repo_package() -> None:
    root = runtime_paths.package_root()
    assert root.name == "retheme"
    assert (root / "themes").exists()


def test_builtin_themes_root_resolves() -> None:
    root = runtime_paths.builtin_themes_root()
    assert root.name == "builtin"
    assert (root / "tech-ai" / "neo-tokyo.json").is_file()


def test_frozen_prefers_meipass_retheme_dir(tmp_path: Path, monkeypatch) -> None:
    bundle_root = tmp_path / "bundle"
    package_root = bundle_root / "retheme"
    package_root.mkdir(parents=True)
    monkeypatch.setattr(runtime_paths.sys, "frozen", True, raising=False)
    monkeypatch.setattr(runtime_paths.sys, "_MEIPASS", str(bundle_root), raising=False)

    assert runtime_paths.package_root() == package_root


def test_frozen_falls_back_to_meipass_when_retheme_missing(tmp_path: Path, monkeypatch) -> None:
    bundle_root = tmp_path / "bundle"
    bundle_root.mkdir(parents=True)
    monkeypatch.setattr(runtime_paths.sys, "frozen", True, raising=False)
    monkeypatch.setattr(runtime_paths.sys, "_MEIPASS", str(bundle_root), raising=False)

    assert runtime_paths.package_root() == bundle_root


def test_user_data_dir_honours_override(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("RETHEME_HOME", str(tmp_path / "home"))
    assert runtime_paths.user_data_dir() == tmp_path / "home"


def test_user_data_dir_default(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("RETHEME_HOME", raising=False)
    monkeypatch.setenv("APPDATA", str(tmp_path))
    assert runtime_paths.user_data_dir() == tmp_path / "retheme"
