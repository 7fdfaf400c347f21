"""Tests for theme loading, validation and the registry."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from retheme.runtime_paths import builtin_themes_root
from retheme.themes import REQUIRED_SLOTS, THEME_CATEGORIES
from retheme.themes.loader import load_theme_file, parse_theme, validate_theme
from retheme.themes.models import Palette, ThemeValidationError
from retheme.themes.registry import ThemeRegistry


def _write_json(path: Path, data: dict[str, object]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def _palette(primary: str = "221.2 83.2% 53.3%") -> dict[str, str]:
    colors = {slot: "0 0% 50%" for slot in REQUIRED_SLOTS}
    colors["primary"] = primary
    return colors


def _document(theme_id: str, category: str = "tech-ai", **overrides) -> dict[str, object]:
    doc = {
        "id": theme_id,
        "name": theme_id.replace("-", " ").title(),
        "category": category,
        "description": "test theme",
        "colors": {"light": _palette(), "dark": _palette("217.2 91.2% 59.8%")},
    }
    doc.update(overrides)
    return doc


class TestValidateTheme:
    def test_valid_document(self):
        report = validate_theme(_document("test-theme"))
        assert report.valid is True
        assert report.errors == ()

    def test_collects_every_error(self):
        doc = _document("Bad_ID", category="retro")
        del doc["name"]
        report = validate_theme(doc)
        assert report.valid is False
        assert "Missing required field: name" in report.errors
        assert any(err.startswith("ID must be kebab-case") for err in report.errors)
        assert any(err.startswith("Invalid category: retro") for err in report.errors)

    @pytest.mark.parametrize("category", [["tech-ai"], {"name": "tech-ai"}])
    def test_unhashable_category_is_reported(self, category):
        report = validate_theme(_document("test-theme", category=category))
        assert report.valid is False
        assert any(err.startswith("Invalid category") for err in report.errors)

    def test_invalid_hsl_value(self):
        doc = _document("test-theme")
        doc["colors"]["light"]["primary"] = "#3b82f6"
        report = validate_theme(doc)
        assert report.valid is False
        assert any("primary" in err and "HSL" in err for err in report.errors)

    def test_missing_dark_palette(self):
        doc = _document("test-theme")
        del doc["colors"]["dark"]
        assert validate_theme(doc).valid is False

    def test_unknown_slot_rejected(self):
        doc = _document("test-theme")
        doc["colors"]["light"]["glow"] = "0 0% 0%"
        report = validate_theme(doc)
        assert any("glow" in err for err in report.errors)

    def test_does_not_mutate_input(self):
        doc = _document("test-theme")
        snapshot = json.loads(json.dumps(doc))
        validate_theme(doc)
        assert doc == snapshot

    def test_accepts_theme_objects(self, registry):
        assert validate_theme(registry.get_theme("neo-tokyo")).valid is True

    def test_non_mapping(self):
        assert validate_theme(["not", "a", "theme"]).valid is False


class TestParseTheme:
    def test_builds_frozen_theme(self):
        theme = parse_theme(_document("test-theme", radius="0.75rem", fontFamily={"sans": "Geist"}))
        assert theme.id == "test-theme"
        assert theme.radius == "0.75rem"
        assert theme.font_family.sans == "Geist"
        assert theme.font_family.mono is None
        with pytest.raises(AttributeError):
            theme.id = "other"

    def test_default_radius(self):
        assert parse_theme(_document("test-theme")).radius == "0.5rem"

    def test_invalid_raises_with_errors(self):
        with pytest.raises(ThemeValidationError) as excinfo:
            parse_theme(_document("test-theme", category="retro"))
        assert any("retro" in err for err in excinfo.value.errors)

    def test_round_trip_through_to_dict(self):
        theme = parse_theme(_document("test-theme", fontFamily={"mono": "Iosevka"}))
        assert parse_theme(theme.to_dict()) == theme

    def test_palette_iterates_in_canonical_order(self):
        values = dict(reversed(list(_palette().items())))
        assert list(Palette(values))[:3] == ["background", "foreground", "primary"]


class TestLoadThemeFile:
    def test_yaml_document(self, tmp_path: Path):
        path = tmp_path / "tech-ai" / "yaml-theme.yaml"
        path.parent.mkdir(parents=True)
        path.write_text(yaml.safe_dump(_document("yaml-theme")), encoding="utf-8")
        assert load_theme_file(path).id == "yaml-theme"

    def test_rejects_non_object(self, tmp_path: Path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        with pytest.raises(ThemeValidationError):
            load_theme_file(path)

    def test_rejects_oversized_file(self, tmp_path: Path):
        path = tmp_path / "huge.json"
        path.write_text(" " * (65 * 1024), encoding="utf-8")
        with pytest.raises(ThemeValidationError, match="max size"):
            load_theme_file(path)

    def test_rejects_unsupported_suffix(self, tmp_path: Path):
        path = tmp_path / "theme.toml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ThemeValidationError):
            load_theme_file(path)


class TestThemeRegistry:
    def test_builtin_library_loads_cleanly(self, registry):
        grouped = registry.load_all()
        assert set(grouped) == set(THEME_CATEGORIES)
        assert registry.load_errors() == []
        assert "neo-tokyo" in registry.theme_ids()
        assert all(grouped[category] for category in THEME_CATEGORIES)

    def test_get_theme(self, registry):
        theme = registry.get_theme("neo-tokyo")
        assert theme.category == "tech-ai"
        assert theme.light["primary"] == "346.8 77.2% 49.8%"
        assert registry.get_theme("does-not-exist") is None

    def test_invalid_files_are_skipped_and_recorded(self, tmp_path: Path):
        builtin = tmp_path / "builtin"
        _write_json(builtin / "tech-ai" / "good.json", _document("good"))
        _write_json(builtin / "tech-ai" / "bad.json", _document("bad", colors={"light": {}}))
        (builtin / "tech-ai" / "broken.json").write_text("{not json", encoding="utf-8")

        registry = ThemeRegistry(builtin_root=builtin)
        assert registry.theme_ids() == ["good"]
        assert len(registry.load_errors()) == 2

    def test_list_category_file_does_not_break_library(self, tmp_path: Path):
        user = tmp_path / "user"
        _write_json(user / "tech-ai" / "odd.json", _document("odd", category=["tech-ai"]))
        registry = ThemeRegistry(builtin_root=builtin_themes_root(), user_root=user)
        assert registry.get_theme("neo-tokyo") is not None
        assert registry.get_theme("odd") is None
        assert any("odd.json" in err for err in registry.load_errors())

    def test_category_mismatch_skipped(self, tmp_path: Path):
        builtin = tmp_path / "builtin"
        _write_json(builtin / "minimal-clean" / "misplaced.json", _document("misplaced", category="tech-ai"))
        registry = ThemeRegistry(builtin_root=builtin)
        assert registry.get_theme("misplaced") is None
        assert any("misplaced" in err for err in registry.load_errors())

    def test_user_theme_overrides_builtin(self, tmp_path: Path):
        user = tmp_path / "user"
        _write_json(user / "tech-ai" / "neo-tokyo.json", _document("neo-tokyo", name="My Tokyo"))
        registry = ThemeRegistry(builtin_root=builtin_themes_root(), user_root=user)
        assert registry.get_theme("neo-tokyo").name == "My Tokyo"
        summary = next(s for s in registry.list_themes() if s.theme_id == "neo-tokyo")
        assert summary.is_builtin is False

    def test_list_themes_sorted_by_category_then_name(self, registry):
        summaries = registry.list_themes()
        order = list(THEME_CATEGORIES)
        keys = [(order.index(s.category), s.name.lower()) for s in summaries]
        assert keys == sorted(keys)
        neo = next(s for s in summaries if s.theme_id == "neo-tokyo")
        assert neo.primary_light == "346.8 77.2% 49.8%"
        assert neo.background_dark

    def test_set_user_root_triggers_reload(self, tmp_path: Path):
        builtin = tmp_path / "builtin"
        user = tmp_path / "user"
        _write_json(builtin / "tech-ai" / "alpha.json", _document("alpha"))
        _write_json(user / "creative-bold" / "beta.json", _document("beta", category="creative-bold"))
        registry = ThemeRegistry(builtin_root=builtin)
        assert registry.theme_ids() == ["alpha"]
        registry.set_user_root(user)
        assert sorted(registry.theme_ids()) == ["alpha", "beta"]
