"""Tests for retheme.core.taxonomy."""

import pytest

from retheme.core.taxonomy import (
    FULL_LITERAL_MAP,
    MODE_FULL,
    MODE_STANDARD,
    OPACITY_FULL,
    STANDARD_LITERAL_MAP,
    bucket_shade,
    classify_hue_family,
    neutral_slot,
    resolve_literal,
)


class TestResolveLiteral:
    def test_standard_entries(self):
        assert resolve_literal("bg-blue-500") == "bg-primary"
        assert resolve_literal("hover:bg-blue-600") == "hover:bg-primary/90"
        assert resolve_literal("bg-gray-100") == "bg-secondary"
        assert resolve_literal("bg-slate-100") == "bg-secondary"
        assert resolve_literal("text-white") == "text-background"

    def test_full_only_entries_need_full_mode(self):
        assert resolve_literal("bg-green-500") is None
        assert resolve_literal("bg-green-500", MODE_FULL) == "bg-success"
        assert resolve_literal("bg-red-50", MODE_FULL) == "bg-destructive/10"

    def test_full_table_is_superset_of_standard(self):
        for key, value in STANDARD_LITERAL_MAP.items():
            assert FULL_LITERAL_MAP[key] == value

    def test_unknown_and_bad_input(self):
        assert resolve_literal("bg-nonsense-500", MODE_FULL) is None
        assert resolve_literal("") is None
        assert resolve_literal(None) is None

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            STANDARD_LITERAL_MAP["bg-blue-500"] = "bg-accent"


class TestClassifyHueFamily:
    @pytest.mark.parametrize(
        "family, expected",
        [
            ("green", "success"),
            ("emerald", "success"),
            ("teal", "success"),
            ("lime", "success"),
            ("red", "destructive"),
            ("rose", "destructive"),
            ("yellow", "warning"),
            ("amber", "warning"),
            ("orange", "warning"),
            ("blue", "primary"),
            ("cyan", "info"),
            ("sky", "info"),
            ("purple", "accent"),
            ("violet", "accent"),
            ("indigo", "accent"),
            ("fuchsia", "accent"),
            ("pink", "accent"),
            ("slate", "neutral"),
            ("gray", "neutral"),
            ("zinc", "neutral"),
            ("neutral", "neutral"),
            ("stone", "neutral"),
        ],
    )
    def test_known_families(self, family, expected):
        assert classify_hue_family(family) == expected

    def test_unknown_family(self):
        assert classify_hue_family("chartreuse") is None
        assert classify_hue_family(42) is None


class TestBucketShade:
    @pytest.mark.parametrize(
        "shade, tier",
        [
            (50, 10),
            (100, 10),
            (101, 20),
            (200, 20),
            (300, 30),
            (400, 70),
            (401, OPACITY_FULL),
            (500, OPACITY_FULL),
            (950, OPACITY_FULL),
        ],
    )
    def test_thresholds(self, shade, tier):
        assert bucket_shade(shade) == tier

    @pytest.mark.parametrize("shade", [0, -100, True, "400", 4.5, None])
    def test_rejects_non_positive_and_non_int(self, shade):
        assert bucket_shade(shade) is None


class TestNeutralSlot:
    def test_light_shades_are_muted(self):
        assert neutral_slot(50) == "muted"
        assert neutral_slot(200) == "muted"

    def test_mid_shades_are_muted_foreground(self):
        assert neutral_slot(300) == "muted-foreground"
        assert neutral_slot(600) == "muted-foreground"

    def test_dark_shades_are_foreground(self):
        assert neutral_slot(700) == "foreground"
        assert neutral_slot(950) == "foreground"

    def test_invalid(self):
        assert neutral_slot(0) is None


def test_modes_are_distinct():
    assert MODE_STANDARD != MODE_FULL
