"""Tests for retheme.themes.colors."""

import pytest

from retheme.themes import hex_to_hsl, hsl_to_hex
from retheme.themes.loader import HSL_VALUE_RE


class TestHexToHsl:
    @pytest.mark.parametrize(
        "hex_color, expected",
        [
            ("#E11D48", "346.8 77.2% 49.8%"),
            ("#ff00aa", "320 100% 50%"),
            ("#FFFFFF", "0 0% 100%"),
            ("#000000", "0 0% 0%"),
            ("#808080", "0 0% 50.2%"),
            ("0F0", "120 100% 50%"),
        ],
    )
    def test_known_colors(self, hex_color, expected):
        assert hex_to_hsl(hex_color) == expected

    def test_output_is_a_valid_palette_value(self):
        assert HSL_VALUE_RE.match(hex_to_hsl("#E11D48"))

    @pytest.mark.parametrize("bad", ["", "#12345", "#GGGGGG", "blue", None])
    def test_invalid(self, bad):
        with pytest.raises(ValueError):
            hex_to_hsl(bad)


class TestHslToHex:
    @pytest.mark.parametrize(
        "hsl, expected",
        [
            ("346.8 77.2% 49.8%", "#E11D48"),
            ("0 100% 50%", "#FF0000"),
            ("120 100% 50%", "#00FF00"),
            ("240 100% 25%", "#000080"),
            ("0 0% 100%", "#FFFFFF"),
            ("0 0% 50.2%", "#808080"),
        ],
    )
    def test_known_values(self, hsl, expected):
        assert hsl_to_hex(hsl) == expected

    def test_full_turn_wraps(self):
        assert hsl_to_hex("360 100% 50%") == "#FF0000"

    @pytest.mark.parametrize("bad", ["1 2 3", "red", "", 42])
    def test_invalid(self, bad):
        with pytest.raises(ValueError):
            hsl_to_hex(bad)
