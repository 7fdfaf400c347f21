"""Conversions between hex colors and the ``H S% L%`` strings palettes use."""

from __future__ import annotations

import colorsys
import math
import re

from retheme.themes.loader import HSL_VALUE_RE

HEX_RE = re.compile(r"^#?([0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$")


def _round1(value: float) -> float:
    # half-up rounding
    return math.floor(value * 10 + 0.5) / 10


def _fmt(value: float) -> str:
    return f"{_round1(value):g}"


def hex_to_hsl(hex_color: str) -> str:
    """``#E11D48`` -> ``346.8 77.2% 49.8%``. Three-digit shorthand is expanded."""
    match = HEX_RE.match(hex_color.strip()) if isinstance(hex_color, str) else None
    if match is None:
        raise ValueError(f"Invalid hex color: {hex_color!r}")
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    r, g, b = (int(digits[i:i + 2], 16) / 255 for i in (0, 2, 4))
    h, l, s = colorsys.rgb_to_hls(r, g, b)
    return f"{_fmt(h * 360)} {_fmt(s * 100)}% {_fmt(l * 100)}%"


def hsl_to_hex(hsl: str) -> str:
    """``346.8 77.2% 49.8%`` -> ``#E11D48`` (uppercase)."""
    if not isinstance(hsl, str) or not HSL_VALUE_RE.match(hsl.strip()):
        raise ValueError(f"Invalid HSL value: {hsl!r}")
    h, s, l = (float(part.rstrip("%")) for part in hsl.split())
    r, g, b = colorsys.hls_to_rgb((h / 360) % 1.0, min(l, 100) / 100, min(s, 100) / 100)
    return "#" + "".join(f"{math.floor(c * 255 + 0.5):02X}" for c in (r, g, b))
