"""Resolve hardcoded color tokens to semantic theme classes."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping

from retheme.core.taxonomy import (
    BARE_COLORS,
    HUE_FAMILIES,
    MODE_FULL,
    MODE_STANDARD,
    OPACITY_FULL,
    UTILITY_PREFIXES,
    bucket_shade,
    classify_hue_family,
    neutral_slot,
    resolve_literal,
)

KIND_UTILITY = "utility-class"
KIND_HEX = "hex-literal"

ORIGIN_LITERAL = "literal"
ORIGIN_INFERRED = "inferred"
ORIGIN_NONE = "none"

_PREFIX_ALT = "|".join(sorted(UTILITY_PREFIXES, key=len, reverse=True))
_FAMILY_ALT = "|".join(sorted(HUE_FAMILIES, key=len, reverse=True))
_BARE_ALT = "|".join(BARE_COLORS)

# <variants:>*<prefix>-<family>-<shade>[/<opacity>] or <prefix>-white|black
COLOR_CLASS_PATTERN = (
    r"(?P<variants>(?:[a-z0-9-]+:)*)"
    rf"(?P<prefix>{_PREFIX_ALT})-"
    rf"(?:(?P<family>{_FAMILY_ALT})-(?P<shade>\d{{2,3}})|(?P<bare>{_BARE_ALT}))"
    r"(?P<opacity>/\d{1,3})?"
)
COLOR_CLASS_RE = re.compile(rf"(?<![\w:/\[-]){COLOR_CLASS_PATTERN}(?![\w/-])")
_COLOR_CLASS_FULL_RE = re.compile(COLOR_CLASS_PATTERN)

HEX_COLOR_RE = re.compile(r"#(?:[0-9A-Fa-f]{6}|[0-9A-Fa-f]{3})\b")


@dataclass(frozen=True, slots=True)
class ParsedColorClass:
    variants: str
    prefix: str
    family: str
    shade: int | None
    opacity: str

    @property
    def base(self) -> str:
        if self.shade is None:
            return f"{self.prefix}-{self.family}"
        return f"{self.prefix}-{self.family}-{self.shade}"


@dataclass(frozen=True, slots=True)
class ColorToken:
    """A single hardcoded color usage found in a source file."""

    file_path: str
    line_number: int
    column: int  # 0-based offset within the line
    raw_text: str
    kind: str = KIND_UTILITY
    protected: bool = False


@dataclass(frozen=True, slots=True)
class ColorMapping:
    """The verdict for one token."""

    token: ColorToken
    suggestion: str | None
    origin: str = ORIGIN_NONE

    @property
    def fixable(self) -> bool:
        return self.suggestion is not None


def parse_color_class(text: str) -> ParsedColorClass | None:
    """Split ``hover:bg-emerald-400/50`` into its grammar parts."""
    match = _COLOR_CLASS_FULL_RE.fullmatch(text or "")
    if match is None:
        return None
    shade = match.group("shade")
    return ParsedColorClass(
        variants=match.group("variants") or "",
        prefix=match.group("prefix"),
        family=match.group("family") or match.group("bare"),
        shade=int(shade) if shade else None,
        opacity=match.group("opacity") or "",
    )


def infer_color_class(parsed: ParsedColorClass) -> str | None:
    """Synthesize a semantic class from hue family and shade (no variants)."""
    if parsed.shade is None:
        return None
    category = classify_hue_family(parsed.family)
    if category is None:
        return None
    if category == "neutral":
        slot = neutral_slot(parsed.shade)
        return f"{parsed.prefix}-{slot}" if slot else None
    tier = bucket_shade(parsed.shade)
    if tier is None:
        return None
    if tier == OPACITY_FULL:
        return f"{parsed.prefix}-{category}"
    return f"{parsed.prefix}-{category}/{tier}"


def _recombine(parsed: ParsedColorClass, suggestion: str) -> str | None:
    if parsed.opacity:
        if "/" in suggestion:
            return None
        suggestion = f"{suggestion}{parsed.opacity}"
    return f"{parsed.variants}{suggestion}"


class ColorMapper:
    """Two-tier resolver: reviewed literal table first, inference second.

    ``extra_literals`` (from project config) are consulted before the
    builtin tables and count as literal mappings.
    """

    def __init__(self, extra_literals: Mapping[str, str] | None = None) -> None:
        self._extra = dict(extra_literals or {})

    def _literal(self, text: str, mode: str) -> str | None:
        return self._extra.get(text) or resolve_literal(text, mode)

    def suggest(self, text: str, mode: str = MODE_STANDARD) -> tuple[str | None, str]:
        """Return ``(suggestion, origin)`` for a raw utility-class string."""
        literal = self._literal(text, mode)
        if literal:
            return literal, ORIGIN_LITERAL

        parsed = parse_color_class(text)
        if parsed is None:
            return None, ORIGIN_NONE

        if parsed.variants or parsed.opacity:
            literal = self._literal(parsed.base, mode)
            if literal:
                combined = _recombine(parsed, literal)
                if combined is None:
                    return None, ORIGIN_NONE
                return combined, ORIGIN_LITERAL

        if mode != MODE_FULL:
            return None, ORIGIN_NONE

        inferred = infer_color_class(parsed)
        if inferred is None:
            return None, ORIGIN_NONE
        combined = _recombine(parsed, inferred)
        if combined is None:
            return None, ORIGIN_NONE
        return combined, ORIGIN_INFERRED

    def resolve(self, token: ColorToken, mode: str = MODE_STANDARD) -> ColorMapping:
        if token.kind != KIND_UTILITY or token.protected:
            return ColorMapping(token=token, suggestion=None, origin=ORIGIN_NONE)
        suggestion, origin = self.suggest(token.raw_text, mode)
        return ColorMapping(token=token, suggestion=suggestion, origin=origin)
