"""Theme document parsing and validation."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Mapping

import yaml

from retheme.themes.constants import (
    ALL_SLOTS,
    DEFAULT_RADIUS,
    FONT_KEYS,
    PALETTE_MODES,
    REQUIRED_FIELDS,
    REQUIRED_SLOTS,
    THEME_CATEGORIES,
)
from retheme.themes.models import FontFamily, Palette, Theme, ThemeValidationError, ValidationReport

THEME_ID_RE = re.compile(r"^[a-z0-9-]+$")
HSL_VALUE_RE = re.compile(r"^\d+(\.\d+)?\s+\d+(\.\d+)?%\s+\d+(\.\d+)?%$")

THEME_FILE_SUFFIXES = (".json", ".yaml", ".yml")

_MAX_THEME_BYTES = 64 * 1024
_MAX_SHORT_FIELD_LEN = 120
_MAX_DESC_LEN = 400


def validate_theme(theme: Theme | Mapping[str, Any]) -> ValidationReport:
    """Check a theme (or raw theme document) without mutating it.

    All problems are collected so callers can show them together.
    """
    data = theme.to_dict() if isinstance(theme, Theme) else theme
    if not isinstance(data, Mapping):
        return ValidationReport(valid=False, errors=("Theme document must be an object",))

    errors: list[str] = []
    for key in REQUIRED_FIELDS:
        if not data.get(key):
            errors.append(f"Missing required field: {key}")

    theme_id = data.get("id")
    if theme_id and (not isinstance(theme_id, str) or not THEME_ID_RE.match(theme_id)):
        errors.append("ID must be kebab-case (lowercase letters, numbers, hyphens)")

    category = data.get("category")
    if category and (not isinstance(category, str) or category not in THEME_CATEGORIES):
        allowed = ", ".join(THEME_CATEGORIES)
        errors.append(f"Invalid category: {category}. Must be one of: {allowed}")

    for key in ("name", "description"):
        value = data.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            errors.append(f"Field {key!r} must be a string")
            continue
        limit = _MAX_DESC_LEN if key == "description" else _MAX_SHORT_FIELD_LEN
        if len(value) > limit:
            errors.append(f"Field {key!r} exceeds max length {limit}")
        if key == "name" and any(ch in value for ch in ("\n", "\r", "\t")):
            errors.append(f"Field {key!r} must be a single line string")

    colors = data.get("colors")
    if colors:
        if not isinstance(colors, Mapping):
            errors.append("Field 'colors' must be an object")
        else:
            errors.extend(_palette_errors(colors))

    radius = data.get("radius")
    if radius is not None and (not isinstance(radius, str) or not radius.strip()):
        errors.append("Field 'radius' must be a non-empty string")

    fonts = data.get("fontFamily")
    if fonts is not None:
        if not isinstance(fonts, Mapping):
            errors.append("Field 'fontFamily' must be an object")
        else:
            for key, value in fonts.items():
                if key not in FONT_KEYS:
                    errors.append(f"Unsupported fontFamily key: {key}")
                elif not isinstance(value, str) or not value.strip():
                    errors.append(f"fontFamily.{key} must be a non-empty string")

    return ValidationReport(valid=not errors, errors=tuple(errors))


def _palette_errors(colors: Mapping[str, Any]) -> list[str]:
    errors: list[str] = []
    for mode in PALETTE_MODES:
        if not colors.get(mode):
            errors.append(f"Missing {mode} color palette")
    for mode in PALETTE_MODES:
        palette = colors.get(mode)
        if not palette:
            continue
        if not isinstance(palette, Mapping):
            errors.append(f"Palette {mode!r} must be an object")
            continue
        for slot in REQUIRED_SLOTS:
            if not palette.get(slot):
                errors.append(f"Missing {mode}.{slot} color")
        for key, value in palette.items():
            if key not in ALL_SLOTS:
                errors.append(f"Unknown color slot {mode}.{key}")
                continue
            if not isinstance(value, str) or not HSL_VALUE_RE.match(value):
                errors.append(
                    f'Invalid HSL format for {mode}.{key}: "{value}". '
                    'Expected format: "H S% L%" (e.g., "220 14.3% 95.9%")'
                )
    return errors


def parse_theme(data: Mapping[str, Any]) -> Theme:
    """Validate a theme document and build a Theme from it."""
    report = validate_theme(data)
    if not report.valid:
        theme_id = data.get("id", "?") if isinstance(data, Mapping) else "?"
        raise ThemeValidationError(
            f"Invalid theme {theme_id}: {', '.join(report.errors)}",
            errors=list(report.errors),
        )

    colors = data["colors"]
    font_family = None
    fonts = data.get("fontFamily")
    if fonts:
        font_family = FontFamily(sans=fonts.get("sans"), mono=fonts.get("mono"))

    return Theme(
        id=data["id"],
        name=data["name"].strip(),
        category=data["category"],
        description=(data.get("description") or "").strip(),
        light=Palette(dict(colors["light"])),
        dark=Palette(dict(colors["dark"])),
        radius=(data.get("radius") or DEFAULT_RADIUS).strip(),
        font_family=font_family,
    )


def load_theme_file(path: Path) -> Theme:
    """Load and validate a single theme document (JSON or YAML)."""
    if not path.is_file():
        raise ThemeValidationError(f"Theme path is not a file: {path}")
    if path.suffix.lower() not in THEME_FILE_SUFFIXES:
        raise ThemeValidationError(f"Unsupported theme file type: {path}")
    return parse_theme(load_document(path))


def load_document(path: Path, *, max_bytes: int = _MAX_THEME_BYTES) -> Mapping[str, Any]:
    content = _read_text_limited(path, max_bytes=max_bytes)
    try:
        if path.suffix.lower() == ".json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ThemeValidationError(f"Invalid document in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ThemeValidationError(f"Expected an object in {path}")
    return data


def _read_text_limited(path: Path, *, max_bytes: int) -> str:
    try:
        size = path.stat().st_size
    except OSError as exc:
        raise ThemeValidationError(f"Unable to stat {path}: {exc}") from exc
    if size > max_bytes:
        raise ThemeValidationError(f"{path}: file exceeds max size ({max_bytes} bytes)")
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ThemeValidationError(f"Unable to read {path}: {exc}") from exc
