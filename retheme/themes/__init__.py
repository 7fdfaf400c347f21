"""Theme store: models, validation, registry and artifact rendering."""

from retheme.themes.colors import hex_to_hsl, hsl_to_hex
from retheme.themes.constants import REQUIRED_SLOTS, THEME_CATEGORIES
from retheme.themes.loader import load_theme_file, parse_theme, validate_theme
from retheme.themes.models import Palette, Theme, ThemeSummary, ThemeValidationError, ValidationReport
from retheme.themes.registry import ThemeRegistry

__all__ = [
    "REQUIRED_SLOTS",
    "THEME_CATEGORIES",
    "Palette",
    "Theme",
    "ThemeRegistry",
    "ThemeSummary",
    "ThemeValidationError",
    "ValidationReport",
    "hex_to_hsl",
    "hsl_to_hex",
    "load_theme_file",
    "parse_theme",
    "validate_theme",
]
