"""Render a theme into project artifacts."""

from __future__ import annotations

import json

from retheme.themes.constants import DEFAULT_FONT_MONO, DEFAULT_FONT_SANS
from retheme.themes.models import Palette, Theme

# Slot groups rendered as nested Tailwind color objects: group -> (DEFAULT slot, sub-keys).
_NESTED_GROUPS: dict[str, tuple[str, tuple[str, ...]]] = {
    "card": ("card", ("foreground",)),
    "popover": ("popover", ("foreground",)),
    "primary": ("primary", ("foreground",)),
    "secondary": ("secondary", ("foreground",)),
    "muted": ("muted", ("foreground",)),
    "accent": ("accent", ("foreground",)),
    "destructive": ("destructive", ("foreground",)),
}
_FLAT_SLOTS = ("background", "foreground", "border", "input", "ring")
_STATUS_SLOTS = ("success", "warning", "info")
_SIDEBAR_KEYS = (
    "foreground",
    "primary",
    "primary-foreground",
    "accent",
    "accent-foreground",
    "border",
    "ring",
)


def render_palette_json(theme: Theme) -> str:
    """Serialize the theme as the project's palette file."""
    return json.dumps(theme.to_dict(), indent=2) + "\n"


def _css_vars(palette: Palette, indent: str) -> str:
    return "".join(f"{indent}--{slot}: {value};\n" for slot, value in palette.items())


def render_stylesheet(theme: Theme) -> str:
    """Render the palette as CSS custom properties for light and dark selectors."""
    light_vars = _css_vars(theme.light, "    ")
    dark_vars = _css_vars(theme.dark, "    ")
    return (
        f"/* retheme theme: {theme.name} */\n"
        f"/* Theme ID: {theme.id} */\n"
        f"/* Category: {theme.category} */\n"
        "/* Generated by retheme; edits are overwritten on rebuild. */\n"
        "\n"
        "@layer base {\n"
        "  :root {\n"
        f"{light_vars}"
        f"    --radius: {theme.radius};\n"
        "  }\n"
        "\n"
        "  .dark {\n"
        f"{dark_vars}"
        "  }\n"
        "}\n"
        "\n"
        "@layer base {\n"
        "  * {\n"
        "    @apply border-border;\n"
        "  }\n"
        "  body {\n"
        "    @apply bg-background text-foreground;\n"
        "  }\n"
        "}\n"
    )


def _hsl_ref(slot: str) -> str:
    return f'"hsl(var(--{slot}))"'


def _color_entries(theme: Theme) -> list[str]:
    lines: list[str] = []
    for slot in _FLAT_SLOTS[:2]:
        lines.append(f"        {slot}: {_hsl_ref(slot)},")

    groups = dict(_NESTED_GROUPS)
    for status in _STATUS_SLOTS:
        if status in theme.light.values:
            groups[status] = (status, ("foreground",) if f"{status}-foreground" in theme.light.values else ())

    for group, (default_slot, sub_keys) in groups.items():
        lines.append(f"        {group}: {{")
        lines.append(f"          DEFAULT: {_hsl_ref(default_slot)},")
        for key in sub_keys:
            lines.append(f"          {key}: {_hsl_ref(f'{group}-{key}')},")
        lines.append("        },")

    for slot in _FLAT_SLOTS[2:]:
        lines.append(f"        {slot}: {_hsl_ref(slot)},")

    lines.append("        chart: {")
    for index in range(1, 6):
        lines.append(f'          "{index}": {_hsl_ref(f"chart-{index}")},')
    lines.append("        },")

    lines.append("        sidebar: {")
    lines.append(f"          DEFAULT: {_hsl_ref('sidebar-background')},")
    for key in _SIDEBAR_KEYS:
        lines.append(f'          "{key}": {_hsl_ref(f"sidebar-{key}")},')
    lines.append("        },")
    return lines


def render_tailwind_config(theme: Theme, *, typescript: bool = True) -> str:
    """Render a Tailwind config that maps every semantic slot to its custom property.

    ``typescript=False`` emits the CommonJS flavour used by ``tailwind.config.js``.
    """
    font_sans = DEFAULT_FONT_SANS
    font_mono = DEFAULT_FONT_MONO
    if theme.font_family is not None:
        font_sans = theme.font_family.sans or font_sans
        font_mono = theme.font_family.mono or font_mono

    if typescript:
        header = 'import type { Config } from "tailwindcss";\n\nconst config: Config = {\n'
        footer = "};\n\nexport default config;\n"
    else:
        header = "/** @type {import('tailwindcss').Config} */\nmodule.exports = {\n"
        footer = "};\n"

    colors = "\n".join(_color_entries(theme))
    return (
        f"{header}"
        '  darkMode: ["class"],\n'
        "  content: [\n"
        '    "./pages/**/*.{js,ts,jsx,tsx,mdx}",\n'
        '    "./components/**/*.{js,ts,jsx,tsx,mdx}",\n'
        '    "./app/**/*.{js,ts,jsx,tsx,mdx}",\n'
        '    "./src/**/*.{js,ts,jsx,tsx,mdx}",\n'
        "  ],\n"
        "  theme: {\n"
        "    extend: {\n"
        "      colors: {\n"
        f"{colors}\n"
        "      },\n"
        "      borderRadius: {\n"
        '        lg: "var(--radius)",\n'
        '        md: "calc(var(--radius) - 2px)",\n'
        '        sm: "calc(var(--radius) - 4px)",\n'
        "      },\n"
        "      fontFamily: {\n"
        f"        sans: [{json.dumps(font_sans)}],\n"
        f"        mono: [{json.dumps(font_mono)}],\n"
        "      },\n"
        "    },\n"
        "  },\n"
        '  plugins: [require("tailwindcss-animate")],\n'
        f"{footer}"
    )
