"""Color taxonomy: reviewed literal mappings plus hue/shade classification rules.

Everything here is a pure lookup. Unknown input yields ``None``; nothing raises.
"""

from __future__ import annotations

from types import MappingProxyType

MODE_STANDARD = "standard"
MODE_FULL = "full"
SCAN_MODES = (MODE_STANDARD, MODE_FULL)

OPACITY_FULL = 100

UTILITY_PREFIXES: tuple[str, ...] = (
    "bg", "text", "border", "ring", "fill", "stroke", "outline",
    "divide", "from", "via", "to", "shadow", "decoration",
)

HUE_FAMILIES: dict[str, str] = {
    "green": "success",
    "emerald": "success",
    "teal": "success",
    "lime": "success",
    "red": "destructive",
    "rose": "destructive",
    "yellow": "warning",
    "amber": "warning",
    "orange": "warning",
    "blue": "primary",
    "cyan": "info",
    "sky": "info",
    "purple": "accent",
    "violet": "accent",
    "indigo": "accent",
    "fuchsia": "accent",
    "pink": "accent",
    "slate": "neutral",
    "gray": "neutral",
    "zinc": "neutral",
    "neutral": "neutral",
    "stone": "neutral",
}

# Shade-less palette keywords; only reachable through the literal tables.
BARE_COLORS: tuple[str, ...] = ("white", "black")

_STANDARD_MAP: dict[str, str] = {
    # backgrounds
    "bg-white": "bg-background",
    "bg-gray-50": "bg-muted",
    "bg-gray-100": "bg-secondary",
    "bg-gray-200": "bg-muted",
    "bg-gray-900": "bg-foreground",
    "bg-slate-50": "bg-muted",
    "bg-slate-100": "bg-secondary",
    "bg-slate-900": "bg-foreground",
    "bg-zinc-50": "bg-muted",
    "bg-zinc-100": "bg-muted",
    "bg-zinc-900": "bg-foreground",
    # text
    "text-black": "text-foreground",
    "text-white": "text-background",
    "text-gray-900": "text-foreground",
    "text-gray-800": "text-foreground",
    "text-gray-700": "text-foreground",
    "text-gray-600": "text-muted-foreground",
    "text-gray-500": "text-muted-foreground",
    "text-gray-400": "text-muted-foreground",
    "text-slate-900": "text-foreground",
    "text-slate-600": "text-muted-foreground",
    "text-slate-500": "text-muted-foreground",
    "text-zinc-900": "text-foreground",
    "text-zinc-600": "text-muted-foreground",
    "text-zinc-500": "text-muted-foreground",
    # borders
    "border-gray-100": "border-border",
    "border-gray-200": "border-border",
    "border-gray-300": "border-input",
    "border-slate-200": "border-border",
    "border-slate-300": "border-input",
    "border-zinc-200": "border-border",
    "border-zinc-300": "border-input",
    # primary
    "bg-blue-500": "bg-primary",
    "bg-blue-600": "bg-primary",
    "bg-blue-700": "bg-primary",
    "text-blue-500": "text-primary",
    "text-blue-600": "text-primary",
    "text-blue-700": "text-primary",
    "ring-blue-500": "ring-ring",
    "ring-blue-600": "ring-ring",
    "hover:bg-blue-600": "hover:bg-primary/90",
    # destructive
    "bg-red-500": "bg-destructive",
    "bg-red-600": "bg-destructive",
    "text-red-500": "text-destructive",
    "text-red-600": "text-destructive",
    "border-red-500": "border-destructive",
    # interactive surfaces
    "hover:bg-gray-100": "hover:bg-accent",
    "hover:bg-slate-100": "hover:bg-accent",
}


_FULL_EXTRAS: dict[str, str] = {
    # success
    "bg-green-50": "bg-success/10",
    "bg-green-100": "bg-success/20",
    "bg-green-200": "bg-success/30",
    "bg-green-300": "bg-success/50",
    "bg-green-400": "bg-success/70",
    "bg-green-500": "bg-success",
    "bg-green-600": "bg-success",
    "bg-green-700": "bg-success",
    "bg-green-800": "bg-success",
    "bg-green-900": "bg-success",
    "bg-emerald-50": "bg-success/10",
    "bg-emerald-100": "bg-success/20",
    "bg-emerald-200": "bg-success/30",
    "bg-emerald-300": "bg-success/50",
    "bg-emerald-400": "bg-success/70",
    "bg-emerald-500": "bg-success",
    "bg-emerald-600": "bg-success",
    "bg-emerald-700": "bg-success",
    # warning
    "bg-yellow-50": "bg-warning/10",
    "bg-yellow-100": "bg-warning/20",
    "bg-yellow-200": "bg-warning/30",
    "bg-yellow-300": "bg-warning/50",
    "bg-yellow-400": "bg-warning/70",
    "bg-yellow-500": "bg-warning",
    "bg-yellow-600": "bg-warning",
    "bg-amber-50": "bg-warning/10",
    "bg-amber-100": "bg-warning/20",
    "bg-amber-300": "bg-warning/50",
    "bg-amber-400": "bg-warning/70",
    "bg-amber-500": "bg-warning",
    "bg-amber-600": "bg-warning",
    # primary / info
    "bg-blue-50": "bg-primary/10",
    "bg-blue-100": "bg-primary/20",
    "bg-blue-200": "bg-primary/30",
    "bg-blue-300": "bg-primary/50",
    "bg-blue-400": "bg-primary/70",
    "bg-blue-800": "bg-primary",
    "bg-blue-900": "bg-primary",
    "bg-cyan-50": "bg-info/10",
    "bg-cyan-100": "bg-info/20",
    "bg-cyan-300": "bg-info/50",
    "bg-cyan-400": "bg-info/70",
    "bg-cyan-500": "bg-info",
    "bg-cyan-600": "bg-info",
    "bg-sky-50": "bg-info/10",
    "bg-sky-100": "bg-info/20",
    "bg-sky-400": "bg-info/70",
    "bg-sky-500": "bg-info",
    "bg-sky-600": "bg-info",
    # destructive
    "bg-red-50": "bg-destructive/10",
    "bg-red-100": "bg-destructive/20",
    "bg-red-200": "bg-destructive/30",
    "bg-red-300": "bg-destructive/50",
    "bg-red-400": "bg-destructive/70",
    "bg-red-700": "bg-destructive",
    "bg-red-800": "bg-destructive",
    "bg-red-900": "bg-destructive",
    "bg-rose-50": "bg-destructive/10",
    "bg-rose-100": "bg-destructive/20",
    "bg-rose-400": "bg-destructive/70",
    "bg-rose-500": "bg-destructive",
    "bg-rose-600": "bg-destructive",
    # accent
    "bg-purple-50": "bg-accent/10",
    "bg-purple-100": "bg-accent/20",
    "bg-purple-200": "bg-accent/30",
    "bg-purple-400": "bg-accent/70",
    "bg-purple-500": "bg-accent",
    "bg-purple-600": "bg-accent",
    "bg-violet-50": "bg-accent/10",
    "bg-violet-100": "bg-accent/20",
    "bg-violet-400": "bg-accent/70",
    "bg-violet-500": "bg-accent",
    "bg-violet-600": "bg-accent",
    "bg-indigo-50": "bg-accent/10",
    "bg-indigo-100": "bg-accent/20",
    "bg-indigo-400": "bg-accent/70",
    "bg-indigo-500": "bg-accent",
    "bg-indigo-600": "bg-accent",
    "bg-pink-50": "bg-accent/10",
    "bg-pink-100": "bg-accent/20",
    "bg-pink-400": "bg-accent/70",
    "bg-pink-500": "bg-accent",
    "bg-pink-600": "bg-accent",
    "text-green-500": "text-success",
    "text-green-600": "text-success",
    "text-green-700": "text-success",
    "text-green-800": "text-success",
    "border-green-500": "border-success",
    "ring-green-500": "ring-success",
    "text-emerald-500": "text-success",
    "text-emerald-600": "text-success",
    "text-emerald-700": "text-success",
    "border-emerald-500": "border-success",
    "bg-teal-500": "bg-success",
    "bg-teal-600": "bg-success",
    "text-teal-500": "text-success",
    "text-teal-600": "text-success",
    "bg-lime-500": "bg-success",
    "bg-lime-600": "bg-success",
    "text-lime-500": "text-success",
    "text-lime-600": "text-success",
    # warning
    "text-yellow-500": "text-warning",
    "text-yellow-600": "text-warning",
    "text-yellow-700": "text-warning",
    "border-yellow-500": "border-warning",
    "text-amber-500": "text-warning",
    "text-amber-600": "text-warning",
    "border-amber-500": "border-warning",
    "bg-orange-500": "bg-warning",
    "bg-orange-600": "bg-warning",
    "text-orange-500": "text-warning",
    "text-orange-600": "text-warning",
    "border-orange-500": "border-warning",
    # primary / info
    "text-blue-800": "text-primary",
    "text-blue-900": "text-primary",
    "text-cyan-500": "text-info",
    "text-cyan-600": "text-info",
    "border-cyan-500": "border-info",
    "text-sky-500": "text-info",
    "text-sky-600": "text-info",
    "border-sky-500": "border-info",
    # destructive
    "text-red-700": "text-destructive",
    "text-red-800": "text-destructive",
    "border-red-600": "border-destructive",
    "text-rose-500": "text-destructive",
    "text-rose-600": "text-destructive",
    "border-rose-500": "border-destructive",
    # accent
    "text-purple-500": "text-accent-foreground",
    "text-purple-600": "text-accent-foreground",
    "text-purple-700": "text-accent-foreground",
    "border-purple-500": "border-accent",
    "bg-purple-700": "bg-accent",
    "text-violet-500": "text-accent-foreground",
    "text-violet-600": "text-accent-foreground",
    "border-violet-500": "border-accent",
    "text-indigo-500": "text-accent-foreground",
    "text-indigo-600": "text-accent-foreground",
    "border-indigo-500": "border-accent",
    "text-pink-500": "text-accent-foreground",
    "text-pink-600": "text-accent-foreground",
    "bg-fuchsia-500": "bg-accent",
    "bg-fuchsia-600": "bg-accent",
    "text-fuchsia-500": "text-accent-foreground",
    "text-fuchsia-600": "text-accent-foreground",
    # neutrals
    "bg-neutral-50": "bg-muted",
    "bg-neutral-100": "bg-muted",
    "bg-neutral-200": "bg-muted",
    "bg-neutral-800": "bg-foreground",
    "bg-neutral-900": "bg-foreground",
    "text-neutral-900": "text-foreground",
    "text-neutral-800": "text-foreground",
    "text-neutral-600": "text-muted-foreground",
    "text-neutral-500": "text-muted-foreground",
    "border-neutral-200": "border-border",
    "border-neutral-300": "border-input",
    "bg-stone-50": "bg-muted",
    "bg-stone-100": "bg-muted",
    "bg-stone-200": "bg-muted",
    "text-stone-900": "text-foreground",
    "text-stone-600": "text-muted-foreground",
    "text-stone-500": "text-muted-foreground",
    "border-stone-200": "border-border",
    "border-stone-300": "border-input",
    # hover
    "hover:bg-gray-50": "hover:bg-muted",
    "hover:bg-gray-200": "hover:bg-muted",
    "hover:bg-slate-50": "hover:bg-muted",
    "hover:bg-slate-200": "hover:bg-muted",
    "hover:bg-zinc-50": "hover:bg-muted",
    "hover:bg-zinc-100": "hover:bg-accent",
    "hover:bg-zinc-200": "hover:bg-muted",
    "hover:bg-blue-700": "hover:bg-primary/90",
    "hover:bg-red-600": "hover:bg-destructive/90",
    "hover:bg-red-700": "hover:bg-destructive/90",
    "hover:bg-green-600": "hover:bg-success/90",
    "hover:bg-green-700": "hover:bg-success/90",
    # focus
    "focus:ring-blue-500": "focus:ring-ring",
    "focus:ring-blue-600": "focus:ring-ring",
    "focus:border-blue-500": "focus:border-ring",
    "focus:border-blue-600": "focus:border-ring",
    # dark mode
    "dark:bg-gray-800": "dark:bg-muted",
    "dark:bg-gray-900": "dark:bg-background",
    "dark:bg-slate-800": "dark:bg-muted",
    "dark:bg-slate-900": "dark:bg-background",
    "dark:text-gray-100": "dark:text-foreground",
    "dark:text-gray-200": "dark:text-foreground",
    "dark:text-gray-300": "dark:text-muted-foreground",
    "dark:text-gray-400": "dark:text-muted-foreground",
    "dark:border-gray-700": "dark:border-border",
    "dark:border-gray-800": "dark:border-border",
}

STANDARD_LITERAL_MAP = MappingProxyType(dict(_STANDARD_MAP))
# the full table never overrides a standard entry
FULL_LITERAL_MAP = MappingProxyType({**_FULL_EXTRAS, **_STANDARD_MAP})


def literal_table(mode: str = MODE_STANDARD):
    return FULL_LITERAL_MAP if mode == MODE_FULL else STANDARD_LITERAL_MAP


def resolve_literal(token: str, mode: str = MODE_STANDARD) -> str | None:
    """Exact-string lookup of a utility class in the reviewed table."""
    if not isinstance(token, str):
        return None
    return literal_table(mode).get(token)


def classify_hue_family(color_name: str) -> str | None:
    """Map a palette family name (``emerald``, ``sky`` ...) to its semantic category."""
    if not isinstance(color_name, str):
        return None
    return HUE_FAMILIES.get(color_name.strip().lower())


def bucket_shade(shade: int) -> int | None:
    """Bucket a 1-900 intensity into an opacity tier; ``OPACITY_FULL`` means solid."""
    if isinstance(shade, bool) or not isinstance(shade, int) or shade <= 0:
        return None
    if shade <= 100:
        return 10
    if shade <= 200:
        return 20
    if shade <= 300:
        return 30
    if shade <= 400:
        return 70
    return OPACITY_FULL


def neutral_slot(shade: int) -> str | None:
    """Neutrals split by lightness into surface/text slots rather than opacity."""
    if isinstance(shade, bool) or not isinstance(shade, int) or shade <= 0:
        return None
    if shade <= 200:
        return "muted"
    if shade >= 700:
        return "foreground"
    return "muted-foreground"
