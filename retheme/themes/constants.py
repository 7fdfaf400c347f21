"""Theme schema constants."""

from __future__ import annotations

DEFAULT_RADIUS = "0.5rem"
DEFAULT_FONT_SANS = "Inter, system-ui, sans-serif"
DEFAULT_FONT_MONO = "JetBrains Mono, monospace"

THEME_CATEGORIES: dict[str, dict[str, str]] = {
    "tech-ai": {
        "name": "Tech & AI",
        "description": "Futuristic, cyberpunk, and technology-inspired themes",
    },
    "minimal-clean": {
        "name": "Minimal & Clean",
        "description": "Simple, elegant, and distraction-free themes",
    },
    "corporate-enterprise": {
        "name": "Corporate & Enterprise",
        "description": "Professional themes for business applications",
    },
    "creative-bold": {
        "name": "Creative & Bold",
        "description": "Vibrant, expressive themes for creative projects",
    },
    "nature-organic": {
        "name": "Nature & Organic",
        "description": "Earthy, natural color palettes inspired by nature",
    },
}

REQUIRED_SLOTS: tuple[str, ...] = (
    "background",
    "foreground",
    "primary",
    "primary-foreground",
    "secondary",
    "secondary-foreground",
    "muted",
    "muted-foreground",
    "accent",
    "accent-foreground",
    "destructive",
    "destructive-foreground",
    "border",
    "input",
    "ring",
    "card",
    "card-foreground",
    "popover",
    "popover-foreground",
)

OPTIONAL_SLOTS: tuple[str, ...] = (
    "chart-1",
    "chart-2",
    "chart-3",
    "chart-4",
    "chart-5",
    "sidebar-background",
    "sidebar-foreground",
    "sidebar-primary",
    "sidebar-primary-foreground",
    "sidebar-accent",
    "sidebar-accent-foreground",
    "sidebar-border",
    "sidebar-ring",
    "success",
    "success-foreground",
    "warning",
    "warning-foreground",
    "info",
    "info-foreground",
)

ALL_SLOTS: tuple[str, ...] = REQUIRED_SLOTS + OPTIONAL_SLOTS

REQUIRED_FIELDS: tuple[str, ...] = ("name", "id", "category", "colors")

FONT_KEYS: tuple[str, ...] = ("sans", "mono")

PALETTE_MODES: tuple[str, ...] = ("light", "dark")
