"""Theme models."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from retheme.themes.constants import ALL_SLOTS, DEFAULT_RADIUS, REQUIRED_SLOTS


class ThemeValidationError(ValueError):
    """Raised when a theme document fails validation."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [message])


@dataclass(frozen=True, slots=True)
class ValidationReport:
    """Outcome of validating a theme document."""

    valid: bool
    errors: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Palette:
    """Slot-name to ``H S% L%`` mapping restricted to the known slots.

    Required slots are always present; optional slots only when the theme
    defines them. Iteration follows the canonical slot order.
    """

    values: Mapping[str, str]

    def __post_init__(self) -> None:
        missing = [slot for slot in REQUIRED_SLOTS if slot not in self.values]
        if missing:
            raise ThemeValidationError(f"palette missing slots: {', '.join(missing)}")
        unknown = sorted(key for key in self.values if key not in ALL_SLOTS)
        if unknown:
            raise ThemeValidationError(f"palette has unknown slots: {', '.join(unknown)}")
        ordered = {slot: self.values[slot] for slot in ALL_SLOTS if slot in self.values}
        object.__setattr__(self, "values", MappingProxyType(ordered))

    def __getitem__(self, slot: str) -> str:
        return self.values[slot]

    def __iter__(self):
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Palette):
            return NotImplemented
        return dict(self.values) == dict(other.values)

    def __hash__(self) -> int:
        return hash(tuple(self.values.items()))

    def get(self, slot: str, default: str | None = None) -> str | None:
        return self.values.get(slot, default)

    def items(self):
        return self.values.items()

    def to_dict(self) -> dict[str, str]:
        return dict(self.values)


@dataclass(frozen=True, slots=True)
class FontFamily:
    sans: str | None = None
    mono: str | None = None

    def to_dict(self) -> dict[str, str]:
        data: dict[str, str] = {}
        if self.sans:
            data["sans"] = self.sans
        if self.mono:
            data["mono"] = self.mono
        return data


@dataclass(frozen=True, slots=True)
class Theme:
    """A validated design theme."""

    id: str
    name: str
    category: str
    description: str
    light: Palette
    dark: Palette
    radius: str = DEFAULT_RADIUS
    font_family: FontFamily | None = None

    def palette(self, mode: str) -> Palette:
        if mode == "dark":
            return self.dark
        return self.light

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to the on-disk theme document shape."""
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "colors": {
                "light": self.light.to_dict(),
                "dark": self.dark.to_dict(),
            },
            "radius": self.radius,
        }
        if self.font_family is not None:
            data["fontFamily"] = self.font_family.to_dict()
        return data


@dataclass(frozen=True, slots=True)
class ThemeSummary:
    """Display-ready theme metadata."""

    theme_id: str
    name: str
    description: str
    category: str
    primary_light: str
    primary_dark: str
    background_light: str
    background_dark: str
    is_builtin: bool = True
    source_path: str = field(default="", compare=False)
