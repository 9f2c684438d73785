# -*- coding: utf-8 -*-
"""
Colorix: Perceptual color engine and semantic theme tokens
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Preset swatches and built-in themes.

A theme is an ordered 12-tuple of presets, one per semantic slot (see
``SLOT_LABELS``).  A slot entry is either one of the 22 named ``ColorPreset``
swatches or a ``CustomPreset`` carrying raw sRGB bytes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from numbers import Integral
from typing import Final, Sequence, Tuple, TypeAlias, Union

from colorix_colorspace import LinSrgb

__all__ = [
    "ColorPreset",
    "CustomPreset",
    "ThemeColor",
    "Theme",
    "THEME_SIZE",
    "EGUI_THEME",
    "INDIGO_JADE",
    "GRASS_BRONZE",
    "WARM",
    "COOL",
    "SEVENTIES",
    "GRAYS",
    "THEMES",
    "THEME_NAMES",
    "PRESET_NAMES",
    "SLOT_LABELS",
    "as_theme",
]

RGB8: TypeAlias = Tuple[int, int, int]

THEME_SIZE: Final[int] = 12


class ColorPreset(Enum):
    """Named reference swatches (sRGB bytes of the solid step)."""
    GRAY = (117, 117, 117)
    EGUI_BLUE = (0, 109, 143)
    TOMATO = (229, 77, 46)
    RED = (229, 72, 77)
    RUBY = (229, 70, 102)
    CRIMSON = (233, 61, 130)
    PINK = (214, 64, 159)
    PLUM = (171, 74, 186)
    PURPLE = (142, 78, 198)
    VIOLET = (110, 86, 207)
    IRIS = (91, 91, 214)
    INDIGO = (62, 99, 214)
    BLUE = (0, 144, 255)
    CYAN = (0, 162, 199)
    TEAL = (18, 165, 148)
    JADE = (41, 163, 131)
    GREEN = (48, 164, 108)
    GRASS = (70, 167, 88)
    BROWN = (173, 127, 88)
    BRONZE = (161, 128, 114)
    GOLD = (151, 131, 101)
    ORANGE = (247, 107, 21)

    @property
    def rgb(self) -> RGB8:
        return self.value

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title().replace(" ", "")

    def get_srgb(self) -> LinSrgb:
        return LinSrgb.from_u8(self.rgb)


@dataclass(slots=True, frozen=True)
class CustomPreset:
    """Arbitrary swatch.  Equal to another ``CustomPreset`` iff the bytes match."""
    rgb: RGB8

    def __post_init__(self) -> None:
        if len(self.rgb) != 3:
            raise ValueError(f"CustomPreset expects 3 channels, got {self.rgb!r}")
        for v in self.rgb:
            if isinstance(v, bool) or not isinstance(v, Integral) or not 0 <= v <= 255:
                raise ValueError(f"CustomPreset channels must be ints in 0..255, got {self.rgb!r}")
        object.__setattr__(self, "rgb", tuple(int(v) for v in self.rgb))

    @property
    def label(self) -> str:
        return "Custom"

    def get_srgb(self) -> LinSrgb:
        return LinSrgb.from_u8(self.rgb)


ThemeColor: TypeAlias = Union[ColorPreset, CustomPreset]
Theme: TypeAlias = Tuple[ThemeColor, ...]


def as_theme(presets: Sequence[ThemeColor]) -> Theme:
    """Validates a 12-slot theme and returns it as a tuple."""
    theme = tuple(presets)
    if len(theme) != THEME_SIZE:
        raise ValueError(f"A theme has {THEME_SIZE} slots, got {len(theme)}")
    for p in theme:
        if not isinstance(p, (ColorPreset, CustomPreset)):
            raise TypeError(f"Unsupported preset type: {type(p)}")
    return theme


_P = ColorPreset

EGUI_THEME: Final[Theme] = (
    _P.GRAY, _P.GRAY, _P.GRAY, _P.GRAY,
    _P.GRAY, _P.GRAY, _P.GRAY, _P.GRAY,
    _P.EGUI_BLUE, _P.EGUI_BLUE, _P.GRAY, _P.GRAY,
)

INDIGO_JADE: Final[Theme] = (
    _P.GRAY, _P.GRAY, _P.INDIGO, _P.GRAY,
    _P.GRAY, _P.GRAY, _P.GRAY, _P.JADE,
    _P.JADE, _P.JADE, _P.GRAY, _P.GRAY,
)

GRASS_BRONZE: Final[Theme] = (
    _P.GRAY, _P.GRAY, _P.GRASS, _P.BRONZE,
    _P.BRONZE, _P.GRAY, _P.GRAY, _P.GREEN,
    _P.BRONZE, _P.BRONZE, _P.GRAY, _P.GRAY,
)

WARM: Final[Theme] = (
    _P.GRAY, _P.GRAY, _P.ORANGE, _P.GOLD,
    _P.GOLD, _P.GOLD, _P.RED, _P.RED,
    _P.GOLD, _P.GOLD, _P.GRAY, _P.TEAL,
)

COOL: Final[Theme] = (
    _P.GRAY, _P.INDIGO, _P.INDIGO, _P.CYAN,
    _P.INDIGO, _P.GRAY, _P.CYAN, _P.INDIGO,
    _P.BLUE, _P.INDIGO, _P.ORANGE, _P.GRAY,
)

_PURPLE_70S = CustomPreset((95, 78, 163))
_SUN_70S = CustomPreset((254, 180, 0))

SEVENTIES: Final[Theme] = (
    _PURPLE_70S, _P.PINK, _P.PINK, _PURPLE_70S,
    _PURPLE_70S, _SUN_70S, _PURPLE_70S, _PURPLE_70S,
    _SUN_70S, _SUN_70S, _P.GRAY, _P.GRAY,
)

GRAYS: Final[Theme] = (_P.GRAY,) * THEME_SIZE

THEMES: Final[Tuple[Theme, ...]] = (
    EGUI_THEME, INDIGO_JADE, GRASS_BRONZE, WARM, COOL, SEVENTIES, GRAYS,
)

THEME_NAMES: Final[Tuple[str, ...]] = (
    "Egui", "Indigo/jade", "Grass/bronze", "Warm", "Cool", "Seventies", "Grays",
)

PRESET_NAMES: Final[Tuple[str, ...]] = tuple(p.label for p in ColorPreset) + ("Custom",)

SLOT_LABELS: Final[Tuple[str, ...]] = (
    "app background",
    "subtle background",
    "ui element background",
    "hovered ui element background",
    "active ui element background",
    "subtle borders and separators",
    "ui element border and focus rings",
    "hovered ui element border",
    "solid backgrounds",
    "hovered solid backgrounds",
    "low contrast text",
    "high contrast text",
)
