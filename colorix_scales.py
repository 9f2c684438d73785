# -*- coding: utf-8 -*-
"""
Colorix: Perceptual color engine and semantic theme tokens
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Scale generator.

Every preset expands into a 12-step perceptual ramp in Okhsl: hue is kept,
lightness is pushed toward white or black by a signed blend factor, and
saturation is reduced near the lightness extremes.  The blend factors follow
a monotone PCHIP curve through a handful of knots, one curve per mode:

    light mode   backgrounds lightened strongly, text darkened
    dark mode    backgrounds darkened strongly, text lightened

The color a theme slot receives is the ramp's ``SOLID_STEP``.  That makes a
slot color a pure function of ``(preset, dark_mode)``.
"""

from __future__ import annotations

import functools
import warnings
from typing import Final, List, Tuple

import numpy as np
from scipy.interpolate import PchipInterpolator

from colorix_colorspace import TRANSPARENT, Color, LinSrgb, Okhsl
from colorix_presets import THEME_SIZE, ThemeColor

__all__ = [
    "SCALE_STEPS",
    "SOLID_STEP",
    "Scales",
    "blend_curve",
    "warn_if_achromatic",
]

SCALE_STEPS: Final[int] = 12
SOLID_STEP: Final[int] = 8

# (step, signed blend) knots; > 0 lightens, < 0 darkens.
_LIGHT_KNOTS: Final[Tuple[Tuple[float, ...], Tuple[float, ...]]] = (
    (0.0, 4.0, 8.0, 11.0),
    (0.94, 0.70, 0.22, -0.62),
)
_DARK_KNOTS: Final[Tuple[Tuple[float, ...], Tuple[float, ...]]] = (
    (0.0, 4.0, 8.0, 11.0),
    (-0.86, -0.62, -0.22, 0.78),
)


@functools.lru_cache(maxsize=2)
def _blend_curve(dark_mode: bool) -> Tuple[float, ...]:
    steps, knots = _DARK_KNOTS if dark_mode else _LIGHT_KNOTS
    curve = PchipInterpolator(np.asarray(steps), np.asarray(knots))
    values = curve(np.arange(SCALE_STEPS, dtype=np.float64))
    return tuple(float(v) for v in values)

def blend_curve(dark_mode: bool) -> np.ndarray:
    """Signed lighten/darken factor for each of the 12 ramp steps."""
    return np.array(_blend_curve(bool(dark_mode)))


def _saturation_factor(lightness: float) -> float:
    """Chroma reduction near white and black."""
    if lightness > 0.9 or lightness < 0.2:
        return 0.5
    if lightness > 0.8 or lightness < 0.3:
        return 0.75
    return 1.0

def _apply_blend(base: Okhsl, blend: float) -> Okhsl:
    tone = base.lighten(blend) if blend >= 0.0 else base.darken(-blend)
    return tone._replace(saturation=base.saturation * _saturation_factor(tone.lightness))

_ACHROMATIC_EXTREMES: Final[Tuple[Tuple[int, int, int], ...]] = ((0, 0, 0), (255, 255, 255))

def warn_if_achromatic(preset: ThemeColor, stacklevel: int = 1) -> None:
    """
    Warns when ``preset`` is pure black or pure white.

    ``stacklevel`` counts from the caller of this function, so 1 points at the
    line that called it and 2 at that function's caller.
    """
    if preset.rgb in _ACHROMATIC_EXTREMES:
        warnings.warn(
            f"Preset {preset.rgb} is achromatic at the lightness extreme; "
            "its scale collapses to neutral greys.",
            stacklevel=stacklevel + 1,
        )

@functools.lru_cache(maxsize=128)
def _ramp_for(rgb: Tuple[int, int, int], dark_mode: bool) -> Tuple[Color, ...]:
    base = LinSrgb.from_u8(rgb).to_okhsl()
    return tuple(
        Color(*_apply_blend(base, blend).to_u8())
        for blend in _blend_curve(dark_mode)
    )


class Scales:
    """
    Per-slot cache of resolved colors for the current mode.

    ``scale[i]`` holds the color of theme slot ``i``.  Entries are only ever
    written through ``process_color`` / ``copy_color`` by the theme owner.
    """

    __slots__ = ("dark_mode", "scale")

    def __init__(self, dark_mode: bool = True) -> None:
        self.dark_mode: bool = bool(dark_mode)
        self.scale: List[Color] = [TRANSPARENT] * THEME_SIZE

    def __repr__(self) -> str:
        mode = "dark" if self.dark_mode else "light"
        return f"Scales(mode={mode}, scale=[{', '.join(c.to_hex() for c in self.scale)}])"

    @staticmethod
    def ramp(preset: ThemeColor, dark_mode: bool) -> Tuple[Color, ...]:
        """The full 12-step shade ramp of ``preset``."""
        warn_if_achromatic(preset, stacklevel=2)
        return _ramp_for(preset.rgb, bool(dark_mode))

    @staticmethod
    def resolve(preset: ThemeColor, dark_mode: bool) -> Color:
        """The single color a theme slot holding ``preset`` resolves to."""
        warn_if_achromatic(preset, stacklevel=2)
        return _ramp_for(preset.rgb, bool(dark_mode))[SOLID_STEP]

    @staticmethod
    def clear_cache() -> None:
        _ramp_for.cache_clear()

    def process_color(self, i: int, preset: ThemeColor) -> Color:
        """
        Resolves ``preset`` for the current mode into ``scale[i]``.

        Does not warn; the theme owner checks presets when they enter a theme.
        """
        color = _ramp_for(preset.rgb, self.dark_mode)[SOLID_STEP]
        self.scale[i] = color
        return color

    def copy_color(self, src: int, dst: int) -> Color:
        """Reuses an already resolved slot for a slot holding the same preset."""
        color = self.scale[src]
        self.scale[dst] = color
        return color
