# -*- coding: utf-8 -*-
"""
Colorix: Perceptual color engine and semantic theme tokens
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Theme orchestrator.

``Colorix`` owns the 12-slot theme, the dark/light flag and the per-slot
scale cache, and publishes a fresh immutable ``ColorTokens`` snapshot after
every mutation:

    theme + dark_mode  ->  Scales (one per distinct preset)  ->  ColorTokens

Mutators (``pick_theme``, ``invert_mode``, ``set_slot``) return the new
snapshot.  They run under a re-entrant lock, so readers of ``tokens`` only
ever see complete snapshots.
"""

from __future__ import annotations

import threading
from typing import Final, List, Optional, Sequence, Tuple

from colorix_colorspace import WHITE, Color, LinSrgb, Okhsl
from colorix_contrast import ContrastMetrics
from colorix_presets import (
    EGUI_THEME,
    THEME_NAMES,
    THEME_SIZE,
    THEMES,
    Theme,
    ThemeColor,
    as_theme,
)
from colorix_scales import Scales, warn_if_achromatic
from colorix_tokens import ColorTokens, TokenLike

__all__ = [
    "ACCENT_TEXT_LIGHTNESS",
    "ACCENT_TEXT_SATURATION",
    "DEFAULT_DARK_MODE",
    "DEFAULT_THEME_INDEX",
    "Colorix",
    "accent_text_color",
]

DEFAULT_THEME_INDEX: Final[int] = 0
DEFAULT_DARK_MODE: Final[bool] = True

# Okhsl of the dark accent-text variant.
ACCENT_TEXT_LIGHTNESS: Final[float] = 0.01
ACCENT_TEXT_SATURATION: Final[float] = 0.7


def accent_text_color(solid_background: Color) -> Tuple[Color, bool]:
    """
    Picks the text color for the accent fill.

    White is kept while its contrast on ``solid_background`` stays at or under
    ``ACCENT_TEXT_THRESHOLD``.  Otherwise a near-black, saturated shade of the
    fill's hue is used and the inverse flag is raised.  A neutral fill has no
    hue and gets a neutral near-black.

    Returns:
        (color_on_accent, inverse_color)
    """
    if ContrastMetrics.accent_text_is_white(solid_background):
        return WHITE, False

    base = LinSrgb.from_u8(solid_background.rgb).to_okhsl()
    if base.saturation > 0.0:
        dark = Okhsl(base.hue, ACCENT_TEXT_SATURATION, ACCENT_TEXT_LIGHTNESS)
    else:
        dark = Okhsl(0.0, 0.0, ACCENT_TEXT_LIGHTNESS)
    return Color(*dark.to_u8()), True


def _builtin_index(theme: Theme) -> int:
    for i, builtin in enumerate(THEMES):
        if builtin == theme:
            return i
    return -1


class Colorix:
    """
    Owner of the active theme and its resolved palette.

    Attributes:
        tokens: Latest complete snapshot.
        theme: The 12 presets, in slot order.
        scales: Per-slot resolved colors for the current mode.
        dark_mode: Current mode.
        theme_index: Index of the matching built-in theme, -1 for custom.
    """

    __slots__ = ("tokens", "theme", "scales", "dark_mode", "theme_index", "_lock")

    def __init__(self, theme: Optional[Sequence[ThemeColor]] = None,
                 dark_mode: bool = DEFAULT_DARK_MODE) -> None:
        self._setup(THEMES[DEFAULT_THEME_INDEX] if theme is None else theme, dark_mode)

    @classmethod
    def init(cls, theme: Sequence[ThemeColor] = EGUI_THEME,
             dark_mode: bool = DEFAULT_DARK_MODE) -> "Colorix":
        self = cls.__new__(cls)
        self._setup(theme, dark_mode)
        return self

    def _setup(self, theme: Sequence[ThemeColor], dark_mode: bool) -> None:
        # Called directly by both constructors; warnings point at their caller.
        self._lock = threading.RLock()
        self.theme: Theme = as_theme(theme)
        for preset in set(self.theme):
            warn_if_achromatic(preset, stacklevel=3)
        self.theme_index: int = _builtin_index(self.theme)
        self.dark_mode: bool = bool(dark_mode)
        self.scales = Scales(self.dark_mode)
        self.tokens = ColorTokens()
        self.process_theme()

    def __repr__(self) -> str:
        mode = "dark" if self.dark_mode else "light"
        return f"Colorix(theme={self.theme_name!r}, mode={mode})"

    @property
    def theme_name(self) -> str:
        if self.theme_index < 0:
            return "Custom"
        return THEME_NAMES[self.theme_index]

    @property
    def inverse_color(self) -> bool:
        return self.tokens.inverse_color

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def pick_theme(self, i: int) -> ColorTokens:
        """Replaces the theme with built-in ``i`` and recomputes."""
        if not 0 <= i < len(THEMES):
            raise IndexError(f"Theme index {i} out of range 0..{len(THEMES) - 1}")
        with self._lock:
            self.theme = THEMES[i]
            self.theme_index = i
            return self.process_theme()

    def invert_mode(self) -> ColorTokens:
        """Flips between dark and light mode and recomputes."""
        with self._lock:
            self.dark_mode = not self.dark_mode
            self.scales.dark_mode = self.dark_mode
            return self.process_theme()

    def set_slot(self, i: int, preset: ThemeColor) -> ColorTokens:
        """Replaces the preset of slot ``i`` and recomputes."""
        if not 0 <= i < THEME_SIZE:
            raise IndexError(f"Slot index {i} out of range 0..{THEME_SIZE - 1}")
        with self._lock:
            theme = list(self.theme)
            theme[i] = preset
            self.theme = as_theme(theme)
            warn_if_achromatic(preset, stacklevel=2)
            self.theme_index = _builtin_index(self.theme)
            return self.process_theme()

    def process_theme(self) -> ColorTokens:
        """
        Resolves every slot and publishes a new snapshot.

        Slots are visited in order.  The first slot holding a given preset
        runs the scale; later slots with the same preset copy its color.
        """
        with self._lock:
            tokens = ColorTokens()
            processed: List[bool] = [False] * THEME_SIZE
            for i in range(THEME_SIZE):
                if processed[i]:
                    continue
                color = self.scales.process_color(i, self.theme[i])
                tokens = tokens.update_schema(i, color)
                processed[i] = True
                for j in range(i + 1, THEME_SIZE):
                    if not processed[j] and self.theme[j] == self.theme[i]:
                        tokens = tokens.update_schema(j, self.scales.copy_color(i, j))
                        processed[j] = True

            on_accent, inverse = accent_text_color(tokens.solid_backgrounds)
            self.tokens = tokens.with_accent(on_accent, inverse)
            return self.tokens

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def set_color(self, token: TokenLike) -> Color:
        return self.tokens.set_color(token)

    def theme_as_rgb(self) -> Tuple[Tuple[int, int, int], ...]:
        """Reference bytes of each slot's preset, in slot order."""
        return tuple(p.rgb for p in self.theme)
