# -*- coding: utf-8 -*-
"""
Colorix: Perceptual color engine and semantic theme tokens
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Semantic palette snapshot and role tokens.

``ColorTokens`` is the resolved palette: one field per theme slot plus the
derived accent-text color and the ``inverse_color`` hint.  It is frozen;
every update yields a new snapshot.

``Token`` names a semantic role.  Widgets hold tokens, never raw colors, and
resolve them against the current snapshot at paint time.  ``CustomToken``
carries a literal color for the odd widget that needs one.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Dict, Final, Tuple, Union

from colorix_colorspace import TRANSPARENT, WHITE, Color

__all__ = [
    "SLOT_FIELDS",
    "ColorTokens",
    "CustomToken",
    "Token",
    "TokenLike",
]

# Field name of every theme slot, in slot order.
SLOT_FIELDS: Final[Tuple[str, ...]] = (
    "app_background",
    "subtle_background",
    "ui_element_background",
    "hovered_ui_element_background",
    "active_ui_element_background",
    "subtle_borders_and_separators",
    "ui_element_border_and_focus_rings",
    "hovered_ui_element_border",
    "solid_backgrounds",
    "hovered_solid_backgrounds",
    "low_contrast_text",
    "high_contrast_text",
)


@dataclass(slots=True, frozen=True)
class ColorTokens:
    app_background: Color = TRANSPARENT
    subtle_background: Color = TRANSPARENT
    ui_element_background: Color = TRANSPARENT
    hovered_ui_element_background: Color = TRANSPARENT
    active_ui_element_background: Color = TRANSPARENT
    subtle_borders_and_separators: Color = TRANSPARENT
    ui_element_border_and_focus_rings: Color = TRANSPARENT
    hovered_ui_element_border: Color = TRANSPARENT
    solid_backgrounds: Color = TRANSPARENT
    hovered_solid_backgrounds: Color = TRANSPARENT
    low_contrast_text: Color = TRANSPARENT
    high_contrast_text: Color = TRANSPARENT
    color_on_accent: Color = WHITE
    inverse_color: bool = False

    @classmethod
    def from_slots(cls, colors: Tuple[Color, ...], color_on_accent: Color = WHITE,
                   inverse_color: bool = False) -> "ColorTokens":
        """Builds a snapshot from 12 slot colors in slot order."""
        if len(colors) != len(SLOT_FIELDS):
            raise ValueError(f"Expected {len(SLOT_FIELDS)} slot colors, got {len(colors)}")
        values = dict(zip(SLOT_FIELDS, colors))
        return cls(color_on_accent=color_on_accent, inverse_color=inverse_color, **values)

    def slot(self, i: int) -> Color:
        """Color of slot ``i`` (0..11)."""
        return getattr(self, SLOT_FIELDS[i])

    def slots(self) -> Tuple[Color, ...]:
        return tuple(getattr(self, name) for name in SLOT_FIELDS)

    def update_schema(self, i: int, color: Color) -> "ColorTokens":
        """
        Returns a copy with slot ``i`` set to ``color``.

        An index outside 0..11 is ignored and ``self`` is returned unchanged.
        """
        if not 0 <= i < len(SLOT_FIELDS):
            return self
        return replace(self, **{SLOT_FIELDS[i]: color})

    def with_accent(self, color_on_accent: Color, inverse_color: bool) -> "ColorTokens":
        return replace(self, color_on_accent=color_on_accent, inverse_color=inverse_color)

    def set_color(self, token: "TokenLike") -> Color:
        """Resolves ``token`` against this snapshot."""
        match token:
            case CustomToken(color=color):
                return color
            case Token.TRANSPARENT:
                return TRANSPARENT
            case Token.ACCENT_TEXT:
                return self.color_on_accent
            case Token():
                return getattr(self, token.value)
            case _:
                raise TypeError(f"Unsupported token: {token!r}")

    def as_dict(self) -> Dict[str, Union[Color, bool]]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


class Token(Enum):
    """Semantic color roles.  The value is the ``ColorTokens`` field it reads."""
    APP_BACKGROUND = "app_background"
    SUBTLE_BACKGROUND = "subtle_background"
    UI_ELEMENT_BACKGROUND = "ui_element_background"
    HOVERED_UI_ELEMENT_BACKGROUND = "hovered_ui_element_background"
    ACTIVE_UI_ELEMENT_BACKGROUND = "active_ui_element_background"
    SUBTLE_BORDERS_AND_SEPARATORS = "subtle_borders_and_separators"
    UI_ELEMENT_BORDER_AND_FOCUS_RINGS = "ui_element_border_and_focus_rings"
    HOVERED_UI_ELEMENT_BORDER = "hovered_ui_element_border"
    SOLID_BACKGROUNDS = "solid_backgrounds"
    HOVERED_SOLID_BACKGROUNDS = "hovered_solid_backgrounds"
    LOW_CONTRAST_TEXT = "low_contrast_text"
    HIGH_CONTRAST_TEXT = "high_contrast_text"
    ACCENT_TEXT = "color_on_accent"
    TRANSPARENT = "transparent"

    @classmethod
    def for_slot(cls, i: int) -> "Token":
        return cls(SLOT_FIELDS[i])

    def resolve(self, tokens: ColorTokens) -> Color:
        return tokens.set_color(self)


@dataclass(slots=True, frozen=True)
class CustomToken:
    """A literal color in place of a semantic role."""
    color: Color

    def resolve(self, tokens: ColorTokens) -> Color:
        return self.color


TokenLike = Union[Token, CustomToken]
