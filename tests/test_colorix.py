# -*- coding: utf-8 -*-
"""
Colorix: Perceptual color engine and semantic theme tokens
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later
"""

import os
import threading
import warnings

import pytest

from colorix_colorspace import BLACK, WHITE, Color, LinSrgb
from colorix_contrast import ACCENT_TEXT_THRESHOLD, ContrastMetrics, estimate_lc
from colorix_presets import (
    EGUI_THEME,
    GRASS_BRONZE,
    SEVENTIES,
    THEMES,
    ColorPreset,
    CustomPreset,
)
from colorix_scales import Scales
from colorix_theme import (
    DEFAULT_DARK_MODE,
    DEFAULT_THEME_INDEX,
    Colorix,
    accent_text_color,
)
from colorix_tokens import ColorTokens, CustomToken, Token


@pytest.fixture
def colorix():
    return Colorix.init()


def test_init_defaults(colorix):
    assert colorix.theme == THEMES[DEFAULT_THEME_INDEX] == EGUI_THEME
    assert colorix.theme_index == DEFAULT_THEME_INDEX
    assert colorix.dark_mode is DEFAULT_DARK_MODE
    assert colorix.theme_name == "Egui"
    assert isinstance(colorix.tokens, ColorTokens)
    assert colorix.tokens == Colorix().tokens

def test_tokens_follow_scales(colorix):
    for i, preset in enumerate(colorix.theme):
        assert colorix.tokens.slot(i) == Scales.resolve(preset, colorix.dark_mode)
        assert colorix.scales.scale[i] == colorix.tokens.slot(i)

def test_dedup_identical_presets_share_color():
    theme = list(GRASS_BRONZE)
    theme[0] = ColorPreset.GRAY
    theme[5] = ColorPreset.GRAY
    theme[3] = ColorPreset.ORANGE
    colorix = Colorix.init(theme)
    assert colorix.tokens.slot(0) == colorix.tokens.slot(5)
    assert colorix.tokens.slot(0) != colorix.tokens.slot(3)

def test_dedup_invariant_for_every_builtin(colorix):
    for i in range(len(THEMES)):
        tokens = colorix.pick_theme(i)
        for a in range(12):
            for b in range(12):
                if colorix.theme[a] == colorix.theme[b]:
                    assert tokens.slot(a) == tokens.slot(b)

def test_custom_presets_dedup_by_value():
    colorix = Colorix.init(SEVENTIES)
    assert colorix.tokens.slot(0) == colorix.tokens.slot(3) == colorix.tokens.slot(7)
    assert colorix.theme_index == 5

def test_custom_preset_matching_named_swatch_resolves_identically(colorix):
    tokens = colorix.set_slot(3, CustomPreset(ColorPreset.GRAY.rgb))
    assert tokens.slot(3) == tokens.slot(0)

def test_double_invert_restores_snapshot(colorix):
    before = colorix.tokens
    flipped = colorix.invert_mode()
    assert flipped != before
    assert colorix.dark_mode is not DEFAULT_DARK_MODE
    restored = colorix.invert_mode()
    assert restored == before
    assert colorix.dark_mode is DEFAULT_DARK_MODE

def test_mutators_return_current_snapshot(colorix):
    assert colorix.pick_theme(1) is colorix.tokens
    assert colorix.invert_mode() is colorix.tokens
    assert colorix.set_slot(0, ColorPreset.PLUM) is colorix.tokens

def test_scenario_pick_invert_revert():
    colorix = Colorix.init()
    initial = colorix.tokens

    first = colorix.pick_theme(2)
    assert colorix.theme is GRASS_BRONZE
    inverted = colorix.invert_mode()
    assert inverted.app_background != initial.app_background

    colorix.invert_mode()
    again = colorix.pick_theme(2)
    assert again == first

def test_pick_theme_out_of_range(colorix):
    before = colorix.tokens
    for bad in (-1, len(THEMES), 100):
        with pytest.raises(IndexError):
            colorix.pick_theme(bad)
    assert colorix.tokens is before

def test_set_slot(colorix):
    tokens = colorix.set_slot(8, ColorPreset.TOMATO)
    assert colorix.theme[8] is ColorPreset.TOMATO
    assert tokens.solid_backgrounds == Scales.resolve(ColorPreset.TOMATO, colorix.dark_mode)
    assert colorix.theme_index == -1
    assert colorix.theme_name == "Custom"

    colorix.set_slot(8, ColorPreset.EGUI_BLUE)
    assert colorix.theme_index == 0

def test_set_slot_out_of_range(colorix):
    with pytest.raises(IndexError):
        colorix.set_slot(12, ColorPreset.GRAY)

def test_set_slot_rejects_non_preset(colorix):
    with pytest.raises(TypeError):
        colorix.set_slot(0, (1, 2, 3))

def test_init_validates_theme():
    with pytest.raises(ValueError):
        Colorix.init([ColorPreset.GRAY] * 5)

def test_theme_as_rgb(colorix):
    rgb = colorix.theme_as_rgb()
    assert len(rgb) == 12
    assert rgb[0] == ColorPreset.GRAY.rgb
    assert rgb[8] == ColorPreset.EGUI_BLUE.rgb


# --- Accent text ---

def test_contrast_gate_black_keeps_white():
    color, inverse = accent_text_color(BLACK)
    assert color == WHITE
    assert inverse is False

def test_contrast_gate_white_uses_dark_variant():
    color, inverse = accent_text_color(WHITE)
    assert inverse is True
    assert color != WHITE
    assert LinSrgb.from_u8(color.rgb).to_okhsl().lightness < 0.05

@pytest.mark.parametrize("fill", [Color(200, 200, 200), Color(190, 190, 190), WHITE])
def test_neutral_fill_gets_neutral_dark_text(fill):
    color, inverse = accent_text_color(fill)
    assert inverse is True
    r, g, b = color.rgb
    assert r == g == b

def test_accent_gate_matches_contrast_metrics():
    fills = [BLACK, WHITE, Color(200, 200, 200), Color(0, 109, 143),
             Color(254, 180, 0), Color(229, 77, 46), Color(40, 40, 40)]
    for fill in fills:
        _, inverse = accent_text_color(fill)
        assert inverse is (not ContrastMetrics.accent_text_is_white(fill))

def test_pale_accent_gets_dark_text():
    pale = Color(*ColorPreset.GOLD.get_srgb().to_okhsl().lighten(0.8).to_u8())
    color, inverse = accent_text_color(pale)
    assert inverse is True
    assert max(color.rgb) < 40
    assert estimate_lc(color, pale) > 0

def test_tokens_carry_accent_decision(colorix):
    for i in range(len(THEMES)):
        for _ in range(2):
            tokens = colorix.pick_theme(i)
            lc = estimate_lc(WHITE, tokens.solid_backgrounds)
            if lc > ACCENT_TEXT_THRESHOLD:
                assert tokens.inverse_color is True
                assert tokens.color_on_accent != WHITE
            else:
                assert tokens.inverse_color is False
                assert tokens.color_on_accent == WHITE
            assert colorix.inverse_color is tokens.inverse_color
            colorix.invert_mode()

def test_token_resolution_through_colorix(colorix):
    assert colorix.set_color(Token.SOLID_BACKGROUNDS) == colorix.tokens.solid_backgrounds
    assert colorix.set_color(Token.ACCENT_TEXT) == colorix.tokens.color_on_accent
    assert colorix.set_color(CustomToken(BLACK)) == BLACK


# --- Concurrency ---

def test_concurrent_mutators_publish_complete_snapshots(colorix):
    expected = {}
    for i in range(len(THEMES)):
        for dark_mode in (False, True):
            theme = THEMES[i]
            expected[(i, dark_mode)] = Colorix(theme, dark_mode).tokens
    valid = set(expected.values())

    errors = []

    def worker(n):
        for k in range(20):
            if (n + k) % 2:
                tokens = colorix.pick_theme((n + k) % len(THEMES))
            else:
                tokens = colorix.invert_mode()
            if tokens not in valid:
                errors.append(tokens)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert not errors
    assert colorix.tokens in valid


# --- Achromatic preset warnings ---

def _achromatic(record):
    return [w for w in record if "achromatic" in str(w.message)]

def _theme_with(preset):
    theme = list(EGUI_THEME)
    theme[0] = preset
    return theme

def test_init_warning_points_at_caller():
    with pytest.warns(UserWarning, match="achromatic") as record:
        Colorix.init(_theme_with(CustomPreset((0, 0, 0))))
    assert os.path.basename(_achromatic(record)[0].filename) == "test_colorix.py"

def test_constructor_warning_points_at_caller():
    with pytest.warns(UserWarning, match="achromatic") as record:
        Colorix(_theme_with(CustomPreset((255, 255, 255))))
    assert os.path.basename(_achromatic(record)[0].filename) == "test_colorix.py"

def test_set_slot_warning_points_at_caller(colorix):
    with pytest.warns(UserWarning, match="achromatic") as record:
        colorix.set_slot(0, CustomPreset((255, 255, 255)))
    assert os.path.basename(_achromatic(record)[0].filename) == "test_colorix.py"

def test_builtin_themes_do_not_warn(colorix):
    with warnings.catch_warnings(record=True) as record:
        warnings.simplefilter("always")
        for i in range(len(THEMES)):
            colorix.pick_theme(i)
        colorix.invert_mode()
    assert _achromatic(record) == []
