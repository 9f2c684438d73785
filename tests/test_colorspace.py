# -*- coding: utf-8 -*-
"""
Colorix: Perceptual color engine and semantic theme tokens
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later
"""

import math

import numpy as np
import pytest
from scipy.optimize import brentq

import colorix_colorspace as cs
from colorix_colorspace import (
    Color,
    ColorSpaceEngine,
    LinSrgb,
    Oklab,
    Okhsl,
    compute_max_saturation,
    find_cusp,
    find_gamut_intersection,
    gamma_decode,
    gamma_encode,
    linear_srgb_to_oklab,
    okhsl_to_oklab,
    oklab_to_linear_srgb,
    oklab_to_okhsl,
    toe,
    toe_inv,
)

HUE_ANGLES = (0.3, 1.3, 2.5, 4.0, 5.5)


def _hue_vector(angle):
    return math.cos(angle), math.sin(angle)

def _hue_distance(h1, h2):
    d = np.abs(np.asarray(h1) - np.asarray(h2))
    return np.minimum(d, 1.0 - d)


# --- Transfer function ---

def test_gamma_byte_round_trip_is_exact():
    for byte in range(256):
        assert gamma_encode(gamma_decode(byte)) == byte

def test_gamma_decode_endpoints():
    assert gamma_decode(0) == 0.0
    assert gamma_decode(255) == pytest.approx(1.0, abs=1e-12)
    # Linear segment below the threshold.
    assert gamma_decode(5) == pytest.approx(5 / 255 / 12.92, rel=1e-9)

def test_gamma_decode_rounds_like_batch():
    assert gamma_decode(3.7) == gamma_decode(4)
    assert gamma_decode(3.2) == gamma_decode(3)
    assert gamma_decode(3.7) == ColorSpaceEngine.srgb8_to_linear([3.7, 3.7, 3.7])[0]
    assert gamma_decode(-4.0) == 0.0
    assert gamma_decode(300.0) == gamma_decode(255)

def test_gamma_encode_clamps():
    assert gamma_encode(-0.5) == 0
    assert gamma_encode(0.0) == 0
    assert gamma_encode(1.0) == 255
    assert gamma_encode(7.0) == 255
    assert gamma_encode(float("nan")) == 0


# --- Oklab ---

def test_known_oklab_values():
    red = linear_srgb_to_oklab(LinSrgb.from_u8((255, 0, 0)))
    np.testing.assert_allclose(red, (0.627955, 0.224863, 0.125846), atol=1e-5)

    white = linear_srgb_to_oklab(LinSrgb(1.0, 1.0, 1.0))
    np.testing.assert_allclose(white, (1.0, 0.0, 0.0), atol=1e-4)

    black = linear_srgb_to_oklab(LinSrgb(0.0, 0.0, 0.0))
    assert black == Oklab(0.0, 0.0, 0.0)

def test_byte_round_trip_on_grid():
    axis = np.arange(0, 256, 15)
    grid = np.stack(np.meshgrid(axis, axis, axis), axis=-1).reshape(-1, 3)

    lab = ColorSpaceEngine.linear_srgb_to_oklab(ColorSpaceEngine.srgb8_to_linear(grid))
    back = ColorSpaceEngine.linear_to_srgb8(ColorSpaceEngine.oklab_to_linear_srgb(lab))

    assert back.shape == grid.shape
    assert np.max(np.abs(back.astype(int) - grid)) <= 1

def test_scalar_byte_round_trip():
    for rgb in [(0, 109, 143), (229, 77, 46), (254, 180, 0), (1, 2, 3)]:
        lab = linear_srgb_to_oklab(LinSrgb.from_u8(rgb))
        back = oklab_to_linear_srgb(lab).to_u8()
        assert all(abs(x - y) <= 1 for x, y in zip(back, rgb))


# --- Okhsl ---

def test_okhsl_round_trip():
    for h in (0.0, 0.25, 0.5, 0.75):
        for s in (0.1, 0.5, 0.9):
            for l in (0.2, 0.5, 0.8):
                back = oklab_to_okhsl(okhsl_to_oklab(Okhsl(h, s, l)))
                assert _hue_distance(back.hue, h) < 1e-3
                assert back.saturation == pytest.approx(s, abs=1e-3)
                assert back.lightness == pytest.approx(l, abs=1e-3)

def test_okhsl_achromatic_axis():
    assert okhsl_to_oklab(Okhsl(0.3, 0.9, 0.0)) == Oklab(0.0, 0.0, 0.0)
    assert okhsl_to_oklab(Okhsl(0.3, 0.9, 1.0)) == Oklab(1.0, 0.0, 0.0)

    grey = oklab_to_okhsl(Oklab(0.5, 0.0, 0.0))
    assert grey.hue == 0.0
    assert grey.saturation == 0.0
    assert grey.lightness == pytest.approx(toe(0.5))

def test_okhsl_full_saturation_hits_gamut_boundary():
    for h in (0.05, 0.4, 0.7):
        rgb = Okhsl(h, 1.0, 0.6).to_linear()
        assert max(rgb) == pytest.approx(1.0, abs=2e-3) or min(rgb) == pytest.approx(0.0, abs=2e-3)

def test_okhsl_lighten_darken_clip():
    base = Okhsl(0.5, 0.4, 0.6)
    assert base.lighten(0.5).lightness == pytest.approx(0.8)
    assert base.darken(0.5).lightness == pytest.approx(0.3)
    assert base.lighten(2.0).lightness == 1.0
    assert base.darken(2.0).lightness == 0.0
    assert base.lighten(0.5).hue == base.hue

def test_toe_inverse():
    for x in np.linspace(0.0, 1.0, 21):
        assert toe(toe_inv(x)) == pytest.approx(x, abs=1e-9)
    assert toe(0.0) == 0.0
    assert toe(1.0) == pytest.approx(1.0, abs=1e-9)


# --- Gamut solver ---

def test_cusp_inside_unit_range():
    for angle in HUE_ANGLES:
        a_, b_ = _hue_vector(angle)
        l_cusp, c_cusp = find_cusp(a_, b_)
        assert 0.0 < l_cusp < 1.0
        assert c_cusp > 0.0
        assert compute_max_saturation(a_, b_) > 0.0

def test_cusp_lies_on_gamut_boundary():
    for angle in HUE_ANGLES:
        a_, b_ = _hue_vector(angle)
        l_cusp, c_cusp = find_cusp(a_, b_)
        rgb = oklab_to_linear_srgb(Oklab(l_cusp, c_cusp * a_, c_cusp * b_))
        assert max(rgb) == pytest.approx(1.0, abs=1e-3)
        assert min(rgb) == pytest.approx(0.0, abs=1e-3)

@pytest.mark.parametrize("angle", HUE_ANGLES)
@pytest.mark.parametrize("lightness", (0.3, 0.5, 0.8))
def test_gamut_intersection_in_unit_range_and_monotone(angle, lightness):
    a_, b_ = _hue_vector(angle)
    ts = [find_gamut_intersection(a_, b_, lightness, c, lightness)
          for c in (0.05, 0.4, 0.6, 0.8, 1.0)]
    assert all(0.0 <= t <= 1.0 for t in ts)
    assert all(t1 >= t2 for t1, t2 in zip(ts, ts[1:]))

@pytest.mark.parametrize("angle", HUE_ANGLES)
@pytest.mark.parametrize("lightness", (0.3, 0.5, 0.8))
def test_gamut_intersection_matches_bracketing_root(angle, lightness):
    a_, b_ = _hue_vector(angle)
    c_1 = 0.4

    def outside(t):
        c = t * c_1
        rgb = oklab_to_linear_srgb(Oklab(lightness, c * a_, c * b_))
        return max(max(rgb) - 1.0, -min(rgb))

    expected = brentq(outside, 0.0, 1.0, xtol=1e-12)
    t = find_gamut_intersection(a_, b_, lightness, c_1, lightness)
    assert t * c_1 == pytest.approx(expected * c_1, abs=5e-3)

def test_zero_hue_vector_is_handled():
    assert math.isfinite(compute_max_saturation(0.0, 0.0))
    assert find_cusp(0.0, 0.0) == (0.5, 0.0)
    t = find_gamut_intersection(0.0, 0.0, 0.5, 1.0, 0.5)
    assert 0.0 <= t <= 1.0

def test_gamut_intersection_zero_denominator_returns_zero():
    # Zero-chroma target at the same lightness as the origin.
    assert find_gamut_intersection(1.0, 0.0, 0.5, 0.0, 0.5, cusp=(0.6, 0.2)) == 0.0

def test_gamut_intersection_accepts_precomputed_cusp():
    a_, b_ = _hue_vector(2.5)
    cusp = find_cusp(a_, b_)
    assert find_gamut_intersection(a_, b_, 0.6, 0.5, 0.6, cusp) == \
        find_gamut_intersection(a_, b_, 0.6, 0.5, 0.6)


# --- Batch engine ---

def test_scalar_and_batch_agree():
    rng = np.random.default_rng(7)
    hsl = rng.random((64, 3))
    lab = ColorSpaceEngine.okhsl_to_oklab(hsl)
    for row, expected in zip(hsl, lab):
        np.testing.assert_allclose(okhsl_to_oklab(Okhsl(*row)), expected, rtol=0, atol=1e-12)

    back = ColorSpaceEngine.oklab_to_okhsl(lab)
    for row, expected in zip(lab, back):
        np.testing.assert_allclose(oklab_to_okhsl(Oklab(*row)), expected, rtol=0, atol=1e-12)

def test_single_vector_keeps_shape():
    lab = ColorSpaceEngine.linear_srgb_to_oklab(np.array([1.0, 0.0, 0.0]))
    assert lab.shape == (3,)
    rgb8 = ColorSpaceEngine.okhsl_to_srgb8([0.0, 0.0, 1.0])
    assert rgb8.shape == (3,)
    assert tuple(int(v) for v in rgb8) == (255, 255, 255)

def test_srgb8_to_okhsl_matches_scalar():
    rgb = np.array([[0, 109, 143], [229, 77, 46]])
    hsl = ColorSpaceEngine.srgb8_to_okhsl(rgb)
    for row, expected in zip(rgb, hsl):
        np.testing.assert_allclose(LinSrgb.from_u8(tuple(row)).to_okhsl(), expected, atol=1e-12)

def test_bad_shape_raises():
    with pytest.raises(ValueError):
        ColorSpaceEngine.linear_srgb_to_oklab(np.zeros((4, 4)))

def test_strict_ieee_transfer_agrees():
    rgb = np.linspace(0.0, 1.0, 300).reshape(-1, 3)
    fast = ColorSpaceEngine.linear_to_srgb(rgb)
    cs.set_strict_ieee(True)
    try:
        strict = ColorSpaceEngine.linear_to_srgb(rgb)
        decoded = ColorSpaceEngine.srgb_to_linear(strict)
    finally:
        cs.set_strict_ieee(False)
    np.testing.assert_allclose(fast, strict, atol=1e-12)
    np.testing.assert_allclose(decoded, rgb, atol=1e-12)

def test_transfer_clip_flag():
    out = ColorSpaceEngine.linear_to_srgb(np.array([[-0.2, 0.5, 1.5]]))
    assert out[0, 0] == 0.0 and out[0, 2] == 1.0
    raw = ColorSpaceEngine.linear_to_srgb(np.array([[0.0, 0.5, 1.5]]), clip=False)
    assert raw[0, 2] > 1.0


# --- Color ---

def test_color_hex():
    assert Color.from_hex("#ff8000") == Color(255, 128, 0, 255)
    assert Color.from_hex("00000080") == Color(0, 0, 0, 128)
    assert Color(255, 128, 0).to_hex() == "#ff8000"
    assert Color(0, 0, 0, 0).to_hex() == "#00000000"

@pytest.mark.parametrize("text", ["", "#fff", "#gg0000", "#1234567"])
def test_color_hex_rejects_malformed(text):
    with pytest.raises(ValueError):
        Color.from_hex(text)

def test_color_linear_round_trip():
    c = Color.rgb8(12, 200, 99)
    assert Color.from_linear(c.to_linear()) == c
