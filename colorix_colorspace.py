# -*- coding: utf-8 -*-
"""
Colorix: Perceptual color engine and semantic theme tokens
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Perceptual Color-Space Engine
=============================
sRGB (gamma) <-> linear sRGB <-> Oklab <-> Okhsl, built around JIT-compiled
scalar kernels with vectorised ``prange`` batch wrappers on top.

The Okhsl direction needs the sRGB gamut boundary for every hue.  It is found
analytically (cusp estimate + triangle intersection) and refined with a single
Halley step per linear-RGB channel, following Ottosson's reference derivation.

Robustness notes:
- Every division that can degenerate (Halley divisors, channel maximum in
  ``scale_l``, intersection estimates, inverse saturation) has an explicit
  fallback branch.  Numba raises ``ZeroDivisionError`` on float division by
  zero, so these branches are also what keeps the kernels exception-free.
- Achromatic input (lightness at 0 or 1, or zero chroma) never reaches the
  hue computation.

References:
    - IEC 61966-2-1:1999 (sRGB Standard)
    - B. Ottosson (2020). "A perceptual color space for image processing".
    - B. Ottosson (2021). "Two new color spaces for color picking - Okhsv and Okhsl".
"""

import functools
import time
from typing import Any, Callable, Final, NamedTuple, Optional, Tuple, TypeAlias

import numpy as np
import numpy.typing as npt
from numba import njit, prange

__all__ = [
    # --- Type Aliases ---
    "ArrayFloat",

    # --- Constants ---
    "SRGB_LINEAR_THRESHOLD",
    "SRGB_ENCODED_THRESHOLD",
    "TOE_K1",
    "TOE_K2",
    "TOE_K3",
    "SATURATION_SPLIT",
    "HALLEY_SENTINEL",
    "ACHROMATIC_CHROMA",

    # --- Configuration ---
    "set_strict_ieee",

    # --- Decorators ---
    "handle_shapes",

    # --- Value types ---
    "LinSrgb",
    "Oklab",
    "Okhsl",
    "Color",
    "WHITE",
    "BLACK",
    "TRANSPARENT",

    # --- Scalar API ---
    "gamma_decode",
    "gamma_encode",
    "from_linear",
    "from_degrees",
    "linear_srgb_to_oklab",
    "oklab_to_linear_srgb",
    "okhsl_to_oklab",
    "oklab_to_okhsl",
    "compute_max_saturation",
    "find_cusp",
    "find_gamut_intersection",
    "toe",
    "toe_inv",

    # --- Classes ---
    "ColorSpaceEngine",
]

# --- Type Aliases ---
ArrayFloat: TypeAlias = npt.NDArray[np.floating]

# --- Transfer function constants (IEC 61966-2-1) ---
SRGB_LINEAR_THRESHOLD: Final[float] = 0.0031308
SRGB_ENCODED_THRESHOLD: Final[float] = 0.04045
_SRGB_SLOPE: Final[float] = 12.92
_SRGB_GAMMA: Final[float] = 2.4

# --- Okhsl constants ---
# Lightness toe: makes Okhsl lightness track CIELAB L* near black.
TOE_K1: Final[float] = 0.206
TOE_K2: Final[float] = 0.03
TOE_K3: Final[float] = (1.0 + TOE_K1) / (1.0 + TOE_K2)

# Saturation is piecewise-rational around this breakpoint.
SATURATION_SPLIT: Final[float] = 0.8
_SATURATION_SPLIT_INV: Final[float] = 1.0 / SATURATION_SPLIT

# Channels whose Halley update points away from the boundary never win min().
HALLEY_SENTINEL: Final[float] = 1.0e6

_EPS: Final[float] = 1e-12
# Oklab chroma below this is treated as neutral (matrix residue of sRGB greys).
ACHROMATIC_CHROMA: Final[float] = 1e-6
_TWO_PI: Final[float] = 2.0 * np.pi


# --- Runtime Configuration ---
# When True, the vectorised transfer-function kernels use fastmath=False
# variants.  The Oklab / Okhsl kernels are always compiled strictly.
#
#     import colorix_colorspace as cs
#     cs.set_strict_ieee(True)
_STRICT_IEEE: bool = False

def set_strict_ieee(enabled: bool = True) -> None:
    """
    Toggle between fast (default) and strict IEEE 754 transfer kernels.

    Args:
        enabled: If True, use strict IEEE mode.
    """
    global _STRICT_IEEE
    _STRICT_IEEE = bool(enabled)


# =============================================================================
# 1. DECORATORS
# =============================================================================

def handle_shapes(func: Callable[..., np.ndarray]) -> Callable[..., np.ndarray]:
    """
    Normalises array input to a contiguous (N, 3) batch.

    - (3,) input returns (3,)
    - (N, 3) input returns (N, 3)
    """
    @functools.wraps(func)
    def wrapper(arr: Any, *args: Any, **kwargs: Any) -> np.ndarray:
        arr = np.asarray(arr)
        arr_in = np.ascontiguousarray(np.atleast_2d(arr))

        if arr_in.ndim != 2 or arr_in.shape[-1] != 3:
            raise ValueError(f"Expected shape (3,) or (N, 3), got {arr.shape}")

        res = func(arr_in, *args, **kwargs)

        if arr.ndim == 1:
            return res[0]
        return res
    return wrapper


# =============================================================================
# 2. SCALAR KERNELS
# =============================================================================
# The gamut solver compares signed Halley updates against zero and relies on
# exact zero tests for the achromatic axis, so these are compiled without
# fastmath.

@njit(cache=True)
def _cbrt(x: float) -> float:
    if x >= 0.0:
        return x ** (1.0 / 3.0)
    return -((-x) ** (1.0 / 3.0))

@njit(cache=True)
def _srgb_oetf(v: float) -> float:
    """Linear -> encoded [0, 1].  Negative input maps through the linear toe."""
    if v <= SRGB_LINEAR_THRESHOLD:
        return _SRGB_SLOPE * v
    return 1.055 * (v ** (1.0 / _SRGB_GAMMA)) - 0.055

@njit(cache=True)
def _gamma_u8_from_linear(v: float) -> int:
    """Linear -> byte, clamped, rounded half up."""
    if not v > 0.0:
        return 0
    if v >= 1.0:
        return 255
    return int(255.0 * _srgb_oetf(v) + 0.5)

@njit(cache=True)
def _linear_srgb_to_oklab(r: float, g: float, b: float) -> Tuple[float, float, float]:
    l = 0.4122214708 * r + 0.5363325363 * g + 0.0514459929 * b
    m = 0.2119034982 * r + 0.6806995451 * g + 0.1073969566 * b
    s = 0.0883024619 * r + 0.2817188376 * g + 0.6299787005 * b

    l_ = _cbrt(l)
    m_ = _cbrt(m)
    s_ = _cbrt(s)

    return (
        0.2104542553 * l_ + 0.7936177850 * m_ - 0.0040720468 * s_,
        1.9779984951 * l_ - 2.4285922050 * m_ + 0.4505937099 * s_,
        0.0259040371 * l_ + 0.7827717662 * m_ - 0.8086757660 * s_,
    )

@njit(cache=True)
def _oklab_to_linear_srgb(L: float, a: float, b: float) -> Tuple[float, float, float]:
    l_ = L + 0.3963377774 * a + 0.2158037573 * b
    m_ = L - 0.1055613458 * a - 0.0638541728 * b
    s_ = L - 0.0894841775 * a - 1.2914855480 * b

    l = l_ * l_ * l_
    m = m_ * m_ * m_
    s = s_ * s_ * s_

    return (
        +4.0767416621 * l - 3.3077115913 * m + 0.2309699292 * s,
        -1.2684380046 * l + 2.6097574011 * m - 0.3413193965 * s,
        -0.0041960863 * l - 0.7034186147 * m + 1.7076147010 * s,
    )

@njit(cache=True)
def _compute_max_saturation(a: float, b: float) -> float:
    """
    Maximum saturation S = C/L for the hue direction (a, b), where one linear
    channel first clips to zero.  Polynomial fit plus one Halley step.
    """
    # Select the channel that clips first for this hue.
    if -1.88170328 * a - 0.80936493 * b > 1.0:
        k0, k1, k2, k3, k4 = 1.19086277, 1.76576728, 0.59662641, 0.75515197, 0.56771245
        wl, wm, ws = 4.0767416621, -3.3077115913, 0.2309699292
    elif 1.81444104 * a - 1.19445276 * b > 1.0:
        k0, k1, k2, k3, k4 = 0.73956515, -0.45954404, 0.08285427, 0.12541070, 0.14503204
        wl, wm, ws = -1.2684380046, 2.6097574011, -0.3413193965
    else:
        k0, k1, k2, k3, k4 = 1.35733652, -0.00915799, -1.15130210, -0.50559606, 0.00692167
        wl, wm, ws = -0.0041960863, -0.7034186147, 1.7076147010

    sat = k0 + k1 * a + k2 * b + k3 * a * a + k4 * a * b

    k_l = 0.3963377774 * a + 0.2158037573 * b
    k_m = -0.1055613458 * a - 0.0638541728 * b
    k_s = -0.0894841775 * a - 1.2914855480 * b

    l_ = 1.0 + sat * k_l
    m_ = 1.0 + sat * k_m
    s_ = 1.0 + sat * k_s

    l = l_ * l_ * l_
    m = m_ * m_ * m_
    s = s_ * s_ * s_

    l_ds = 3.0 * k_l * l_ * l_
    m_ds = 3.0 * k_m * m_ * m_
    s_ds = 3.0 * k_s * s_ * s_

    l_ds2 = 6.0 * k_l * k_l * l_
    m_ds2 = 6.0 * k_m * k_m * m_
    s_ds2 = 6.0 * k_s * k_s * s_

    f = wl * l + wm * m + ws * s
    f1 = wl * l_ds + wm * m_ds + ws * s_ds
    f2 = wl * l_ds2 + wm * m_ds2 + ws * s_ds2

    div = f1 * f1 - 0.5 * f * f2
    if abs(f1) < _EPS or abs(div) < _EPS:
        # Flat boundary: keep the polynomial estimate.
        return sat
    return sat - f * f1 / div

@njit(cache=True)
def _scale_l(l_vt: float, c_vt: float, a_: float, b_: float) -> float:
    """Factor that brings the brightest linear channel of (l_vt, c_vt) to 1."""
    r, g, b = _oklab_to_linear_srgb(l_vt, a_ * c_vt, b_ * c_vt)
    rgb_max = max(max(r, g), max(b, 0.0))
    if rgb_max < _EPS:
        return 0.0
    return _cbrt(1.0 / rgb_max)

@njit(cache=True)
def _find_cusp(a_: float, b_: float) -> Tuple[float, float]:
    """(L, C) of the widest point of the gamut slice for hue (a_, b_)."""
    if a_ * a_ + b_ * b_ < _EPS:
        return 0.5, 0.0
    s_cusp = _compute_max_saturation(a_, b_)
    l_cusp = _scale_l(1.0, s_cusp, a_, b_)
    if l_cusp < _EPS or l_cusp > 1.0 - _EPS or s_cusp < 0.0:
        # Degenerate hue vector: fall back to a mid-grey cusp with no chroma.
        return 0.5, 0.0
    return l_cusp, l_cusp * s_cusp

@njit(cache=True)
def _halley_channel(f: float, f1: float, f2: float) -> float:
    """Halley step for one channel, or HALLEY_SENTINEL if it is not binding."""
    div = f1 * f1 - 0.5 * f * f2
    if abs(div) < _EPS:
        return HALLEY_SENTINEL
    u = f1 / div
    if u >= 0.0:
        return -f * u
    return HALLEY_SENTINEL

@njit(cache=True)
def _find_gamut_intersection(a_: float, b_: float, l_1: float, c_1: float,
                             l_0: float, cusp_l: float, cusp_c: float) -> float:
    """
    Parameter t at which the segment (l_0, 0) -> (l_1, c_1) leaves the gamut.

    Lower half: exact triangle intersection.  Upper half: triangle estimate
    plus one Halley step on each linear channel (upper boundary = 1).
    """
    if (l_1 - l_0) * cusp_c - (cusp_l - l_0) * c_1 <= 0.0:
        den = c_1 * cusp_l + cusp_c * (l_0 - l_1)
        if abs(den) < _EPS:
            return 0.0
        return cusp_c * l_0 / den

    den = c_1 * (cusp_l - 1.0) + cusp_c * (l_0 - l_1)
    if abs(den) < _EPS:
        return 0.0
    t = cusp_c * (l_0 - 1.0) / den

    d_l = l_1 - l_0
    d_c = c_1

    k_l = 0.3963377774 * a_ + 0.2158037573 * b_
    k_m = -0.1055613458 * a_ - 0.0638541728 * b_
    k_s = -0.0894841775 * a_ - 1.2914855480 * b_

    l_dt = d_l + d_c * k_l
    m_dt = d_l + d_c * k_m
    s_dt = d_l + d_c * k_s

    L = l_0 * (1.0 - t) + t * l_1
    C = t * c_1

    l_ = L + C * k_l
    m_ = L + C * k_m
    s_ = L + C * k_s

    l = l_ * l_ * l_
    m = m_ * m_ * m_
    s = s_ * s_ * s_

    ldt = 3.0 * l_dt * l_ * l_
    mdt = 3.0 * m_dt * m_ * m_
    sdt = 3.0 * s_dt * s_ * s_

    ldt2 = 6.0 * l_dt * l_dt * l_
    mdt2 = 6.0 * m_dt * m_dt * m_
    sdt2 = 6.0 * s_dt * s_dt * s_

    r = 4.0767416621 * l - 3.3077115913 * m + 0.2309699292 * s - 1.0
    r1 = 4.0767416621 * ldt - 3.3077115913 * mdt + 0.2309699292 * sdt
    r2 = 4.0767416621 * ldt2 - 3.3077115913 * mdt2 + 0.2309699292 * sdt2

    g = -1.2684380046 * l + 2.6097574011 * m - 0.3413193965 * s - 1.0
    g1 = -1.2684380046 * ldt + 2.6097574011 * mdt - 0.3413193965 * sdt
    g2 = -1.2684380046 * ldt2 + 2.6097574011 * mdt2 - 0.3413193965 * sdt2

    bb = -0.0041960863 * l - 0.7034186147 * m + 1.7076147010 * s - 1.0
    bb1 = -0.0041960863 * ldt - 0.7034186147 * mdt + 1.7076147010 * sdt
    bb2 = -0.0041960863 * ldt2 - 0.7034186147 * mdt2 + 1.7076147010 * sdt2

    t_r = _halley_channel(r, r1, r2)
    t_g = _halley_channel(g, g1, g2)
    t_b = _halley_channel(bb, bb1, bb2)

    step = min(t_r, min(t_g, t_b))
    if step < HALLEY_SENTINEL:
        t += step
    return t

@njit(cache=True)
def _toe(x: float) -> float:
    y = TOE_K3 * x - TOE_K1
    return 0.5 * (y + np.sqrt(y * y + 4.0 * TOE_K2 * TOE_K3 * x))

@njit(cache=True)
def _toe_inv(x: float) -> float:
    return (x * x + TOE_K1 * x) / (TOE_K3 * (x + TOE_K2))

@njit(cache=True)
def _st_mid(a_: float, b_: float) -> Tuple[float, float]:
    """Smooth (S, T) approximation used for the mid chroma anchor."""
    s = 0.11516993 + 1.0 / (
        7.44778970 + 4.15901240 * b_
        + a_ * (-2.19557347 + 1.75198401 * b_
        + a_ * (-2.13704948 - 10.02301043 * b_
        + a_ * (-4.24894561 + 5.38770819 * b_ + 4.69891013 * a_)))
    )
    t = 0.11239642 + 1.0 / (
        1.61320320 - 0.68124379 * b_
        + a_ * (0.40370612 + 0.90148123 * b_
        + a_ * (-0.27087943 + 0.61223990 * b_
        + a_ * (0.00299215 - 0.45399568 * b_ - 0.14661872 * a_)))
    )
    return s, t

@njit(cache=True)
def _get_cs(L: float, a_: float, b_: float) -> Tuple[float, float, float]:
    """Chroma anchors (c_0, c_mid, c_max) for Oklab lightness L and hue (a_, b_)."""
    cusp_l, cusp_c = _find_cusp(a_, b_)
    c_max = _find_gamut_intersection(a_, b_, L, 1.0, L, cusp_l, cusp_c)

    s_max = cusp_c / cusp_l
    t_max = cusp_c / (1.0 - cusp_l)
    tri = min(L * s_max, (1.0 - L) * t_max)
    k = c_max / tri if tri > _EPS else 1.0

    s_mid, t_mid = _st_mid(a_, b_)
    c_a = L * s_mid
    c_b = (1.0 - L) * t_mid
    # sqrt(sqrt(1 / (1/c_a^4 + 1/c_b^4))) without the reciprocal blow-up.
    q = (c_a * c_a * c_a * c_a + c_b * c_b * c_b * c_b) ** 0.25
    c_mid = 0.9 * k * c_a * c_b / q if q > _EPS else 0.0

    c_a = L * 0.4
    c_b = (1.0 - L) * 0.8
    q = np.sqrt(c_a * c_a + c_b * c_b)
    c_0 = c_a * c_b / q if q > _EPS else 0.0

    return c_0, c_mid, c_max

@njit(cache=True)
def _okhsl_to_oklab(h: float, s: float, l: float) -> Tuple[float, float, float]:
    if l <= 0.0 or l >= 1.0:
        return l, 0.0, 0.0

    a_ = np.cos(_TWO_PI * h)
    b_ = np.sin(_TWO_PI * h)
    L = _toe_inv(l)

    c_0, c_mid, c_max = _get_cs(L, a_, b_)
    if c_0 < _EPS or c_mid < _EPS:
        return L, 0.0, 0.0

    if s < SATURATION_SPLIT:
        t = _SATURATION_SPLIT_INV * s
        k_0 = 0.0
        k_1 = SATURATION_SPLIT * c_0
        k_2 = 1.0 - k_1 / c_mid
    else:
        t = (s - SATURATION_SPLIT) / (1.0 - SATURATION_SPLIT)
        k_0 = c_mid
        k_1 = (1.0 - SATURATION_SPLIT) * c_mid * c_mid * _SATURATION_SPLIT_INV * _SATURATION_SPLIT_INV / c_0
        span = c_max - c_mid
        k_2 = 1.0 - k_1 / span if abs(span) > _EPS else 0.0

    den = 1.0 - k_2 * t
    if abs(den) < _EPS:
        c = c_max
    else:
        c = k_0 + t * k_1 / den
    return L, c * a_, c * b_

@njit(cache=True)
def _oklab_to_okhsl(L: float, a: float, b: float) -> Tuple[float, float, float]:
    if not (L > 0.0 and L < 1.0):
        return 0.0, 0.0, L
    c = np.hypot(a, b)
    if c < ACHROMATIC_CHROMA:
        return 0.0, 0.0, _toe(L)

    a_ = a / c
    b_ = b / c
    h = 0.5 + 0.5 * np.arctan2(-b, -a) / np.pi
    if h >= 1.0:
        h -= 1.0

    c_0, c_mid, c_max = _get_cs(L, a_, b_)
    if c_0 < _EPS or c_mid < _EPS:
        return h, 0.0, _toe(L)

    if c < c_mid:
        k_1 = SATURATION_SPLIT * c_0
        k_2 = 1.0 - k_1 / c_mid
        den = k_1 + k_2 * c
        t = c / den if abs(den) > _EPS else 1.0
        s = t * SATURATION_SPLIT
    else:
        k_0 = c_mid
        k_1 = (1.0 - SATURATION_SPLIT) * c_mid * c_mid * _SATURATION_SPLIT_INV * _SATURATION_SPLIT_INV / c_0
        span = c_max - c_mid
        k_2 = 1.0 - k_1 / span if abs(span) > _EPS else 0.0
        den = k_1 + k_2 * (c - k_0)
        t = (c - k_0) / den if abs(den) > _EPS else 1.0
        s = SATURATION_SPLIT + (1.0 - SATURATION_SPLIT) * t

    return h, s, _toe(L)


# =============================================================================
# 3. BATCH KERNELS
# =============================================================================

def _oetf_array(linear: ArrayFloat) -> ArrayFloat:
    """Linear -> encoded sRGB over a contiguous array."""
    out = np.empty_like(linear)
    linear_flat = linear.ravel()
    out_flat = out.ravel()
    for i in range(linear.size):
        v = linear_flat[i]
        if v <= SRGB_LINEAR_THRESHOLD:
            out_flat[i] = _SRGB_SLOPE * v
        else:
            out_flat[i] = 1.055 * (v ** (1.0 / _SRGB_GAMMA)) - 0.055
    return out

def _eotf_array(srgb: ArrayFloat) -> ArrayFloat:
    """Encoded sRGB -> linear over a contiguous array."""
    out = np.empty_like(srgb)
    srgb_flat = srgb.ravel()
    out_flat = out.ravel()
    for i in range(srgb.size):
        v = srgb_flat[i]
        if v <= SRGB_ENCODED_THRESHOLD:
            out_flat[i] = v / _SRGB_SLOPE
        else:
            out_flat[i] = ((v + 0.055) / 1.055) ** _SRGB_GAMMA
    return out

_oetf_fast = njit(cache=True, fastmath=True)(_oetf_array)
_eotf_fast = njit(cache=True, fastmath=True)(_eotf_array)
# Strict twins share the Python source, so they are not disk-cached.
_oetf_strict = njit(fastmath=False)(_oetf_array)
_eotf_strict = njit(fastmath=False)(_eotf_array)

def _oetf(linear: ArrayFloat) -> ArrayFloat:
    if _STRICT_IEEE:
        return _oetf_strict(linear)
    return _oetf_fast(linear)

def _eotf(srgb: ArrayFloat) -> ArrayFloat:
    if _STRICT_IEEE:
        return _eotf_strict(srgb)
    return _eotf_fast(srgb)

@njit(cache=True, parallel=True)
def _batch_linear_to_srgb8(rgb: ArrayFloat) -> np.ndarray:
    n = rgb.shape[0]
    out = np.empty((n, 3), dtype=np.uint8)
    for i in prange(n):
        for j in range(3):
            out[i, j] = _gamma_u8_from_linear(rgb[i, j])
    return out

@njit(cache=True, parallel=True)
def _batch_linear_to_oklab(rgb: ArrayFloat) -> ArrayFloat:
    n = rgb.shape[0]
    out = np.empty((n, 3), dtype=np.float64)
    for i in prange(n):
        x, y, z = _linear_srgb_to_oklab(rgb[i, 0], rgb[i, 1], rgb[i, 2])
        out[i, 0] = x
        out[i, 1] = y
        out[i, 2] = z
    return out

@njit(cache=True, parallel=True)
def _batch_oklab_to_linear(lab: ArrayFloat) -> ArrayFloat:
    n = lab.shape[0]
    out = np.empty((n, 3), dtype=np.float64)
    for i in prange(n):
        x, y, z = _oklab_to_linear_srgb(lab[i, 0], lab[i, 1], lab[i, 2])
        out[i, 0] = x
        out[i, 1] = y
        out[i, 2] = z
    return out

@njit(cache=True, parallel=True)
def _batch_oklab_to_okhsl(lab: ArrayFloat) -> ArrayFloat:
    n = lab.shape[0]
    out = np.empty((n, 3), dtype=np.float64)
    for i in prange(n):
        x, y, z = _oklab_to_okhsl(lab[i, 0], lab[i, 1], lab[i, 2])
        out[i, 0] = x
        out[i, 1] = y
        out[i, 2] = z
    return out

@njit(cache=True, parallel=True)
def _batch_okhsl_to_oklab(hsl: ArrayFloat) -> ArrayFloat:
    n = hsl.shape[0]
    out = np.empty((n, 3), dtype=np.float64)
    for i in prange(n):
        x, y, z = _okhsl_to_oklab(hsl[i, 0], hsl[i, 1], hsl[i, 2])
        out[i, 0] = x
        out[i, 1] = y
        out[i, 2] = z
    return out


# Exact decode table for every byte value.
_SRGB8_TO_LINEAR: Final[ArrayFloat] = _eotf_strict(np.arange(256, dtype=np.float64) / 255.0)


# =============================================================================
# 4. VALUE TYPES
# =============================================================================

class LinSrgb(NamedTuple):
    """Linear-light sRGB triplet.  Not clamped during intermediate math."""
    red: float
    green: float
    blue: float

    @classmethod
    def from_u8(cls, rgb: Tuple[int, int, int]) -> "LinSrgb":
        return cls(gamma_decode(rgb[0]), gamma_decode(rgb[1]), gamma_decode(rgb[2]))

    def to_u8(self) -> Tuple[int, int, int]:
        return from_linear(self)

    def lighten(self, factor: float) -> "LinSrgb":
        """Blend every channel toward 1 by ``factor``."""
        return LinSrgb(
            float(np.clip(self.red + factor * (1.0 - self.red), 0.0, 1.0)),
            float(np.clip(self.green + factor * (1.0 - self.green), 0.0, 1.0)),
            float(np.clip(self.blue + factor * (1.0 - self.blue), 0.0, 1.0)),
        )

    def darken(self, factor: float) -> "LinSrgb":
        """Blend every channel toward 0 by ``factor``."""
        return LinSrgb(
            float(np.clip(self.red - factor * self.red, 0.0, 1.0)),
            float(np.clip(self.green - factor * self.green, 0.0, 1.0)),
            float(np.clip(self.blue - factor * self.blue, 0.0, 1.0)),
        )

    def to_oklab(self) -> "Oklab":
        return linear_srgb_to_oklab(self)

    def to_okhsl(self) -> "Okhsl":
        return oklab_to_okhsl(linear_srgb_to_oklab(self))


class Oklab(NamedTuple):
    l: float
    a: float
    b: float

    def to_linear_srgb(self) -> LinSrgb:
        return oklab_to_linear_srgb(self)

    def to_okhsl(self) -> "Okhsl":
        return oklab_to_okhsl(self)


class Okhsl(NamedTuple):
    """
    Cylindrical Oklab: hue in turns [0, 1), saturation and lightness in [0, 1].

    Lightness 0 or 1 is achromatic; hue and saturation are then ignored.
    """
    hue: float
    saturation: float
    lightness: float

    @classmethod
    def from_color(cls, rgb: LinSrgb) -> "Okhsl":
        return rgb.to_okhsl()

    def lighten(self, factor: float) -> "Okhsl":
        """Blend lightness toward 1 by ``factor``; hue and saturation kept."""
        lightness = self.lightness + factor * (1.0 - self.lightness)
        return self._replace(lightness=float(np.clip(lightness, 0.0, 1.0)))

    def darken(self, factor: float) -> "Okhsl":
        """Blend lightness toward 0 by ``factor``; hue and saturation kept."""
        lightness = self.lightness - factor * self.lightness
        return self._replace(lightness=float(np.clip(lightness, 0.0, 1.0)))

    def as_degrees(self) -> float:
        return float(np.clip(self.hue * 360.0, 0.0, 360.0))

    def to_oklab(self) -> Oklab:
        return okhsl_to_oklab(self)

    def to_linear(self) -> LinSrgb:
        return oklab_to_linear_srgb(okhsl_to_oklab(self))

    def to_u8(self) -> Tuple[int, int, int]:
        return from_linear(self.to_linear())


class Color(NamedTuple):
    """Gamma-encoded 8-bit RGBA color, the form handed to paint code."""
    r: int
    g: int
    b: int
    a: int = 255

    @classmethod
    def rgb8(cls, r: int, g: int, b: int) -> "Color":
        return cls(int(r), int(g), int(b), 255)

    @classmethod
    def from_linear(cls, rgb: LinSrgb) -> "Color":
        return cls(*from_linear(rgb))

    @classmethod
    def from_hex(cls, text: str) -> "Color":
        """Parses ``#rrggbb`` or ``#rrggbbaa`` (leading ``#`` optional)."""
        digits = text.strip().lstrip("#")
        if len(digits) not in (6, 8):
            raise ValueError(f"Expected 6 or 8 hex digits, got {text!r}")
        try:
            values = [int(digits[i:i + 2], 16) for i in range(0, len(digits), 2)]
        except ValueError as exc:
            raise ValueError(f"Invalid hex color {text!r}") from exc
        return cls(*values)

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return self.r, self.g, self.b

    def to_hex(self) -> str:
        if self.a == 255:
            return f"#{self.r:02x}{self.g:02x}{self.b:02x}"
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}{self.a:02x}"

    def to_linear(self) -> LinSrgb:
        return LinSrgb.from_u8(self.rgb)


WHITE: Final[Color] = Color(255, 255, 255, 255)
BLACK: Final[Color] = Color(0, 0, 0, 255)
TRANSPARENT: Final[Color] = Color(0, 0, 0, 0)


# =============================================================================
# 5. SCALAR API
# =============================================================================

def gamma_decode(byte: int) -> float:
    """sRGB byte (0..255) -> linear light, via the exact decode table.

    Non-integer input is rounded to the nearest byte, as in
    ``ColorSpaceEngine.srgb8_to_linear``.
    """
    return float(_SRGB8_TO_LINEAR[int(np.clip(np.rint(byte), 0, 255))])

def gamma_encode(linear: float) -> int:
    """Linear light -> sRGB byte, clamped to [0, 255] and rounded half up."""
    return _gamma_u8_from_linear(float(linear))

def from_linear(rgb: LinSrgb) -> Tuple[int, int, int]:
    return gamma_encode(rgb.red), gamma_encode(rgb.green), gamma_encode(rgb.blue)

def from_degrees(hue: float) -> float:
    """Degrees -> turns, clamped to [0, 1]."""
    return float(np.clip(hue / 360.0, 0.0, 1.0))

def linear_srgb_to_oklab(c: LinSrgb) -> Oklab:
    return Oklab(*_linear_srgb_to_oklab(float(c[0]), float(c[1]), float(c[2])))

def oklab_to_linear_srgb(c: Oklab) -> LinSrgb:
    return LinSrgb(*_oklab_to_linear_srgb(float(c[0]), float(c[1]), float(c[2])))

def okhsl_to_oklab(c: Okhsl) -> Oklab:
    return Oklab(*_okhsl_to_oklab(float(c[0]), float(c[1]), float(c[2])))

def oklab_to_okhsl(c: Oklab) -> Okhsl:
    return Okhsl(*_oklab_to_okhsl(float(c[0]), float(c[1]), float(c[2])))

def compute_max_saturation(a_: float, b_: float) -> float:
    """
    Maximum S = C/L for the normalised hue direction (a_, b_).

    Args:
        a_, b_: Unit vector in the Oklab a/b plane.
    """
    return _compute_max_saturation(float(a_), float(b_))

def find_cusp(a_: float, b_: float) -> Tuple[float, float]:
    """
    Lightness and chroma of the gamut cusp for hue (a_, b_).

    Returns:
        ``(l_cusp, c_cusp)``.  A degenerate hue vector yields ``(0.5, 0.0)``.
    """
    return _find_cusp(float(a_), float(b_))

def find_gamut_intersection(
    a_: float,
    b_: float,
    l_1: float,
    c_1: float,
    l_0: float,
    cusp: Optional[Tuple[float, float]] = None,
) -> float:
    """
    Finds where the (L, C) segment from ``(l_0, 0)`` to ``(l_1, c_1)`` leaves
    the sRGB gamut for hue direction (a_, b_).

    Args:
        a_, b_: Unit hue vector.
        l_1, c_1: Target point of the segment.
        l_0: Lightness of the achromatic start point (inside the gamut).
        cusp: Precomputed ``find_cusp(a_, b_)``, computed when omitted.

    Returns:
        ``t`` clamped to [0, 1]; 1 means the whole segment lies inside.
    """
    if cusp is None:
        cusp = _find_cusp(float(a_), float(b_))
    t = _find_gamut_intersection(
        float(a_), float(b_), float(l_1), float(c_1), float(l_0),
        float(cusp[0]), float(cusp[1]),
    )
    return float(np.clip(t, 0.0, 1.0))

def toe(x: float) -> float:
    """Oklab L -> Okhsl lightness."""
    return _toe(float(x))

def toe_inv(x: float) -> float:
    """Okhsl lightness -> Oklab L."""
    return _toe_inv(float(x))


# =============================================================================
# 6. VECTORISED ENGINE
# =============================================================================

class ColorSpaceEngine:
    """Static batch API over (N, 3) or (3,) arrays.

    Every batch method runs the same scalar kernels as the scalar API, so a
    batch of one gives bit-identical results to the scalar call.
    """

    @staticmethod
    @handle_shapes
    def srgb8_to_linear(rgb8: np.ndarray) -> ArrayFloat:
        """sRGB bytes -> linear floats (table lookup, input clipped to 0..255)."""
        idx = np.clip(np.rint(rgb8), 0, 255).astype(np.intp)
        return _SRGB8_TO_LINEAR[idx]

    @staticmethod
    @handle_shapes
    def linear_to_srgb8(rgb: ArrayFloat) -> np.ndarray:
        """Linear floats -> sRGB bytes (uint8), clamped and rounded."""
        return _batch_linear_to_srgb8(rgb.astype(np.float64))

    @staticmethod
    @handle_shapes
    def srgb_to_linear(rgb: ArrayFloat, clip: bool = True) -> ArrayFloat:
        """
        Encoded sRGB [0..1] -> linear.

        Args:
            rgb: Input, shape (N, 3) or (3,).
            clip: If True (default), clamps input to [0, 1] first.
        """
        rgb = rgb.astype(np.float64)
        if clip:
            rgb = np.clip(rgb, 0.0, 1.0)
        return _eotf(rgb)

    @staticmethod
    @handle_shapes
    def linear_to_srgb(rgb: ArrayFloat, clip: bool = True) -> ArrayFloat:
        """
        Linear -> encoded sRGB [0..1].

        Args:
            rgb: Input, shape (N, 3) or (3,).
            clip: If True (default), clamps linear input to [0, 1] first.
        """
        rgb = rgb.astype(np.float64)
        if clip:
            rgb = np.clip(rgb, 0.0, 1.0)
        return _oetf(rgb)

    @staticmethod
    @handle_shapes
    def linear_srgb_to_oklab(rgb: ArrayFloat) -> ArrayFloat:
        return _batch_linear_to_oklab(rgb.astype(np.float64))

    @staticmethod
    @handle_shapes
    def oklab_to_linear_srgb(lab: ArrayFloat) -> ArrayFloat:
        return _batch_oklab_to_linear(lab.astype(np.float64))

    @staticmethod
    @handle_shapes
    def oklab_to_okhsl(lab: ArrayFloat) -> ArrayFloat:
        """Oklab -> Okhsl as (hue, saturation, lightness) columns."""
        return _batch_oklab_to_okhsl(lab.astype(np.float64))

    @staticmethod
    @handle_shapes
    def okhsl_to_oklab(hsl: ArrayFloat) -> ArrayFloat:
        """Okhsl (hue, saturation, lightness) -> Oklab."""
        return _batch_okhsl_to_oklab(hsl.astype(np.float64))

    @staticmethod
    @handle_shapes
    def srgb8_to_okhsl(rgb8: np.ndarray) -> ArrayFloat:
        """Direct conversion sRGB bytes -> Okhsl."""
        idx = np.clip(np.rint(rgb8), 0, 255).astype(np.intp)
        lab = _batch_linear_to_oklab(np.ascontiguousarray(_SRGB8_TO_LINEAR[idx]))
        return _batch_oklab_to_okhsl(lab)

    @staticmethod
    @handle_shapes
    def okhsl_to_srgb8(hsl: ArrayFloat) -> np.ndarray:
        """Direct conversion Okhsl -> sRGB bytes."""
        lab = _batch_okhsl_to_oklab(hsl.astype(np.float64))
        return _batch_linear_to_srgb8(_batch_oklab_to_linear(lab))


# =============================================================================
# 7. SELF-CHECK
# =============================================================================

if __name__ == "__main__":
    print("--- Colorix Color-Space Self-Check ---")

    # 1. Reference value
    print("1. sRGB red -> Oklab...")
    red = linear_srgb_to_oklab(LinSrgb.from_u8((255, 0, 0)))
    expected = np.array([0.627955, 0.224863, 0.125846])
    err = np.max(np.abs(np.array(red) - expected))
    print(f"   {red}  err={err:.2e} {'[PASS]' if err < 1e-5 else '[FAIL]'}")

    # 2. Byte round-trip on a coarse grid
    print("2. Byte round-trip (sRGB -> Oklab -> sRGB)...")
    grid = np.stack(np.meshgrid(*[np.arange(0, 256, 15)] * 3), axis=-1).reshape(-1, 3)
    lab = ColorSpaceEngine.linear_srgb_to_oklab(ColorSpaceEngine.srgb8_to_linear(grid))
    back = ColorSpaceEngine.linear_to_srgb8(ColorSpaceEngine.oklab_to_linear_srgb(lab))
    worst = int(np.max(np.abs(back.astype(int) - grid)))
    print(f"   Max byte error: {worst} {'[PASS]' if worst <= 1 else '[FAIL]'}")

    # 3. Okhsl round-trip
    print("3. Okhsl round-trip...")
    hsl = np.array([[h, s, l] for h in (0.0, 0.25, 0.5, 0.75)
                    for s in (0.1, 0.5, 0.9) for l in (0.2, 0.5, 0.8)])
    hsl_back = ColorSpaceEngine.oklab_to_okhsl(ColorSpaceEngine.okhsl_to_oklab(hsl))
    d_hue = np.abs(hsl_back[:, 0] - hsl[:, 0])
    d_hue = np.minimum(d_hue, 1.0 - d_hue)
    rt_err = max(d_hue.max(), np.abs(hsl_back[:, 1:] - hsl[:, 1:]).max())
    print(f"   Max error: {rt_err:.2e} {'[PASS]' if rt_err < 1e-3 else '[FAIL]'}")

    # 4. Benchmark
    print("4. Benchmarking Okhsl -> Oklab (1M)...")
    bench = np.random.rand(1_000_000, 3)
    t0 = time.perf_counter()
    _ = ColorSpaceEngine.okhsl_to_oklab(bench)
    t1 = time.perf_counter()
    print(f"   Processed {bench.shape[0]:,} colors in {(t1 - t0) * 1000:.2f} ms")
