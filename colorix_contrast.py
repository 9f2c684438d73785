# -*- coding: utf-8 -*-
"""
Colorix: Perceptual color engine and semantic theme tokens
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Perceptual Contrast (APCA-style)
================================
Lightness-contrast estimate ``Lc`` between a text color and a background,
following the APCA 0.0.98G-4g constants.  The sign encodes polarity:

    Lc > 0   dark text on a light background
    Lc < 0   light text on a dark background

The theme layer uses ``ACCENT_TEXT_THRESHOLD`` to decide whether white text
stays legible on the accent fill.

References:
    - Somers, A. "APCA: Accessible Perceptual Contrast Algorithm", 0.0.98G-4g.
"""

from typing import Final, Sequence, Tuple, Union

import numpy as np
from numba import njit, float64, prange

from colorix_colorspace import ArrayFloat, Color

__all__ = [
    "ACCENT_TEXT_THRESHOLD",
    "estimate_lc",
    "ContrastMetrics",
]

ColorLike = Union[Color, Sequence[int]]

# Below this, white text on the accent fill is considered legible.
ACCENT_TEXT_THRESHOLD: Final[float] = -46.0

# --- APCA 0.0.98G-4g constants ---
_MAIN_TRC: Final[float] = 2.4
_R_CO: Final[float] = 0.2126729
_G_CO: Final[float] = 0.7151522
_B_CO: Final[float] = 0.0721750

_NORM_BG: Final[float] = 0.56
_NORM_TXT: Final[float] = 0.57
_REV_TXT: Final[float] = 0.62
_REV_BG: Final[float] = 0.65

_BLK_THRS: Final[float] = 0.022
_BLK_CLMP: Final[float] = 1.414
_SCALE_BOW: Final[float] = 1.14
_SCALE_WOB: Final[float] = 1.14
_LO_BOW_OFFSET: Final[float] = 0.027
_LO_WOB_OFFSET: Final[float] = 0.027
_DELTA_Y_MIN: Final[float] = 0.0005
_LO_CLIP: Final[float] = 0.1


@njit(float64(float64, float64, float64), cache=True, fastmath=True)
def _screen_luminance(r: float, g: float, b: float) -> float:
    """Estimated screen luminance Y from 8-bit channels, soft-clamped near black."""
    y = (_R_CO * (r / 255.0) ** _MAIN_TRC
         + _G_CO * (g / 255.0) ** _MAIN_TRC
         + _B_CO * (b / 255.0) ** _MAIN_TRC)
    if y < _BLK_THRS:
        y += (_BLK_THRS - y) ** _BLK_CLMP
    return y

@njit(float64(float64, float64, float64, float64, float64, float64), cache=True, fastmath=True)
def _apca_lc(tr: float, tg: float, tb: float, br: float, bg: float, bb: float) -> float:
    """Single-pair APCA Lc, scaled to the usual -108..106 range."""
    y_txt = _screen_luminance(tr, tg, tb)
    y_bg = _screen_luminance(br, bg, bb)

    if abs(y_bg - y_txt) < _DELTA_Y_MIN:
        return 0.0

    if y_bg > y_txt:
        # Normal polarity: dark text on light background.
        sapc = (y_bg ** _NORM_BG - y_txt ** _NORM_TXT) * _SCALE_BOW
        if sapc < _LO_CLIP:
            return 0.0
        return (sapc - _LO_BOW_OFFSET) * 100.0

    # Reverse polarity: light text on dark background.
    sapc = (y_bg ** _REV_BG - y_txt ** _REV_TXT) * _SCALE_WOB
    if sapc > -_LO_CLIP:
        return 0.0
    return (sapc + _LO_WOB_OFFSET) * 100.0

@njit(cache=True, fastmath=True, parallel=True)
def _batch_apca_lc(txt: ArrayFloat, bg: ArrayFloat) -> ArrayFloat:
    n = txt.shape[0]
    res = np.empty(n, dtype=np.float64)
    for i in prange(n):
        res[i] = _apca_lc(txt[i, 0], txt[i, 1], txt[i, 2], bg[i, 0], bg[i, 1], bg[i, 2])
    return res


def _rgb_of(color: ColorLike) -> Tuple[float, float, float]:
    if len(color) < 3:
        raise ValueError(f"Expected at least 3 channels, got {color!r}")
    return float(color[0]), float(color[1]), float(color[2])

def estimate_lc(fg: ColorLike, bg: ColorLike) -> float:
    """
    Estimates perceptual lightness contrast of ``fg`` text on ``bg``.

    Alpha is ignored; both colors are treated as opaque 8-bit sRGB.

    Args:
        fg: Text color (``Color`` or an (r, g, b[, a]) byte sequence).
        bg: Background color.

    Returns:
        Signed Lc.  Zero when the luminance difference is imperceptible.
    """
    return _apca_lc(*_rgb_of(fg), *_rgb_of(bg))


class ContrastMetrics:
    @staticmethod
    def _prepare_inputs(fg: ArrayFloat, bg: ArrayFloat) -> Tuple[ArrayFloat, ArrayFloat]:
        """Broadcasts 1-vs-N and materialises contiguous float64 (N, 3) arrays."""
        f = np.ascontiguousarray(np.atleast_2d(np.asarray(fg, dtype=np.float64))[..., :3])
        b = np.ascontiguousarray(np.atleast_2d(np.asarray(bg, dtype=np.float64))[..., :3])

        if f.ndim != 2 or b.ndim != 2 or f.shape[-1] != 3 or b.shape[-1] != 3:
            raise ValueError(f"Inputs must have shape (N, 3), got {f.shape} and {b.shape}")

        if f.shape[0] != b.shape[0]:
            if f.shape[0] == 1: f = np.ascontiguousarray(np.broadcast_to(f, b.shape))
            elif b.shape[0] == 1: b = np.ascontiguousarray(np.broadcast_to(b, f.shape))
            else: raise ValueError(f"Shapes {f.shape} and {b.shape} are not broadcastable.")
        return f, b

    @staticmethod
    def estimate_lc_batch(fg: ArrayFloat, bg: ArrayFloat) -> ArrayFloat:
        """
        Vectorised ``estimate_lc``.

        Args:
            fg: Text colors, 8-bit channels, shape (N, 3|4) or (3|4,).
            bg: Background colors, same conventions.

        Returns:
            Lc values, shape (N,).  Supports broadcasting (1 vs N).
        """
        f, b = ContrastMetrics._prepare_inputs(fg, bg)
        return _batch_apca_lc(f, b)

    @staticmethod
    def accent_text_is_white(solid_background: ColorLike) -> bool:
        """True when white text stays under ``ACCENT_TEXT_THRESHOLD`` on this fill."""
        return estimate_lc((255, 255, 255), solid_background) <= ACCENT_TEXT_THRESHOLD
