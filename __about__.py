# -*- coding: utf-8 -*-
# Colorix: Perceptual color engine and semantic theme tokens
#
# Copyright (c) 2026 opticsWolf
#
# SPDX-License-Identifier: LGPL-3.0-or-later

"""
Project metadata for Colorix.
"""

from typing import Final

# Metadata Definitions
__title__: Final[str] = "Colorix"
__description__: Final[str] = (
    "Oklab/Okhsl color engine with a Halley gamut solver, APCA contrast "
    "gating and a 12-slot semantic theme token system."
)
__version__: Final[str] = "0.1.0"
__author__: Final[str] = "opticsWolf"
__license__: Final[str] = "LGPL-3.0-or-later"
__copyright__: Final[str] = "Copyright (c) 2026 opticsWolf"

def metadata_summary() -> dict[str, str]:
    """Returns a dictionary of project metadata for introspection."""
    return {
        "title": __title__,
        "version": __version__,
        "license": __license__,
        "description": __description__,
        "copyright": __copyright__,
    }
