# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

"""
PNG Atlas Exporter

Writes a Font's RGBA distance-field atlas to a PNG file using Pillow.
Row 0 of the atlas is the top row of the image.
"""

import logging
import os

from PIL import Image

from ..core.font_artifact import Font

logger = logging.getLogger(__name__)


def atlas_image(font: Font) -> Image.Image:
    """Return the atlas as an RGBA Pillow image."""
    return Image.fromarray(font.atlas)


def write_atlas_png(font: Font, path: str) -> str:
    """
    Write the atlas of *font* to *path*.

    Args:
        font: Imported font whose atlas is an (edge, edge, 4) uint8 array
        path: Destination file name

    Returns:
        The path written.
    """
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    atlas_image(font).save(path, format="PNG")
    logger.debug("Wrote %dx%d atlas to %s", font.atlas_edge_length, font.atlas_edge_length, path)
    return path
