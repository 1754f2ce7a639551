# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

"""
JSON Metadata Exporter

Serialises everything in a Font except the atlas pixels: name, sizes,
line metrics, the glyph list in import order and kerning pairs. The atlas
is referenced by file name.
"""

import json
import logging
import os

from ..core.font_artifact import Font, GlyphData

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


def _glyph_to_dict(glyph: GlyphData) -> dict:
    return {
        "character": glyph.character,
        "codepoint": ord(glyph.character),
        "size": list(glyph.size),
        "atlasRect": list(glyph.atlas_rect),
        "advanceWidth": glyph.metrics.advance_width,
        "leftSideBearing": glyph.metrics.left_side_bearing,
    }


def font_to_dict(font: Font, atlas_file: str | None = None) -> dict:
    return {
        "formatVersion": FORMAT_VERSION,
        "name": font.name,
        "maxGlyphHeight": font.max_glyph_height,
        "pixelRange": font.pixel_range,
        "atlasEdgeLength": font.atlas_edge_length,
        "atlas": atlas_file,
        "lineMetrics": {
            "ascender": font.line_metrics.ascender,
            "descender": font.line_metrics.descender,
            "lineGap": font.line_metrics.line_gap,
        },
        "glyphs": [_glyph_to_dict(glyph) for glyph in font.glyphs],
        "kerning": [
            {"left": left, "right": right, "adjustment": value}
            for (left, right), value in sorted(font.kerning.items())
        ],
    }


def write_metadata(font: Font, path: str, atlas_file: str | None = None) -> str:
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(font_to_dict(font, atlas_file), f, indent=2, ensure_ascii=False)
    logger.debug("Wrote metadata for %d glyph(s) to %s", len(font.glyphs), path)
    return path
