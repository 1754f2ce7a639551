# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
The exported font: atlas pixels plus per-glyph placement and metrics.

This is the only structure handed to exporters; every table parsed on the
way is discarded once a Font exists.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


@dataclass(frozen=True)
class HorizontalMetrics:
    advance_width: int
    left_side_bearing: int


@dataclass(frozen=True)
class LineMetrics:
    ascender: int
    descender: int
    line_gap: int


@dataclass(frozen=True)
class GlyphData:
    character: str
    size: tuple[int, int]                          # cell pixels, range margin included
    atlas_rect: tuple[float, float, float, float]  # x, y, width, height as atlas fractions
    metrics: HorizontalMetrics

    @property
    def is_empty(self) -> bool:
        return self.size == (0, 0)


@dataclass
class Font:
    name: str
    max_glyph_height: float
    pixel_range: int
    atlas_edge_length: int
    atlas: np.ndarray                              # (edge, edge, 4) uint8 RGBA
    glyphs: list[GlyphData] = field(default_factory=list)
    kerning: dict[tuple[str, str], int] = field(default_factory=dict)
    line_metrics: LineMetrics = LineMetrics(0, 0, 0)

    def glyph(self, character: str) -> GlyphData | None:
        for glyph in self.glyphs:
            if glyph.character == character:
                return glyph
        return None

    def kerning_for(self, left: str, right: str) -> int:
        return self.kerning.get((left, right), 0)
