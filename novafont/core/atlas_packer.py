# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Square atlas layout using a guillotine single-bin packer.

Positions are in pixels with the origin at the top-left of the atlas and
name the top-left of each glyph's area, excluding its distance range
margin.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_EDGE_STEP = 4


@dataclass
class Rectangle:
    x: int
    y: int
    width: int
    height: int


class GlyphPacker:
    """Guillotine packer over a single square bin."""

    def __init__(self, edge_length: int) -> None:
        if edge_length <= 0:
            raise ValueError("edge_length must be more than zero")
        self.edge_length = edge_length
        self.spaces = [Rectangle(0, 0, edge_length, edge_length)]

    def try_pack(self, sizes: list[tuple[int, int]], padding: int) -> list[tuple[int, int]] | None:
        """Place every (width, height) with *padding* around it.

        Returns positions in the order of *sizes*, or None if they do not
        all fit.
        """
        half_padding = padding // 2
        positions: list[tuple[int, int] | None] = [None] * len(sizes)
        remaining = list(range(len(sizes)))

        while remaining:
            space_index, slot = self._find_best_pair(sizes, remaining, padding)
            if space_index < 0:
                return None
            glyph = remaining.pop(slot)
            space = self.spaces[space_index]
            positions[glyph] = (half_padding + space.x, half_padding + space.y)
            width, height = sizes[glyph]
            self._split_space(space_index, width + padding, height + padding)

        return positions

    def _find_best_pair(self, sizes, remaining, padding) -> tuple[int, int]:
        best_space = best_slot = -1
        best_fit = math.inf
        for i, space in enumerate(self.spaces):
            for slot, glyph in enumerate(remaining):
                width = sizes[glyph][0] + padding
                height = sizes[glyph][1] + padding
                if width == space.width and height == space.height:
                    return i, slot
                if width <= space.width and height <= space.height:
                    fit = min(space.width - width, space.height - height)
                    if fit < best_fit:
                        best_fit = fit
                        best_space, best_slot = i, slot
        return best_space, best_slot

    def _split_space(self, index: int, width: int, height: int) -> None:
        space = self.spaces.pop(index)
        below = Rectangle(space.x, space.y + height, width, space.height - height)
        right = Rectangle(space.x + width, space.y, space.width - width, height)

        # Give the leftover strip to whichever split keeps the larger area
        if width * (space.height - height) <= height * (space.width - width):
            below.width = space.width
        else:
            right.height = space.height

        for rect in (below, right):
            if rect.width > 0 and rect.height > 0:
                self.spaces.append(rect)


def pack_atlas(sizes: list[tuple[int, int]], padding: int,
               pixel_range: int) -> tuple[int, list[tuple[int, int]]]:
    """Find the smallest square atlas (in steps of 4 pixels) holding *sizes*.

    Each glyph reserves its distance range margin plus *padding* pixels
    on every side. Returns (edge_length, positions).
    """
    total_padding = (padding + pixel_range) * 2
    total_area = sum((w + total_padding) * (h + total_padding) for w, h in sizes)
    edge_length = math.ceil(math.sqrt(total_area) / _EDGE_STEP) * _EDGE_STEP

    while True:
        edge_length += _EDGE_STEP
        positions = GlyphPacker(edge_length).try_pack(sizes, total_padding)
        if positions is not None:
            logger.debug("Packed %d glyphs into a %dx%d atlas", len(sizes), edge_length, edge_length)
            return edge_length, positions
