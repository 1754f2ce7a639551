# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
TrueType glyph outline reader ('glyf').

Simple glyphs are decoded into contour end indices plus (x, y, on_curve)
points in font units. Composite glyphs are resolved recursively and their
components merged after applying each component's offset and transform.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .binary_cursor import BinaryCursor
from .error import DegenerateGlyphOutline
from .sfnt_tables import LocaTable

logger = logging.getLogger(__name__)

# Simple glyph flags
_ON_CURVE = 0x01
_X_SHORT = 0x02
_Y_SHORT = 0x04
_REPEAT = 0x08
_X_SAME_OR_POSITIVE = 0x10
_Y_SAME_OR_POSITIVE = 0x20

# Composite glyph flags
_ARG_1_AND_2_ARE_WORDS = 0x0001
_ARGS_ARE_XY_VALUES = 0x0002
_WE_HAVE_A_SCALE = 0x0008
_MORE_COMPONENTS = 0x0020
_WE_HAVE_AN_XY_SCALE = 0x0040
_WE_HAVE_A_TWO_BY_TWO = 0x0080
_SCALED_COMPONENT_OFFSET = 0x0800

_MAX_COMPOSITE_DEPTH = 10


@dataclass
class GlyphOutline:
    """Raw contour points of one glyph, in font units."""
    contour_ends: list[int] = field(default_factory=list)
    points: list[tuple[float, float, bool]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.contour_ends

    def contours(self) -> list[list[tuple[float, float, bool]]]:
        result = []
        start = 0
        for end in self.contour_ends:
            result.append(self.points[start:end + 1])
            start = end + 1
        return result


class GlyfReader:
    """Reads glyph outlines on demand, memoised per glyph index."""

    def __init__(self, cursor: BinaryCursor, glyf_offset: int, loca: LocaTable) -> None:
        self._cursor = cursor
        self._glyf_offset = glyf_offset
        self._loca = loca
        self._cache: dict[int, GlyphOutline] = {}

    def read(self, glyph_index: int) -> GlyphOutline:
        return self._read(glyph_index, 0)

    def _read(self, glyph_index: int, depth: int) -> GlyphOutline:
        cached = self._cache.get(glyph_index)
        if cached is not None:
            return cached

        if depth > _MAX_COMPOSITE_DEPTH:
            raise DegenerateGlyphOutline(None, "composite glyph nesting too deep")

        start, length = self._loca.glyph_range(glyph_index)
        if length == 0:
            outline = GlyphOutline()
        else:
            cursor = self._cursor
            with cursor.preserved_position():
                cursor.seek(self._glyf_offset + start)
                number_of_contours = cursor.read_int16()
                cursor.skip(8)  # xMin, yMin, xMax, yMax
                if number_of_contours >= 0:
                    outline = _parse_simple_glyph(cursor, number_of_contours)
                else:
                    outline = self._parse_composite_glyph(cursor, depth)

        self._cache[glyph_index] = outline
        return outline

    def _parse_composite_glyph(self, cursor: BinaryCursor, depth: int) -> GlyphOutline:
        merged = GlyphOutline()
        while True:
            flags = cursor.read_uint16()
            component_index = cursor.read_uint16()

            if not flags & _ARGS_ARE_XY_VALUES:
                raise DegenerateGlyphOutline(None, "composite uses point matching")
            if flags & _ARG_1_AND_2_ARE_WORDS:
                dx = cursor.read_int16()
                dy = cursor.read_int16()
            else:
                dx = cursor.read_int8()
                dy = cursor.read_int8()

            xx, xy, yx, yy = 1.0, 0.0, 0.0, 1.0
            if flags & _WE_HAVE_A_SCALE:
                xx = yy = cursor.read_f2dot14()
            elif flags & _WE_HAVE_AN_XY_SCALE:
                xx = cursor.read_f2dot14()
                yy = cursor.read_f2dot14()
            elif flags & _WE_HAVE_A_TWO_BY_TWO:
                xx = cursor.read_f2dot14()
                xy = cursor.read_f2dot14()
                yx = cursor.read_f2dot14()
                yy = cursor.read_f2dot14()

            if flags & _SCALED_COMPONENT_OFFSET:
                dx, dy = dx * xx + dy * xy, dx * yx + dy * yy

            component = self._read(component_index, depth + 1)
            base = len(merged.points)
            merged.contour_ends.extend(end + base for end in component.contour_ends)
            merged.points.extend(
                (x * xx + y * xy + dx, x * yx + y * yy + dy, on_curve)
                for x, y, on_curve in component.points
            )

            if not flags & _MORE_COMPONENTS:
                break
        return merged


def _parse_simple_glyph(cursor: BinaryCursor, number_of_contours: int) -> GlyphOutline:
    """Decode a simple glyph from just after its 10-byte header."""
    if number_of_contours == 0:
        return GlyphOutline()

    contour_ends = [cursor.read_uint16() for _ in range(number_of_contours)]
    num_points = contour_ends[-1] + 1

    instruction_length = cursor.read_uint16()
    cursor.skip(instruction_length)

    flags = []
    while len(flags) < num_points:
        flag = cursor.read_uint8()
        flags.append(flag)
        if flag & _REPEAT:
            flags.extend([flag] * cursor.read_uint8())
    del flags[num_points:]

    xs = _read_coordinates(cursor, flags, _X_SHORT, _X_SAME_OR_POSITIVE)
    ys = _read_coordinates(cursor, flags, _Y_SHORT, _Y_SAME_OR_POSITIVE)
    points = [(x, y, bool(flag & _ON_CURVE)) for x, y, flag in zip(xs, ys, flags)]
    return GlyphOutline(contour_ends, points)


def _read_coordinates(cursor: BinaryCursor, flags: list[int],
                      short_bit: int, same_bit: int) -> list[int]:
    values = []
    value = 0
    for flag in flags:
        if flag & short_bit:
            delta = cursor.read_uint8()
            value += delta if flag & same_bit else -delta
        elif not flag & same_bit:
            value += cursor.read_int16()
        values.append(value)
    return values
