# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Fixed-layout metric tables: head, hhea, maxp, hmtx and loca.
"""

from __future__ import annotations

from dataclasses import dataclass

from .binary_cursor import BinaryCursor
from .error import FontFormatError

_HEAD_MAGIC = 0x5F0F3CF5

_MAXP_VERSION_0_5 = 0x00005000
_MAXP_VERSION_1_0 = 0x00010000


# ------------------------------------------------------------------
# head
# ------------------------------------------------------------------

@dataclass(frozen=True)
class HeadTable:
    units_per_em: int
    x_min: int
    y_min: int
    x_max: int
    y_max: int
    index_to_loc_format: int

    @classmethod
    def parse(cls, cursor: BinaryCursor, offset: int) -> HeadTable:
        cursor.seek(offset)
        cursor.skip(8)  # version, fontRevision
        cursor.skip(4)  # checksumAdjustment
        magic = cursor.read_uint32()
        if magic != _HEAD_MAGIC:
            raise FontFormatError(f"head table has bad magic number 0x{magic:08X}")
        cursor.skip(2)  # flags
        units_per_em = cursor.read_uint16()
        cursor.skip(16)  # created, modified
        x_min = cursor.read_int16()
        y_min = cursor.read_int16()
        x_max = cursor.read_int16()
        y_max = cursor.read_int16()
        cursor.skip(6)  # macStyle, lowestRecPPEM, fontDirectionHint
        index_to_loc_format = cursor.read_int16()
        if index_to_loc_format not in (0, 1):
            raise FontFormatError(f"invalid indexToLocFormat {index_to_loc_format}")
        return cls(units_per_em, x_min, y_min, x_max, y_max, index_to_loc_format)


# ------------------------------------------------------------------
# hhea
# ------------------------------------------------------------------

@dataclass(frozen=True)
class HheaTable:
    ascender: int
    descender: int
    line_gap: int
    number_of_h_metrics: int

    @classmethod
    def parse(cls, cursor: BinaryCursor, offset: int) -> HheaTable:
        cursor.seek(offset)
        cursor.skip(4)  # version
        ascender = cursor.read_int16()
        descender = cursor.read_int16()
        line_gap = cursor.read_int16()
        # advanceWidthMax .. metricDataFormat
        cursor.skip(2 + 2 * 3 + 2 * 3 + 2 * 4 + 2)
        number_of_h_metrics = cursor.read_uint16()
        return cls(ascender, descender, line_gap, number_of_h_metrics)


# ------------------------------------------------------------------
# maxp
# ------------------------------------------------------------------

@dataclass(frozen=True)
class MaxpTable:
    num_glyphs: int

    @classmethod
    def parse(cls, cursor: BinaryCursor, offset: int) -> MaxpTable:
        cursor.seek(offset)
        version = cursor.read_uint32()
        if version not in (_MAXP_VERSION_0_5, _MAXP_VERSION_1_0):
            raise FontFormatError(f"unsupported maxp version 0x{version:08X}")
        return cls(cursor.read_uint16())


# ------------------------------------------------------------------
# hmtx
# ------------------------------------------------------------------

@dataclass(frozen=True)
class HorizontalMetric:
    advance_width: int
    left_side_bearing: int


class HmtxTable:
    """Per-glyph advance widths and left side bearings.

    Glyphs past numberOfHMetrics only store a bearing and share the last
    full record's advance width (monospaced tails).
    """

    def __init__(self, metrics: list[HorizontalMetric]) -> None:
        self.metrics = metrics

    @classmethod
    def parse(cls, cursor: BinaryCursor, offset: int,
              number_of_h_metrics: int, num_glyphs: int) -> HmtxTable:
        if number_of_h_metrics == 0 and num_glyphs:
            raise FontFormatError("hhea declares no horizontal metrics")
        cursor.seek(offset)
        metrics = [
            HorizontalMetric(cursor.read_uint16(), cursor.read_int16())
            for _ in range(number_of_h_metrics)
        ]
        if metrics:
            last_advance = metrics[-1].advance_width
            for _ in range(max(num_glyphs - number_of_h_metrics, 0)):
                metrics.append(HorizontalMetric(last_advance, cursor.read_int16()))
        return cls(metrics)

    def __getitem__(self, glyph_index: int) -> HorizontalMetric:
        if glyph_index < len(self.metrics):
            return self.metrics[glyph_index]
        return self.metrics[-1]


# ------------------------------------------------------------------
# loca
# ------------------------------------------------------------------

class LocaTable:
    """Glyph data offsets into glyf; numGlyphs + 1 entries."""

    def __init__(self, offsets: list[int]) -> None:
        self.offsets = offsets

    @classmethod
    def parse(cls, cursor: BinaryCursor, offset: int,
              num_glyphs: int, index_to_loc_format: int) -> LocaTable:
        cursor.seek(offset)
        if index_to_loc_format == 0:
            offsets = [cursor.read_uint16() * 2 for _ in range(num_glyphs + 1)]
        else:
            offsets = [cursor.read_uint32() for _ in range(num_glyphs + 1)]
        return cls(offsets)

    def glyph_range(self, glyph_index: int) -> tuple[int, int]:
        """(start, length) of the glyph within glyf; length 0 means empty."""
        if glyph_index < 0 or glyph_index + 1 >= len(self.offsets):
            raise FontFormatError(f"glyph index {glyph_index} out of range")
        start = self.offsets[glyph_index]
        return start, max(self.offsets[glyph_index + 1] - start, 0)
