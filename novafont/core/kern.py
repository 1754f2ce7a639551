# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Kerning ('kern') table, format 0 subtables only.

Both header layouts are accepted:

  Microsoft (version 0): uint16 version, uint16 nTables; each subtable
    starts with uint16 version, uint16 length, uint16 coverage where bit 0
    is horizontal, bit 2 cross-stream and the high byte is the format.
  Apple (version 1.0): uint32 version, uint32 nTables; each subtable
    starts with uint32 length, uint16 coverage, uint16 tupleIndex where
    0x8000 is vertical, 0x4000 cross-stream and the low byte is the format.
"""

from __future__ import annotations

import logging

from .binary_cursor import BinaryCursor
from .error import UnsupportedKernFormat

logger = logging.getLogger(__name__)

_MS_HORIZONTAL = 0x0001
_MS_CROSS_STREAM = 0x0004

_APPLE_VERTICAL = 0x8000
_APPLE_CROSS_STREAM = 0x4000


def pack_pair(left: int, right: int) -> int:
    return ((left & 0xFFFF) << 16) | (right & 0xFFFF)


class KernFormat0:
    """Explicit sorted glyph pairs."""

    def __init__(self, pairs: dict[int, int], should_swap: bool = False) -> None:
        self.pairs = pairs
        self.should_swap = should_swap

    @classmethod
    def parse(cls, cursor: BinaryCursor, should_swap: bool) -> KernFormat0:
        n_pairs = cursor.read_uint16()
        cursor.skip(6)  # searchRange, entrySelector, rangeShift
        pairs = {}
        for _ in range(n_pairs):
            left = cursor.read_uint16()
            right = cursor.read_uint16()
            pairs[pack_pair(left, right)] = cursor.read_int16()
        return cls(pairs, should_swap)

    def adjustment(self, left: int, right: int) -> int:
        if self.should_swap:
            left, right = right, left
        return self.pairs.get(pack_pair(left, right), 0)

    def items(self):
        """Yield (left, right, value) as seen by adjustment()."""
        for key, value in self.pairs.items():
            first, second = key >> 16, key & 0xFFFF
            if self.should_swap:
                first, second = second, first
            yield first, second, value


class KernTable:

    def __init__(self, subtables: list[KernFormat0]) -> None:
        self.subtables = subtables

    @classmethod
    def parse(cls, cursor: BinaryCursor, table_offset: int) -> KernTable:
        cursor.seek(table_offset)
        version = cursor.read_uint16()
        if version == 1:
            cursor.skip(2)  # low half of the 1.0 fixed version
            return cls(_parse_apple_subtables(cursor, cursor.read_uint32()))
        return cls(_parse_ms_subtables(cursor, cursor.read_uint16()))

    def adjustment(self, left: int, right: int) -> int:
        """Kerning for the glyph pair in font units, summed over subtables."""
        return sum(subtable.adjustment(left, right) for subtable in self.subtables)

    def __len__(self) -> int:
        return sum(len(subtable.pairs) for subtable in self.subtables)

    def pair_adjustments(self) -> dict[tuple[int, int], int]:
        """Every kerned glyph pair with its summed, non-zero adjustment."""
        totals: dict[tuple[int, int], int] = {}
        for subtable in self.subtables:
            for left, right, value in subtable.items():
                totals[left, right] = totals.get((left, right), 0) + value
        return {pair: value for pair, value in totals.items() if value}


def _parse_ms_subtables(cursor: BinaryCursor, count: int) -> list[KernFormat0]:
    subtables = []
    for _ in range(count):
        start = cursor.position
        _version = cursor.read_uint16()
        length = cursor.read_uint16()
        coverage = cursor.read_uint16()
        fmt = coverage >> 8
        if fmt != 0:
            raise UnsupportedKernFormat(fmt)
        is_vertical = not coverage & _MS_HORIZONTAL
        cross_stream = bool(coverage & _MS_CROSS_STREAM)
        subtables.append(KernFormat0.parse(cursor, is_vertical != cross_stream))
        logger.debug("kern: subtable with %d pairs", len(subtables[-1].pairs))
        # Some fonts store a length that overflows 16 bits; trust the pairs.
        if cursor.position <= start + length <= len(cursor):
            cursor.seek(start + length)
    return subtables


def _parse_apple_subtables(cursor: BinaryCursor, count: int) -> list[KernFormat0]:
    subtables = []
    for _ in range(count):
        start = cursor.position
        length = cursor.read_uint32()
        coverage = cursor.read_uint16()
        _tuple_index = cursor.read_uint16()
        fmt = coverage & 0xFF
        if fmt != 0:
            raise UnsupportedKernFormat(fmt)
        is_vertical = bool(coverage & _APPLE_VERTICAL)
        cross_stream = bool(coverage & _APPLE_CROSS_STREAM)
        subtables.append(KernFormat0.parse(cursor, is_vertical != cross_stream))
        logger.debug("kern: subtable with %d pairs", len(subtables[-1].pairs))
        if cursor.position <= start + length <= len(cursor):
            cursor.seek(start + length)
    return subtables
