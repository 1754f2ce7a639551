# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Character to glyph index mapping ('cmap').

Only one subtable is ever parsed: the encoding records are ranked by
platform/encoding and format, and the winner is read lazily. Supported
subtable formats are 0 (byte encoding table) and 4 (segment mapping to
delta values).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .binary_cursor import BinaryCursor
from .error import UnsupportedCmapFormat

logger = logging.getLogger(__name__)

# Platform IDs
PLATFORM_UNICODE = 0
PLATFORM_MACINTOSH = 1
PLATFORM_WINDOWS = 3

# Lower rank wins. The platform class is compared first, then the format,
# then the encoding rank. Unknown platform/encoding pairs are never selected.
_UNICODE_CLASS = 0
_SYMBOL_CLASS = 1
_MACINTOSH_CLASS = 2

_ENCODING_RANK = {
    (PLATFORM_WINDOWS, 1): (_UNICODE_CLASS, 0),     # Unicode BMP
    (PLATFORM_WINDOWS, 10): (_UNICODE_CLASS, 1),    # Unicode full repertoire
    (PLATFORM_UNICODE, 4): (_UNICODE_CLASS, 2),
    (PLATFORM_UNICODE, 3): (_UNICODE_CLASS, 2),
    (PLATFORM_UNICODE, 6): (_UNICODE_CLASS, 2),
    (PLATFORM_UNICODE, 2): (_UNICODE_CLASS, 3),
    (PLATFORM_UNICODE, 1): (_UNICODE_CLASS, 3),
    (PLATFORM_UNICODE, 0): (_UNICODE_CLASS, 3),
    (PLATFORM_WINDOWS, 0): (_SYMBOL_CLASS, 0),
    (PLATFORM_MACINTOSH, 0): (_MACINTOSH_CLASS, 0),   # Roman
}

# Format 4 covers the whole BMP; format 0 only codes 0-255.
_FORMAT_RANK = {4: 0, 0: 1}


@dataclass(frozen=True)
class EncodingRecord:
    platform_id: int
    encoding_id: int
    offset: int  # from the start of the cmap table


class CmapSubtable:
    """A parsed character map subtable."""

    format = -1

    def resolve(self, character_code: int) -> int:
        raise NotImplementedError


class CmapFormat0(CmapSubtable):
    """Dense 256-entry byte array."""

    format = 0

    def __init__(self, glyph_ids: bytes, language: int = 0) -> None:
        self.glyph_ids = glyph_ids
        self.language = language

    @classmethod
    def parse(cls, cursor: BinaryCursor) -> CmapFormat0:
        """Parse from just after the format field."""
        _length = cursor.read_uint16()
        language = cursor.read_uint16()
        return cls(cursor.read_bytes(256), language)

    def resolve(self, character_code: int) -> int:
        if 0 <= character_code < 256:
            return self.glyph_ids[character_code]
        return 0


@dataclass
class Segment:
    start_code: int = 0
    end_code: int = 0
    id_delta: int = 0
    # Absolute buffer position of the glyph id for start_code, or 0 when
    # the glyph id is derived from id_delta.
    id_range_offset: int = 0


class CmapFormat4(CmapSubtable):
    """Segment mapping to delta values.

    Glyph ids reached through idRangeOffset are read from the font buffer
    on demand, so results are memoised per character code.
    """

    format = 4

    def __init__(self, cursor: BinaryCursor, segments: list[Segment], language: int = 0) -> None:
        self._cursor = cursor
        self.segments = segments
        self.language = language
        self._cache: dict[int, int] = {}

    @classmethod
    def parse(cls, cursor: BinaryCursor) -> CmapFormat4:
        """Parse from just after the format field.

        The four per-segment arrays are stored one after another, so the
        cursor must walk endCode, reservedPad, startCode, idDelta and
        idRangeOffset in exactly that order.
        """
        _length = cursor.read_uint16()
        language = cursor.read_uint16()
        segment_count = cursor.read_uint16() // 2
        cursor.skip(6)  # searchRange, entrySelector, rangeShift

        segments = [Segment(end_code=cursor.read_uint16()) for _ in range(segment_count)]
        cursor.skip(2)  # reservedPad
        for segment in segments:
            segment.start_code = cursor.read_uint16()
        for segment in segments:
            segment.id_delta = cursor.read_int16()
        for segment in segments:
            id_range_offset = cursor.read_uint16()
            if id_range_offset:
                # Relative to the idRangeOffset field itself.
                segment.id_range_offset = cursor.position - 2 + id_range_offset

        return cls(cursor, segments, language)

    def resolve(self, character_code: int) -> int:
        cached = self._cache.get(character_code)
        if cached is not None:
            return cached

        glyph_index = 0
        for segment in self.segments:
            if segment.start_code > character_code or segment.end_code < character_code:
                continue
            if segment.id_range_offset:
                address = segment.id_range_offset + 2 * (character_code - segment.start_code)
                with self._cursor.preserved_position():
                    self._cursor.seek(address)
                    glyph_index = self._cursor.read_uint16()
                if glyph_index:
                    glyph_index = (glyph_index + segment.id_delta) & 0xFFFF
            else:
                glyph_index = (segment.id_delta + character_code) & 0xFFFF
            break

        self._cache[character_code] = glyph_index
        return glyph_index


_SUBTABLE_PARSERS = {
    0: CmapFormat0.parse,
    4: CmapFormat4.parse,
}


class CmapTable:
    """Encoding records plus the one subtable selected for lookups."""

    def __init__(self, version: int, encoding_records: list[EncodingRecord],
                 selected: EncodingRecord, subtable: CmapSubtable) -> None:
        self.version = version
        self.encoding_records = encoding_records
        self.selected = selected
        self.subtable = subtable

    @classmethod
    def parse(cls, cursor: BinaryCursor, table_offset: int) -> CmapTable:
        cursor.seek(table_offset)
        version = cursor.read_uint16()
        num_records = cursor.read_uint16()
        records = [
            EncodingRecord(cursor.read_uint16(), cursor.read_uint16(), cursor.read_uint32())
            for _ in range(num_records)
        ]

        best = None
        best_key = None
        first_format = None
        for index, record in enumerate(records):
            rank = _ENCODING_RANK.get((record.platform_id, record.encoding_id))
            if rank is None:
                continue
            platform_class, encoding_rank = rank
            with cursor.preserved_position():
                cursor.seek(table_offset + record.offset)
                fmt = cursor.read_uint16()
            if first_format is None:
                first_format = fmt
            format_rank = _FORMAT_RANK.get(fmt)
            if format_rank is None:
                continue
            key = (platform_class, format_rank, encoding_rank, index)
            if best_key is None or key < best_key:
                best_key = key
                best = (record, fmt)

        if best is None:
            raise UnsupportedCmapFormat(first_format if first_format is not None else -1)

        record, fmt = best
        cursor.seek(table_offset + record.offset + 2)
        subtable = _SUBTABLE_PARSERS[fmt](cursor)
        logger.debug("cmap: using platform %d encoding %d format %d",
                     record.platform_id, record.encoding_id, fmt)
        return cls(version, records, record, subtable)

    def resolve(self, character_code: int) -> int:
        """Glyph index for *character_code*; 0 (.notdef) when unmapped."""
        return self.subtable.resolve(character_code)
