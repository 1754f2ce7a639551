# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
sfnt table directory and table checksum validation.

Layout (all big-endian):
  uint32 sfntVersion, uint16 numTables, uint16 searchRange,
  uint16 entrySelector, uint16 rangeShift, then numTables records of
  Tag tag, uint32 checksum, uint32 offset, uint32 length.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass

from .binary_cursor import BinaryCursor
from .error import ChecksumMismatch, FontFormatError, MissingTable, TruncatedStream

logger = logging.getLogger(__name__)

# Accepted sfntVersion values: TrueType 1.0, Apple 'true', OpenType CFF
_SFNT_VERSIONS = frozenset({0x00010000, 0x74727565, 0x4F54544F})
_COLLECTION_TAG = 0x74746366  # 'ttcf'

# Byte range of head.checksumAdjustment, excluded from the head checksum
_HEAD_ADJUSTMENT_START = 8
_HEAD_ADJUSTMENT_END = 12


@dataclass(frozen=True)
class TableRecord:
    tag: str
    checksum: int
    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length


def compute_checksum(data: bytes, offset: int, length: int, *, is_head: bool = False) -> int:
    """Sum the table as big-endian uint32 words with 32-bit wraparound.

    The final partial word is zero padded. For the head table the
    checksumAdjustment word is treated as zero.
    """
    end = offset + length
    if end > len(data):
        raise TruncatedStream(offset, length, len(data) - offset)

    table = bytearray(data[offset:end])
    if is_head and len(table) >= _HEAD_ADJUSTMENT_END:
        table[_HEAD_ADJUSTMENT_START:_HEAD_ADJUSTMENT_END] = b'\x00\x00\x00\x00'
    remainder = len(table) % 4
    if remainder:
        table.extend(b'\x00' * (4 - remainder))

    total = 0
    for (word,) in struct.iter_unpack('>I', table):
        total = (total + word) & 0xFFFFFFFF
    return total


class TableDirectory:
    """The table directory of a single (non-collection) sfnt font."""

    def __init__(self, sfnt_version: int, records: dict[str, TableRecord]) -> None:
        self.sfnt_version = sfnt_version
        self.records = records

    @classmethod
    def parse(cls, data: bytes) -> TableDirectory:
        cursor = BinaryCursor(data)
        sfnt_version = cursor.read_uint32()
        if sfnt_version == _COLLECTION_TAG:
            raise FontFormatError("font collections are not supported")
        if sfnt_version not in _SFNT_VERSIONS:
            raise FontFormatError(f"unknown sfnt version 0x{sfnt_version:08X}")

        num_tables = cursor.read_uint16()
        cursor.skip(6)  # searchRange, entrySelector, rangeShift

        records: dict[str, TableRecord] = {}
        for _ in range(num_tables):
            tag = cursor.read_tag()
            checksum = cursor.read_uint32()
            offset = cursor.read_uint32()
            length = cursor.read_uint32()
            record = TableRecord(tag, checksum, offset, length)
            if record.end > len(data):
                raise TruncatedStream(offset, length, len(data) - offset)
            records[tag] = record

        logger.debug("Table directory: %d tables (%s)", len(records), " ".join(records))
        return cls(sfnt_version, records)

    def locate(self, tag: str) -> TableRecord | None:
        """Return the record for *tag*, or None when the font lacks it."""
        return self.records.get(tag)

    def require(self, tag: str) -> TableRecord:
        record = self.records.get(tag)
        if record is None:
            raise MissingTable(tag)
        return record

    def __contains__(self, tag: str) -> bool:
        return tag in self.records

    def validate(self, data: bytes) -> None:
        """Recompute every table checksum; the first mismatch is fatal."""
        for record in self.records.values():
            actual = compute_checksum(data, record.offset, record.length,
                                      is_head=record.tag == 'head')
            if actual != record.checksum:
                raise ChecksumMismatch(record.tag, record.checksum, actual)
