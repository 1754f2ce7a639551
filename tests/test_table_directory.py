# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

import struct

import pytest

from novafont.core.error import ChecksumMismatch, FontFormatError, MissingTable, TruncatedStream
from novafont.core.table_directory import TableDirectory, compute_checksum


def test_locate_finds_every_table(triangle_font):
    directory = TableDirectory.parse(triangle_font)
    for tag in ("cmap", "glyf", "head", "hhea", "hmtx", "loca", "maxp"):
        record = directory.locate(tag)
        assert record is not None
        assert record.tag == tag
        assert record.end <= len(triangle_font)


def test_locate_missing_table_returns_none(triangle_font):
    directory = TableDirectory.parse(triangle_font)
    assert directory.locate("kern") is None
    with pytest.raises(MissingTable) as excinfo:
        directory.require("kern")
    assert excinfo.value.tag == "kern"


def test_validate_accepts_correct_checksums(triangle_font):
    TableDirectory.parse(triangle_font).validate(triangle_font)


def test_single_flipped_bit_is_rejected(triangle_font):
    directory = TableDirectory.parse(triangle_font)
    record = directory.locate("glyf")
    corrupt = bytearray(triangle_font)
    corrupt[record.offset + 3] ^= 0x10
    with pytest.raises(ChecksumMismatch) as excinfo:
        directory.validate(bytes(corrupt))
    assert excinfo.value.tag == "glyf"
    assert excinfo.value.expected == record.checksum


def test_head_checksum_adjustment_is_ignored(triangle_font):
    directory = TableDirectory.parse(triangle_font)
    record = directory.locate("head")
    patched = bytearray(triangle_font)
    patched[record.offset + 8:record.offset + 12] = b"\xAB\xCD\xEF\x01"
    directory.validate(bytes(patched))


def test_compute_checksum_pads_final_word():
    assert compute_checksum(b"\x01\x02\x03", 0, 3) == 0x01020300
    assert compute_checksum(b"\xFF\xFF\xFF\xFF\x00\x00\x00\x02", 0, 8) == 1


def test_font_collection_is_rejected():
    data = b"ttcf" + struct.pack(">HHHH", 0, 0, 0, 0)
    with pytest.raises(FontFormatError, match="collections"):
        TableDirectory.parse(data)


def test_unknown_sfnt_version_is_rejected():
    with pytest.raises(FontFormatError, match="sfnt version"):
        TableDirectory.parse(struct.pack(">IHHHH", 0x12345678, 0, 0, 0, 0))


def test_table_past_end_of_buffer(triangle_font):
    directory = TableDirectory.parse(triangle_font)
    last = max(directory.records.values(), key=lambda r: r.end)
    with pytest.raises(TruncatedStream):
        TableDirectory.parse(triangle_font[:last.end - 1])
