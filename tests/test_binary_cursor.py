# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

import struct

import pytest

from novafont.core.binary_cursor import BinaryCursor
from novafont.core.error import FontFormatError, TruncatedStream


def test_reads_big_endian_and_advances():
    data = struct.pack(">BbHhIi", 0xFE, -2, 0xBEEF, -300, 0xDEADBEEF, -70000)
    cursor = BinaryCursor(data)
    assert cursor.read_uint8() == 0xFE
    assert cursor.read_int8() == -2
    assert cursor.read_uint16() == 0xBEEF
    assert cursor.read_int16() == -300
    assert cursor.read_uint32() == 0xDEADBEEF
    assert cursor.read_int32() == -70000
    assert cursor.position == len(data)


def test_fixed_point_reads():
    cursor = BinaryCursor(struct.pack(">ih", 0x00018000, 0x2000))
    assert cursor.read_fixed() == 1.5
    assert cursor.read_f2dot14() == 0.5


def test_tag_and_bytes():
    cursor = BinaryCursor(b"cmapxyz")
    assert cursor.read_tag() == "cmap"
    assert cursor.read_bytes(3) == b"xyz"


def test_read_past_end_raises_truncated_stream():
    cursor = BinaryCursor(b"\x00")
    with pytest.raises(TruncatedStream) as excinfo:
        cursor.read_uint16()
    assert excinfo.value.position == 0
    assert excinfo.value.wanted == 2
    assert isinstance(excinfo.value, FontFormatError)


def test_seek_out_of_range_raises():
    cursor = BinaryCursor(b"\x00\x01")
    cursor.seek(2)
    with pytest.raises(TruncatedStream):
        cursor.seek(3)
    with pytest.raises(TruncatedStream):
        cursor.skip(-5)


def test_preserved_position_restores_after_error():
    cursor = BinaryCursor(b"\x00\x01\x00\x02")
    cursor.read_uint16()
    with pytest.raises(TruncatedStream):
        with cursor.preserved_position():
            cursor.seek(3)
            cursor.read_uint16()
    assert cursor.position == 2
    assert cursor.peek_uint16() == 2
    assert cursor.position == 2
