# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Big-endian binary cursor over an in-memory font buffer.

Several sfnt structures (cmap format 4 in particular) store parallel arrays
column-major, so the parse is order dependent and has to track a single
running position. BinaryCursor owns that position; callers that need to
jump elsewhere and come back use preserved_position().
"""

from __future__ import annotations

import struct
from contextlib import contextmanager
from typing import Iterator

from .error import TruncatedStream

_UINT8 = struct.Struct('>B')
_INT8 = struct.Struct('>b')
_UINT16 = struct.Struct('>H')
_INT16 = struct.Struct('>h')
_UINT32 = struct.Struct('>I')
_INT32 = struct.Struct('>i')


class BinaryCursor:
    """Sequential reader with an explicit, restorable position."""

    __slots__ = ('data', 'position')

    def __init__(self, data: bytes, position: int = 0) -> None:
        self.data = data
        self.position = position

    def __len__(self) -> int:
        return len(self.data)

    # ------------------------------------------------------------------
    # Positioning
    # ------------------------------------------------------------------

    def seek(self, position: int) -> None:
        if position < 0 or position > len(self.data):
            raise TruncatedStream(position, 0, len(self.data) - position)
        self.position = position

    def skip(self, count: int) -> None:
        self.seek(self.position + count)

    @contextmanager
    def preserved_position(self) -> Iterator[BinaryCursor]:
        """Restore the current position when the block exits."""
        saved = self.position
        try:
            yield self
        finally:
            self.position = saved

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _unpack(self, fmt: struct.Struct) -> int:
        offset = self.position
        if offset + fmt.size > len(self.data):
            raise TruncatedStream(offset, fmt.size, len(self.data) - offset)
        self.position = offset + fmt.size
        return fmt.unpack_from(self.data, offset)[0]

    def read_uint8(self) -> int:
        return self._unpack(_UINT8)

    def read_int8(self) -> int:
        return self._unpack(_INT8)

    def read_uint16(self) -> int:
        return self._unpack(_UINT16)

    def read_int16(self) -> int:
        return self._unpack(_INT16)

    def read_uint32(self) -> int:
        return self._unpack(_UINT32)

    def read_int32(self) -> int:
        return self._unpack(_INT32)

    def read_fixed(self) -> float:
        """16.16 signed fixed-point number."""
        return self._unpack(_INT32) / 65536.0

    def read_f2dot14(self) -> float:
        """2.14 signed fixed-point number (composite glyph scales)."""
        return self._unpack(_INT16) / 16384.0

    def read_bytes(self, count: int) -> bytes:
        offset = self.position
        if count < 0 or offset + count > len(self.data):
            raise TruncatedStream(offset, count, len(self.data) - offset)
        self.position = offset + count
        return bytes(self.data[offset:offset + count])

    def read_tag(self) -> str:
        return self.read_bytes(4).decode('latin-1')

    def peek_uint16(self) -> int:
        with self.preserved_position():
            return self.read_uint16()
