# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Font import errors.

Table and subtable errors derive from FontFormatError and abort the whole
import. DegenerateGlyphOutline sits outside that branch; the importer
catches it per glyph and leaves the glyph out.
"""

from __future__ import annotations


class FontError(Exception):
    """Base class for every error raised while importing a font."""
    pass


class FontFormatError(FontError):
    """A font table is malformed or uses a format we cannot read."""
    pass


class MissingTable(FontFormatError):
    """A table required for import is absent from the table directory."""

    def __init__(self, tag: str) -> None:
        super().__init__(f"font doesn't contain required table '{tag}'")
        self.tag = tag


class ChecksumMismatch(FontFormatError):
    """A table's recomputed checksum differs from its directory entry."""

    def __init__(self, tag: str, expected: int, actual: int) -> None:
        super().__init__(
            f"table '{tag}' has invalid checksum "
            f"(expected 0x{expected:08X}, got 0x{actual:08X})"
        )
        self.tag = tag
        self.expected = expected
        self.actual = actual


class UnsupportedCmapFormat(FontFormatError):
    def __init__(self, format_id: int) -> None:
        super().__init__(f"unsupported cmap format {format_id}")
        self.format_id = format_id


class UnsupportedKernFormat(FontFormatError):
    def __init__(self, format_id: int) -> None:
        super().__init__(f"unsupported kern format {format_id}")
        self.format_id = format_id


class TruncatedStream(FontFormatError):
    """A read ran past the end of the font buffer."""

    def __init__(self, position: int, wanted: int, available: int) -> None:
        super().__init__(
            f"truncated font data: wanted {wanted} byte(s) at offset "
            f"0x{position:X}, only {max(available, 0)} available"
        )
        self.position = position
        self.wanted = wanted


class DegenerateGlyphOutline(FontError):
    """A glyph outline cannot be turned into closed edge contours."""

    def __init__(self, character: str | None, reason: str) -> None:
        label = repr(character) if character is not None else "<unknown>"
        super().__init__(f"glyph {label} has a degenerate outline: {reason}")
        self.character = character
        self.reason = reason


class ImportCancelled(FontError):
    """The caller's cancel flag was observed between glyphs."""
    pass
