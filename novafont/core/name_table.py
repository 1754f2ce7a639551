# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Naming table ('name').

Header: uint16 version, uint16 count, uint16 storageOffset, then count
name records of six uint16 each (platformID, encodingID, languageID,
nameID, length, offset). Version 1 appends uint16 langTagCount and
(length, offset) language-tag records. Strings live in a shared storage
area and are only decoded when asked for.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .binary_cursor import BinaryCursor

logger = logging.getLogger(__name__)


class NameId:
    COPYRIGHT = 0
    FAMILY = 1
    SUBFAMILY = 2
    UNIQUE_ID = 3
    FULL_NAME = 4
    VERSION = 5
    POSTSCRIPT_NAME = 6


_PLATFORM_UNICODE = 0
_PLATFORM_MACINTOSH = 1
_PLATFORM_WINDOWS = 3

# Lookup preference when the same name id is stored for several platforms
_PLATFORM_PREFERENCE = (_PLATFORM_WINDOWS, _PLATFORM_UNICODE, _PLATFORM_MACINTOSH)


@dataclass(frozen=True)
class NameRecord:
    platform_id: int
    encoding_id: int
    language_id: int
    name_id: int
    length: int
    offset: int  # from the start of string storage


@dataclass(frozen=True)
class LanguageTagRecord:
    length: int
    offset: int


def decode_name(platform_id: int, raw: bytes) -> str:
    if platform_id == _PLATFORM_MACINTOSH:
        return raw.decode('utf-8', errors='replace')
    return raw.decode('utf-16-be', errors='replace')


class NameTable:

    def __init__(self, cursor: BinaryCursor, storage_start: int, version: int,
                 records: list[NameRecord], language_tags: list[LanguageTagRecord]) -> None:
        self._cursor = cursor
        self._storage_start = storage_start
        self.version = version
        self.records = records
        self.language_tags = language_tags

    @classmethod
    def parse(cls, cursor: BinaryCursor, table_offset: int) -> NameTable:
        cursor.seek(table_offset)
        version = cursor.read_uint16()
        count = cursor.read_uint16()
        storage_offset = cursor.read_uint16()
        records = [
            NameRecord(*(cursor.read_uint16() for _ in range(6)))
            for _ in range(count)
        ]
        language_tags = []
        if version >= 1:
            tag_count = cursor.read_uint16()
            language_tags = [
                LanguageTagRecord(cursor.read_uint16(), cursor.read_uint16())
                for _ in range(tag_count)
            ]
        logger.debug("name: %d records, %d language tags", len(records), len(language_tags))
        return cls(cursor, table_offset + storage_offset, version, records, language_tags)

    def _read_storage(self, offset: int, length: int) -> bytes:
        with self._cursor.preserved_position():
            self._cursor.seek(self._storage_start + offset)
            return self._cursor.read_bytes(length)

    def read_string(self, record: NameRecord) -> str:
        return decode_name(record.platform_id, self._read_storage(record.offset, record.length))

    def language_tag(self, index: int) -> str:
        """BCP 47 tag for a languageID of 0x8000 + index (always UTF-16BE)."""
        record = self.language_tags[index]
        return self._read_storage(record.offset, record.length).decode('utf-16-be', errors='replace')

    def get(self, name_id: int) -> str | None:
        """Best available string for *name_id*, or None."""
        candidates = [r for r in self.records if r.name_id == name_id]
        for platform_id in _PLATFORM_PREFERENCE:
            for record in candidates:
                if record.platform_id == platform_id:
                    text = self.read_string(record)
                    if text:
                        return text
        return None

    def font_name(self) -> str | None:
        """Display name: full name, else "Family (Subfamily)", else PostScript name."""
        full_name = self.get(NameId.FULL_NAME)
        if full_name:
            return full_name
        family = self.get(NameId.FAMILY)
        if family:
            subfamily = self.get(NameId.SUBFAMILY)
            return f"{family} ({subfamily})" if subfamily else family
        return self.get(NameId.POSTSCRIPT_NAME)
