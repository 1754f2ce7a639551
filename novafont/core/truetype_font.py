# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
All tables of a TrueType font buffer, parsed sequentially up front.

After TrueTypeFont.parse returns nothing in it is mutated except the
per-code and per-glyph memo caches, so it can be read freely by the
glyph pipeline.
"""

from __future__ import annotations

import logging

from .binary_cursor import BinaryCursor
from .cmap import CmapTable
from .error import FontFormatError
from .glyf import GlyfReader
from .kern import KernTable
from .name_table import NameTable
from .sfnt_tables import HeadTable, HheaTable, HmtxTable, LocaTable, MaxpTable
from .table_directory import TableDirectory

logger = logging.getLogger(__name__)

REQUIRED_TABLES = ('cmap', 'head', 'hhea', 'hmtx', 'maxp', 'loca', 'glyf')


class TrueTypeFont:

    def __init__(self, directory: TableDirectory, head: HeadTable, hhea: HheaTable,
                 maxp: MaxpTable, hmtx: HmtxTable, loca: LocaTable, cmap: CmapTable,
                 glyf: GlyfReader, kern: KernTable | None = None,
                 name: NameTable | None = None) -> None:
        self.directory = directory
        self.head = head
        self.hhea = hhea
        self.maxp = maxp
        self.hmtx = hmtx
        self.loca = loca
        self.cmap = cmap
        self.glyf = glyf
        self.kern = kern
        self.name = name

    @classmethod
    def parse(cls, data: bytes, validate_checksums: bool = True) -> TrueTypeFont:
        directory = TableDirectory.parse(data)
        if 'glyf' not in directory and ('CFF ' in directory or 'CFF2' in directory):
            raise FontFormatError("fonts with CFF outlines are not supported")
        for tag in REQUIRED_TABLES:
            directory.require(tag)
        if validate_checksums:
            directory.validate(data)

        cursor = BinaryCursor(data)
        head = HeadTable.parse(cursor, directory.require('head').offset)
        hhea = HheaTable.parse(cursor, directory.require('hhea').offset)
        maxp = MaxpTable.parse(cursor, directory.require('maxp').offset)
        hmtx = HmtxTable.parse(cursor, directory.require('hmtx').offset,
                               hhea.number_of_h_metrics, maxp.num_glyphs)
        loca = LocaTable.parse(cursor, directory.require('loca').offset,
                               maxp.num_glyphs, head.index_to_loc_format)
        cmap = CmapTable.parse(cursor, directory.require('cmap').offset)

        kern_record = directory.locate('kern')
        kern = KernTable.parse(cursor, kern_record.offset) if kern_record else None
        name_record = directory.locate('name')
        name = NameTable.parse(cursor, name_record.offset) if name_record else None

        # Glyph outlines are read lazily through their own cursor
        glyf = GlyfReader(BinaryCursor(data), directory.require('glyf').offset, loca)

        logger.debug("Parsed font: %d glyphs, %d units/em, %d kerning pairs",
                     maxp.num_glyphs, head.units_per_em, len(kern) if kern else 0)
        return cls(directory, head, hhea, maxp, hmtx, loca, cmap, glyf, kern, name)

    def font_name(self) -> str | None:
        return self.name.font_name() if self.name is not None else None
