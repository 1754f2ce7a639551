# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

import logging
import threading

import numpy as np
import pytest

from novafont.core.edge_colouring import DEFAULT_ANGLE_THRESHOLD
from novafont.core.error import (
    ChecksumMismatch, FontFormatError, ImportCancelled, MissingTable,
)
from novafont.core.font_importer import import_font
from novafont.core.settings import ImportSettings
from novafont.core.table_directory import TableDirectory
from sfnt_builder import (
    SQUARE, TRIANGLE, build_font, build_sfnt, cmap_format0, cmap_table, head_table,
    kern_table_ms,
)


@pytest.fixture
def two_glyph_font() -> bytes:
    cmap = cmap_table([(3, 1, cmap_format0({65: 1, 66: 2, 32: 3}))])
    return build_font([[], TRIANGLE, SQUARE, []], cmap=cmap,
                      metrics=[(600, 0), (520, 10), (540, 20), (250, 0)])


def test_single_glyph(triangle_font, serial_settings):
    font = import_font(triangle_font, serial_settings)
    assert [g.character for g in font.glyphs] == ["A"]
    glyph = font.glyph("A")
    assert glyph.size == (54, 72)
    x, y, w, h = glyph.atlas_rect
    assert w > 0 and h > 0
    assert 0 <= x and x + w <= 1
    assert 0 <= y and y + h <= 1
    assert font.atlas.shape == (font.atlas_edge_length, font.atlas_edge_length, 4)
    assert font.atlas.any()


def test_tallest_glyph_height_matches_setting(two_glyph_font):
    font = import_font(two_glyph_font, ImportSettings(characters=(65, 66), jobs=1,
                                                      max_glyph_height=32, pixel_range=2))
    # the triangle is the tallest; the range margin is added on both sides
    assert font.glyph("A").size[1] == 32 + 4
    assert font.glyph("B").size[1] == 23 + 4


def test_cell_lands_where_rect_points(triangle_font, serial_settings):
    font = import_font(triangle_font, serial_settings)
    glyph = font.glyph("A")
    edge = font.atlas_edge_length
    x, y, w, h = (round(v * edge) for v in glyph.atlas_rect)
    cell = font.atlas[y:y + h, x:x + w]
    assert cell[h // 2, w // 2, 3] > 127
    outside = np.ones(font.atlas.shape[:2], dtype=bool)
    outside[y:y + h, x:x + w] = False
    assert not font.atlas[outside].any()


def test_default_characters_include_notdef(triangle_font):
    font = import_font(triangle_font, ImportSettings(jobs=1))
    characters = [g.character for g in font.glyphs]
    assert characters == ["\x00", "A"]
    notdef = font.glyph("\x00")
    assert notdef.is_empty
    assert notdef.atlas_rect == (0.0, 0.0, 0.0, 0.0)


def test_empty_glyph_keeps_metrics(two_glyph_font):
    font = import_font(two_glyph_font, ImportSettings(characters=(32, 65), jobs=1))
    space = font.glyph(" ")
    assert space.is_empty
    assert space.metrics.advance_width == round(250 * 64 / 700)


def test_metrics_are_scaled(two_glyph_font):
    font = import_font(two_glyph_font, ImportSettings(characters=(65, 66), jobs=1))
    scale = 64 / 700
    assert font.glyph("A").metrics.advance_width == round(520 * scale)
    assert font.glyph("B").metrics.left_side_bearing == round(20 * scale)
    assert font.line_metrics.ascender == round(800 * scale)
    assert font.line_metrics.descender == round(-200 * scale)
    assert font.line_metrics.line_gap == round(90 * scale)


def test_unmapped_characters_are_skipped(triangle_font):
    font = import_font(triangle_font, ImportSettings(characters=(66, 65, 65), jobs=1))
    assert [g.character for g in font.glyphs] == ["A"]


def test_degenerate_glyph_is_skipped_with_warning(caplog):
    cmap = cmap_table([(3, 1, cmap_format0({65: 1, 66: 2}))])
    data = build_font([[], TRIANGLE, [[(5, 5, True)]]], cmap=cmap)
    with caplog.at_level(logging.WARNING, logger="novafont.core.font_importer"):
        font = import_font(data, ImportSettings(characters=(65, 66), jobs=1))
    assert [g.character for g in font.glyphs] == ["A"]
    assert any("Skipping glyph 'B'" in r.getMessage() for r in caplog.records)


def test_kerning_is_scaled_and_keyed_by_character():
    cmap = cmap_table([(3, 1, cmap_format0({65: 1, 66: 2}))])
    kern = kern_table_ms([({(1, 2): -100, (2, 1): 3}, 0x0001)])
    data = build_font([[], TRIANGLE, SQUARE], cmap=cmap, kern=kern)
    font = import_font(data, ImportSettings(characters=(65, 66), jobs=1))
    assert font.kerning == {("A", "B"): round(-100 * 64 / 700)}
    assert font.kerning_for("A", "B") == -9
    assert font.kerning_for("B", "A") == 0


def test_kerning_for_characters_not_imported_is_dropped():
    cmap = cmap_table([(3, 1, cmap_format0({65: 1, 66: 2}))])
    kern = kern_table_ms([({(1, 2): -100}, 0x0001)])
    data = build_font([[], TRIANGLE, SQUARE], cmap=cmap, kern=kern)
    font = import_font(data, ImportSettings(characters=(65,), jobs=1))
    assert font.kerning == {}


def test_cancelled_import(triangle_font, serial_settings):
    cancel = threading.Event()
    cancel.set()
    with pytest.raises(ImportCancelled):
        import_font(triangle_font, serial_settings, cancel_event=cancel)


def test_checksum_mismatch(triangle_font, serial_settings):
    damaged = bytearray(triangle_font)
    damaged[TableDirectory.parse(triangle_font).require("hhea").offset + 9] ^= 0x01
    with pytest.raises(ChecksumMismatch):
        import_font(bytes(damaged), serial_settings)

    unchecked = ImportSettings(characters=(65,), jobs=1, validate_checksums=False)
    font = import_font(bytes(damaged), unchecked)
    assert font.glyph("A") is not None


def test_missing_required_table():
    data = build_sfnt({"head": head_table()})
    with pytest.raises(MissingTable) as excinfo:
        import_font(data, ImportSettings(jobs=1))
    assert excinfo.value.tag == "cmap"


def test_cff_outlines_are_rejected():
    data = build_sfnt({"CFF ": b"\x01\x00\x04\x01", "head": head_table()}, sfnt_version=0x4F54544F)
    with pytest.raises(FontFormatError, match="CFF"):
        import_font(data, ImportSettings(jobs=1))


def test_process_pool_matches_serial(two_glyph_font):
    characters = (65, 66)
    serial = import_font(two_glyph_font, ImportSettings(characters=characters, jobs=1))
    parallel = import_font(two_glyph_font, ImportSettings(characters=characters, jobs=2))
    assert parallel.glyphs == serial.glyphs
    assert np.array_equal(parallel.atlas, serial.atlas)


def test_font_name_sources(triangle_font, named_triangle_font, serial_settings):
    assert import_font(named_triangle_font, serial_settings).name == "Test Sans Regular"
    assert import_font(named_triangle_font, serial_settings, name="file").name == "Test Sans Regular"
    assert import_font(triangle_font, serial_settings, name="file").name == "file"
    assert import_font(triangle_font, serial_settings).name == "Untitled"


@pytest.mark.parametrize("overrides", [
    {"max_glyph_height": 0},
    {"pixel_range": 0},
    {"padding": -1},
    {"jobs": 0},
])
def test_invalid_settings(overrides):
    with pytest.raises(ValueError):
        ImportSettings(**overrides)


def test_default_angle_threshold_follows_edge_colouring():
    assert ImportSettings().angle_threshold == DEFAULT_ANGLE_THRESHOLD
