# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Font import pipeline: font bytes in, Font artifact out.

The import runs in three phases:

  1. Tables. The whole buffer is parsed sequentially (TrueTypeFont.parse).
  2. Shapes. Every requested character is resolved through the cmap, its
     outline decomposed into coloured edge contours and measured. The
     scale and the atlas layout are fixed here, in this process.
  3. Cells. Distance-field cells are rasterised, in a process pool when
     more than one job is allowed, and copied into the atlas.

Nothing read in phase 1 changes afterwards, so phases 2 and 3 only share
read-only state. The optional cancel_event is checked between glyphs.
"""

from __future__ import annotations

import concurrent.futures
import logging
import math
import threading
from dataclasses import dataclass

import numpy as np

from .atlas_packer import pack_atlas
from .edge_colouring import colour_edges
from .error import DegenerateGlyphOutline, ImportCancelled
from .font_artifact import Font, GlyphData, HorizontalMetrics, LineMetrics
from .msdf import generate_msdf_cell
from .outline import Shape, decompose
from .settings import ImportSettings
from .truetype_font import TrueTypeFont

logger = logging.getLogger(__name__)

_NOTDEF_CODE = 0
_UNNAMED_FONT = "Untitled"


@dataclass
class _PendingGlyph:
    character: str
    glyph_index: int
    shape: Shape
    bounds: tuple[float, float, float, float]
    advance_width: int
    left_side_bearing: int
    width: int = 0
    height: int = 0

    @property
    def is_empty(self) -> bool:
        return self.shape.is_empty


@dataclass(frozen=True)
class _CellTask:
    slot: int
    shape: Shape
    origin: tuple[float, float]
    scale: float
    width: int
    height: int
    pixel_range: int


def _rasterise(task: _CellTask) -> tuple[int, np.ndarray]:
    """Worker entry point; must stay importable at module level."""
    cell = generate_msdf_cell(task.shape, task.origin, task.scale,
                              task.width, task.height, task.pixel_range)
    return task.slot, cell


def _check_cancelled(cancel_event: threading.Event | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise ImportCancelled("font import was cancelled")


def import_font(data: bytes, settings: ImportSettings | None = None,
                cancel_event: threading.Event | None = None,
                name: str | None = None) -> Font:
    """Import a TrueType font buffer into a Font artifact.

    Args:
        data: The complete font file contents.
        settings: Import tunables; defaults to ImportSettings().
        cancel_event: Optional flag checked between glyphs.
        name: Font name to use when the font has no usable name table.

    Raises:
        FontFormatError: A table is malformed or unsupported.
        ImportCancelled: cancel_event was set during the import.
    """
    if settings is None:
        settings = ImportSettings()

    font = TrueTypeFont.parse(data, validate_checksums=settings.validate_checksums)
    font_name = font.font_name() or name or _UNNAMED_FONT

    pending = _collect_glyphs(font, settings, cancel_event)
    scale = _compute_scale(pending, settings.max_glyph_height, font.head.units_per_em)

    for glyph in pending:
        if not glyph.is_empty:
            left, bottom, right, top = glyph.bounds
            glyph.width = _scaled_size(right - left, scale)
            glyph.height = _scaled_size(top - bottom, scale)

    drawn = [glyph for glyph in pending if not glyph.is_empty]
    edge_length, positions = pack_atlas([(g.width, g.height) for g in drawn],
                                        settings.padding, settings.pixel_range)

    atlas = np.zeros((edge_length, edge_length, 4), dtype=np.uint8)
    tasks = [
        _CellTask(slot, glyph.shape, (glyph.bounds[0], glyph.bounds[1]), scale,
                  glyph.width, glyph.height, settings.pixel_range)
        for slot, glyph in enumerate(drawn)
    ]
    for slot, cell in _rasterise_all(tasks, settings.jobs, cancel_event):
        x, y = positions[slot]
        top = y - settings.pixel_range
        left = x - settings.pixel_range
        atlas[top:top + cell.shape[0], left:left + cell.shape[1]] = cell

    slot_of = {id(glyph): slot for slot, glyph in enumerate(drawn)}
    glyphs = []
    for glyph in pending:
        metrics = HorizontalMetrics(round(glyph.advance_width * scale),
                                    round(glyph.left_side_bearing * scale))
        if glyph.is_empty:
            glyphs.append(GlyphData(glyph.character, (0, 0), (0.0, 0.0, 0.0, 0.0), metrics))
            continue
        x, y = positions[slot_of[id(glyph)]]
        cell_width = glyph.width + 2 * settings.pixel_range
        cell_height = glyph.height + 2 * settings.pixel_range
        rect = ((x - settings.pixel_range) / edge_length,
                (y - settings.pixel_range) / edge_length,
                cell_width / edge_length,
                cell_height / edge_length)
        glyphs.append(GlyphData(glyph.character, (cell_width, cell_height), rect, metrics))

    hhea = font.hhea
    result = Font(
        name=font_name,
        max_glyph_height=settings.max_glyph_height,
        pixel_range=settings.pixel_range,
        atlas_edge_length=edge_length,
        atlas=atlas,
        glyphs=glyphs,
        kerning=_collect_kerning(font, pending, scale),
        line_metrics=LineMetrics(round(hhea.ascender * scale),
                                 round(hhea.descender * scale),
                                 round(hhea.line_gap * scale)),
    )
    logger.info("Imported %d glyph(s) from '%s' into a %dx%d atlas",
                len(glyphs), font_name, edge_length, edge_length)
    return result


# ------------------------------------------------------------------
# Phase 2: shapes
# ------------------------------------------------------------------

def _collect_glyphs(font: TrueTypeFont, settings: ImportSettings,
                    cancel_event: threading.Event | None) -> list[_PendingGlyph]:
    pending = []
    for code in dict.fromkeys(settings.characters):
        _check_cancelled(cancel_event)
        character = chr(code)
        glyph_index = font.cmap.resolve(code)
        if glyph_index == 0 and code != _NOTDEF_CODE:
            logger.debug("Character U+%04X is not mapped, skipping", code)
            continue

        try:
            outline = font.glyf.read(glyph_index)
            shape = decompose(outline, character)
        except DegenerateGlyphOutline as e:
            logger.warning("Skipping glyph %r (U+%04X): %s", character, code, e.reason)
            continue

        if not shape.is_empty:
            colour_edges(shape, settings.angle_threshold)
        metric = font.hmtx[glyph_index]
        pending.append(_PendingGlyph(character, glyph_index, shape, shape.bounds(),
                                     metric.advance_width, metric.left_side_bearing))
    return pending


def _compute_scale(pending: list[_PendingGlyph], max_glyph_height: float,
                   units_per_em: int) -> float:
    """Pixels per font unit; the tallest imported glyph gets max_glyph_height."""
    tallest = max((g.bounds[3] - g.bounds[1] for g in pending if not g.is_empty), default=0.0)
    if tallest <= 0:
        tallest = units_per_em or 1
    return max_glyph_height / tallest


def _scaled_size(extent: float, scale: float) -> int:
    # Tolerate float noise so the tallest glyph is exactly max_glyph_height
    return max(math.ceil(extent * scale - 1e-9), 1)


def _collect_kerning(font: TrueTypeFont, pending: list[_PendingGlyph],
                     scale: float) -> dict[tuple[str, str], int]:
    if font.kern is None:
        return {}

    characters_of: dict[int, list[str]] = {}
    for glyph in pending:
        characters_of.setdefault(glyph.glyph_index, []).append(glyph.character)

    kerning = {}
    for (left, right), value in font.kern.pair_adjustments().items():
        if left not in characters_of or right not in characters_of:
            continue
        scaled = round(value * scale)
        if not scaled:
            continue
        for left_char in characters_of[left]:
            for right_char in characters_of[right]:
                kerning[left_char, right_char] = scaled
    return kerning


# ------------------------------------------------------------------
# Phase 3: cells
# ------------------------------------------------------------------

def _rasterise_all(tasks: list[_CellTask], jobs: int,
                   cancel_event: threading.Event | None):
    if jobs == 1 or len(tasks) <= 1:
        # Serial path
        for task in tasks:
            _check_cancelled(cancel_event)
            yield _rasterise(task)
        return

    pool = concurrent.futures.ProcessPoolExecutor(max_workers=min(jobs, len(tasks)))
    try:
        futures = [pool.submit(_rasterise, task) for task in tasks]
        for future in concurrent.futures.as_completed(futures):
            _check_cancelled(cancel_event)
            yield future.result()
    finally:
        pool.shutdown(wait=True, cancel_futures=True)
