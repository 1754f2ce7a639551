# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest

from novafont.core.settings import ImportSettings
from sfnt_builder import TRIANGLE, build_font, cmap_format0, cmap_table, name_table


@pytest.fixture
def triangle_font() -> bytes:
    """Glyph 0 empty, glyph 1 a triangle; format 0 cmap maps 'A' to glyph 1."""
    return build_font([[], TRIANGLE])


@pytest.fixture
def named_triangle_font() -> bytes:
    names = name_table([
        (3, 1, 0x409, 1, "Test Sans"),
        (3, 1, 0x409, 2, "Regular"),
        (3, 1, 0x409, 4, "Test Sans Regular"),
    ])
    cmap = cmap_table([(3, 1, cmap_format0({65: 1}))])
    return build_font([[], TRIANGLE], cmap=cmap, name=names)


@pytest.fixture
def serial_settings() -> ImportSettings:
    return ImportSettings(characters=(65,), jobs=1)
