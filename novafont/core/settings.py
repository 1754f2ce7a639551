# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
from dataclasses import dataclass, field

from .edge_colouring import DEFAULT_ANGLE_THRESHOLD

# .notdef plus printable ASCII, space excluded
DEFAULT_CHARACTERS = (0,) + tuple(range(0x21, 0x7F))


def _default_jobs() -> int:
    return os.cpu_count() or 1


@dataclass(frozen=True)
class ImportSettings:
    """Tunables for one font import."""
    max_glyph_height: float = 64.0   # pixels, tallest glyph
    pixel_range: int = 4             # distance range in pixels
    padding: int = 1                 # pixels between atlas cells
    angle_threshold: float = DEFAULT_ANGLE_THRESHOLD
    characters: tuple[int, ...] = DEFAULT_CHARACTERS
    jobs: int = field(default_factory=_default_jobs)
    validate_checksums: bool = True

    def __post_init__(self) -> None:
        if self.max_glyph_height <= 0:
            raise ValueError("max_glyph_height must be positive")
        if self.pixel_range < 1:
            raise ValueError("pixel_range must be at least 1")
        if self.padding < 0:
            raise ValueError("padding cannot be negative")
        if self.jobs < 1:
            raise ValueError("jobs must be at least 1")
