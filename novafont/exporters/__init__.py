# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os

from ..core.font_artifact import Font
from .metadata import write_metadata
from .png import write_atlas_png


def export_font(font: Font, output_dir: str, base_name: str) -> tuple[str, str]:
    """Write ``<base_name>.png`` and ``<base_name>.json`` into *output_dir*."""
    png_path = os.path.join(output_dir, f"{base_name}.png")
    json_path = os.path.join(output_dir, f"{base_name}.json")
    write_atlas_png(font, png_path)
    write_metadata(font, json_path, atlas_file=os.path.basename(png_path))
    return png_path, json_path
