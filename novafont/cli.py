#!/usr/bin/env python3
# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
NovaFont - command line entry point.

Usage:
    novafont DejaVuSans.ttf
    novafont --chars 32-126,0xA0-0xFF -o sans --output-dir assets DejaVuSans.ttf
    novafont --find "DejaVu Sans"
"""

from __future__ import annotations

import logging
import os
import sys

from .cli_args import _parse_char_ranges, build_argument_parser, get_output_base_name
from .core.error import FontError
from .core.font_importer import import_font
from .core.settings import ImportSettings
from .core.system_font_cache import SystemFontCache
from .exporters import export_font

logger = logging.getLogger(__name__)


def _error(message: str) -> int:
    print(f"novafont: error: {message}", file=sys.stderr)
    return 1


def _build_settings(args) -> ImportSettings:
    """Map parsed arguments onto ImportSettings; unset flags keep defaults."""
    overrides = {}
    if args.chars:
        overrides["characters"] = tuple(_parse_char_ranges(args.chars))
    if args.max_glyph_height is not None:
        overrides["max_glyph_height"] = args.max_glyph_height
    if args.pixel_range is not None:
        overrides["pixel_range"] = args.pixel_range
    if args.padding is not None:
        overrides["padding"] = args.padding
    if args.angle_threshold is not None:
        overrides["angle_threshold"] = args.angle_threshold
    if args.jobs is not None:
        overrides["jobs"] = args.jobs
    if args.no_checksum:
        overrides["validate_checksums"] = False
    return ImportSettings(**overrides)


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the NovaFont converter.

    Returns:
        Exit code: 0 for success, 1 for error
    """
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.rebuild_font_cache:
        cache = SystemFontCache.get_instance()
        cache.rebuild()
        print(f"System font cache rebuilt: {cache.font_count()} fonts found")
        return 0

    fontfile = args.fontfile
    if args.find:
        fontfile = SystemFontCache.get_instance().get_font_path(args.find)
        if fontfile is None:
            return _error(f"no installed font named '{args.find}'")
        logger.info("Resolved '%s' to %s", args.find, fontfile)
    if not fontfile:
        parser.error("a font file or --find NAME is required")

    try:
        settings = _build_settings(args)
    except ValueError as e:
        parser.error(str(e))

    base_name = get_output_base_name(args.outputfile, args.fontfile, args.find)

    try:
        with open(fontfile, "rb") as f:
            data = f.read()
        font = import_font(data, settings,
                           name=os.path.splitext(os.path.basename(fontfile))[0])
        png_path, json_path = export_font(font, args.output_dir, base_name)
    except FontError as e:
        return _error(str(e))
    except OSError as e:
        return _error(f"{e.filename or fontfile}: {e.strerror or e}")

    print(f"{font.name}: {len(font.glyphs)} glyphs -> {png_path}, {json_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
