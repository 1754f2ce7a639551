# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
CLI argument parsing for NovaFont.

Handles command-line argument definition, parsing, character range
specifications, and output file naming.
"""

from __future__ import annotations

import argparse
import os

from . import __version__
from .core.edge_colouring import DEFAULT_ANGLE_THRESHOLD

_MAX_CODE_POINT = 0x10FFFF


def _parse_code_point(text: str, part: str) -> int:
    try:
        code = int(text.strip(), 0)
    except ValueError:
        raise ValueError(f"Invalid character code: '{part}'")
    if code < 0 or code > _MAX_CODE_POINT:
        raise ValueError(f"Character code out of range: '{part}'")
    return code


def _parse_char_ranges(spec: str) -> list[int]:
    """Parse a character range specification into an ordered list of codes.

    Supports single codes (``65``), ranges (``32-126``), hexadecimal
    (``0x400-0x4FF``), and comma-separated combinations. Codes keep the
    order they are first given in; duplicates are dropped.

    Args:
        spec: Character range string, e.g. ``"0,33-126,0xA0-0xFF"``

    Returns:
        List of integer character codes.

    Raises:
        ValueError: If the specification is malformed.
    """
    codes: dict[int, None] = {}
    for part in spec.split(","):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            bounds = part.split("-", 1)
            if not bounds[0].strip() or not bounds[1].strip():
                raise ValueError(f"Invalid character range: '{part}'")
            start = _parse_code_point(bounds[0], part)
            end = _parse_code_point(bounds[1], part)
            if start > end:
                raise ValueError(f"Invalid character range (start > end): '{part}'")
            codes.update(dict.fromkeys(range(start, end + 1)))
        else:
            codes[_parse_code_point(part, part)] = None
    if not codes:
        raise ValueError("Empty character range specification")
    return list(codes)


def get_output_base_name(outputfile: str | None, fontfile: str | None,
                         font_name: str | None = None) -> str:
    """
    Derive output base name from command-line arguments.

    Args:
        outputfile: The -o argument value (or None)
        fontfile: The input font file (or None)
        font_name: Name used with --find (or None)

    Returns:
        Base name for output files (without extension)
    """
    if outputfile:
        # Extract base name from -o argument (remove path and extension)
        base = os.path.basename(outputfile)
        return os.path.splitext(base)[0]
    elif fontfile:
        base = os.path.basename(fontfile)
        return os.path.splitext(base)[0]
    elif font_name:
        return font_name.replace(" ", "_")
    else:
        return "font"


def build_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the NovaFont argument parser.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="novafont",
        description="NovaFont - TrueType to MSDF font atlas converter",
        epilog="Writes <name>.png (RGBA atlas) and <name>.json (glyph metadata).",
    )

    parser.add_argument(
        "-V", "--version", action="version",
        version=f"NovaFont {__version__}"
    )
    parser.add_argument("fontfile", nargs="?", help="TrueType font file to import")
    parser.add_argument(
        "-o", "--output", dest="outputfile",
        help="Output base name (extension ignored; default: font file name)"
    )
    parser.add_argument(
        "--output-dir", dest="output_dir", default="nf_output",
        help="Specify output directory (default: nf_output)"
    )
    parser.add_argument(
        "--chars",
        help="Character codes to import (e.g., 32-126, 0x400-0x4FF, 0,65-90); "
             "default: 0 and 33-126"
    )
    parser.add_argument(
        "--max-glyph-height", type=float,
        help="Height in pixels of the tallest glyph (default: 64)"
    )
    parser.add_argument(
        "--pixel-range", type=int,
        help="Distance field range in pixels (default: 4)"
    )
    parser.add_argument(
        "--padding", type=int,
        help="Pixels between atlas cells (default: 1)"
    )
    parser.add_argument(
        "--angle-threshold", type=float,
        help="Corner angle threshold in radians for edge colouring "
             f"(default: {DEFAULT_ANGLE_THRESHOLD})"
    )
    parser.add_argument(
        "-j", "--jobs", type=int,
        help="Number of worker processes for rasterisation (default: CPU count)"
    )
    parser.add_argument(
        "--no-checksum", action="store_true",
        help="Skip table checksum validation"
    )
    parser.add_argument(
        "--find", metavar="NAME",
        help="Import an installed system font by name instead of a file"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "--rebuild-font-cache", action="store_true",
        help="Force rebuild of the system font discovery cache (font name to file path mapping) and exit"
    )

    return parser
