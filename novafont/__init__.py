# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
NovaFont - offline font asset pipeline.

Parses TrueType font tables and converts glyph outlines into a
multi-channel signed distance field atlas for GPU text rendering.
"""

__version__ = "0.1.0"
