# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

"""
System font cache: scans platform font directories for installed TrueType
fonts, reads each font's display name from its name table, and persists
the mapping in a JSON cache file.

Supported font formats:
  .ttf / .otf : sfnt fonts with glyf outlines (CFF-flavoured .otf files
               are skipped since they cannot be imported)
"""

import json
import logging
import os
import sys

from .binary_cursor import BinaryCursor
from .error import FontError
from .name_table import NameTable
from .table_directory import TableDirectory

logger = logging.getLogger(__name__)

# Platform-specific font directories
_FONT_DIRS = {
    "linux": [
        "/usr/share/fonts",
        "/usr/local/share/fonts",
        os.path.expanduser("~/.local/share/fonts"),
        os.path.expanduser("~/.fonts"),
    ],
    "darwin": [
        "/System/Library/Fonts",
        "/Library/Fonts",
        os.path.expanduser("~/Library/Fonts"),
    ],
    "win32": [
        os.path.join(os.environ.get("WINDIR", r"C:\Windows"), "Fonts"),
    ],
}

# Supported file extensions (lowercase, with dot)
_SUPPORTED_EXTENSIONS = frozenset({".ttf", ".otf"})

# Cache file location
_CACHE_DIR = os.path.join(os.path.expanduser("~"), ".cache", "novafont")
_CACHE_FILE = os.path.join(_CACHE_DIR, "system_fonts.json")

_CACHE_VERSION = 1


class SystemFontCache:
    """Singleton cache mapping font display names to system font file paths."""

    _instance = None

    def __init__(self, cache_file: str = _CACHE_FILE,
                 font_dirs: list[str] | None = None) -> None:
        self._cache_file = cache_file
        self._font_dirs = font_dirs
        self._fonts: dict[str, str] = {}        # {font_name: file_path}
        self._dir_mtimes: dict[str, float] = {}   # {dir_path: mtime}
        self._loaded: bool = False

    @classmethod
    def get_instance(cls) -> SystemFontCache:
        """Return the singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def get_font_path(self, font_name: str) -> str | None:
        """Look up a system font by display name.

        An exact match wins; otherwise the first case-insensitive match is
        returned. Rebuilds the cache automatically if stale or not yet
        loaded.
        """
        if not self._loaded:
            self._load_or_rebuild()
        elif not self._is_fresh():
            self.rebuild()

        path = self._fonts.get(font_name)
        if path is not None:
            return path
        folded = font_name.casefold()
        for name, candidate in self._fonts.items():
            if name.casefold() == folded:
                return candidate
        return None

    def rebuild(self) -> None:
        """Force a full rescan of system font directories and persist the cache."""
        self._fonts.clear()
        self._dir_mtimes.clear()

        for d in self._get_font_dirs():
            if os.path.isdir(d):
                try:
                    self._dir_mtimes[d] = os.stat(d).st_mtime
                except OSError:
                    continue
                self._scan_directory(d)

        self._persist()
        self._loaded = True
        logger.info("System font cache rebuilt: %d fonts found", len(self._fonts))

    def font_count(self) -> int:
        """Return the number of cached fonts."""
        return len(self._fonts)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _get_font_dirs(self) -> list[str]:
        if self._font_dirs is not None:
            return self._font_dirs
        return _get_platform_font_dirs()

    def _load_or_rebuild(self) -> None:
        """Load cache from disk if fresh, otherwise rebuild."""
        if os.path.exists(self._cache_file):
            try:
                with open(self._cache_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
                if data.get("version") != _CACHE_VERSION:
                    self.rebuild()
                    return
                self._dir_mtimes = data.get("dir_mtimes", {})
                self._fonts = data.get("fonts", {})
                self._loaded = True
                if not self._is_fresh():
                    self.rebuild()
                return
            except (json.JSONDecodeError, KeyError, TypeError, OSError) as exc:
                logger.debug("Ignoring unreadable font cache %s: %s", self._cache_file, exc)
        self.rebuild()

    def _is_fresh(self) -> bool:
        """Check whether cached directory mtimes match current filesystem."""
        existing_dirs = {d for d in self._get_font_dirs() if os.path.isdir(d)}

        # Check for new or removed directories
        if existing_dirs != set(self._dir_mtimes):
            return False

        for d in existing_dirs:
            try:
                current_mtime = os.stat(d).st_mtime
            except OSError:
                return False
            if self._dir_mtimes.get(d) != current_mtime:
                return False

        return True

    def _persist(self) -> None:
        """Write the cache to disk as JSON."""
        try:
            os.makedirs(os.path.dirname(self._cache_file), exist_ok=True)
            data = {
                "version": _CACHE_VERSION,
                "dir_mtimes": self._dir_mtimes,
                "fonts": self._fonts,
            }
            with open(self._cache_file, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as exc:
            logger.warning("Could not write system font cache: %s", exc)

    def _scan_directory(self, root: str) -> None:
        """Recursively scan *root* for font files and read their names."""
        for dirpath, _dirnames, filenames in os.walk(root):
            for fname in sorted(filenames):
                ext = os.path.splitext(fname)[1].lower()
                if ext not in _SUPPORTED_EXTENSIONS:
                    continue
                full_path = os.path.join(dirpath, fname)
                try:
                    name = extract_font_name(full_path)
                except (FontError, OSError) as exc:
                    logger.debug("Skipping %s: %s", full_path, exc)
                    continue
                # First font found wins
                if name and name not in self._fonts:
                    self._fonts[name] = full_path


# ------------------------------------------------------------------
# Platform helper
# ------------------------------------------------------------------

def _get_platform_font_dirs() -> list[str]:
    """Return the list of font directories for the current platform."""
    if sys.platform.startswith("linux"):
        key = "linux"
    elif sys.platform == "darwin":
        key = "darwin"
    elif sys.platform == "win32":
        key = "win32"
    else:
        key = "linux"  # best guess
    return _FONT_DIRS.get(key, [])


# ------------------------------------------------------------------
# Font name extraction
# ------------------------------------------------------------------

def extract_font_name(path: str) -> str | None:
    """Display name of the font at *path*, or None if it has none.

    Fonts without glyf outlines return None.
    """
    with open(path, "rb") as f:
        data = f.read()

    directory = TableDirectory.parse(data)
    if "glyf" not in directory:
        return None
    record = directory.locate("name")
    if record is None:
        return None
    return NameTable.parse(BinaryCursor(data), record.offset).font_name()
