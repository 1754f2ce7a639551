# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

import json

import pytest

from novafont.core.system_font_cache import SystemFontCache, extract_font_name
from sfnt_builder import TRIANGLE, build_font


@pytest.fixture
def font_dir(tmp_path, named_triangle_font):
    fonts = tmp_path / "fonts"
    (fonts / "sub").mkdir(parents=True)
    (fonts / "sub" / "TestSans.ttf").write_bytes(named_triangle_font)
    (fonts / "Unnamed.ttf").write_bytes(build_font([[], TRIANGLE]))
    (fonts / "broken.ttf").write_bytes(b"not a font")
    (fonts / "notes.txt").write_text("ignored")
    return fonts


@pytest.fixture
def cache(tmp_path, font_dir):
    return SystemFontCache(cache_file=str(tmp_path / "cache" / "fonts.json"),
                           font_dirs=[str(font_dir), str(tmp_path / "missing")])


def test_extract_font_name(font_dir):
    assert extract_font_name(str(font_dir / "sub" / "TestSans.ttf")) == "Test Sans Regular"
    assert extract_font_name(str(font_dir / "Unnamed.ttf")) is None


def test_lookup(cache, font_dir):
    path = cache.get_font_path("Test Sans Regular")
    assert path == str(font_dir / "sub" / "TestSans.ttf")
    assert cache.font_count() == 1


def test_lookup_is_case_insensitive(cache, font_dir):
    assert cache.get_font_path("TEST SANS REGULAR") == str(font_dir / "sub" / "TestSans.ttf")
    assert cache.get_font_path("Other") is None


def test_cache_is_persisted_and_reloaded(tmp_path, cache, font_dir):
    cache.rebuild()
    cache_file = tmp_path / "cache" / "fonts.json"
    data = json.loads(cache_file.read_text(encoding="utf-8"))
    assert data["fonts"] == {"Test Sans Regular": str(font_dir / "sub" / "TestSans.ttf")}

    reloaded = SystemFontCache(cache_file=str(cache_file), font_dirs=[str(font_dir)])
    assert reloaded.get_font_path("Test Sans Regular") is not None


def test_stale_cache_is_rebuilt(tmp_path, font_dir, named_triangle_font):
    cache_file = tmp_path / "cache.json"
    cache_file.write_text(json.dumps({"version": 1, "dir_mtimes": {}, "fonts": {"Ghost": "/x"}}),
                          encoding="utf-8")
    cache = SystemFontCache(cache_file=str(cache_file), font_dirs=[str(font_dir)])
    assert cache.get_font_path("Ghost") is None
    assert cache.get_font_path("Test Sans Regular") is not None
