# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest

from novafont.core.edge_segments import LinearSegment, QuadraticSegment
from novafont.core.error import DegenerateGlyphOutline
from novafont.core.glyf import GlyphOutline
from novafont.core.outline import decompose
from sfnt_builder import SQUARE, TRIANGLE


def _outline(*contours):
    ends = []
    points = []
    for contour in contours:
        points.extend(contour)
        ends.append(len(points) - 1)
    return GlyphOutline(ends, points)


def _assert_closed(contour):
    edges = contour.edges
    for edge, following in zip(edges, edges[1:] + edges[:1]):
        assert edge.end == following.start


def test_triangle_becomes_three_lines():
    shape = decompose(_outline(TRIANGLE[0]), "A")
    assert len(shape.contours) == 1
    edges = shape.contours[0].edges
    assert [type(e) for e in edges] == [LinearSegment] * 3
    assert edges[0].start == (0.0, 0.0)
    _assert_closed(shape.contours[0])


def test_implied_on_curve_midpoints():
    shape = decompose(_outline([(0, 0, True), (100, 200, False), (200, 200, False), (300, 0, True)]))
    edges = shape.contours[0].edges
    assert [type(e) for e in edges] == [QuadraticSegment, QuadraticSegment, LinearSegment]
    assert edges[0].end == (150.0, 200.0)
    _assert_closed(shape.contours[0])


def test_contour_starting_off_curve():
    shape = decompose(_outline([(100, 200, False), (200, 0, True), (0, 0, True)]))
    edges = shape.contours[0].edges
    assert edges[0].start == (200.0, 0.0)
    assert isinstance(edges[-1], QuadraticSegment)
    assert edges[-1].points[1] == (100.0, 200.0)
    _assert_closed(shape.contours[0])


def test_duplicate_points_are_dropped():
    shape = decompose(_outline([(0, 0, True), (0, 0, True), (250, 700, True), (500, 0, True)]))
    assert len(shape.contours[0]) == 3


def test_quadratic_with_control_on_endpoint_is_linear():
    shape = decompose(_outline([(0, 0, True), (0, 0, False), (500, 0, True), (250, 700, True)]))
    edges = shape.contours[0].edges
    assert all(isinstance(e, LinearSegment) for e in edges)
    assert edges[0].points == ((0.0, 0.0), (500.0, 0.0))


def test_multiple_contours_and_bounds():
    shape = decompose(_outline(TRIANGLE[0], [(x + 600, y - 100, on) for x, y, on in SQUARE[0]]))
    assert len(shape.contours) == 2
    assert shape.bounds() == (0.0, -100.0, 1100.0, 700.0)


def test_empty_outline_gives_empty_shape():
    shape = decompose(GlyphOutline(), " ")
    assert shape.is_empty
    assert shape.bounds() == (0.0, 0.0, 0.0, 0.0)


def test_zero_height_outline_is_degenerate():
    with pytest.raises(DegenerateGlyphOutline) as excinfo:
        decompose(_outline([(0, 0, True), (500, 0, True)]), "-")
    assert excinfo.value.character == "-"
    assert "zero height" in excinfo.value.reason


def test_single_point_contour_is_degenerate():
    with pytest.raises(DegenerateGlyphOutline, match="no contour has any edges"):
        decompose(_outline([(5, 5, True)]), ".")


def test_single_point_contour_beside_real_one_is_dropped():
    shape = decompose(_outline(TRIANGLE[0], [(5, 5, True)]))
    assert len(shape.contours) == 1
