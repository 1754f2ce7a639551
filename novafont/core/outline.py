# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Glyph outline decomposition into closed contours of edge segments.

TrueType contours are quadratic B-splines: two consecutive off-curve
points imply an on-curve point halfway between them, and the contour
closes back onto its first point.
"""

from __future__ import annotations

import logging

from .edge_segments import EdgeSegment, LinearSegment, QuadraticSegment
from .error import DegenerateGlyphOutline
from .glyf import GlyphOutline

logger = logging.getLogger(__name__)


class Contour:
    """Closed loop of edges; each edge ends where the next one starts."""

    __slots__ = ('edges',)

    def __init__(self, edges: list[EdgeSegment] | None = None) -> None:
        self.edges = edges if edges is not None else []

    def __len__(self) -> int:
        return len(self.edges)

    def __iter__(self):
        return iter(self.edges)


class Shape:
    """All contours of one glyph."""

    def __init__(self, contours: list[Contour] | None = None) -> None:
        self.contours = contours if contours is not None else []

    @property
    def is_empty(self) -> bool:
        return not any(self.contours)

    def edges(self):
        for contour in self.contours:
            yield from contour.edges

    def bounds(self) -> tuple[float, float, float, float]:
        """(left, bottom, right, top) over every edge control point."""
        xs = [x for edge in self.edges() for x, _ in edge.points]
        ys = [y for edge in self.edges() for _, y in edge.points]
        if not xs:
            return (0.0, 0.0, 0.0, 0.0)
        return (min(xs), min(ys), max(xs), max(ys))


def decompose(outline: GlyphOutline, character: str | None = None) -> Shape:
    """Build the edge contours of *outline*.

    An outline without contours yields an empty Shape (e.g. space). An
    outline whose contours produce no usable edges, or whose edges have no
    height, raises DegenerateGlyphOutline.
    """
    shape = Shape()
    if outline.is_empty:
        return shape

    for points in outline.contours():
        edges = _contour_edges(points)
        if edges:
            shape.contours.append(Contour(edges))
        else:
            logger.debug("Dropping empty contour of %d point(s) in glyph %r",
                         len(points), character)

    if shape.is_empty:
        raise DegenerateGlyphOutline(character, "no contour has any edges")
    _, bottom, _, top = shape.bounds()
    if top - bottom <= 0:
        raise DegenerateGlyphOutline(character, "outline has zero height")
    return shape


def _contour_edges(points: list[tuple[float, float, bool]]) -> list[EdgeSegment]:
    count = len(points)
    if count < 2:
        return []

    # Make implied on-curve midpoints explicit
    expanded = []
    for i, (x, y, on_curve) in enumerate(points):
        expanded.append((float(x), float(y), on_curve))
        nx, ny, next_on_curve = points[(i + 1) % count]
        if not on_curve and not next_on_curve:
            expanded.append(((x + nx) / 2.0, (y + ny) / 2.0, True))

    # Start on an on-curve point
    first_on = next(i for i, p in enumerate(expanded) if p[2])
    expanded = expanded[first_on:] + expanded[:first_on]

    edges: list[EdgeSegment] = []
    total = len(expanded)
    i = 0
    while i < total:
        start = expanded[i][:2]
        following = expanded[(i + 1) % total]
        if following[2]:
            edge = _linear(start, following[:2])
            i += 1
        else:
            end = expanded[(i + 2) % total][:2]
            edge = _quadratic(start, following[:2], end)
            i += 2
        if edge is not None:
            edges.append(edge)
    return edges


def _linear(p0, p1) -> EdgeSegment | None:
    if p0 == p1:
        return None
    return LinearSegment(p0, p1)


def _quadratic(p0, p1, p2) -> EdgeSegment | None:
    if p1 == p0 or p1 == p2:
        return _linear(p0, p2)
    return QuadraticSegment(p0, p1, p2)
