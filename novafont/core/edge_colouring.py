# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Edge colouring for multi-channel distance fields.

Edges meeting at a corner must not share all their channels, otherwise
the median of the three channels rounds the corner off. Smooth runs of
edges between corners share one colour.
"""

from __future__ import annotations

import math

from .edge_segments import EdgeColour, EdgeSegment, Point
from .outline import Shape

DEFAULT_ANGLE_THRESHOLD = 3.0  # radians

_PRIMARY_COLOURS = (EdgeColour.RED, EdgeColour.GREEN, EdgeColour.BLUE)


def _normalise(vector: Point) -> Point:
    length = math.hypot(vector[0], vector[1])
    if length == 0:
        return (0.0, 0.0)
    return (vector[0] / length, vector[1] / length)


def is_corner(a: Point, b: Point, sin_threshold: float) -> bool:
    """True when unit directions *a* then *b* turn sharply enough."""
    dot = a[0] * b[0] + a[1] * b[1]
    cross = a[0] * b[1] - a[1] * b[0]
    return dot <= 0 or abs(cross) > sin_threshold


def switch_colour(colour: EdgeColour, banned: EdgeColour = EdgeColour.BLACK) -> EdgeColour:
    """Next colour in the cyan -> magenta -> yellow rotation.

    If *colour* and *banned* share exactly one channel, the result is the
    complement of that channel so the two never overlap.
    """
    combined = colour & banned
    if combined in _PRIMARY_COLOURS:
        return EdgeColour(combined ^ EdgeColour.WHITE)
    if colour in (EdgeColour.BLACK, EdgeColour.WHITE):
        return EdgeColour.CYAN
    shifted = int(colour) << 1
    return EdgeColour((shifted | shifted >> 3) & EdgeColour.WHITE)


def colour_edges(shape: Shape, angle_threshold: float = DEFAULT_ANGLE_THRESHOLD) -> None:
    """Assign a colour to every edge of *shape* in place.

    Contours with a single corner and fewer than three edges are replaced
    by split edges so that three colours can be spread around them.
    """
    sin_threshold = math.sin(angle_threshold)

    for contour in shape.contours:
        edges = contour.edges
        if not edges:
            continue

        corners = []
        previous = edges[-1].direction(1)
        for index, edge in enumerate(edges):
            if is_corner(_normalise(previous), _normalise(edge.direction(0)), sin_threshold):
                corners.append(index)
            previous = edge.direction(1)

        if not corners:
            for edge in edges:
                edge.colour = EdgeColour.WHITE
        elif len(corners) == 1:
            contour.edges = _colour_teardrop(edges, corners[0])
        else:
            _colour_corners(edges, corners)


def _colour_teardrop(edges: list[EdgeSegment], corner: int) -> list[EdgeSegment]:
    first = switch_colour(EdgeColour.WHITE)
    colours = (first, EdgeColour.WHITE, switch_colour(first))
    count = len(edges)

    if count >= 3:
        for i in range(count):
            edges[(corner + i) % count].colour = colours[int(3 + 2.875 * i / (count - 1) - 1.4375 + 0.5) - 2]
        return edges

    parts: list[EdgeSegment | None] = [None] * 6
    parts[3 * corner:3 * corner + 3] = edges[0].split_into_three()
    if count >= 2:
        parts[3 - 3 * corner:6 - 3 * corner] = edges[1].split_into_three()
        parts[0].colour = parts[1].colour = colours[0]
        parts[2].colour = parts[3].colour = colours[1]
        parts[4].colour = parts[5].colour = colours[2]
    else:
        parts[0].colour = colours[0]
        parts[1].colour = colours[1]
        parts[2].colour = colours[2]
    return [part for part in parts if part is not None]


def _colour_corners(edges: list[EdgeSegment], corners: list[int]) -> None:
    count = len(edges)
    spline = 0
    start = corners[0]
    colour = switch_colour(EdgeColour.WHITE)
    initial = colour

    for i in range(count):
        index = (start + i) % count
        if spline + 1 < len(corners) and corners[spline + 1] == index:
            spline += 1
            # The last spline touches the first one
            banned = initial if spline == len(corners) - 1 else EdgeColour.BLACK
            colour = switch_colour(colour, banned)
        edges[index].colour = colour
