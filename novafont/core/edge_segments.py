# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Edge segments of a glyph contour and their signed distance geometry.

Coordinates are y-up font units. With TrueType's clockwise outer
contours, a positive distance means the sample point is inside the glyph.

Every distance routine is written once against numpy arrays of sample
points so a whole distance-field cell is evaluated per edge in one call;
the scalar methods (signed_distance, distance_to_pseudo_distance) wrap the
array versions for a single point.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass

import numpy as np

from .equation_solver import solve_cubic_array

Point = tuple[float, float]


class EdgeColour(enum.IntFlag):
    """Distance field channels an edge contributes to."""
    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7


@dataclass
class SignedDistance:
    """Distance to an edge plus the tie-breaking dot term.

    Ordering compares |distance| first and dot second; a smaller value is
    the closer edge.
    """
    distance: float = -math.inf
    dot: float = 1.0

    def __lt__(self, other: SignedDistance) -> bool:
        a, b = abs(self.distance), abs(other.distance)
        return a < b or (a == b and self.dot < other.dot)

    def __gt__(self, other: SignedDistance) -> bool:
        return other < self


def lerp(a: Point, b: Point, t: float) -> Point:
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)


def _normalised(x, y):
    length = np.hypot(x, y)
    safe = np.where(length == 0, 1.0, length)
    return x / safe, y / safe


def _sign(values):
    return np.where(values < 0, -1.0, 1.0)


class EdgeSegment:
    """Base class for an oriented piece of a closed contour."""

    __slots__ = ('points', 'colour')

    def __init__(self, points: tuple[Point, ...], colour: EdgeColour = EdgeColour.WHITE) -> None:
        self.points = points
        self.colour = colour

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.points!r}, {self.colour!r})"

    @property
    def start(self) -> Point:
        return self.points[0]

    @property
    def end(self) -> Point:
        return self.points[-1]

    def direction(self, t: float) -> Point:
        raise NotImplementedError

    def point_at(self, t: float) -> Point:
        raise NotImplementedError

    def split_into_three(self) -> tuple[EdgeSegment, EdgeSegment, EdgeSegment]:
        raise NotImplementedError

    def signed_distances(self, px: np.ndarray, py: np.ndarray):
        """Return (distance, dot, param) arrays for the sample points."""
        raise NotImplementedError

    def signed_distance(self, point: Point) -> tuple[SignedDistance, float]:
        distance, dot, param = self.signed_distances(
            np.array([point[0]], dtype=np.float64), np.array([point[1]], dtype=np.float64))
        return SignedDistance(float(distance[0]), float(dot[0])), float(param[0])

    def pseudo_distances(self, distance: np.ndarray, dot: np.ndarray,
                         px: np.ndarray, py: np.ndarray, param: np.ndarray):
        """Replace distances whose nearest point lies past an endpoint.

        Where param < 0 (or > 1) and the sample lies beyond the start (or
        end) along the tangent there, the distance to the extended tangent
        line is used if it is no larger in magnitude. The dot term of a
        replaced distance becomes 0.
        """
        distance = np.array(distance, dtype=np.float64)
        dot = np.array(dot, dtype=np.float64)

        for before, t, anchor in ((True, 0.0, self.start), (False, 1.0, self.end)):
            dx, dy = self.direction(t)
            length = math.hypot(dx, dy)
            if length == 0:
                continue
            dx, dy = dx / length, dy / length
            qx = px - anchor[0]
            qy = py - anchor[1]
            along = qx * dx + qy * dy
            pseudo = qx * dy - qy * dx
            if before:
                mask = (param < 0) & (along < 0)
            else:
                mask = (param > 1) & (along > 0)
            mask &= np.abs(pseudo) <= np.abs(distance)
            distance[mask] = pseudo[mask]
            dot[mask] = 0.0
        return distance, dot

    def distance_to_pseudo_distance(self, distance: SignedDistance,
                                    point: Point, param: float) -> SignedDistance:
        d, dot = self.pseudo_distances(
            np.array([distance.distance]), np.array([distance.dot]),
            np.array([point[0]], dtype=np.float64), np.array([point[1]], dtype=np.float64),
            np.array([param]))
        return SignedDistance(float(d[0]), float(dot[0]))


class LinearSegment(EdgeSegment):

    __slots__ = ()

    def __init__(self, p0: Point, p1: Point, colour: EdgeColour = EdgeColour.WHITE) -> None:
        super().__init__((p0, p1), colour)

    def direction(self, t: float) -> Point:
        (x0, y0), (x1, y1) = self.points
        return (x1 - x0, y1 - y0)

    def point_at(self, t: float) -> Point:
        return lerp(self.points[0], self.points[1], t)

    def split_into_three(self) -> tuple[EdgeSegment, EdgeSegment, EdgeSegment]:
        p0, p1 = self.points
        one_third = lerp(p0, p1, 1 / 3)
        two_thirds = lerp(p0, p1, 2 / 3)
        return (LinearSegment(p0, one_third, self.colour),
                LinearSegment(one_third, two_thirds, self.colour),
                LinearSegment(two_thirds, p1, self.colour))

    def signed_distances(self, px, py):
        (x0, y0), (x1, y1) = self.points
        abx, aby = x1 - x0, y1 - y0
        ab_length = math.hypot(abx, aby)
        aqx = px - x0
        aqy = py - y0
        param = (aqx * abx + aqy * aby) / (abx * abx + aby * aby)

        # Vector from the nearer endpoint to the sample point's position
        nearer_end = param > 0.5
        eqx = np.where(nearer_end, x1, x0) - px
        eqy = np.where(nearer_end, y1, y0) - py
        endpoint_distance = np.hypot(eqx, eqy)

        cross = aqx * aby - aqy * abx
        orthogonal = cross / ab_length
        interior = (param > 0) & (param < 1) & (np.abs(orthogonal) < endpoint_distance)

        nx, ny = _normalised(eqx, eqy)
        endpoint_dot = np.abs((abx * nx + aby * ny) / ab_length)

        distance = np.where(interior, orthogonal, _sign(cross) * endpoint_distance)
        dot = np.where(interior, 0.0, endpoint_dot)
        return distance, dot, param


class QuadraticSegment(EdgeSegment):

    __slots__ = ()

    def __init__(self, p0: Point, p1: Point, p2: Point,
                 colour: EdgeColour = EdgeColour.WHITE) -> None:
        super().__init__((p0, p1, p2), colour)

    def direction(self, t: float) -> Point:
        (x0, y0), (x1, y1), (x2, y2) = self.points
        return lerp((x1 - x0, y1 - y0), (x2 - x1, y2 - y1), t)

    def point_at(self, t: float) -> Point:
        p0, p1, p2 = self.points
        return lerp(lerp(p0, p1, t), lerp(p1, p2, t), t)

    def split_into_three(self) -> tuple[EdgeSegment, EdgeSegment, EdgeSegment]:
        p0, p1, p2 = self.points
        one_third = self.point_at(1 / 3)
        two_thirds = self.point_at(2 / 3)
        middle = lerp(lerp(p0, p1, 5 / 9), lerp(p1, p2, 4 / 9), 0.5)
        return (QuadraticSegment(p0, lerp(p0, p1, 1 / 3), one_third, self.colour),
                QuadraticSegment(one_third, middle, two_thirds, self.colour),
                QuadraticSegment(two_thirds, lerp(p1, p2, 2 / 3), p2, self.colour))

    def signed_distances(self, px, py):
        (x0, y0), (x1, y1), (x2, y2) = self.points
        abx, aby = x1 - x0, y1 - y0
        bcx, bcy = x2 - x1, y2 - y1
        brx, bry = bcx - abx, bcy - aby
        pax = x0 - px
        pay = y0 - py

        a = brx * brx + bry * bry
        b = 3 * (abx * brx + aby * bry)
        c = 2 * (abx * abx + aby * aby) + pax * brx + pay * bry
        d = pax * abx + pay * aby
        roots = solve_cubic_array(a, b, c, d).reshape(px.shape + (3,))

        # Start point
        param = -(pax * abx + pay * aby) / (abx * abx + aby * aby)
        start_distance = np.hypot(pax, pay)
        distance = _sign(abx * pay - aby * pax) * start_distance

        # End point
        qcx = x2 - px
        qcy = y2 - py
        end_distance = np.hypot(qcx, qcy)
        closer = end_distance < np.abs(distance)
        distance = np.where(closer, _sign(bcx * qcy - bcy * qcx) * end_distance, distance)
        end_param = ((px - x1) * bcx + (py - y1) * bcy) / (bcx * bcx + bcy * bcy)
        param = np.where(closer, end_param, param)

        # Interior roots
        for i in range(3):
            t = roots[..., i]
            with np.errstate(invalid='ignore'):
                inside = (t > 0) & (t < 1)
            t = np.where(inside, t, 0.0)
            qex = pax + 2 * t * abx + t * t * brx
            qey = pay + 2 * t * aby + t * t * bry
            root_distance = np.hypot(qex, qey)
            closer = inside & (root_distance <= np.abs(distance))
            tangent_x = abx + t * brx
            tangent_y = aby + t * bry
            signed = _sign(tangent_x * qey - tangent_y * qex) * root_distance
            distance = np.where(closer, signed, distance)
            param = np.where(closer, t, param)

        start_nx, start_ny = _normalised(pax, pay)
        end_nx, end_ny = _normalised(qcx, qcy)
        start_dot = np.abs(abx * start_nx + aby * start_ny) / math.hypot(abx, aby)
        end_dot = np.abs(bcx * end_nx + bcy * end_ny) / math.hypot(bcx, bcy)
        on_segment = (param >= 0) & (param <= 1)
        dot = np.where(on_segment, 0.0, np.where(param < 0.5, start_dot, end_dot))
        return distance, dot, param
