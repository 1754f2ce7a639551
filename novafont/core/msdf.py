# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Multi-channel true signed distance field rasterisation of one glyph cell.

Each of R, G and B holds the pseudo-distance to the nearest edge carrying
that channel; A holds the true signed distance to the nearest edge of any
colour. Distances are in pixels, divided by the pixel range and offset so
that the outline sits at 0.5.
"""

from __future__ import annotations

import math

import numpy as np

from .edge_segments import EdgeColour
from .outline import Shape

_CHANNELS = (EdgeColour.RED, EdgeColour.GREEN, EdgeColour.BLUE)


def _closer(distance, dot, best_distance, best_dot):
    a = np.abs(distance)
    b = np.abs(best_distance)
    return (a < b) | ((a == b) & (dot < best_dot))


def sample_points(origin: tuple[float, float], scale: float, width: int, height: int,
                  pixel_range: int) -> tuple[np.ndarray, np.ndarray]:
    """Font-unit coordinates of every pixel centre in a cell.

    The cell is the glyph's width x height pixels plus *pixel_range*
    pixels of margin on each side. Row 0 is the top of the cell.
    """
    cell_width = width + 2 * pixel_range
    cell_height = height + 2 * pixel_range
    columns = np.arange(cell_width, dtype=np.float64)
    rows = np.arange(cell_height, dtype=np.float64)
    xs = origin[0] + (columns + 0.5 - pixel_range) / scale
    ys = origin[1] + (height + pixel_range - rows - 0.5) / scale
    px, py = np.meshgrid(xs, ys)
    return px, py


def generate_msdf_cell(shape: Shape, origin: tuple[float, float], scale: float,
                       width: int, height: int, pixel_range: int) -> np.ndarray:
    """Rasterise *shape* into an (h, w, 4) uint8 RGBA cell.

    *origin* is the font-unit point at the bottom-left corner of the glyph
    area and *scale* converts font units to pixels.
    """
    px, py = sample_points(origin, scale, width, height, pixel_range)
    cell_shape = px.shape
    px = px.ravel()
    py = py.ravel()
    n = px.size
    edges = list(shape.edges())

    true_distance = np.full(n, -math.inf)
    true_dot = np.ones(n)
    channel_distance = np.full((3, n), -math.inf)
    channel_dot = np.ones((3, n))
    channel_param = np.zeros((3, n))
    channel_edge = np.full((3, n), -1, dtype=np.intp)

    for index, edge in enumerate(edges):
        distance, dot, param = edge.signed_distances(px, py)

        closer = _closer(distance, dot, true_distance, true_dot)
        true_distance = np.where(closer, distance, true_distance)
        true_dot = np.where(closer, dot, true_dot)

        for k, channel in enumerate(_CHANNELS):
            if not edge.colour & channel:
                continue
            closer = _closer(distance, dot, channel_distance[k], channel_dot[k])
            channel_distance[k][closer] = distance[closer]
            channel_dot[k][closer] = dot[closer]
            channel_param[k][closer] = param[closer]
            channel_edge[k][closer] = index

    for k in range(3):
        for index in np.unique(channel_edge[k]):
            if index < 0:
                continue
            mask = channel_edge[k] == index
            pseudo, _ = edges[index].pseudo_distances(
                channel_distance[k][mask], channel_dot[k][mask],
                px[mask], py[mask], channel_param[k][mask])
            channel_distance[k][mask] = pseudo

    cell = np.empty(cell_shape + (4,), dtype=np.uint8)
    for k in range(3):
        cell[..., k] = _to_byte(channel_distance[k], scale, pixel_range).reshape(cell_shape)
    cell[..., 3] = _to_byte(true_distance, scale, pixel_range).reshape(cell_shape)
    return cell


def _to_byte(distance: np.ndarray, scale: float, pixel_range: int) -> np.ndarray:
    with np.errstate(invalid='ignore'):
        normalised = np.clip(distance * scale / pixel_range + 0.5, 0.0, 1.0)
    normalised = np.nan_to_num(normalised, nan=0.0)
    return np.rint(normalised * 255).astype(np.uint8)
