# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Real roots of quadratic and cubic polynomials.

The *_array functions work element-wise over numpy arrays and return an
(n, k) float array padded with NaN where fewer than k real roots exist;
the distance field generator calls them once per edge for a whole glyph
cell. The scalar functions return a tuple of roots.
"""

from __future__ import annotations

import math

import numpy as np

# Coefficient ratio above which the leading term is treated as zero
TOO_LARGE_RATIO = 1e12

# |imaginary part| below which the conjugate pair collapses to a double root
_DOUBLE_ROOT_EPSILON = 1e-14


def solve_quadratic_array(a, b, c) -> np.ndarray:
    """Roots of a*x^2 + b*x + c = 0, shape (n, 2)."""
    a, b, c = (np.asarray(v, dtype=np.float64).ravel() for v in np.broadcast_arrays(a, b, c))
    roots = np.full((a.size, 2), np.nan)

    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        linear = (a == 0) | (np.abs(b) + np.abs(c) > TOO_LARGE_RATIO * np.abs(a))
        solvable = linear & (b != 0) & ~(np.abs(c) > TOO_LARGE_RATIO * np.abs(b))
        roots[solvable, 0] = -c[solvable] / b[solvable]

        quadratic = ~linear
        discriminant = b * b - 4 * a * c
        two = quadratic & (discriminant > 0)
        root = np.sqrt(np.where(two, discriminant, 0.0))
        roots[two, 0] = ((-b + root) / (2 * a))[two]
        roots[two, 1] = ((-b - root) / (2 * a))[two]

        one = quadratic & (discriminant == 0)
        roots[one, 0] = (-b / (2 * a))[one]
    return roots


def solve_cubic_normed_array(a, b, c) -> np.ndarray:
    """Roots of x^3 + a*x^2 + b*x + c = 0, shape (n, 3)."""
    a, b, c = (np.asarray(v, dtype=np.float64).ravel() for v in np.broadcast_arrays(a, b, c))
    roots = np.full((a.size, 3), np.nan)

    a2 = a * a
    q = (a2 - 3 * b) / 9
    r = (a * (2 * a2 - 9 * b) + 27 * c) / 54
    r2 = r * r
    q3 = q * q * q
    a_third = a / 3

    with np.errstate(divide='ignore', invalid='ignore'):
        three = r2 < q3
        if three.any():
            t = np.arccos(np.clip(r[three] / np.sqrt(q3[three]), -1.0, 1.0))
            m = -2 * np.sqrt(q[three])
            shift = a_third[three]
            roots[three, 0] = m * np.cos(t / 3) - shift
            roots[three, 1] = m * np.cos((t + 2 * math.pi) / 3) - shift
            roots[three, 2] = m * np.cos((t - 2 * math.pi) / 3) - shift

        one = ~three
        if one.any():
            r1 = r[one]
            big_a = -np.cbrt(np.abs(r1) + np.sqrt(r2[one] - q3[one]))
            big_a = np.where(r1 < 0, -big_a, big_a)
            big_b = np.where(big_a == 0, 0.0, q[one] / np.where(big_a == 0, 1.0, big_a))
            shift = a_third[one]
            first = (big_a + big_b) - shift
            second = -0.5 * (big_a + big_b) - shift
            imaginary = 0.5 * math.sqrt(3) * (big_a - big_b)

            rows = np.flatnonzero(one)
            roots[rows, 0] = first
            double = np.abs(imaginary) < _DOUBLE_ROOT_EPSILON
            roots[rows[double], 1] = second[double]
    return roots


def solve_cubic_array(a, b, c, d) -> np.ndarray:
    """Roots of a*x^3 + b*x^2 + c*x + d = 0, shape (n, 3).

    Falls back to the quadratic b*x^2 + c*x + d where the leading
    coefficient is zero or negligible next to the others.
    """
    a, b, c, d = (np.asarray(v, dtype=np.float64).ravel() for v in np.broadcast_arrays(a, b, c, d))
    roots = np.full((a.size, 3), np.nan)

    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        safe_a = np.where(a == 0, 1.0, a)
        bn, cn, dn = b / safe_a, c / safe_a, d / safe_a
        normed = ((a != 0) & (np.abs(bn) < TOO_LARGE_RATIO)
                  & (np.abs(cn) < TOO_LARGE_RATIO) & (np.abs(dn) < TOO_LARGE_RATIO))

    if normed.any():
        roots[normed] = solve_cubic_normed_array(bn[normed], cn[normed], dn[normed])
    if not normed.all():
        rest = ~normed
        roots[rest, :2] = solve_quadratic_array(b[rest], c[rest], d[rest])
    return roots


def _real_roots(row: np.ndarray) -> tuple[float, ...]:
    return tuple(float(x) for x in row if not math.isnan(x))


def solve_quadratic(a: float, b: float, c: float) -> tuple[float, ...]:
    return _real_roots(solve_quadratic_array(a, b, c)[0])


def solve_cubic_normed(a: float, b: float, c: float) -> tuple[float, ...]:
    return _real_roots(solve_cubic_normed_array(a, b, c)[0])


def solve_cubic(a: float, b: float, c: float, d: float) -> tuple[float, ...]:
    return _real_roots(solve_cubic_array(a, b, c, d)[0])
