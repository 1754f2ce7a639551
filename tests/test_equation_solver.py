# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

import numpy as np
import pytest

from novafont.core.equation_solver import (
    solve_cubic, solve_cubic_array, solve_cubic_normed, solve_quadratic, solve_quadratic_array,
)


def test_quadratic_two_roots():
    assert sorted(solve_quadratic(1, -3, 2)) == pytest.approx([1.0, 2.0])


def test_quadratic_double_root():
    assert solve_quadratic(1, -2, 1) == pytest.approx((1.0,))


def test_quadratic_no_real_roots():
    assert solve_quadratic(1, 0, 1) == ()


def test_quadratic_degenerates_to_linear():
    assert solve_quadratic(0, 2, -4) == pytest.approx((2.0,))


def test_all_zero_coefficients_have_no_roots():
    assert solve_quadratic(0, 0, 0) == ()
    assert solve_quadratic(0, 0, 5) == ()


def test_cubic_three_roots():
    assert sorted(solve_cubic(1, -6, 11, -6)) == pytest.approx([1.0, 2.0, 3.0])


def test_cubic_single_real_root():
    assert solve_cubic(1, 0, 0, -1) == pytest.approx((1.0,))


def test_cubic_double_root():
    # (x - 1)^2 (x + 2)
    assert solve_cubic_normed(0, -3, 2) == pytest.approx((-2.0, 1.0))


def test_cubic_negligible_leading_term_falls_back_to_quadratic():
    assert sorted(solve_cubic(1e-20, 1, -3, 2)) == pytest.approx([1.0, 2.0])
    assert sorted(solve_cubic(0, 1, -3, 2)) == pytest.approx([1.0, 2.0])


def test_quadratic_array_pads_with_nan():
    roots = solve_quadratic_array([1.0, 1.0, 0.0], [-3.0, 0.0, 2.0], [2.0, 1.0, -4.0])
    assert roots.shape == (3, 2)
    assert sorted(roots[0]) == pytest.approx([1.0, 2.0])
    assert np.isnan(roots[1]).all()
    assert roots[2, 0] == pytest.approx(2.0)
    assert np.isnan(roots[2, 1])


def test_cubic_array_matches_scalar():
    a = np.array([1.0, 1.0, 0.0, 2.0])
    b = np.array([-6.0, 0.0, 1.0, -3.0])
    c = np.array([11.0, 0.0, -3.0, -1.0])
    d = np.array([-6.0, -1.0, 2.0, 0.5])
    roots = solve_cubic_array(a, b, c, d)
    assert roots.shape == (4, 3)
    for row, coefficients in zip(roots, zip(a, b, c, d)):
        found = sorted(x for x in row if not np.isnan(x))
        assert found == pytest.approx(sorted(solve_cubic(*coefficients)))


def test_cubic_roots_satisfy_equation():
    coefficients = (2.0, -3.0, -1.0, 0.5)
    for x in solve_cubic(*coefficients):
        a, b, c, d = coefficients
        assert a * x ** 3 + b * x ** 2 + c * x + d == pytest.approx(0.0, abs=1e-9)
