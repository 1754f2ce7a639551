# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest

from novafont.core.binary_cursor import BinaryCursor
from novafont.core.error import UnsupportedKernFormat
from novafont.core.kern import KernTable, pack_pair
from sfnt_builder import kern_table_apple, kern_table_ms


def _parse(data):
    return KernTable.parse(BinaryCursor(data), 0)


def test_pack_pair_puts_left_in_high_half():
    assert pack_pair(0x0102, 0x0304) == 0x01020304


def test_horizontal_subtable_looks_up_in_order():
    kern = _parse(kern_table_ms([({(1, 2): -50}, 0x0001)]))
    assert kern.adjustment(1, 2) == -50
    assert kern.adjustment(2, 1) == 0
    assert kern.adjustment(1, 3) == 0
    assert len(kern) == 1


@pytest.mark.parametrize("coverage", [0x0005, 0x0000])
def test_cross_stream_or_vertical_subtable_swaps_operands(coverage):
    kern = _parse(kern_table_ms([({(1, 2): -50}, coverage)]))
    assert kern.subtables[0].should_swap
    assert kern.adjustment(2, 1) == -50
    assert kern.adjustment(1, 2) == 0


def test_vertical_cross_stream_cancels_out():
    kern = _parse(kern_table_ms([({(1, 2): 30}, 0x0004)]))
    assert not kern.subtables[0].should_swap
    assert kern.adjustment(1, 2) == 30


@pytest.mark.parametrize("coverage, swapped", [
    (0x0000, False),
    (0x8000, True),
    (0x4000, True),
    (0xC000, False),
])
def test_apple_coverage_bits(coverage, swapped):
    kern = _parse(kern_table_apple([({(4, 5): 12}, coverage)]))
    assert kern.subtables[0].should_swap is swapped
    left, right = (5, 4) if swapped else (4, 5)
    assert kern.adjustment(left, right) == 12


def test_subtables_are_summed():
    kern = _parse(kern_table_ms([
        ({(1, 2): -50, (3, 4): 10}, 0x0001),
        ({(1, 2): 20}, 0x0001),
    ]))
    assert kern.adjustment(1, 2) == -30
    assert kern.pair_adjustments() == {(1, 2): -30, (3, 4): 10}


def test_pair_adjustments_apply_swap_and_drop_zero_sums():
    kern = _parse(kern_table_ms([
        ({(1, 2): -50}, 0x0000),
        ({(2, 1): 50, (7, 8): 5}, 0x0001),
    ]))
    assert kern.pair_adjustments() == {(7, 8): 5}


def test_unsupported_subtable_format_is_fatal():
    with pytest.raises(UnsupportedKernFormat) as excinfo:
        _parse(kern_table_ms([({(1, 2): -50}, 0x0201)]))
    assert excinfo.value.format_id == 2
