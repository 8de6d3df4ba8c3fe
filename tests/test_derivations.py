"""Unit tests for TTM sums and YoY growth."""

from datetime import date

import pytest

from sec_series.derivations import (
    compute_ttm,
    compute_yoy,
    growth_percent,
    is_contiguous,
)
from sec_series.models import QuarterlyPoint, TTMPoint

_QUARTER_ENDS = ((3, 31), (6, 30), (9, 30), (12, 31))


def _series(values, start_year=2020):
    return [
        QuarterlyPoint(
            period_end=date(start_year + i // 4, *_QUARTER_ENDS[i % 4]),
            value=v,
        )
        for i, v in enumerate(values)
    ]


def test_ttm_constant_series():
    ttm = compute_ttm(_series([100] * 8))
    assert len(ttm) == 5
    assert all(p.value == 400 for p in ttm)
    assert ttm[0].period_end == date(2020, 12, 31)
    assert ttm[-1].period_end == date(2021, 12, 31)


def test_ttm_sums_window_ending_at_each_quarter():
    ttm = compute_ttm(_series([1, 2, 3, 4, 5, 6]))
    assert [p.value for p in ttm] == [10, 14, 18]


def test_ttm_needs_four_quarters():
    assert compute_ttm(_series([1, 2, 3])) == []
    assert compute_ttm([]) == []


def test_ttm_skips_windows_across_a_gap():
    points = _series([1, 2, 3, 4, 5, 6, 7, 8, 9])
    del points[4]     # 2021-03-31 never reported
    ttm = compute_ttm(points)
    assert [p.period_end for p in ttm] == [date(2020, 12, 31), date(2022, 3, 31)]
    assert ttm[-1].value == 6 + 7 + 8 + 9


def test_ttm_cap_keeps_latest():
    ttm = compute_ttm(_series(list(range(1, 50))), limit=37)
    assert len(ttm) == 37
    assert ttm[-1].value == 46 + 47 + 48 + 49


def test_ttm_accepts_unsorted_input():
    points = _series([1, 2, 3, 4])
    assert compute_ttm(list(reversed(points)))[0].value == 10


def test_growth_percent():
    assert growth_percent(110, 100) == pytest.approx(10.0)
    assert growth_percent(50, 100) == pytest.approx(-50.0)
    assert growth_percent(-20, -10) == pytest.approx(100.0)
    assert growth_percent(100, 0) is None


def test_yoy_flat_series_is_zero():
    growth = compute_yoy(_series([100] * 8))
    assert len(growth) == 4
    assert all(g.growth_percent == 0 for g in growth)
    assert growth[0].period_end == date(2021, 3, 31)


def test_yoy_compares_same_quarter_last_year():
    growth = compute_yoy(_series([100, 200, 300, 400, 150, 200, 330, 300]))
    assert [g.growth_percent for g in growth] == pytest.approx([50.0, 0.0, 10.0, -25.0])


def test_yoy_omits_zero_prior():
    points = [
        QuarterlyPoint(period_end=date(2020, 3, 31), value=0.0),
        *_series([1, 1, 1, 2, 2, 2, 2])[1:],
    ]
    growth = compute_yoy(points)
    assert date(2021, 3, 31) not in [g.period_end for g in growth]


def test_yoy_pairs_by_date_across_a_missing_quarter():
    points = _series([1, 2, 3, 4, 5, 6, 7, 8])
    del points[2]     # 2020-09-30 never reported
    growth = compute_yoy(points)
    assert [g.period_end for g in growth] == [
        date(2021, 3, 31), date(2021, 6, 30), date(2021, 12, 31),
    ]
    assert [g.growth_percent for g in growth] == pytest.approx([400.0, 200.0, 100.0])


def test_yoy_skips_period_with_no_point_a_year_back():
    points = _series([1, 2, 3, 4, 5, 6, 7, 8])
    del points[2]
    ends = [g.period_end for g in compute_yoy(points)]
    assert date(2021, 9, 30) not in ends


def test_yoy_on_ttm_series():
    ttm = compute_ttm(_series([100] * 4 + [110] * 4))
    growth = compute_yoy(ttm)
    assert len(growth) == 1
    assert growth[0].growth_percent == pytest.approx(10.0)


def test_yoy_cap():
    growth = compute_yoy(_series(list(range(1, 60))), limit=36)
    assert len(growth) == 36


def test_spacing_helpers():
    a, b, c, d = _series([1, 2, 3, 4])
    assert is_contiguous([a, b, c, d])
    assert not is_contiguous([a, c])
    assert is_contiguous([TTMPoint(period_end=date(2020, 3, 31), value=1)])
