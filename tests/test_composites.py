"""Unit tests for sum and ratio composites."""

from datetime import date

import pytest

from sec_series.composites import combine_quarterly, ratio_ttm
from sec_series.models import PointOrigin, QuarterlyPoint, TTMPoint
from sec_series.xbrl_mappings import CompositeKind


def _p(month, value, origin=PointOrigin.DIRECT):
    day = 30 if month in (6, 9) else 31
    return QuarterlyPoint(period_end=date(2023, month, day), value=value, origin=origin)


def test_sum_on_shared_periods_only():
    left = [_p(3, 20), _p(6, 22), _p(9, 24)]
    right = [_p(6, 5), _p(9, 5), _p(12, 5)]
    combined = combine_quarterly(CompositeKind.SUM, left, right)
    assert [(p.period_end.month, p.value) for p in combined] == [(6, 27), (9, 29)]


def test_ratio_is_percent():
    combined = combine_quarterly(CompositeKind.RATIO, [_p(3, 25)], [_p(3, 200)])
    assert combined[0].value == pytest.approx(12.5)


def test_ratio_skips_zero_denominator():
    assert combine_quarterly(CompositeKind.RATIO, [_p(3, 25)], [_p(3, 0.0)]) == []


def test_sum_to_zero_is_dropped():
    assert combine_quarterly(CompositeKind.SUM, [_p(3, 5)], [_p(3, -5)]) == []


def test_imputed_component_marks_point_imputed():
    combined = combine_quarterly(
        CompositeKind.SUM, [_p(12, 30, PointOrigin.IMPUTED)], [_p(12, 5)],
    )
    assert combined[0].origin == PointOrigin.IMPUTED


def test_ratio_ttm():
    num = [TTMPoint(period_end=date(2023, 12, 31), value=46),
           TTMPoint(period_end=date(2024, 3, 31), value=50)]
    den = [TTMPoint(period_end=date(2023, 12, 31), value=460)]
    out = ratio_ttm(num, den)
    assert len(out) == 1
    assert out[0].value == pytest.approx(10.0)
