"""Series built from two canonical quarterly series.

EBITDA is operating income plus D&A; margins are a numerator over
revenue.  Points only exist where both inputs report the same period end.
A ratio's TTM is the ratio of the two TTM sums, never a sum of ratios.
"""

from __future__ import annotations

from typing import Sequence

from sec_series.models import PointOrigin, QuarterlyPoint, TTMPoint
from sec_series.xbrl_mappings import CompositeKind


def _div(a: float | None, b: float | None) -> float | None:
    """a / b, or None when b is missing or zero."""
    if a is None or b is None or b == 0:
        return None
    return a / b


def _origin(*points: QuarterlyPoint) -> PointOrigin:
    if all(p.origin == PointOrigin.DIRECT for p in points):
        return PointOrigin.DIRECT
    return PointOrigin.IMPUTED


def combine_quarterly(
    kind: CompositeKind,
    left: Sequence[QuarterlyPoint],
    right: Sequence[QuarterlyPoint],
) -> list[QuarterlyPoint]:
    """Pointwise sum or percentage ratio over shared period ends, ascending."""
    by_end = {p.period_end: p for p in right}
    combined: list[QuarterlyPoint] = []
    for lp in sorted(left, key=lambda p: p.period_end):
        rp = by_end.get(lp.period_end)
        if rp is None:
            continue
        if kind == CompositeKind.SUM:
            value = lp.value + rp.value
        else:
            ratio = _div(lp.value, rp.value)
            if ratio is None:
                continue
            value = ratio * 100
        if value == 0:
            continue
        combined.append(QuarterlyPoint(
            period_end=lp.period_end,
            value=value,
            origin=_origin(lp, rp),
        ))
    return combined


def ratio_ttm(
    numerator: Sequence[TTMPoint],
    denominator: Sequence[TTMPoint],
) -> list[TTMPoint]:
    """TTM ratio (percent) from the two TTM series, ascending."""
    by_end = {p.period_end: p for p in denominator}
    out: list[TTMPoint] = []
    for num in sorted(numerator, key=lambda p: p.period_end):
        den = by_end.get(num.period_end)
        ratio = _div(num.value, den.value if den is not None else None)
        if ratio is None:
            continue
        out.append(TTMPoint(period_end=num.period_end, value=ratio * 100))
    return out
