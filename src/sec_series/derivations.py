"""TTM sums and year-over-year growth over a canonical quarterly series.

The merged series can have holes where a quarter was never reported,
and summing or comparing across a hole silently produces a wrong number.
TTM windows (i-3..i) are checked for quarter spacing and skipped when
they straddle a hole.  YoY finds its comparison point by date, one year
back within the annual band, never by position.
"""

from __future__ import annotations

import logging
import math
from bisect import bisect_left, bisect_right
from datetime import date, timedelta
from typing import Protocol, Sequence

from sec_series.classifier import ANNUAL_DAYS, QUARTER_DAYS, in_band
from sec_series.config import get_config
from sec_series.models import GrowthPoint, TTMPoint

log = logging.getLogger(__name__)

TTM_WINDOW = 4
YEAR_DAYS = 365


class ValuedPoint(Protocol):
    period_end: date
    value: float


def _days_between(earlier: ValuedPoint, later: ValuedPoint) -> int:
    return (later.period_end - earlier.period_end).days


def is_contiguous(window: Sequence[ValuedPoint]) -> bool:
    """True when each consecutive pair of period ends is one quarter apart."""
    return all(
        in_band(_days_between(a, b), QUARTER_DAYS)
        for a, b in zip(window, window[1:])
    )


def _cap(points: list, limit: int) -> list:
    if limit <= 0:
        return []
    return points[-limit:]


def compute_ttm(
    quarterly: Sequence[ValuedPoint],
    *,
    limit: int | None = None,
) -> list[TTMPoint]:
    """Rolling four-quarter sums, labelled with the newest quarter.

    Needs four contiguous quarters; fewer than four points gives an empty
    series.  Capped to the most recent *limit* points, oldest first.
    """
    if limit is None:
        limit = get_config().max_ttm_points

    points = sorted(quarterly, key=lambda p: p.period_end)
    ttm: list[TTMPoint] = []
    for i in range(TTM_WINDOW - 1, len(points)):
        window = points[i - TTM_WINDOW + 1:i + 1]
        if not is_contiguous(window):
            log.debug(
                "No TTM for %s: quarter gap between %s and %s",
                points[i].period_end, window[0].period_end, window[-1].period_end,
            )
            continue
        ttm.append(TTMPoint(
            period_end=points[i].period_end,
            value=sum(p.value for p in window),
        ))
    return _cap(ttm, limit)


def growth_percent(current: float, prior: float) -> float | None:
    """(current − prior) / prior × 100, or None when undefined."""
    if prior is None or current is None or prior == 0:
        return None
    growth = (current - prior) / prior * 100
    if math.isnan(growth) or math.isinf(growth):
        return None
    return growth


def _year_earlier(
    points: Sequence[ValuedPoint],
    ends: list[date],
    current: ValuedPoint,
) -> ValuedPoint | None:
    """The point one year before *current*, looked up by period end.

    Candidates must sit in the annual band; the one closest to 365 days
    back wins.
    """
    lo_days, hi_days = ANNUAL_DAYS
    lo = bisect_left(ends, current.period_end - timedelta(days=hi_days))
    hi = bisect_right(ends, current.period_end - timedelta(days=lo_days))
    candidates = points[lo:hi]
    if not candidates:
        return None
    return min(candidates, key=lambda p: abs(_days_between(p, current) - YEAR_DAYS))


def compute_yoy(
    series: Sequence[ValuedPoint],
    *,
    limit: int | None = None,
) -> list[GrowthPoint]:
    """Growth of each period against the same period a year earlier.

    Works for quarterly and TTM series alike.  The comparison point is
    found by date, not position, so a missing quarter only costs the
    growth points that actually needed it.  Periods whose comparison
    point is missing or zero are omitted rather than reported as 0%.
    """
    if limit is None:
        limit = get_config().max_growth_points

    points = sorted(series, key=lambda p: p.period_end)
    ends = [p.period_end for p in points]
    growth: list[GrowthPoint] = []
    for current in points:
        prior = _year_earlier(points, ends, current)
        if prior is None:
            log.debug("No YoY for %s: nothing reported one year back", current.period_end)
            continue
        pct = growth_percent(current.value, prior.value)
        if pct is None:
            continue
        growth.append(GrowthPoint(period_end=current.period_end, growth_percent=pct))
    return _cap(growth, limit)
