"""Quarterly deduplication.

The same quarter shows up many times in companyfacts: in its own 10-Q,
as the comparative column of next year's 10-Q, in amendments.  One fact
survives per period end, chosen by three rules applied in order:

  1. frame confirms a single quarter   (CY2024Q3 beats no frame)
  2. amended form                      (10-Q/A beats 10-Q)
  3. latest filing date
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Iterable

from sec_series.models import FactRecord, PointOrigin, QuarterlyPoint

log = logging.getLogger(__name__)

_QUARTER_FRAME = re.compile(r"Q[1-4]")


def is_quarter_frame(frame: str | None) -> bool:
    """True for frames like 'CY2024Q3' (and the instant form 'CY2024Q3I')."""
    return bool(frame) and _QUARTER_FRAME.search(frame) is not None


def is_amended(form: str | None) -> bool:
    return bool(form) and "/A" in form.upper()


def filing_priority(fact: FactRecord) -> tuple[bool, bool, date]:
    """Sort key for duplicate facts — higher is better.

    Missing filing dates rank below every real date.
    """
    return (
        is_quarter_frame(fact.frame),
        is_amended(fact.form),
        fact.filed_date or date.min,
    )


def pick_preferred(facts: Iterable[FactRecord]) -> FactRecord:
    """Best fact of a same-period group; first seen wins an exact tie."""
    return max(facts, key=filing_priority)


def reconcile_quarters(quarterly: Iterable[FactRecord]) -> list[QuarterlyPoint]:
    """One direct QuarterlyPoint per distinct period end, ascending."""
    groups: dict[date, list[FactRecord]] = {}
    for fact in quarterly:
        groups.setdefault(fact.period_end, []).append(fact)

    points: list[QuarterlyPoint] = []
    for period_end in sorted(groups):
        group = groups[period_end]
        chosen = pick_preferred(group)
        if len(group) > 1:
            log.debug(
                "%s: %d candidates, kept %s filed %s (value %s)",
                period_end, len(group), chosen.form or "?", chosen.filed_date, chosen.value,
            )
        points.append(QuarterlyPoint(
            period_end=period_end,
            value=chosen.value,
            origin=PointOrigin.DIRECT,
        ))
    return points
