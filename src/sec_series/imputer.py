"""Fourth-quarter imputation.

Filers report cumulative nine-month figures in the Q3 10-Q and full-year
figures in the 10-K, but rarely a standalone Q4.  Q4 is backed out as

    Q4 = annual − nine-month

where both cover the same fiscal year (same start date) and the
nine-month period ends roughly one quarter before the annual one.
Imputation only fills gaps: a directly reported quarter always wins.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Sequence

from sec_series.models import FactRecord, PointOrigin, QuarterlyPoint
from sec_series.reconciler import filing_priority, pick_preferred

log = logging.getLogger(__name__)

Q4_OFFSET_DAYS = 90
Q4_OFFSET_TOLERANCE = 30


def find_nine_month_match(
    annual: FactRecord,
    nine_month: Iterable[FactRecord],
) -> FactRecord | None:
    """The nine-month fact covering Q1–Q3 of *annual*'s fiscal year."""
    candidates = [
        n for n in nine_month
        if n.period_start == annual.period_start
        and abs((annual.period_end - n.period_end).days - Q4_OFFSET_DAYS) <= Q4_OFFSET_TOLERANCE
    ]
    if not candidates:
        return None
    return pick_preferred(candidates)


def impute_q4(
    annual: Sequence[FactRecord],
    nine_month: Sequence[FactRecord],
    direct: Iterable[QuarterlyPoint],
    *,
    positive_only: bool = False,
) -> list[QuarterlyPoint]:
    """Imputed Q4 points for fiscal years lacking a direct Q4, ascending.

    When several annual facts share a period end (original 10-K, 10-K/A,
    comparative columns) they are tried in filing-priority order and the
    first one with a nine-month partner is used.
    """
    direct_ends = {p.period_end for p in direct}
    imputed: dict[date, QuarterlyPoint] = {}

    for fact in sorted(annual, key=filing_priority, reverse=True):
        end = fact.period_end
        if end in direct_ends or end in imputed:
            continue

        partner = find_nine_month_match(fact, nine_month)
        if partner is None:
            continue

        value = fact.value - partner.value
        if value == 0:
            log.debug("Imputed Q4 ending %s is zero — treated as unreported", end)
            continue
        if positive_only and value < 0:
            log.debug("Imputed Q4 ending %s is negative (%s) — discarded", end, value)
            continue

        imputed[end] = QuarterlyPoint(
            period_end=end,
            value=value,
            origin=PointOrigin.IMPUTED,
        )

    if imputed:
        log.debug("Imputed %d Q4 values", len(imputed))
    return [imputed[end] for end in sorted(imputed)]
