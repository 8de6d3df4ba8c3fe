"""Fact validation and duration classification.

Filers never report exact day counts, so each bucket is a band:

    quarterly    70–120 days
    nine-month  240–300 days   (only used to back out Q4)
    annual      330–380 days

Anything else (six-month YTD figures, stub periods, partial restatements)
is dropped.  Malformed facts are dropped too, each with a SkipReason so
the drop is visible in the debug log instead of vanishing in a filter.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from datetime import date
from typing import Any, Iterable

from sec_series.models import (
    ClassifiedFacts,
    FactRecord,
    PeriodClass,
    SkippedFact,
    SkipReason,
)

log = logging.getLogger(__name__)

QUARTER_DAYS = (70, 120)
NINE_MONTH_DAYS = (240, 300)
ANNUAL_DAYS = (330, 380)

_BANDS: tuple[tuple[tuple[int, int], PeriodClass], ...] = (
    (QUARTER_DAYS, PeriodClass.QUARTERLY),
    (NINE_MONTH_DAYS, PeriodClass.NINE_MONTH),
    (ANNUAL_DAYS, PeriodClass.ANNUAL),
)


def in_band(days: int, band: tuple[int, int]) -> bool:
    lo, hi = band
    return lo <= days <= hi


def _parse_date(raw: Any) -> date | None:
    """Parse 'YYYY-MM-DD' (or a longer ISO timestamp). Raises ValueError on junk."""
    if isinstance(raw, date):
        return raw
    text = str(raw).strip()
    return date.fromisoformat(text[:10])


def _skip(concept_key: str, reason: SkipReason, raw: dict) -> SkippedFact:
    detail = (
        f"start={raw.get('start')} end={raw.get('end')} "
        f"val={raw.get('val', raw.get('value'))} form={raw.get('form')}"
    )
    return SkippedFact(concept_key=concept_key, reason=reason, detail=detail)


def parse_fact(
    raw: dict,
    concept_key: str,
    *,
    positive_only: bool = False,
) -> FactRecord | SkippedFact:
    """Validate one raw companyfacts entry.

    Zero is "not reported", never a data point.  ``positive_only`` also
    rejects negative values (revenue-like metrics).
    """
    raw_value = raw.get("val") if "val" in raw else raw.get("value")
    if raw_value is None or raw_value == "":
        return _skip(concept_key, SkipReason.MISSING_VALUE, raw)
    if isinstance(raw_value, bool):
        return _skip(concept_key, SkipReason.NON_NUMERIC_VALUE, raw)
    try:
        value = float(raw_value)
    except (TypeError, ValueError):
        return _skip(concept_key, SkipReason.NON_NUMERIC_VALUE, raw)
    if math.isnan(value) or math.isinf(value):
        return _skip(concept_key, SkipReason.NON_NUMERIC_VALUE, raw)
    if value == 0:
        return _skip(concept_key, SkipReason.ZERO_VALUE, raw)
    if positive_only and value < 0:
        return _skip(concept_key, SkipReason.NEGATIVE_VALUE, raw)

    if not raw.get("start") or not raw.get("end"):
        return _skip(concept_key, SkipReason.MISSING_PERIOD, raw)
    try:
        start = _parse_date(raw["start"])
        end = _parse_date(raw["end"])
    except (TypeError, ValueError):
        return _skip(concept_key, SkipReason.INVALID_DATE, raw)
    if end <= start:
        return _skip(concept_key, SkipReason.NON_POSITIVE_PERIOD, raw)

    # Filing date is only a tie-break; a bad one ranks lowest instead of dropping the fact
    filed = None
    if raw.get("filed"):
        try:
            filed = _parse_date(raw["filed"])
        except (TypeError, ValueError):
            filed = None

    frame = raw.get("frame")
    return FactRecord(
        concept_key=concept_key,
        period_start=start,
        period_end=end,
        value=value,
        form=str(raw.get("form") or ""),
        filed_date=filed,
        frame=str(frame) if frame else None,
    )


def duration_days(fact: FactRecord) -> int:
    return (fact.period_end - fact.period_start).days


def classify_fact(fact: FactRecord) -> PeriodClass | None:
    """Bucket a fact by duration; None means outside every band."""
    days = duration_days(fact)
    for band, period_class in _BANDS:
        if in_band(days, band):
            return period_class
    return None


def classify_facts(
    raw_facts: Iterable[dict],
    concept_key: str,
    *,
    positive_only: bool = False,
) -> ClassifiedFacts:
    """Validate and bucket every raw fact reported under one concept."""
    buckets: dict[PeriodClass, list[FactRecord]] = {pc: [] for pc in PeriodClass}
    skipped: list[SkippedFact] = []

    for raw in raw_facts:
        parsed = parse_fact(raw, concept_key, positive_only=positive_only)
        if isinstance(parsed, SkippedFact):
            skipped.append(parsed)
            log.debug("Skipping %s fact (%s): %s", concept_key, parsed.reason.value, parsed.detail)
            continue

        period_class = classify_fact(parsed)
        if period_class is None:
            skipped.append(_skip(concept_key, SkipReason.OUT_OF_BAND, raw))
            log.debug(
                "Skipping %s fact (out_of_band, %d days) ending %s",
                concept_key, duration_days(parsed), parsed.period_end,
            )
            continue
        buckets[period_class].append(parsed)

    result = ClassifiedFacts(
        concept_key=concept_key,
        quarterly=tuple(buckets[PeriodClass.QUARTERLY]),
        nine_month=tuple(buckets[PeriodClass.NINE_MONTH]),
        annual=tuple(buckets[PeriodClass.ANNUAL]),
        skipped=tuple(skipped),
    )
    if skipped:
        reasons = Counter(s.reason.value for s in skipped)
        log.debug("%s: skipped %d facts %s", concept_key, len(skipped), dict(reasons))
    return result
