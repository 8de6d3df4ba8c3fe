"""Concept resolution: pick the one XBRL tag a metric is read from.

Companies are inconsistent about which tag they use for the same line
item, so each metric carries an ordered list of acceptable tags.  The
first tag whose facts yield a quarterly value wins unconditionally; values are never
merged across tags.
"""

from __future__ import annotations

import logging
from typing import NamedTuple, Sequence

from sec_series.classifier import classify_facts
from sec_series.facts import unit_facts
from sec_series.imputer import impute_q4
from sec_series.models import ClassifiedFacts

log = logging.getLogger(__name__)


class ResolvedConcept(NamedTuple):
    concept_key: str
    classified: ClassifiedFacts


def yields_quarters(classified: ClassifiedFacts, *, positive_only: bool = False) -> bool:
    """True when the facts give at least one direct or imputed quarter.

    Annual facts alone never do: without a nine-month partner no Q4 can
    be backed out of them.
    """
    if classified.quarterly:
        return True
    return bool(impute_q4(
        classified.annual, classified.nine_month, [], positive_only=positive_only,
    ))


def resolve_concept(
    document: dict,
    concept_keys: Sequence[str],
    *,
    positive_only: bool = False,
    unit: str | None = None,
) -> ResolvedConcept | None:
    """Return the first concept in *concept_keys* with usable data.

    A concept is usable when its unit array is non-empty and its facts
    produce at least one quarterly point (a direct quarter, or an annual
    fact with a matching nine-month fact).  Returns None (no data found)
    when no candidate qualifies — the normal "company does not disclose
    this metric" case, not an error.
    """
    for key in concept_keys:
        raw_facts = unit_facts(document, key, unit=unit)
        if not raw_facts:
            continue

        classified = classify_facts(raw_facts, key, positive_only=positive_only)
        if not yields_quarters(classified, positive_only=positive_only):
            log.debug(
                "Concept %s has %d facts but no quarterly data, trying next",
                key, len(raw_facts),
            )
            continue

        log.debug(
            "Resolved %s: %d quarterly, %d nine-month, %d annual, %d skipped",
            key, len(classified.quarterly), len(classified.nine_month),
            len(classified.annual), len(classified.skipped),
        )
        return ResolvedConcept(key, classified)

    log.info("No usable facts for any of %s", list(concept_keys))
    return None
