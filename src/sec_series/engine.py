"""Financial series engine.

One generic pipeline replaces per-metric extractors.  Data flow:
  1. resolve_concept()     → first XBRL tag with classifiable facts
  2. classify_facts()      → quarterly / nine-month / annual buckets
  3. reconcile_quarters()  → one direct point per period end
  4. impute_q4()           → annual − nine-month where Q4 is missing
  5. merge_series()        → canonical ascending series, capped to 40
  6. compute_ttm()         → rolling four-quarter sums (on demand)
  7. compute_yoy()         → growth vs. four periods earlier (on demand)

Everything is a pure function of the facts document, so an engine can be
shared across threads and its output memoised by the caller per
(symbol, metric, document version).
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable, NamedTuple, Sequence, Union

import pandas as pd

from sec_series.composites import combine_quarterly, ratio_ttm
from sec_series.config import get_config
from sec_series.derivations import compute_ttm, compute_yoy
from sec_series.imputer import impute_q4
from sec_series.merger import merge_series
from sec_series.models import (
    GrowthPoint,
    MetricSeries,
    PointOrigin,
    QuarterlyPoint,
    TTMPoint,
)
from sec_series.reconciler import reconcile_quarters
from sec_series.resolver import resolve_concept
from sec_series.xbrl_mappings import (
    AnyMetric,
    CompositeDefinition,
    CompositeKind,
    ConceptEntry,
    MetricDefinition,
    get_metric,
)

log = logging.getLogger(__name__)

MetricLike = Union[str, MetricDefinition, CompositeDefinition, Sequence[str]]

GROWTH_BASES = ("quarterly", "ttm")


class QuarterlyResult(NamedTuple):
    concept: str | None
    points: list[QuarterlyPoint]
    skipped_count: int = 0


# ═══════════════════════════════════════════════════════════════════════════
#  Canonical quarterly series
# ═══════════════════════════════════════════════════════════════════════════

def build_quarterly_series(
    document: dict,
    concept_keys: Sequence[str],
    *,
    positive_only: bool = False,
    limit: int | None = None,
) -> QuarterlyResult:
    """Resolve, classify, reconcile, impute and merge one metric.

    Returns QuarterlyResult(None, [], 0) when no candidate concept has
    usable data.
    """
    resolved = resolve_concept(document, concept_keys, positive_only=positive_only)
    if resolved is None:
        return QuarterlyResult(None, [], 0)

    classified = resolved.classified
    direct = reconcile_quarters(classified.quarterly)
    imputed = impute_q4(
        classified.annual,
        classified.nine_month,
        direct,
        positive_only=positive_only,
    )
    merged = merge_series(direct, imputed, limit=limit)

    n_imputed = sum(1 for p in merged if p.origin == PointOrigin.IMPUTED)
    log.info(
        "%s: %d quarters (%d imputed), %d facts skipped",
        resolved.concept_key, len(merged), n_imputed, len(classified.skipped),
    )
    return QuarterlyResult(resolved.concept_key, merged, len(classified.skipped))


def custom_metric(concept_keys: Sequence[str], name: str | None = None) -> MetricDefinition:
    """Ad-hoc metric from a caller-supplied ordered concept list."""
    keys = tuple(concept_keys)
    return MetricDefinition(
        name=name or (keys[0] if keys else "custom"),
        display_name=name or "Custom",
        concepts=tuple(ConceptEntry(k, k) for k in keys),
    )


def _as_definition(metric: MetricLike) -> AnyMetric:
    if isinstance(metric, (MetricDefinition, CompositeDefinition)):
        return metric
    if isinstance(metric, str):
        return get_metric(metric)
    return custom_metric(metric)


# ═══════════════════════════════════════════════════════════════════════════
#  Engine facade
# ═══════════════════════════════════════════════════════════════════════════

class SeriesEngine:
    """All series for one facts document.

    The canonical quarterly series of each metric is computed once per
    engine; TTM and growth are derived from it on every call.
    """

    def __init__(
        self,
        document: dict,
        *,
        max_quarters: int | None = None,
        max_ttm_points: int | None = None,
        max_growth_points: int | None = None,
    ):
        config = get_config()
        self.document = document
        self.max_quarters = config.max_quarters if max_quarters is None else max_quarters
        self.max_ttm_points = config.max_ttm_points if max_ttm_points is None else max_ttm_points
        self.max_growth_points = (
            config.max_growth_points if max_growth_points is None else max_growth_points
        )
        self._quarterly_cache: dict[tuple, QuarterlyResult] = {}

    # ── Quarterly ─────────────────────────────────────────────────────

    def _quarterly_result(self, definition: AnyMetric) -> QuarterlyResult:
        if isinstance(definition, CompositeDefinition):
            return self._composite_result(definition)

        key = (tuple(definition.concept_keys), definition.positive_only)
        cached = self._quarterly_cache.get(key)
        if cached is None:
            cached = build_quarterly_series(
                self.document,
                definition.concept_keys,
                positive_only=definition.positive_only,
                limit=self.max_quarters,
            )
            self._quarterly_cache[key] = cached
        return cached

    def _composite_result(self, composite: CompositeDefinition) -> QuarterlyResult:
        left = self._quarterly_result(get_metric(composite.left))
        right = self._quarterly_result(get_metric(composite.right))
        skipped = left.skipped_count + right.skipped_count
        if left.concept is None or right.concept is None:
            log.info("%s: missing component (%s, %s)", composite.name, left.concept, right.concept)
            return QuarterlyResult(None, [], skipped)

        op = "+" if composite.kind == CompositeKind.SUM else "/"
        points = combine_quarterly(composite.kind, left.points, right.points)
        return QuarterlyResult(f"{left.concept} {op} {right.concept}", points, skipped)

    def quarterly(self, metric: MetricLike) -> list[QuarterlyPoint]:
        return list(self._quarterly_result(_as_definition(metric)).points)

    def concept(self, metric: MetricLike) -> str | None:
        """The XBRL concept(s) the metric was read from, or None."""
        return self._quarterly_result(_as_definition(metric)).concept

    # ── Derived ───────────────────────────────────────────────────────

    def ttm(self, metric: MetricLike) -> list[TTMPoint]:
        definition = _as_definition(metric)
        if isinstance(definition, CompositeDefinition) and definition.kind == CompositeKind.RATIO:
            num = compute_ttm(self.quarterly(definition.left), limit=self.max_ttm_points)
            den = compute_ttm(self.quarterly(definition.right), limit=self.max_ttm_points)
            return ratio_ttm(num, den)
        return compute_ttm(self.quarterly(definition), limit=self.max_ttm_points)

    def yoy(self, metric: MetricLike, basis: str = "quarterly") -> list[GrowthPoint]:
        """Year-over-year growth of the quarterly or TTM series."""
        if basis not in GROWTH_BASES:
            raise ValueError(f"Unknown growth basis: {basis!r} (use one of {GROWTH_BASES})")
        source = self.quarterly(metric) if basis == "quarterly" else self.ttm(metric)
        return compute_yoy(source, limit=self.max_growth_points)

    def series(self, metric: MetricLike) -> MetricSeries:
        definition = _as_definition(metric)
        result = self._quarterly_result(definition)
        return MetricSeries(
            metric=definition.name,
            concept=result.concept,
            quarterly=tuple(result.points),
            ttm=tuple(self.ttm(definition)),
            quarterly_growth=tuple(self.yoy(definition, "quarterly")),
            ttm_growth=tuple(self.yoy(definition, "ttm")),
            skipped_count=result.skipped_count,
        )

    def batch(self, metrics: Iterable[MetricLike], max_workers: int = 4) -> dict[str, MetricSeries]:
        """Compute several metrics in parallel, keyed by metric name."""
        definitions = [_as_definition(m) for m in metrics]
        results: dict[str, MetricSeries] = {}
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {executor.submit(self.series, d): d.name for d in definitions}
            for future in as_completed(futures):
                results[futures[future]] = future.result()
        return {d.name: results[d.name] for d in definitions}


def run_engine(facts_document: dict, metric_concept_keys: Sequence[str]) -> MetricSeries:
    """Engine entry point: a facts document plus an ordered concept list."""
    return SeriesEngine(facts_document).series(list(metric_concept_keys))


# ═══════════════════════════════════════════════════════════════════════════
#  Output shapes
# ═══════════════════════════════════════════════════════════════════════════

def to_records(points: Iterable[QuarterlyPoint | TTMPoint | GrowthPoint]) -> list[dict]:
    """[{"periodEnd": "2024-03-31", "value": ...}] / [{..., "growthPercent": ...}]"""
    return [p.model_dump(mode="json", by_alias=True) for p in points]


def series_frame(points: Iterable[QuarterlyPoint | TTMPoint | GrowthPoint]) -> pd.DataFrame:
    """DataFrame view of a series with a datetime ``period_end`` column."""
    df = pd.DataFrame([p.model_dump() for p in points])
    if not df.empty:
        df["period_end"] = pd.to_datetime(df["period_end"])
    return df
