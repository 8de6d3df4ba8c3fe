"""Pydantic models for facts, reconciled points and derived series."""

from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Frozen(BaseModel):
    """Immutable model serialised with camelCase keys (``periodEnd``)."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ---------------------------------------------------------------------------
# Raw facts
# ---------------------------------------------------------------------------

class PeriodClass(str, Enum):
    QUARTERLY = "quarterly"
    NINE_MONTH = "nine_month"
    ANNUAL = "annual"


class SkipReason(str, Enum):
    """Why a raw fact never made it into a classification bucket."""
    MISSING_VALUE = "missing_value"
    NON_NUMERIC_VALUE = "non_numeric_value"
    ZERO_VALUE = "zero_value"
    NEGATIVE_VALUE = "negative_value"
    MISSING_PERIOD = "missing_period"
    INVALID_DATE = "invalid_date"
    NON_POSITIVE_PERIOD = "non_positive_period"
    OUT_OF_BAND = "out_of_band"


class FactRecord(_Frozen):
    """One reported value from the companyfacts feed."""
    concept_key: str
    period_start: date
    period_end: date
    value: float
    form: str = ""
    filed_date: date | None = None
    frame: str | None = None


class SkippedFact(_Frozen):
    concept_key: str
    reason: SkipReason
    detail: str = ""


class ClassifiedFacts(_Frozen):
    """Facts of one concept bucketed by reporting duration."""
    concept_key: str
    quarterly: tuple[FactRecord, ...] = ()
    nine_month: tuple[FactRecord, ...] = ()
    annual: tuple[FactRecord, ...] = ()
    skipped: tuple[SkippedFact, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.quarterly or self.nine_month or self.annual)


# ---------------------------------------------------------------------------
# Series points
# ---------------------------------------------------------------------------

class PointOrigin(str, Enum):
    DIRECT = "direct"
    IMPUTED = "imputed"


class QuarterlyPoint(_Frozen):
    period_end: date
    value: float
    # Only used for tie-breaks; never part of the external shape
    origin: PointOrigin = Field(default=PointOrigin.DIRECT, exclude=True)


class TTMPoint(_Frozen):
    period_end: date
    value: float


class GrowthPoint(_Frozen):
    period_end: date
    growth_percent: float


# ---------------------------------------------------------------------------
# Engine output
# ---------------------------------------------------------------------------

class MetricSeries(_Frozen):
    """All series derived for one metric from one facts document.

    ``concept`` is None when no candidate concept had classifiable data
    (the company does not disclose the metric); every series is then empty.
    """
    metric: str
    concept: str | None = None
    quarterly: tuple[QuarterlyPoint, ...] = ()
    ttm: tuple[TTMPoint, ...] = ()
    quarterly_growth: tuple[GrowthPoint, ...] = ()
    ttm_growth: tuple[GrowthPoint, ...] = ()
    skipped_count: int = 0

    @property
    def found(self) -> bool:
        return self.concept is not None and bool(self.quarterly)

    def to_payload(self) -> dict:
        """Plain-JSON form: ISO dates, camelCase keys, origin dropped."""
        return self.model_dump(mode="json", by_alias=True)
