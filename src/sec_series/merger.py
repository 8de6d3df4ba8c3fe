"""Merge direct and imputed quarters into the canonical series."""

from __future__ import annotations

import logging
from typing import Sequence

import pandas as pd

from sec_series.config import get_config
from sec_series.models import QuarterlyPoint

log = logging.getLogger(__name__)


def merge_series(
    direct: Sequence[QuarterlyPoint],
    imputed: Sequence[QuarterlyPoint],
    *,
    limit: int | None = None,
) -> list[QuarterlyPoint]:
    """Chronological, deduplicated, length-capped quarterly series.

    Direct points are placed ahead of imputed ones before a stable
    newest-first sort, so on a shared period end the direct point is the
    one kept.  The most recent *limit* periods are returned oldest first.
    """
    if limit is None:
        limit = get_config().max_quarters

    points = [*direct, *imputed]
    if not points or limit <= 0:
        return []

    df = pd.DataFrame({
        "period_end": pd.to_datetime([p.period_end for p in points]),
        "position": range(len(points)),
    })
    df = (
        df.sort_values("period_end", ascending=False, kind="mergesort")
        .drop_duplicates(subset="period_end", keep="first")
        .head(limit)
        .iloc[::-1]
    )

    merged = [points[i] for i in df["position"].tolist()]
    dropped = len(points) - len(merged)
    if dropped:
        log.debug("Merged %d points into %d (limit %d)", len(points), len(merged), limit)
    return merged
