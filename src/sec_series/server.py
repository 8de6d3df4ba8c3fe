"""SEC-Series: MCP server exposing the financial series engine.

Every tool reads a companyfacts JSON file that an upstream fetcher
already saved to disk; the server itself never touches the network.

Tool hierarchy
──────────────
  Discovery
    1. list_metrics          — catalogue metrics + composites and their XBRL tags

  Series
    2. get_quarterly_series  — canonical quarterly values (direct + imputed Q4)
    3. get_ttm_series        — rolling four-quarter sums
    4. get_yoy_growth        — YoY growth of the quarterly or TTM series
    5. get_metric_series     — all of the above in one payload
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from fastmcp import FastMCP

from sec_series.engine import SeriesEngine, custom_metric, to_records
from sec_series.facts import FactsDocumentError, entity_name, load_facts_document
from sec_series.xbrl_mappings import COMPOSITES, METRICS

log = logging.getLogger(__name__)

mcp = FastMCP(name="SEC-Series")


@lru_cache(maxsize=32)
def _engine_for_version(facts_path: str, mtime_ns: int, size: int) -> SeriesEngine:
    return SeriesEngine(load_facts_document(facts_path))


def _engine_for(facts_path: str) -> SeriesEngine:
    """Engine for the current version of a facts file.

    Keyed on modification time and size, so a file rewritten by the
    fetcher gets a fresh engine while unchanged files reuse their
    memoised series.
    """
    try:
        stat = Path(facts_path).stat()
    except FileNotFoundError as exc:
        raise FactsDocumentError(f"Facts file not found: {facts_path}") from exc
    return _engine_for_version(facts_path, stat.st_mtime_ns, stat.st_size)


def _metric_arg(metric: str, concepts: list[str] | None):
    """Explicit concept lists override the catalogue entry for *metric*."""
    if concepts:
        return custom_metric(concepts, name=metric)
    return metric


def _series_payload(
    facts_path: str,
    metric: str,
    kind: str,
    concepts: list[str] | None = None,
) -> dict:
    """Shared body of the series tools; errors come back as {"error": ...}."""
    try:
        engine = _engine_for(facts_path)
        target = _metric_arg(metric, concepts)
        if kind == "quarterly":
            points = engine.quarterly(target)
        elif kind == "ttm":
            points = engine.ttm(target)
        elif kind in ("yoy", "yoy_ttm"):
            points = engine.yoy(target, basis="ttm" if kind == "yoy_ttm" else "quarterly")
        else:
            raise ValueError(f"Unknown series kind: {kind!r}")
        concept = engine.concept(target)
    except ValueError as exc:
        log.warning("Series request failed (%s, %s): %s", metric, kind, exc)
        return {"metric": metric, "error": str(exc)}

    return {
        "metric": metric,
        "company_name": entity_name(engine.document),
        "concept": concept,
        "series": kind,
        "points": to_records(points),
    }


# ═══════════════════════════════════════════════════════════════════════════
#  DISCOVERY
# ═══════════════════════════════════════════════════════════════════════════


@mcp.tool()
def list_metrics() -> list[dict]:
    """List the metrics the engine knows, with their XBRL concepts in priority order.

    Composites (EBITDA, margins) list the two metrics they are built from.
    """
    out = [
        {
            "name": m.name,
            "display_name": m.display_name,
            "concepts": m.concept_keys,
            "positive_only": m.positive_only,
        }
        for m in METRICS.values()
    ]
    out.extend(
        {
            "name": c.name,
            "display_name": c.display_name,
            "composite": c.kind.value,
            "components": [c.left, c.right],
        }
        for c in COMPOSITES.values()
    )
    return out


# ═══════════════════════════════════════════════════════════════════════════
#  SERIES
# ═══════════════════════════════════════════════════════════════════════════


@mcp.tool()
def get_quarterly_series(
    facts_path: str,
    metric: str = "revenue",
    concepts: list[str] | None = None,
) -> dict:
    """Get the reconciled quarterly series for a metric (up to 40 quarters).

    Args:
        facts_path: path to a saved SEC companyfacts JSON file
        metric: catalogue name, e.g. 'revenue', 'earnings', 'operating_income', 'ebitda'
        concepts: optional ordered XBRL concept list overriding the catalogue

    Missing fourth quarters are imputed as annual minus nine-month values.
    Points: [{periodEnd, value}] oldest first.
    """
    return _series_payload(facts_path, metric, "quarterly", concepts)


@mcp.tool()
def get_ttm_series(
    facts_path: str,
    metric: str = "revenue",
    concepts: list[str] | None = None,
) -> dict:
    """Get trailing-twelve-month sums for a metric (up to 37 points).

    A TTM point is only produced where four consecutive quarters exist.
    """
    return _series_payload(facts_path, metric, "ttm", concepts)


@mcp.tool()
def get_yoy_growth(
    facts_path: str,
    metric: str = "revenue",
    basis: str = "quarterly",
    concepts: list[str] | None = None,
) -> dict:
    """Get year-over-year growth percentages (up to 36 points).

    Args:
        basis: 'quarterly' compares each quarter with the same quarter a year
            earlier; 'ttm' compares TTM sums.

    Periods whose prior-year value is zero or missing are omitted.
    Points: [{periodEnd, growthPercent}].
    """
    kind = "yoy_ttm" if basis == "ttm" else "yoy"
    if basis not in ("quarterly", "ttm"):
        return {"metric": metric, "error": f"Unknown growth basis: {basis!r}"}
    return _series_payload(facts_path, metric, kind, concepts)


@mcp.tool()
def get_metric_series(
    facts_path: str,
    metric: str = "revenue",
    concepts: list[str] | None = None,
) -> dict:
    """Get quarterly, TTM and both growth series for a metric in one payload."""
    try:
        engine = _engine_for(facts_path)
        result = engine.series(_metric_arg(metric, concepts))
    except ValueError as exc:
        return {"metric": metric, "error": str(exc)}
    payload = result.to_payload()
    payload["companyName"] = entity_name(engine.document)
    return payload


# ═══════════════════════════════════════════════════════════════════════════
#  ENTRY POINT
# ═══════════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    from sec_series.config import get_config

    logging.basicConfig(level=get_config().log_level.upper())
    mcp.run()
