"""Command-line access to the series engine.

Usage — every command reads a saved companyfacts JSON file:

  # List catalogue metrics and their XBRL concepts
  sec-series metrics

  # Inspect raw facts (optionally one concept)
  sec-series facts data/CIK0000320193.json
  sec-series facts data/CIK0000320193.json Revenues

  # Series for a metric
  sec-series quarterly data/CIK0000320193.json revenue
  sec-series ttm data/CIK0000320193.json earnings
  sec-series yoy data/CIK0000320193.json revenue ttm

  # Everything for a metric as JSON
  sec-series series data/CIK0000320193.json operating_margin
"""

from __future__ import annotations

import json
import logging
import sys

from sec_series.config import get_config
from sec_series.engine import SeriesEngine, to_records
from sec_series.facts import entity_name, facts_dataframe, load_facts_document
from sec_series.xbrl_mappings import COMPOSITES, METRICS, normalize_metric_name

_SCALES = ((1e12, "T"), (1e9, "B"), (1e6, "M"))


def _fmt(v: float | None) -> str:
    """Dollar amount for display: $1.23B, -$456.00M, $999."""
    if v is None:
        return "N/A"
    sign = "-" if v < 0 else ""
    for scale, suffix in _SCALES:
        if abs(v) >= scale:
            return f"{sign}${abs(v) / scale:,.2f}{suffix}"
    return f"{sign}${abs(v):,.0f}"


def _header(title: str):
    print(f"\n{'='*60}")
    print(f"  {title}")
    print(f"{'='*60}\n")


def _is_percent_metric(metric: str) -> bool:
    key = normalize_metric_name(metric)
    return key in COMPOSITES and COMPOSITES[key].kind.value == "ratio"


def cmd_metrics():
    """List catalogue metrics."""
    _header("Metrics")
    for m in METRICS.values():
        print(f"  {m.name:28s}  {m.display_name}")
        for key in m.concept_keys:
            print(f"      {key}")
    print()
    for c in COMPOSITES.values():
        op = "+" if c.kind.value == "sum" else "/"
        print(f"  {c.name:28s}  {c.left} {op} {c.right}")


def cmd_facts(path: str, concept: str | None = None):
    """Show raw facts, newest first."""
    document = load_facts_document(path)
    _header(f"Facts: {entity_name(document) or path}")
    df = facts_dataframe(document)
    if concept:
        df = df[df["concept"] == concept] if not df.empty else df
    if df.empty:
        print("  No facts found.")
        return
    cols = ["concept", "start", "end", "value", "form", "filed", "frame"]
    print(df[cols].head(40).to_string(index=False))
    print(f"\n  Total: {len(df)} fact(s)")


def _print_series(engine: SeriesEngine, metric: str, points, value_key: str):
    concept = engine.concept(metric)
    if not points:
        print(f"  No data ({'no concept found' if concept is None else 'insufficient history'}).")
        return
    print(f"  Concept: {concept}\n")
    percent = value_key == "growthPercent" or _is_percent_metric(metric)
    for rec in to_records(points):
        v = rec[value_key]
        shown = f"{v:>10.2f}%" if percent else f"{_fmt(v):>12s}"
        print(f"  {rec['periodEnd']:12s}  {shown}")
    print(f"\n  Total: {len(points)} period(s)")


def cmd_quarterly(path: str, metric: str = "revenue"):
    engine = SeriesEngine(load_facts_document(path))
    _header(f"Quarterly {metric}: {entity_name(engine.document) or path}")
    _print_series(engine, metric, engine.quarterly(metric), "value")


def cmd_ttm(path: str, metric: str = "revenue"):
    engine = SeriesEngine(load_facts_document(path))
    _header(f"TTM {metric}: {entity_name(engine.document) or path}")
    _print_series(engine, metric, engine.ttm(metric), "value")


def cmd_yoy(path: str, metric: str = "revenue", basis: str = "quarterly"):
    engine = SeriesEngine(load_facts_document(path))
    _header(f"YoY {metric} ({basis}): {entity_name(engine.document) or path}")
    _print_series(engine, metric, engine.yoy(metric, basis=basis), "growthPercent")


def cmd_series(path: str, metric: str = "revenue"):
    engine = SeriesEngine(load_facts_document(path))
    print(json.dumps(engine.series(metric).to_payload(), indent=2))


COMMANDS = {
    "metrics": (cmd_metrics, ""),
    "facts": (cmd_facts, "facts.json [concept]"),
    "quarterly": (cmd_quarterly, "facts.json [metric]"),
    "ttm": (cmd_ttm, "facts.json [metric]"),
    "yoy": (cmd_yoy, "facts.json [metric] [quarterly|ttm]"),
    "series": (cmd_series, "facts.json [metric]"),
}


def _usage():
    print("\nSEC Series — quarterly / TTM / YoY from companyfacts")
    print("=" * 52)
    print("\nUsage: sec-series <command> [args]\n")
    print("Commands:")
    for cmd, (_, args) in COMMANDS.items():
        print(f"  {cmd:12s}  {args}")
    print()


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    logging.basicConfig(level=get_config().log_level.upper())

    if not args or args[0] in ("-h", "--help", "help"):
        _usage()
        return 0

    cmd_name = args[0].lower()
    if cmd_name not in COMMANDS:
        print(f"Unknown command: {cmd_name}")
        print(f"Available: {', '.join(COMMANDS.keys())}")
        return 2

    fn, usage = COMMANDS[cmd_name]
    n_args = len(args) - 1
    if (cmd_name != "metrics" and n_args < 1) or n_args > fn.__code__.co_argcount:
        print(f"Usage: sec-series {cmd_name} {usage}")
        return 2

    try:
        fn(*args[1:])
    except ValueError as exc:
        print(f"  ERROR: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
