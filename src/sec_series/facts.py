"""Facts document access.

The engine never fetches anything: callers hand it a companyfacts
document that an upstream provider already downloaded.  Three shapes are
accepted, from most to least wrapped:

  1. The SEC companyfacts JSON as served by data.sec.gov:
       {"cik": ..., "entityName": ..., "facts": {"us-gaap": {
           "Revenues": {"label": ..., "units": {"USD": [{...}, ...]}}}}}
  2. The inner taxonomy mapping ({"us-gaap": {"Revenues": {"units": ...}}})
  3. A USD-scoped mapping where each concept maps straight to its facts
     ({"us-gaap": {"Revenues": [{...}, ...]}}) or to {"USD": [...]}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pandas as pd

from sec_series.config import get_config

log = logging.getLogger(__name__)


class FactsDocumentError(ValueError):
    """The facts document is unreadable or not shaped like companyfacts."""


def load_facts_document(path: str | Path) -> dict:
    """Read a companyfacts JSON file from disk."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            document = json.load(fh)
    except FileNotFoundError as exc:
        raise FactsDocumentError(f"Facts file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise FactsDocumentError(f"Facts file is not valid JSON: {path} ({exc})") from exc

    if not isinstance(document, dict):
        raise FactsDocumentError(f"Facts file must hold a JSON object: {path}")
    log.debug("Loaded facts document %s (%s)", path, entity_name(document) or "unnamed")
    return document


def taxonomy_facts(document: dict) -> dict[str, dict]:
    """Return the taxonomy → concept mapping of any accepted shape."""
    if not isinstance(document, dict):
        raise FactsDocumentError(
            f"Facts document must be a mapping, got {type(document).__name__}"
        )
    inner = document.get("facts", document)
    if not isinstance(inner, dict):
        raise FactsDocumentError("'facts' must map taxonomies to concepts")
    return inner


def entity_name(document: dict) -> str | None:
    name = document.get("entityName") if isinstance(document, dict) else None
    return name if isinstance(name, str) else None


def split_concept_key(concept_key: str, default_taxonomy: str | None = None) -> tuple[str, str]:
    """'ifrs-full:Revenue' → ('ifrs-full', 'Revenue'); bare keys get the default taxonomy."""
    if ":" in concept_key:
        taxonomy, concept = concept_key.split(":", 1)
        return taxonomy, concept
    return default_taxonomy or get_config().default_taxonomy, concept_key


def unit_facts(
    document: dict,
    concept_key: str,
    *,
    unit: str | None = None,
    default_taxonomy: str | None = None,
) -> list[dict]:
    """Raw fact dicts for one concept in one unit (empty list if absent)."""
    unit = unit or get_config().facts_unit
    taxonomy, concept = split_concept_key(concept_key, default_taxonomy)

    concepts = taxonomy_facts(document).get(taxonomy)
    if not isinstance(concepts, dict):
        return []
    concept_data = concepts.get(concept)

    if isinstance(concept_data, list):
        facts = concept_data
    elif isinstance(concept_data, dict):
        units = concept_data.get("units", concept_data)
        facts = units.get(unit) if isinstance(units, dict) else None
    else:
        facts = None

    if not isinstance(facts, list):
        return []
    return [f for f in facts if isinstance(f, dict)]


def _iter_concepts(document: dict, unit: str):
    for taxonomy, concepts in taxonomy_facts(document).items():
        if not isinstance(concepts, dict):
            continue
        for concept_name, concept_data in concepts.items():
            label = concept_name
            if isinstance(concept_data, dict):
                label = concept_data.get("label") or concept_name
            yield taxonomy, concept_name, label, unit_facts(
                document, f"{taxonomy}:{concept_name}", unit=unit,
            )


def facts_dataframe(document: dict, *, unit: str | None = None) -> pd.DataFrame:
    """Flatten a facts document into one row per fact.

    Columns: concept, label, value, start, end, filed, form, frame, fy, fp,
    units, taxonomy.  Used for inspection; the engine itself works on
    FactRecords.
    """
    unit = unit or get_config().facts_unit
    rows: list[dict[str, Any]] = []
    for taxonomy, concept_name, label, facts in _iter_concepts(document, unit):
        for fact in facts:
            rows.append({
                "concept": concept_name,
                "label": label,
                "value": fact.get("val") if "val" in fact else fact.get("value"),
                "start": fact.get("start"),
                "end": fact.get("end"),
                "filed": fact.get("filed"),
                "form": fact.get("form"),
                "frame": fact.get("frame"),
                "fy": fact.get("fy"),
                "fp": fact.get("fp"),
                "units": unit,
                "taxonomy": taxonomy,
            })

    df = pd.DataFrame(rows)
    if not df.empty:
        df["end"] = pd.to_datetime(df["end"], errors="coerce")
        df["filed"] = pd.to_datetime(df["filed"], errors="coerce")
        df = df.sort_values("end", ascending=False)
    return df
