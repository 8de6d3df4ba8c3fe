"""Shared builders for companyfacts-shaped test data."""

import json
from datetime import date

import pytest

_QUARTER_BOUNDS = {
    1: ((1, 1), (3, 31)),
    2: ((4, 1), (6, 30)),
    3: ((7, 1), (9, 30)),
    4: ((10, 1), (12, 31)),
}


def raw_fact(start, end, val, form="10-Q", filed="2024-01-15", frame=None, **extra):
    fact = {"start": start, "end": end, "val": val, "form": form, "filed": filed}
    if frame is not None:
        fact["frame"] = frame
    fact.update(extra)
    return fact


def quarter_fact(year, q, val, **kw):
    (sm, sd), (em, ed) = _QUARTER_BOUNDS[q]
    kw.setdefault("filed", f"{year}-{em + 1:02d}-15" if q < 4 else f"{year + 1}-02-15")
    return raw_fact(date(year, sm, sd).isoformat(), date(year, em, ed).isoformat(), val, **kw)


def nine_month_fact(year, val, **kw):
    kw.setdefault("filed", f"{year}-10-28")
    return raw_fact(f"{year}-01-01", f"{year}-09-30", val, **kw)


def annual_fact(year, val, **kw):
    kw.setdefault("form", "10-K")
    kw.setdefault("filed", f"{year + 1}-02-20")
    return raw_fact(f"{year}-01-01", f"{year}-12-31", val, **kw)


def companyfacts(concepts, entity="Example Corp", taxonomy="us-gaap"):
    """Wrap {concept: [facts]} in the data.sec.gov companyfacts shape."""
    return {
        "cik": 1234567,
        "entityName": entity,
        "facts": {
            taxonomy: {
                name: {"label": name, "units": {"USD": facts}}
                for name, facts in concepts.items()
            },
        },
    }


def quarters(values, start_year=2022, **kw):
    """Consecutive calendar quarters starting at Q1 of *start_year*."""
    out = []
    for i, val in enumerate(values):
        out.append(quarter_fact(start_year + i // 4, i % 4 + 1, val, **kw))
    return out


def sample_document():
    """Two fiscal years with Q4 revenue only reported through the 10-K."""
    revenue = [
        quarter_fact(2022, 1, 100),
        quarter_fact(2022, 2, 110),
        quarter_fact(2022, 3, 120),
        nine_month_fact(2022, 330),
        annual_fact(2022, 460),
        # prior-year comparative column re-reported in the 2023 10-Q
        quarter_fact(2022, 1, 100, filed="2023-05-02", frame="CY2022Q1"),
        quarter_fact(2023, 1, 140, frame="CY2023Q1"),
        quarter_fact(2023, 2, 150, frame="CY2023Q2"),
        quarter_fact(2023, 3, 160, frame="CY2023Q3"),
        nine_month_fact(2023, 450),
        annual_fact(2023, 620, frame="CY2023"),
    ]
    return companyfacts({
        "RevenueFromContractWithCustomerExcludingAssessedTax": [],
        "Revenues": revenue,
        "NetIncomeLoss": quarters([10, 11, 12, 13, 14, 15, 16, 17]),
        "OperatingIncomeLoss": quarters([20, 22, 24, 26, 28, 30, 32, 34]),
        "DepreciationDepletionAndAmortization": quarters([5] * 8),
    })


@pytest.fixture
def sample_doc():
    return sample_document()


@pytest.fixture
def facts_file(tmp_path):
    path = tmp_path / "CIK0001234567.json"
    path.write_text(json.dumps(sample_document()), encoding="utf-8")
    return path
