"""XBRL concept → metric mappings.

Two layers:
  Layer 1 — Metric catalogue  (metric key → display name + ordered XBRL tags)
  Layer 2 — Composites        (metrics built from two catalogue metrics,
                               e.g. EBITDA = operating income + D&A)

Concept order matters: the resolver takes the first tag that carries
classifiable data and never merges values across tags.  Companies moved
from SalesRevenueNet to the ASC 606 revenue tags around 2018, so the
current tags come first.
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Union


# ═══════════════════════════════════════════════════════════════════════════
#  Concept entry
# ═══════════════════════════════════════════════════════════════════════════

class ConceptEntry(NamedTuple):
    xbrl_concept: str       # tag name, optionally "taxonomy:Tag"
    display_name: str       # human label


class MetricDefinition(NamedTuple):
    name: str
    display_name: str
    concepts: tuple[ConceptEntry, ...]
    positive_only: bool = False   # True = negative facts and Q4s are noise

    @property
    def concept_keys(self) -> list[str]:
        return [entry.xbrl_concept for entry in self.concepts]


# ═══════════════════════════════════════════════════════════════════════════
#  REVENUE
#  Labels: Revenue, Net Sales, Total Revenues, Contract Revenue
# ═══════════════════════════════════════════════════════════════════════════

REVENUE: tuple[ConceptEntry, ...] = (
    ConceptEntry("RevenueFromContractWithCustomerExcludingAssessedTax",
                 "Revenue from Contract with Customer"),
    ConceptEntry("RevenueFromContractWithCustomerIncludingAssessedTax",
                 "Revenue from Contract with Customer (incl. tax)"),
    ConceptEntry("SalesRevenueNet", "Net Sales Revenue"),
    ConceptEntry("Revenues", "Total Revenue"),
    ConceptEntry("SalesRevenueGoodsNet", "Net Goods Revenue"),
    ConceptEntry("SalesRevenueServicesNet", "Net Services Revenue"),
    ConceptEntry("RevenuesNetOfInterestExpense", "Revenue Net of Interest Expense"),
)

# ═══════════════════════════════════════════════════════════════════════════
#  NET INCOME ("earnings" in the charts)
# ═══════════════════════════════════════════════════════════════════════════

EARNINGS: tuple[ConceptEntry, ...] = (
    ConceptEntry("NetIncomeLoss", "Net Income (Loss)"),
    ConceptEntry("ProfitLoss", "Profit (Loss)"),
    ConceptEntry("NetIncomeLossAvailableToCommonStockholdersBasic",
                 "Net Income Available to Common (Basic)"),
)

# ═══════════════════════════════════════════════════════════════════════════
#  OPERATING INCOME
#  Falls back to pre-tax income from continuing operations
# ═══════════════════════════════════════════════════════════════════════════

OPERATING_INCOME: tuple[ConceptEntry, ...] = (
    ConceptEntry("OperatingIncomeLoss", "Operating Income (Loss)"),
    ConceptEntry(
        "IncomeLossFromContinuingOperationsBeforeIncomeTaxesExtraordinaryItemsNoncontrollingInterest",
        "Pre-tax Income from Continuing Operations",
    ),
)

GROSS_PROFIT: tuple[ConceptEntry, ...] = (
    ConceptEntry("GrossProfit", "Gross Profit"),
    ConceptEntry("GrossProfitLoss", "Gross Profit (Loss)"),
)

COST_OF_REVENUE: tuple[ConceptEntry, ...] = (
    ConceptEntry("CostOfRevenue", "Cost of Revenue"),
    ConceptEntry("CostOfGoodsAndServicesSold", "Cost of Goods & Services Sold"),
    ConceptEntry("CostOfGoodsSold", "Cost of Goods Sold"),
    ConceptEntry("CostOfServices", "Cost of Services"),
)

DEPRECIATION_AMORTIZATION: tuple[ConceptEntry, ...] = (
    ConceptEntry("DepreciationDepletionAndAmortization", "D&A (incl. depletion)"),
    ConceptEntry("DepreciationAndAmortization", "Depreciation & Amortization"),
    ConceptEntry("DepreciationAmortizationAndAccretionNet", "D&A and Accretion"),
    ConceptEntry("Depreciation", "Depreciation"),
)

OPERATING_CASH_FLOW: tuple[ConceptEntry, ...] = (
    ConceptEntry("NetCashProvidedByUsedInOperatingActivities", "Operating Cash Flow"),
    ConceptEntry("NetCashProvidedByUsedInOperatingActivitiesContinuingOperations",
                 "Operating Cash Flow (continuing ops)"),
)


METRICS: dict[str, MetricDefinition] = {
    "revenue": MetricDefinition("revenue", "Revenue", REVENUE, positive_only=True),
    "earnings": MetricDefinition("earnings", "Net Income", EARNINGS),
    "operating_income": MetricDefinition(
        "operating_income", "Operating Income", OPERATING_INCOME,
    ),
    "gross_profit": MetricDefinition("gross_profit", "Gross Profit", GROSS_PROFIT),
    "cost_of_revenue": MetricDefinition(
        "cost_of_revenue", "Cost of Revenue", COST_OF_REVENUE, positive_only=True,
    ),
    "depreciation_amortization": MetricDefinition(
        "depreciation_amortization", "Depreciation & Amortization",
        DEPRECIATION_AMORTIZATION, positive_only=True,
    ),
    "operating_cash_flow": MetricDefinition(
        "operating_cash_flow", "Operating Cash Flow", OPERATING_CASH_FLOW,
    ),
}


# ═══════════════════════════════════════════════════════════════════════════
#  Composites
# ═══════════════════════════════════════════════════════════════════════════

class CompositeKind(str, Enum):
    SUM = "sum"        # left + right
    RATIO = "ratio"    # left / right × 100


class CompositeDefinition(NamedTuple):
    name: str
    display_name: str
    kind: CompositeKind
    left: str      # catalogue metric names
    right: str


COMPOSITES: dict[str, CompositeDefinition] = {
    "ebitda": CompositeDefinition(
        "ebitda", "EBITDA", CompositeKind.SUM,
        "operating_income", "depreciation_amortization",
    ),
    "gross_margin": CompositeDefinition(
        "gross_margin", "Gross Margin %", CompositeKind.RATIO, "gross_profit", "revenue",
    ),
    "operating_margin": CompositeDefinition(
        "operating_margin", "Operating Margin %", CompositeKind.RATIO,
        "operating_income", "revenue",
    ),
    "net_margin": CompositeDefinition(
        "net_margin", "Net Margin %", CompositeKind.RATIO, "earnings", "revenue",
    ),
}

_ALIASES: dict[str, str] = {
    "revenues": "revenue",
    "sales": "revenue",
    "net_income": "earnings",
    "net_earnings": "earnings",
    "operating_profit": "operating_income",
    "cogs": "cost_of_revenue",
    "d&a": "depreciation_amortization",
    "ocf": "operating_cash_flow",
}

AnyMetric = Union[MetricDefinition, CompositeDefinition]


def normalize_metric_name(name: str) -> str:
    key = name.strip().lower().replace("-", "_").replace(" ", "_")
    return _ALIASES.get(key, key)


def get_metric(name: str) -> AnyMetric:
    """Look up a catalogue metric or composite by name (aliases accepted)."""
    key = normalize_metric_name(name)
    if key in METRICS:
        return METRICS[key]
    if key in COMPOSITES:
        return COMPOSITES[key]
    raise ValueError(
        f"Unknown metric: {name!r}. Available: {', '.join(available_metrics())}"
    )


def available_metrics() -> list[str]:
    return list(METRICS) + list(COMPOSITES)
