"""Tests for the metric catalogue and settings."""

import pytest

from sec_series.config import Settings
from sec_series.xbrl_mappings import (
    COMPOSITES,
    METRICS,
    available_metrics,
    get_metric,
    normalize_metric_name,
)


def test_revenue_concept_order():
    keys = METRICS["revenue"].concept_keys
    assert keys[0] == "RevenueFromContractWithCustomerExcludingAssessedTax"
    assert keys.index("SalesRevenueNet") < keys.index("Revenues")
    assert METRICS["revenue"].positive_only
    assert not METRICS["earnings"].positive_only


def test_composites_reference_catalogue_metrics():
    for composite in COMPOSITES.values():
        assert composite.left in METRICS
        assert composite.right in METRICS


def test_aliases():
    assert normalize_metric_name(" Net-Income ") == "earnings"
    assert normalize_metric_name("COGS") == "cost_of_revenue"
    assert get_metric("sales") is METRICS["revenue"]
    assert get_metric("Operating Margin") is COMPOSITES["operating_margin"]


def test_unknown_metric():
    with pytest.raises(ValueError, match="Unknown metric"):
        get_metric("eps")


def test_available_metrics():
    names = available_metrics()
    assert names[0] == "revenue"
    assert "ebitda" in names


def test_settings_defaults_and_env(monkeypatch):
    monkeypatch.setenv("MAX_QUARTERS", "12")
    monkeypatch.setenv("FACTS_UNIT", ' "EUR" ')
    settings = Settings(_env_file=None)
    assert settings.max_quarters == 12
    assert settings.facts_unit == "EUR"
    assert settings.max_ttm_points == 37
    assert settings.max_growth_points == 36
