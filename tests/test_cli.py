"""Tests for the command-line entry point."""

import json

from sec_series.cli import _fmt, main


def test_fmt():
    assert _fmt(None) == "N/A"
    assert _fmt(1_500_000_000) == "$1.50B"
    assert _fmt(-2_000_000) == "-$2.00M"
    assert _fmt(999) == "$999"


def test_help_and_metrics(capsys):
    assert main([]) == 0
    assert main(["metrics"]) == 0
    out = capsys.readouterr().out
    assert "revenue" in out
    assert "RevenueFromContractWithCustomerExcludingAssessedTax" in out
    assert "ebitda" in out


def test_usage_errors(capsys):
    assert main(["bogus"]) == 2
    assert main(["quarterly"]) == 2
    assert main(["facts", "a.json", "Revenues", "extra"]) == 2
    assert "Usage" in capsys.readouterr().out


def test_quarterly(facts_file, capsys):
    assert main(["quarterly", str(facts_file), "revenue"]) == 0
    out = capsys.readouterr().out
    assert "Concept: Revenues" in out
    assert "2023-12-31" in out
    assert "Total: 8 period(s)" in out


def test_yoy_ttm_basis(facts_file, capsys):
    assert main(["yoy", str(facts_file), "revenue", "ttm"]) == 0
    assert "34.78%" in capsys.readouterr().out


def test_margin_printed_as_percent(facts_file, capsys):
    assert main(["ttm", str(facts_file), "net_margin"]) == 0
    assert "10.00%" in capsys.readouterr().out


def test_series_json(facts_file, capsys):
    assert main(["series", str(facts_file), "earnings"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["concept"] == "NetIncomeLoss"
    assert len(payload["quarterly"]) == 8


def test_no_data_message(facts_file, capsys):
    assert main(["quarterly", str(facts_file), "gross_profit"]) == 0
    assert "no concept found" in capsys.readouterr().out


def test_facts(facts_file, capsys):
    assert main(["facts", str(facts_file), "NetIncomeLoss"]) == 0
    assert "Total: 8 fact(s)" in capsys.readouterr().out


def test_errors_return_one(facts_file, tmp_path, capsys):
    assert main(["quarterly", str(facts_file), "free_cash_flow"]) == 1
    assert main(["facts", str(tmp_path / "missing.json")]) == 1
    assert "ERROR" in capsys.readouterr().out
