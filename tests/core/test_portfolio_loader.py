from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
import yaml
from vestlab.core.entities import Portfolio, StockPrice, empty_portfolio
from vestlab.core.errors import PortfolioImportError
from vestlab.core.portfolio_loader import export_portfolio, load_portfolio, merge_portfolios


def _valid_grant(grant_id: str = "g1", shares: int = 50) -> dict:
    return {
        "id": grant_id,
        "type": "purchase",
        "grantDate": "2024-01-01",
        "totalShares": shares,
        "pricePerShareAtGrant": 10,
        "vestingSchedule": [
            {"id": "t1", "vestDate": "2025-01-01", "numberOfShares": shares, "taxTreatment": "income"}
        ],
    }


class TestLoadPortfolio:
    def test_valid_json_text(self, scenario_dict):
        result = load_portfolio(json.dumps(scenario_dict))
        assert result.success
        assert result.errors == []
        assert result.warnings == []
        assert len(result.portfolio.grants) == 1
        assert len(result.portfolio.loans) == 1
        assert len(result.portfolio.stock_prices) == 2

    def test_mapping_source(self, scenario_dict, scenario_portfolio):
        result = load_portfolio(scenario_dict)
        assert result.portfolio == scenario_portfolio
        assert result.source == "<mapping>"

    def test_invalid_json(self):
        result = load_portfolio("{bad json!!!")
        assert not result.success
        assert len(result.errors) == 1
        assert result.errors[0].startswith("Invalid JSON")
        assert result.portfolio == empty_portfolio()

    @pytest.mark.parametrize("text", ['"hello"', "[1,2,3]", "null"])
    def test_non_object_root(self, text):
        result = load_portfolio(text)
        assert not result.success
        assert result.errors == [
            "JSON must be an object with grants, loans, and stockPrices arrays."
        ]

    def test_empty_object(self):
        result = load_portfolio("{}")
        assert result.success
        assert result.portfolio == empty_portfolio()
        assert result.warnings == []

    def test_collection_not_a_list(self):
        result = load_portfolio(json.dumps({"grants": "not an array", "stockPrices": 42}))
        assert result.success
        assert "grants field is not an array, skipping." in result.warnings
        assert "stockPrices field is not an array, skipping." in result.warnings

    def test_invalid_records_are_skipped(self, caplog):
        data = {
            "grants": [{"id": "bad-grant", "grantDate": "2024-01-01"}, _valid_grant()],
            "loans": [{"id": "bad-loan"}],
            "stockPrices": [{"date": "bad-date", "pricePerShare": 50}, "oops"],
        }
        with caplog.at_level(logging.WARNING, logger="vestlab.core.portfolio_loader"):
            result = load_portfolio(data)

        assert result.success
        assert [g.id for g in result.portfolio.grants] == ["g1"]
        assert result.portfolio.loans == ()
        assert result.portfolio.stock_prices == ()
        assert len(result.warnings) == 4
        assert result.warnings[0].startswith("Grant 0: ")
        assert result.warnings[1].startswith("Loan 0: ")
        assert result.warnings[2] == "Stock price 0: Date is required (YYYY-MM-DD)."
        assert result.warnings[3] == "Stock price 1: Record must be an object."
        assert "skipping Grant 0" in caplog.text

    def test_yaml_file_with_bare_dates(self, tmp_path: Path):
        path = tmp_path / "portfolio.yaml"
        path.write_text(
            "stockPrices:\n"
            "  - date: 2025-01-01\n"
            "    pricePerShare: 25\n",
            encoding="utf-8",
        )
        result = load_portfolio(path)
        assert result.success
        assert result.portfolio.stock_prices == (StockPrice("2025-01-01", 25),)
        assert result.source == str(path)

    def test_json_path_given_as_string(self, tmp_path: Path, scenario_dict):
        path = tmp_path / "portfolio.json"
        path.write_text(json.dumps(scenario_dict), encoding="utf-8")
        result = load_portfolio(str(path))
        assert len(result.portfolio.grants) == 1

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_portfolio(tmp_path / "missing.json")

    def test_strict_raises(self):
        with pytest.raises(PortfolioImportError) as exc:
            load_portfolio("[1, 2]", strict=True)
        assert exc.value.source == "<text>"
        assert "JSON must be an object" in str(exc.value)

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "broken.yml"
        path.write_text("grants: [unclosed", encoding="utf-8")
        result = load_portfolio(path)
        assert not result.success
        assert result.errors[0].startswith("Invalid YAML")


class TestExportPortfolio:
    def test_json_export_is_indented_and_reloadable(self, scenario_portfolio):
        text = export_portfolio(scenario_portfolio)
        assert "\n  " in text
        assert load_portfolio(text).portfolio == scenario_portfolio

    def test_empty_export(self):
        data = json.loads(export_portfolio(empty_portfolio()))
        assert data == {
            "grants": [],
            "loans": [],
            "stockPrices": [],
            "programConfigs": [],
            "shareExchanges": [],
            "stockSales": [],
        }

    def test_yaml_file(self, tmp_path: Path, scenario_portfolio):
        path = tmp_path / "out.yaml"
        export_portfolio(scenario_portfolio, path)
        assert yaml.safe_load(path.read_text(encoding="utf-8"))["grants"][0]["id"] == "g1"
        assert load_portfolio(path).portfolio == scenario_portfolio


class TestMergePortfolios:
    def test_two_empty(self):
        assert merge_portfolios(empty_portfolio(), empty_portfolio()) == empty_portfolio()

    def test_upsert_by_id(self):
        existing = load_portfolio({"grants": [_valid_grant("g1", 100)]}).portfolio
        incoming = load_portfolio(
            {"grants": [_valid_grant("g2", 10), _valid_grant("g1", 200)]}
        ).portfolio
        merged = merge_portfolios(existing, incoming)
        assert [g.id for g in merged.grants] == ["g1", "g2"]
        assert merged.grants[0].total_shares == 200

    def test_prices_merged_by_date_and_sorted(self):
        existing = Portfolio(
            stock_prices=(StockPrice("2025-01-01", 30.0), StockPrice("2024-06-01", 15.0))
        )
        incoming = Portfolio(
            stock_prices=(StockPrice("2024-06-01", 20.0), StockPrice("2024-01-01", 10.0))
        )
        merged = merge_portfolios(existing, incoming)
        assert merged.stock_prices == (
            StockPrice("2024-01-01", 10.0),
            StockPrice("2024-06-01", 20.0),
            StockPrice("2025-01-01", 30.0),
        )
