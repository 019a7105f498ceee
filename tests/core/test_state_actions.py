"""
Tests for portfolio state transitions.
"""

from dataclasses import replace

import pytest
from conftest import make_grant, make_loan
from vestlab.core.entities import Portfolio, StockPrice, default_program_config, empty_portfolio
from vestlab.core.errors import ConfigError
from vestlab.core.kinds import LoanStatus
from vestlab.core.state import (
    AddGrant,
    AddLoan,
    AddProgramConfig,
    AddStockPrice,
    ClearAll,
    DeleteGrant,
    DeleteLoan,
    DeleteStockPrice,
    SetPortfolio,
    UpdateGrant,
    UpdateLoan,
    UpdateStockPrice,
    apply_action,
)


class TestRecordActions:
    def test_add_appends(self):
        state = apply_action(empty_portfolio(), AddGrant(make_grant("g1")))
        state = apply_action(state, AddGrant(make_grant("g2")))
        assert [g.id for g in state.grants] == ["g1", "g2"]

    def test_update_replaces_in_place(self, scenario_portfolio):
        paid = replace(scenario_portfolio.loans[0], status=LoanStatus.PAID_OFF)
        state = apply_action(scenario_portfolio, UpdateLoan(paid))
        assert state.loans == (paid,)
        # input untouched
        assert scenario_portfolio.loans[0].status == LoanStatus.ACTIVE

    def test_update_unknown_id_is_noop(self, scenario_portfolio):
        state = apply_action(scenario_portfolio, UpdateGrant(make_grant("ghost")))
        assert state == scenario_portfolio

    def test_delete(self, scenario_portfolio):
        state = apply_action(scenario_portfolio, DeleteLoan("l1"))
        assert state.loans == ()
        assert state.grants == scenario_portfolio.grants

    def test_delete_unknown_id_is_noop(self, scenario_portfolio):
        assert apply_action(scenario_portfolio, DeleteGrant("ghost")) == scenario_portfolio

    def test_program_configs(self):
        config = default_program_config(2025)
        state = apply_action(empty_portfolio(), AddProgramConfig(config))
        assert state.program_configs == (config,)


class TestStockPriceActions:
    def test_add_keeps_prices_sorted(self, scenario_portfolio):
        state = apply_action(scenario_portfolio, AddStockPrice(StockPrice("2024-06-01", 22.0)))
        assert [p.date for p in state.stock_prices] == ["2024-01-01", "2024-06-01", "2025-01-01"]

    def test_add_overwrites_same_date(self, scenario_portfolio):
        state = apply_action(scenario_portfolio, AddStockPrice(StockPrice("2025-01-01", 30.0)))
        assert len(state.stock_prices) == 2
        assert state.stock_prices[-1].price_per_share == 30.0

    def test_update_moves_date(self, scenario_portfolio):
        state = apply_action(
            scenario_portfolio,
            UpdateStockPrice(old_date="2024-01-01", price=StockPrice("2025-06-01", 28.0)),
        )
        assert [p.date for p in state.stock_prices] == ["2025-01-01", "2025-06-01"]

    def test_delete(self, scenario_portfolio):
        state = apply_action(scenario_portfolio, DeleteStockPrice("2024-01-01"))
        assert [p.date for p in state.stock_prices] == ["2025-01-01"]


def test_set_and_clear(scenario_portfolio):
    state = apply_action(empty_portfolio(), SetPortfolio(scenario_portfolio))
    assert state is scenario_portfolio
    assert apply_action(state, ClearAll()) == Portfolio()


def test_add_loan_then_engine_sees_it():
    state = apply_action(empty_portfolio(), AddLoan(make_loan()))
    assert state.loans[0].principal_amount == 5000.0


def test_unknown_action_raises():
    with pytest.raises(ConfigError, match="Unknown portfolio action"):
        apply_action(empty_portfolio(), object())
