"""
Tests for entity conversion and factories.
"""

import dataclasses

import pytest
from vestlab.core.entities import (
    Loan,
    Portfolio,
    ProgramConfig,
    StockGrant,
    create_grant,
    create_share_exchange,
    create_stock_sale,
    create_vesting_tranche,
    default_program_config,
    empty_portfolio,
)
from vestlab.core.kinds import GrantType, LoanStatus, SaleReason, TaxTreatment


class TestFromDict:
    def test_grant_reads_camel_case(self):
        grant = StockGrant.from_dict(
            {
                "id": "g1",
                "type": "bonus",
                "grantDate": "2024-03-01",
                "totalShares": 30,
                "pricePerShareAtGrant": 12.5,
                "vestingSchedule": [
                    {"vestDate": "2025-03-01", "numberOfShares": 30, "taxTreatment": "income"}
                ],
                "relatedGrantId": "g0",
            }
        )
        assert grant.type == GrantType.BONUS
        assert grant.price_per_share_at_grant == 12.5
        assert grant.related_grant_id == "g0"
        assert grant.notes is None
        assert len(grant.vesting_schedule) == 1
        # tranche ids are generated when missing
        assert grant.vesting_schedule[0].id

    def test_loan_status_defaults_to_active(self):
        loan = Loan.from_dict(
            {
                "type": "tax",
                "principalAmount": 800,
                "annualInterestRate": 0.03,
                "originationDate": "2024-01-01",
                "maturityDate": "2029-01-01",
            }
        )
        assert loan.status == LoanStatus.ACTIVE
        assert loan.id

    def test_to_dict_drops_unset_optionals(self, scenario_portfolio):
        data = scenario_portfolio.grants[0].to_dict()
        assert "notes" not in data
        assert "relatedGrantId" not in data
        assert data["vestingSchedule"][0]["vestDate"] == "2024-01-01"

    def test_portfolio_round_trip(self, scenario_portfolio):
        assert Portfolio.from_dict(scenario_portfolio.to_dict()) == scenario_portfolio


def test_entities_are_frozen(scenario_portfolio):
    with pytest.raises(dataclasses.FrozenInstanceError):
        scenario_portfolio.grants[0].total_shares = 5


def test_empty_portfolio():
    portfolio = empty_portfolio()
    assert portfolio.is_empty
    assert portfolio.grants == ()
    assert portfolio.to_dict()["stockSales"] == []


class TestFactories:
    def test_ids_are_unique(self):
        a = create_vesting_tranche(vest_date="2025-01-01", number_of_shares=1)
        b = create_vesting_tranche(vest_date="2025-01-01", number_of_shares=1)
        assert a.id != b.id

    def test_create_grant_freezes_schedule(self):
        tranche = create_vesting_tranche(
            vest_date="2025-01-01", number_of_shares=10, tax_treatment=TaxTreatment.INCOME
        )
        grant = create_grant(
            type=GrantType.FREE,
            grant_date="2024-01-01",
            total_shares=10,
            price_per_share_at_grant=0,
            vesting_schedule=[tranche],
        )
        assert grant.vesting_schedule == (tranche,)

    def test_exchange_value_defaults_to_shares_times_price(self):
        exchange = create_share_exchange(
            date="2025-02-01",
            source_grant_id="g1",
            target_grant_id="g2",
            shares_exchanged=40,
            price_per_share_at_exchange=25.0,
        )
        assert exchange.value_at_exchange == 1000.0

    def test_sale_proceeds_and_gain(self):
        sale = create_stock_sale(
            date="2025-02-01",
            source_grant_id="g1",
            shares_sold=100,
            price_per_share=25.0,
            cost_basis=10.0,
            reason=SaleReason.LOAN_PAYOFF,
        )
        assert sale.total_proceeds == 2500.0
        assert sale.realized_gain == 1500.0


class TestDefaultProgramConfig:
    def test_standard_terms(self):
        config = default_program_config(2025)
        assert isinstance(config, ProgramConfig)
        assert config.name == "2025 Stock Purchase Program"
        assert config.standard_interest_rate == 0.04
        assert config.standard_loan_term_years == 10
        assert config.down_payment_percent == 0.1
        assert config.share_exchange_available is True

    def test_templates_cover_every_grant_type(self):
        templates = default_program_config(2025).grant_templates
        assert set(templates) == set(GrantType.all_kinds())
        for template in templates.values():
            total = sum(t.share_fraction for t in template.vesting_template)
            assert total == pytest.approx(1.0)

    def test_purchase_template_treatments(self):
        purchase = default_program_config(2025).grant_templates[GrantType.PURCHASE]
        assert [t.tax_treatment for t in purchase.vesting_template] == [
            TaxTreatment.NONE,
            TaxTreatment.NONE,
            TaxTreatment.NONE,
            TaxTreatment.CAPITAL_GAINS,
            TaxTreatment.CAPITAL_GAINS,
        ]
