"""
Shared portfolio fixtures.
"""

from __future__ import annotations

import pytest
from vestlab.core.entities import (
    Loan,
    Portfolio,
    StockGrant,
    StockPrice,
    VestingTranche,
)
from vestlab.core.kinds import GrantType, LoanStatus, LoanType, TaxTreatment


def make_grant(
    grant_id: str = "g1",
    tranches: list[tuple[str, float, str]] | None = None,
    price_at_grant: float = 10.0,
    grant_type: str = GrantType.PURCHASE,
    grant_date: str = "2023-01-01",
) -> StockGrant:
    """Build a grant from ``(vest_date, shares, tax_treatment)`` triples."""
    tranches = tranches or [("2024-01-01", 100, TaxTreatment.NONE)]
    schedule = tuple(
        VestingTranche(id=f"{grant_id}-t{i}", vest_date=d, number_of_shares=n, tax_treatment=t)
        for i, (d, n, t) in enumerate(tranches)
    )
    return StockGrant(
        id=grant_id,
        type=grant_type,
        grant_date=grant_date,
        total_shares=sum(n for _, n, _ in tranches),
        price_per_share_at_grant=price_at_grant,
        vesting_schedule=schedule,
    )


def make_loan(
    loan_id: str = "l1",
    principal: float = 5000.0,
    rate: float = 0.04,
    origination: str = "2023-01-01",
    maturity: str = "2033-01-01",
    status: str = LoanStatus.ACTIVE,
    loan_type: str = LoanType.PURCHASE,
) -> Loan:
    return Loan(
        id=loan_id,
        type=loan_type,
        principal_amount=principal,
        annual_interest_rate=rate,
        origination_date=origination,
        maturity_date=maturity,
        status=status,
    )


@pytest.fixture
def scenario_portfolio() -> Portfolio:
    """One 1000-share purchase grant, one 5000 loan, prices for 2024 and 2025."""
    grant = make_grant(
        "g1",
        [
            ("2024-01-01", 250, TaxTreatment.INCOME),
            ("2025-01-01", 250, TaxTreatment.INCOME),
            ("2026-01-01", 250, TaxTreatment.CAPITAL_GAINS),
            ("2027-01-01", 250, TaxTreatment.NONE),
        ],
    )
    return Portfolio(
        grants=(grant,),
        loans=(make_loan(),),
        stock_prices=(
            StockPrice(date="2024-01-01", price_per_share=20.0),
            StockPrice(date="2025-01-01", price_per_share=25.0),
        ),
    )


@pytest.fixture
def scenario_dict(scenario_portfolio: Portfolio) -> dict:
    """The scenario portfolio in its camelCase interchange form."""
    return scenario_portfolio.to_dict()
