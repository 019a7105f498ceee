"""
Forward projection of a stock grant portfolio.

``project_future_value`` simulates each calendar year in turn under a constant
share-price growth assumption. Loans that mature during a year are assumed to
be repaid by selling shares at that year's projected price; those planned
sales reduce held shares in that year and every later one.
"""

from __future__ import annotations

import logging
import math

from .core.currency import round_cents, round_whole
from .core.entities import Portfolio
from .core.events import ProjectedEvent
from .core.kinds import EventKind, LoanStatus
from .core.results import YearProjection
from .core.utils import days_between, end_of_year, get_year
from .valuation import active_loans, latest_stock_price, total_vested_shares

logger = logging.getLogger(__name__)

# Maturity payoff uses a flat 365-day year, unlike actual/actual accrual
_PAYOFF_DAYS_PER_YEAR = 365
# Rough tax estimate on planned sales
_PLANNED_SALE_BASIS_FRACTION = 0.8
_PLANNED_SALE_TAX_RATE = 0.15


def _fmt_shares(shares: float) -> str:
    if math.isinf(shares):
        return "all"
    return f"{shares:,.0f}" if float(shares).is_integer() else f"{shares:,}"


def project_future_value(
    portfolio: Portfolio,
    growth_rate: float,
    from_year: int,
    to_year: int,
) -> list[YearProjection]:
    """
    Project the portfolio forward one calendar year at a time.

    The projected price for a year is the latest known price compounded at
    ``growth_rate`` from that price's year; it is always indexed against that
    single base price. For each active loan maturing in the year, the amount
    owed at maturity is ``principal * (1 + rate * days / 365)`` and the
    number of shares needed to cover it (rounded up) is treated as sold on
    the maturity date.

    Args:
        portfolio: Portfolio to project
        growth_rate: Annual share-price growth as a decimal (0.08 = 8%)
        from_year: First projected year
        to_year: Last projected year (inclusive)

    Returns:
        One YearProjection per year, or an empty list when the portfolio
        has no stock prices to project from

    Example:
        ```python
        from vestlab import project_future_value
        from vestlab.core.results import YearProjection, to_frame

        years = project_future_value(portfolio, 0.08, 2025, 2035)
        to_frame(years, YearProjection)[["year", "net_value"]]
        ```
    """
    base = latest_stock_price(portfolio.stock_prices)
    if base is None:
        logger.info("No stock prices available; nothing to project")
        return []

    base_price = base.price_per_share
    base_year = get_year(base.date)
    cumulative_planned_sale_shares = 0
    projections: list[YearProjection] = []

    for year in range(from_year, to_year + 1):
        year_end = end_of_year(year)
        projected_price = base_price * (1 + growth_rate) ** (year - base_year)
        events: list[ProjectedEvent] = []

        for grant in portfolio.grants:
            for tranche in grant.vesting_schedule:
                if get_year(tranche.vest_date) == year:
                    events.append(
                        ProjectedEvent(
                            date=tranche.vest_date,
                            kind=EventKind.VESTING,
                            description=f"{_fmt_shares(tranche.number_of_shares)} shares vest",
                            shares=tranche.number_of_shares,
                        )
                    )

        for loan in portfolio.loans:
            if loan.status != LoanStatus.ACTIVE or get_year(loan.maturity_date) != year:
                continue
            years_active = (
                days_between(loan.origination_date, loan.maturity_date) / _PAYOFF_DAYS_PER_YEAR
            )
            total_owed = loan.principal_amount * (1 + loan.annual_interest_rate * years_active)
            if projected_price > 0:
                shares_needed = math.ceil(total_owed / projected_price)
                proceeds = shares_needed * projected_price
            else:
                # worthless shares never cover the loan, so every held share goes
                shares_needed = math.inf
                proceeds = 0.0
            gain_per_share = projected_price - base_price * _PLANNED_SALE_BASIS_FRACTION
            cumulative_planned_sale_shares += shares_needed
            logger.debug(
                "Loan %s matures %s: %.2f owed, planning sale of %s shares",
                loan.id,
                loan.maturity_date,
                total_owed,
                shares_needed,
            )

            events.append(
                ProjectedEvent(
                    date=loan.maturity_date,
                    kind=EventKind.LOAN_MATURITY,
                    description=f"Loan matures: ${round_whole(total_owed):,} owed",
                    amount=total_owed,
                )
            )
            events.append(
                ProjectedEvent(
                    date=loan.maturity_date,
                    kind=EventKind.PLANNED_SALE,
                    description=f"Sell ~{_fmt_shares(shares_needed)} shares to cover loan",
                    shares=shares_needed,
                    amount=proceeds,
                    tax_impact=(
                        shares_needed * gain_per_share * _PLANNED_SALE_TAX_RATE
                        if projected_price > 0
                        else 0.0
                    ),
                )
            )

        vested = total_vested_shares(portfolio.grants, year_end)
        exchanged = sum(
            e.shares_exchanged for e in portfolio.share_exchanges if e.date <= year_end
        )
        sold = sum(s.shares_sold for s in portfolio.stock_sales if s.date <= year_end)
        held = max(0, vested - exchanged - sold - cumulative_planned_sale_shares)

        year_end_loans = active_loans(portfolio.loans, year_end)
        loans_outstanding = sum(loan.principal_amount for loan in year_end_loans)
        interest = sum(
            loan.principal_amount * loan.annual_interest_rate for loan in year_end_loans
        )

        gross_value = held * projected_price
        net_value = gross_value - loans_outstanding - interest

        projections.append(
            YearProjection(
                year=year,
                projected_stock_price=round_cents(projected_price),
                vested_shares=vested,
                held_shares=held,
                loans_outstanding=loans_outstanding,
                accrued_interest=round_cents(interest),
                gross_value=round_whole(gross_value),
                net_value=round_whole(net_value),
                events=tuple(events),
            )
        )

    return projections
