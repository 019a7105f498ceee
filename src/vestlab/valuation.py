"""
Valuation engine for stock grant portfolios.

Pure functions that turn a ``Portfolio`` into point-in-time reports: share
positions, loan accrual, the net value snapshot, taxable vesting events,
interest expense per year and nearby vesting milestones. Every function is
total: missing prices count as ``None``/0, over-exchanged grants clamp at
zero held shares, and empty inputs give empty or zero results.

Dates are ISO ``YYYY-MM-DD`` strings and are compared as strings.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .core.entities import (
    Loan,
    Portfolio,
    ShareExchange,
    StockGrant,
    StockPrice,
    StockSale,
    VestingTranche,
)
from .core.kinds import LoanStatus, TaxTreatment
from .core.results import (
    GrantSummary,
    LoanDetail,
    LoanInterest,
    NetValueReport,
    TaxableEvent,
    VestingMilestone,
    YearlyInterestExpense,
)
from .core.utils import days_between, days_in_year, end_of_year, get_year, start_of_year


# Stock prices


def price_on_date(prices: Iterable[StockPrice], as_of_date: str) -> float | None:
    """
    Price of the latest entry dated on or before ``as_of_date``.

    Returns ``None`` when no price exists on or before the date. Prices are
    never interpolated. If several entries share the winning date, the last
    one in ``prices`` is used.
    """
    latest: StockPrice | None = None
    for price in prices:
        if price.date <= as_of_date and (latest is None or price.date >= latest.date):
            latest = price
    return latest.price_per_share if latest is not None else None


def latest_stock_price(prices: Iterable[StockPrice]) -> StockPrice | None:
    """
    The most recent price entry, or ``None`` when there are no prices.

    Ties on the date go to the last entry, as in ``price_on_date``.
    """
    latest: StockPrice | None = None
    for price in prices:
        if latest is None or price.date >= latest.date:
            latest = price
    return latest


# Vesting and share lifecycle


def vested_tranches(grant: StockGrant, as_of_date: str) -> list[VestingTranche]:
    """Tranches of ``grant`` that vested on or before ``as_of_date``."""
    return [t for t in grant.vesting_schedule if t.vest_date <= as_of_date]


def _vested_share_count(grant: StockGrant, as_of_date: str) -> float:
    return sum(t.number_of_shares for t in vested_tranches(grant, as_of_date))


def total_vested_shares(grants: Iterable[StockGrant], as_of_date: str) -> float:
    """Vested shares summed across ``grants``."""
    return sum(_vested_share_count(g, as_of_date) for g in grants)


def exchanged_shares(
    exchanges: Iterable[ShareExchange], grant_id: str, as_of_date: str
) -> float:
    """Shares exchanged out of ``grant_id`` on or before ``as_of_date``."""
    return sum(
        e.shares_exchanged
        for e in exchanges
        if e.source_grant_id == grant_id and e.date <= as_of_date
    )


def sold_shares(sales: Iterable[StockSale], grant_id: str, as_of_date: str) -> float:
    """Shares sold out of ``grant_id`` on or before ``as_of_date``."""
    return sum(
        s.shares_sold for s in sales if s.source_grant_id == grant_id and s.date <= as_of_date
    )


def held_shares(
    grant: StockGrant,
    exchanges: Sequence[ShareExchange],
    sales: Sequence[StockSale],
    as_of_date: str,
) -> float:
    """
    Vested shares still held: ``max(0, vested - exchanged - sold)``.

    Exchanging or selling more than has vested is tolerated; the result
    clamps at zero rather than going negative.
    """
    vested = _vested_share_count(grant, as_of_date)
    exchanged = exchanged_shares(exchanges, grant.id, as_of_date)
    sold = sold_shares(sales, grant.id, as_of_date)
    return max(0, vested - exchanged - sold)


# Loans


def active_loans(loans: Iterable[Loan], as_of_date: str) -> list[Loan]:
    """
    Loans with status ``active`` whose term covers ``as_of_date``.

    Both bounds are inclusive. A loan past maturity that is still marked
    ``active`` drops out here, but its status is left alone.
    """
    return [
        loan
        for loan in loans
        if loan.status == LoanStatus.ACTIVE
        and loan.origination_date <= as_of_date
        and loan.maturity_date >= as_of_date
    ]


def accrued_interest(loan: Loan, as_of_date: str) -> float:
    """
    Simple interest accrued in the current partial year.

    Accrual runs from the later of the origination date and January 1 of
    ``as_of_date``'s year, on an actual/actual day count. Interest for
    earlier full years is assumed to have been rolled into separate
    ``interest`` loans already.

    Args:
        loan: Loan to accrue
        as_of_date: Accrual end date

    Returns:
        Accrued interest, 0 when ``as_of_date`` is on or before the start
    """
    year = get_year(as_of_date)
    accrual_start = max(loan.origination_date, start_of_year(year))
    if as_of_date <= accrual_start:
        return 0.0
    days = days_between(accrual_start, as_of_date)
    return loan.principal_amount * loan.annual_interest_rate * (days / days_in_year(year))


def interest_for_year(loan: Loan, year: int) -> float:
    """
    Interest a loan accrues within calendar ``year``.

    The year is clipped to ``[max(origination, Jan 1), min(maturity, Dec 31)]``
    and prorated on that year's actual day count. Returns 0 for loans that are
    not ``active`` or whose term does not overlap the year.
    """
    year_start = start_of_year(year)
    year_end = end_of_year(year)

    if loan.status != LoanStatus.ACTIVE:
        return 0.0
    if year_end < loan.origination_date or loan.maturity_date < year_start:
        return 0.0

    effective_start = max(loan.origination_date, year_start)
    effective_end = min(loan.maturity_date, year_end)
    days = days_between(effective_start, effective_end)
    return loan.principal_amount * loan.annual_interest_rate * (days / days_in_year(year))


# Net value


def calculate_net_value(portfolio: Portfolio, as_of_date: str) -> NetValueReport:
    """
    Build the valuation snapshot of ``portfolio`` as of ``as_of_date``.

    ``net_value`` deducts principal and accrued interest of loans active on
    the date. ``potential_net_value`` values held plus unvested shares and
    deducts the principal of every loan with status ``active``, whatever its
    term, so the two figures can disagree about which loans count.

    Args:
        portfolio: Portfolio to value
        as_of_date: Valuation date

    Returns:
        NetValueReport with per-grant and per-loan breakdowns

    Example:
        ```python
        from vestlab import calculate_net_value

        report = calculate_net_value(portfolio, "2025-06-15")
        print(report.net_value, report.grants_frame())
        ```
    """
    stock_price = price_on_date(portfolio.stock_prices, as_of_date)
    price = stock_price if stock_price is not None else 0.0
    exchanges = portfolio.share_exchanges
    sales = portfolio.stock_sales

    by_grant = []
    for grant in portfolio.grants:
        vested = _vested_share_count(grant, as_of_date)
        exchanged = exchanged_shares(exchanges, grant.id, as_of_date)
        sold = sold_shares(sales, grant.id, as_of_date)
        held = max(0, vested - exchanged - sold)
        by_grant.append(
            GrantSummary(
                grant_id=grant.id,
                grant_type=grant.type,
                vested_shares=vested,
                unvested_shares=grant.total_shares - vested,
                total_shares=grant.total_shares,
                exchanged_shares=exchanged,
                sold_shares=sold,
                held_shares=held,
                share_value=held * price,
            )
        )

    by_loan = [
        LoanDetail(
            loan_id=loan.id,
            loan_type=loan.type,
            principal=loan.principal_amount,
            annual_interest=loan.principal_amount * loan.annual_interest_rate,
            accrued_interest_to_date=accrued_interest(loan, as_of_date),
            maturity_date=loan.maturity_date,
        )
        for loan in active_loans(portfolio.loans, as_of_date)
    ]

    total_held = sum(g.held_shares for g in by_grant)
    total_unvested = sum(g.unvested_shares for g in by_grant)
    gross = total_held * price
    total_principal = sum(x.principal for x in by_loan)
    total_accrued = sum(x.accrued_interest_to_date for x in by_loan)
    all_active_principal = sum(
        loan.principal_amount for loan in portfolio.loans if loan.status == LoanStatus.ACTIVE
    )

    return NetValueReport(
        as_of_date=as_of_date,
        stock_price=stock_price,
        total_vested_shares=sum(g.vested_shares for g in by_grant),
        total_unvested_shares=total_unvested,
        total_held_shares=total_held,
        total_exchanged_shares=sum(g.exchanged_shares for g in by_grant),
        total_sold_shares=sum(g.sold_shares for g in by_grant),
        total_realized_gains=sum(s.realized_gain for s in sales if s.date <= as_of_date),
        gross_share_value=gross,
        total_loan_principal=total_principal,
        total_accrued_interest=total_accrued,
        net_value=gross - total_principal - total_accrued,
        potential_net_value=(total_held + total_unvested) * price - all_active_principal,
        by_grant=tuple(by_grant),
        by_loan=tuple(by_loan),
    )


# Taxable events


def income_taxable_events(portfolio: Portfolio, up_to_date: str) -> list[TaxableEvent]:
    """
    Income-taxed tranches vested on or before ``up_to_date``.

    Value is ``shares * price_at_vest``, with the price looked up at the
    tranche's vest date (0 when unknown).
    """
    return _taxable_events(portfolio, up_to_date, TaxTreatment.INCOME)


def cap_gains_taxable_events(portfolio: Portfolio, up_to_date: str) -> list[TaxableEvent]:
    """
    Capital-gains tranches vested on or before ``up_to_date``.

    Value is ``shares * (price_at_vest - grant price)`` and is negative when
    the share price fell below the grant price.
    """
    return _taxable_events(portfolio, up_to_date, TaxTreatment.CAPITAL_GAINS)


def _taxable_events(portfolio: Portfolio, up_to_date: str, treatment: str) -> list[TaxableEvent]:
    events = []
    for grant in portfolio.grants:
        for tranche in grant.vesting_schedule:
            if tranche.tax_treatment != treatment or tranche.vest_date > up_to_date:
                continue
            price_at_vest = price_on_date(portfolio.stock_prices, tranche.vest_date)
            if price_at_vest is None:
                price_at_vest = 0.0
            if treatment == TaxTreatment.CAPITAL_GAINS:
                total_value = tranche.number_of_shares * (
                    price_at_vest - grant.price_per_share_at_grant
                )
            else:
                total_value = tranche.number_of_shares * price_at_vest
            events.append(
                TaxableEvent(
                    date=tranche.vest_date,
                    grant_id=grant.id,
                    grant_type=grant.type,
                    shares=tranche.number_of_shares,
                    price_per_share=price_at_vest,
                    total_value=total_value,
                    tax_treatment=treatment,
                )
            )
    # sorted() is stable, so same-day events keep grant/tranche order
    return sorted(events, key=lambda e: e.date)


# Interest expense


def interest_expense_by_year(
    loans: Sequence[Loan], from_year: int, to_year: int
) -> list[YearlyInterestExpense]:
    """
    Interest accrued per calendar year, ``from_year`` to ``to_year`` inclusive.

    Interest accrued in year Y is deductible in Y + 1. The per-loan breakdown
    only lists loans with non-zero interest in the year.
    """
    results = []
    for year in range(from_year, to_year + 1):
        by_loan = []
        for loan in loans:
            interest = interest_for_year(loan, year)
            if interest > 0:
                by_loan.append(
                    LoanInterest(
                        loan_id=loan.id,
                        loan_type=loan.type,
                        principal=loan.principal_amount,
                        rate=loan.annual_interest_rate,
                        interest=interest,
                    )
                )
        results.append(
            YearlyInterestExpense(
                year=year,
                total_interest=sum(x.interest for x in by_loan),
                deductible_in_year=year + 1,
                by_loan=tuple(by_loan),
            )
        )
    return results


# Milestones


def vesting_milestones(
    portfolio: Portfolio,
    as_of_date: str,
    days_before: int = 30,
    days_after: int = 90,
) -> list[VestingMilestone]:
    """
    Tranches vesting within ``[-days_before, days_after]`` days of ``as_of_date``.

    ``days_away`` is negative for tranches that already vested. The estimated
    value uses the price as of ``as_of_date`` and is ``None`` without one.
    Results are ordered by ``days_away``.
    """
    price = price_on_date(portfolio.stock_prices, as_of_date)
    milestones = []
    for grant in portfolio.grants:
        for tranche in grant.vesting_schedule:
            days_away = days_between(as_of_date, tranche.vest_date)
            if -days_before <= days_away <= days_after:
                milestones.append(
                    VestingMilestone(
                        grant_id=grant.id,
                        grant_type=grant.type,
                        vest_date=tranche.vest_date,
                        shares=tranche.number_of_shares,
                        days_away=days_away,
                        estimated_value=(
                            tranche.number_of_shares * price if price is not None else None
                        ),
                    )
                )
    milestones.sort(key=lambda m: m.days_away)
    return milestones
