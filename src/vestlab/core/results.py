"""
Report structures produced by the VestLab engines.

Every report is a frozen dataclass built fresh on each call, so two calls
with the same inputs return equal reports. ``to_frame`` turns any sequence of
report rows into a pandas DataFrame for analysis and charting, and
``ReportEncoder`` serialises reports for the CLI.
"""

from __future__ import annotations

import json
import math
from collections.abc import Sequence
from dataclasses import asdict, dataclass, fields, is_dataclass
from typing import Any

import numpy as np
import pandas as pd

from .events import ProjectedEvent


@dataclass(frozen=True)
class GrantSummary:
    """Per-grant share position as of a date."""

    grant_id: str
    grant_type: str
    vested_shares: float
    unvested_shares: float
    total_shares: float
    exchanged_shares: float
    sold_shares: float
    held_shares: float  # max(0, vested - exchanged - sold)
    share_value: float  # held_shares * price (0 when no price)


@dataclass(frozen=True)
class LoanDetail:
    """Per-loan position for a loan active as of a date."""

    loan_id: str
    loan_type: str
    principal: float
    annual_interest: float  # nominal full-year interest, display only
    accrued_interest_to_date: float  # current partial year only
    maturity_date: str


@dataclass(frozen=True)
class NetValueReport:
    """
    Point-in-time valuation snapshot.

    Attributes:
        as_of_date: Valuation date
        stock_price: Latest price on or before the date, ``None`` if none
        total_*: Sums across ``by_grant``
        total_realized_gains: Gains on every sale dated on or before the date
        gross_share_value: ``total_held_shares * price``
        total_loan_principal: Principal of loans active as of the date
        total_accrued_interest: Partial-year accrual on those loans
        net_value: ``gross - principal - accrued``
        potential_net_value: Value if every unvested share vested today,
            less the principal of every loan with status active, whatever
            its origination and maturity dates
        by_grant: One summary per grant, in portfolio order
        by_loan: One detail per active loan, in portfolio order
    """

    as_of_date: str
    stock_price: float | None
    total_vested_shares: float
    total_unvested_shares: float
    total_held_shares: float
    total_exchanged_shares: float
    total_sold_shares: float
    total_realized_gains: float
    gross_share_value: float
    total_loan_principal: float
    total_accrued_interest: float
    net_value: float
    potential_net_value: float
    by_grant: tuple[GrantSummary, ...] = ()
    by_loan: tuple[LoanDetail, ...] = ()

    def grants_frame(self) -> pd.DataFrame:
        return to_frame(self.by_grant, GrantSummary)

    def loans_frame(self) -> pd.DataFrame:
        return to_frame(self.by_loan, LoanDetail)


@dataclass(frozen=True)
class TaxableEvent:
    """A vesting tranche that triggers income or a capital gain."""

    date: str
    grant_id: str
    grant_type: str
    shares: float
    price_per_share: float  # price at vest (0 when none known)
    total_value: float  # may be negative for capital gains
    tax_treatment: str


@dataclass(frozen=True)
class LoanInterest:
    """One loan's contribution to a year's interest expense."""

    loan_id: str
    loan_type: str
    principal: float
    rate: float
    interest: float


@dataclass(frozen=True)
class YearlyInterestExpense:
    """Interest accrued across loans in one calendar year."""

    year: int
    total_interest: float
    deductible_in_year: int  # interest for year Y is deductible in Y + 1
    by_loan: tuple[LoanInterest, ...] = ()


@dataclass(frozen=True)
class VestingMilestone:
    """A tranche vesting close to a reference date."""

    grant_id: str
    grant_type: str
    vest_date: str
    shares: float
    days_away: int  # negative = already vested
    estimated_value: float | None


@dataclass(frozen=True)
class YearProjection:
    """
    Simulated portfolio state at the end of one future year.

    ``projected_stock_price`` and ``accrued_interest`` are rounded to cents,
    ``gross_value`` and ``net_value`` to whole units.
    """

    year: int
    projected_stock_price: float
    vested_shares: float
    held_shares: float
    loans_outstanding: float
    accrued_interest: float  # nominal full-year interest, not prorated
    gross_value: int
    net_value: int
    events: tuple[ProjectedEvent, ...] = ()


def to_frame(rows: Sequence[Any], row_type: type | None = None) -> pd.DataFrame:
    """
    Build a DataFrame with one row per report record.

    Nested tuples (``by_loan``, ``events``) are kept as object columns. When
    ``rows`` is empty, ``row_type`` supplies the column names so that the
    frame still has the expected schema.

    **Example:**
        ```python
        from vestlab import interest_expense_by_year
        from vestlab.core.results import YearlyInterestExpense, to_frame

        df = to_frame(interest_expense_by_year(loans, 2024, 2026), YearlyInterestExpense)
        df.set_index("year")["total_interest"]
        ```
    """
    if rows:
        return pd.DataFrame([_shallow_dict(r) for r in rows])
    columns = [f.name for f in fields(row_type)] if row_type is not None else []
    return pd.DataFrame(columns=columns)


def _shallow_dict(row: Any) -> dict[str, Any]:
    if is_dataclass(row):
        return {f.name: getattr(row, f.name) for f in fields(row)}
    if hasattr(row, "_asdict"):
        return dict(row._asdict())
    return dict(row)


def to_jsonable(obj: Any) -> Any:
    """
    Recursively convert reports, events and tuples into JSON-ready values.

    Non-finite floats (the ``inf`` share count of a planned sale at a zero
    price) become ``None`` so the output stays valid JSON.
    """
    if isinstance(obj, float) and not math.isfinite(obj):
        return None
    if is_dataclass(obj) and not isinstance(obj, type):
        return {k: to_jsonable(v) for k, v in asdict(obj).items()}
    if hasattr(obj, "_asdict"):
        return {k: to_jsonable(v) for k, v in obj._asdict().items()}
    if isinstance(obj, dict):
        return {k: to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]
    return obj


class ReportEncoder(json.JSONEncoder):
    """JSON encoder that handles report dataclasses, numpy scalars and DataFrames."""

    def default(self, obj):
        if is_dataclass(obj) and not isinstance(obj, type):
            return to_jsonable(obj)
        elif isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, np.ndarray):
            return obj.tolist()
        elif isinstance(obj, pd.DataFrame):
            return obj.to_dict("records")
        elif isinstance(obj, pd.Series):
            return obj.to_dict()
        return super().default(obj)
