"""
One-call composition of every report for a portfolio.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pandas as pd

from .core.config import ReportConfig
from .core.entities import Portfolio
from .core.events import ProjectedEvent
from .core.results import (
    NetValueReport,
    TaxableEvent,
    VestingMilestone,
    YearlyInterestExpense,
    YearProjection,
    to_frame,
    to_jsonable,
)
from .projection import project_future_value
from .valuation import (
    calculate_net_value,
    cap_gains_taxable_events,
    income_taxable_events,
    interest_expense_by_year,
    vesting_milestones,
)


@dataclass(frozen=True)
class Dashboard:
    """
    Every report for one portfolio under one ``ReportConfig``.

    Attributes:
        config: Assumptions the dashboard was built with
        net_value: Snapshot at ``config.as_of_date``
        interest_expense: One entry per year of ``config.interest_window``
        income_events: Income-taxed tranches vested up to the as-of date
        cap_gains_events: Capital-gains tranches vested up to the as-of date
        milestones: Tranches vesting close to the as-of date
        projection: Forward projection over ``config.projection_window``
    """

    config: ReportConfig
    net_value: NetValueReport
    interest_expense: tuple[YearlyInterestExpense, ...] = ()
    income_events: tuple[TaxableEvent, ...] = ()
    cap_gains_events: tuple[TaxableEvent, ...] = ()
    milestones: tuple[VestingMilestone, ...] = ()
    projection: tuple[YearProjection, ...] = ()

    @property
    def total_income(self) -> float:
        return sum(e.total_value for e in self.income_events)

    @property
    def total_cap_gains(self) -> float:
        return sum(e.total_value for e in self.cap_gains_events)

    @property
    def upcoming_events(self) -> list[ProjectedEvent]:
        """Projected events of every year, in year order."""
        return [event for year in self.projection for event in year.events]

    def frame(self, name: str) -> pd.DataFrame:
        """
        DataFrame view of one report list.

        ``name`` is one of ``interest_expense``, ``income_events``,
        ``cap_gains_events``, ``milestones`` or ``projection``.
        """
        row_types = {
            "interest_expense": YearlyInterestExpense,
            "income_events": TaxableEvent,
            "cap_gains_events": TaxableEvent,
            "milestones": VestingMilestone,
            "projection": YearProjection,
        }
        if name not in row_types:
            raise KeyError(f"Unknown dashboard section '{name}'")
        return to_frame(getattr(self, name), row_types[name])

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "config": to_jsonable(self.config),
            "net_value": to_jsonable(self.net_value),
            "interest_expense": to_jsonable(self.interest_expense),
            "income_events": to_jsonable(self.income_events),
            "cap_gains_events": to_jsonable(self.cap_gains_events),
            "total_income": self.total_income,
            "total_cap_gains": self.total_cap_gains,
            "milestones": to_jsonable(self.milestones),
            "projection": to_jsonable(self.projection),
        }


def build_dashboard(portfolio: Portfolio, config: ReportConfig | None = None) -> Dashboard:
    """
    Run every report for ``portfolio``.

    Args:
        portfolio: Portfolio to report on
        config: Assumptions; ``ReportConfig()`` (as of today) when omitted

    Returns:
        Dashboard holding every report

    Example:
        ```python
        from vestlab import ReportConfig, build_dashboard

        dash = build_dashboard(portfolio, ReportConfig(as_of_date="2025-06-15"))
        dash.net_value.net_value
        dash.frame("projection")
        ```
    """
    config = config or ReportConfig()
    as_of = config.as_of_date
    interest_from, interest_to = config.interest_window
    projection_from, projection_to = config.projection_window

    return Dashboard(
        config=config,
        net_value=calculate_net_value(portfolio, as_of),
        interest_expense=tuple(
            interest_expense_by_year(portfolio.loans, interest_from, interest_to)
        ),
        income_events=tuple(income_taxable_events(portfolio, as_of)),
        cap_gains_events=tuple(cap_gains_taxable_events(portfolio, as_of)),
        milestones=tuple(
            vesting_milestones(
                portfolio,
                as_of,
                days_before=config.milestone_days_before,
                days_after=config.milestone_days_after,
            )
        ),
        projection=tuple(
            project_future_value(portfolio, config.growth_rate, projection_from, projection_to)
        ),
    )
