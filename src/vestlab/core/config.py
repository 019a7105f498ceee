"""
Report configuration for VestLab.

The engines take their assumptions as plain arguments. ``ReportConfig``
bundles the defaults the dashboard and CLI use when the caller does not
supply them.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field

from .errors import ConfigError
from .utils import get_year, parse_date, today

_LONG_HORIZON_YEARS = 50


@dataclass(frozen=True)
class ReportConfig:
    """
    Assumptions for a dashboard run.

    Attributes:
        as_of_date: Valuation date (default: today)
        growth_rate: Assumed annual share-price growth for projections
        years_ahead: Projection runs from the as-of year to year + years_ahead
        interest_years_before: Interest expense window starts this many
            years before the as-of year
        interest_years_after: Interest expense window ends this many years
            after the as-of year
        milestone_days_before: Recently vested tranches are shown up to this
            many days back
        milestone_days_after: Upcoming tranches are shown up to this many
            days ahead
    """

    as_of_date: str = field(default_factory=today)
    growth_rate: float = 0.08
    years_ahead: int = 10
    interest_years_before: int = 2
    interest_years_after: int = 2
    milestone_days_before: int = 30
    milestone_days_after: int = 90

    def __post_init__(self) -> None:
        parse_date(self.as_of_date)
        for name in (
            "years_ahead",
            "interest_years_before",
            "interest_years_after",
            "milestone_days_before",
            "milestone_days_after",
        ):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must be >= 0, got {getattr(self, name)!r}")
        if self.growth_rate <= -1:
            raise ConfigError(f"growth_rate must be > -1, got {self.growth_rate!r}")
        if self.years_ahead > _LONG_HORIZON_YEARS:
            warnings.warn(
                f"Projecting {self.years_ahead} years ahead; results that far out "
                "are rarely meaningful",
                stacklevel=2,
            )

    @property
    def as_of_year(self) -> int:
        return get_year(self.as_of_date)

    @property
    def interest_window(self) -> tuple[int, int]:
        return (
            self.as_of_year - self.interest_years_before,
            self.as_of_year + self.interest_years_after,
        )

    @property
    def projection_window(self) -> tuple[int, int]:
        return self.as_of_year, self.as_of_year + self.years_ahead
