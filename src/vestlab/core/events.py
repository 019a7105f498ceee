"""
Event records emitted by the projection engine.
"""

from __future__ import annotations

from typing import NamedTuple


class ProjectedEvent(NamedTuple):
    """
    Dated occurrence inside a projected year.

    Attributes:
        date: ISO date of the event (tranche vest date or loan maturity date)
        kind: One of ``EventKind.all_kinds()``
        description: Human-readable summary
        shares: Shares vesting or planned for sale, when applicable
        amount: Money owed at maturity or expected sale proceeds
        tax_impact: Rough capital-gains tax estimate for planned sales
    """

    date: str
    kind: str
    description: str
    shares: float | None = None
    amount: float | None = None
    tax_impact: float | None = None
