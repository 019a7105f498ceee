"""
Portfolio state transitions.

Editing a portfolio is an explicit pure function: ``apply_action(state,
action)`` returns a new ``Portfolio`` and leaves ``state`` untouched. Whatever
owns persistence (a CLI session, a request handler, a UI event loop) holds the
current state and decides when to save it; nothing here keeps state between
calls.

**Example:**
    ```python
    from vestlab.core.entities import empty_portfolio
    from vestlab.core.state import AddLoan, DeleteLoan, apply_action

    state = empty_portfolio()
    state = apply_action(state, AddLoan(loan))
    state = apply_action(state, DeleteLoan(loan.id))
    ```
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from .entities import (
    Loan,
    Portfolio,
    ProgramConfig,
    ShareExchange,
    StockGrant,
    StockPrice,
    StockSale,
    empty_portfolio,
)
from .errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SetPortfolio:
    portfolio: Portfolio


@dataclass(frozen=True)
class ClearAll:
    pass


@dataclass(frozen=True)
class AddGrant:
    grant: StockGrant


@dataclass(frozen=True)
class UpdateGrant:
    grant: StockGrant


@dataclass(frozen=True)
class DeleteGrant:
    grant_id: str


@dataclass(frozen=True)
class AddLoan:
    loan: Loan


@dataclass(frozen=True)
class UpdateLoan:
    loan: Loan


@dataclass(frozen=True)
class DeleteLoan:
    loan_id: str


@dataclass(frozen=True)
class AddProgramConfig:
    config: ProgramConfig


@dataclass(frozen=True)
class UpdateProgramConfig:
    config: ProgramConfig


@dataclass(frozen=True)
class DeleteProgramConfig:
    config_id: str


@dataclass(frozen=True)
class AddShareExchange:
    exchange: ShareExchange


@dataclass(frozen=True)
class UpdateShareExchange:
    exchange: ShareExchange


@dataclass(frozen=True)
class DeleteShareExchange:
    exchange_id: str


@dataclass(frozen=True)
class AddStockSale:
    sale: StockSale


@dataclass(frozen=True)
class UpdateStockSale:
    sale: StockSale


@dataclass(frozen=True)
class DeleteStockSale:
    sale_id: str


@dataclass(frozen=True)
class AddStockPrice:
    """Add a price; an existing price on the same date is replaced."""

    price: StockPrice


@dataclass(frozen=True)
class UpdateStockPrice:
    old_date: str
    price: StockPrice


@dataclass(frozen=True)
class DeleteStockPrice:
    date: str


# action type -> (portfolio collection, payload attribute)
_ADDS = {
    AddGrant: ("grants", "grant"),
    AddLoan: ("loans", "loan"),
    AddProgramConfig: ("program_configs", "config"),
    AddShareExchange: ("share_exchanges", "exchange"),
    AddStockSale: ("stock_sales", "sale"),
}
_UPDATES = {
    UpdateGrant: ("grants", "grant"),
    UpdateLoan: ("loans", "loan"),
    UpdateProgramConfig: ("program_configs", "config"),
    UpdateShareExchange: ("share_exchanges", "exchange"),
    UpdateStockSale: ("stock_sales", "sale"),
}
_DELETES = {
    DeleteGrant: ("grants", "grant_id"),
    DeleteLoan: ("loans", "loan_id"),
    DeleteProgramConfig: ("program_configs", "config_id"),
    DeleteShareExchange: ("share_exchanges", "exchange_id"),
    DeleteStockSale: ("stock_sales", "sale_id"),
}


def _sorted_prices(prices) -> tuple[StockPrice, ...]:
    return tuple(sorted(prices, key=lambda p: p.date))


def apply_action(state: Portfolio, action: object) -> Portfolio:
    """
    Return the portfolio that results from applying ``action`` to ``state``.

    Updates and deletes that name an unknown id leave the collection as is.

    **Raises:**
        ConfigError: If ``action`` is not one of the actions defined here
    """
    action_type = type(action)
    logger.debug("Applying %s", action_type.__name__)

    if action_type is SetPortfolio:
        return action.portfolio
    if action_type is ClearAll:
        return empty_portfolio()

    if action_type in _ADDS:
        collection, attr = _ADDS[action_type]
        record = getattr(action, attr)
        return replace(state, **{collection: getattr(state, collection) + (record,)})

    if action_type in _UPDATES:
        collection, attr = _UPDATES[action_type]
        record = getattr(action, attr)
        updated = tuple(
            record if item.id == record.id else item for item in getattr(state, collection)
        )
        return replace(state, **{collection: updated})

    if action_type in _DELETES:
        collection, attr = _DELETES[action_type]
        record_id = getattr(action, attr)
        kept = tuple(item for item in getattr(state, collection) if item.id != record_id)
        return replace(state, **{collection: kept})

    if action_type is AddStockPrice:
        others = [p for p in state.stock_prices if p.date != action.price.date]
        return replace(state, stock_prices=_sorted_prices([*others, action.price]))

    if action_type is UpdateStockPrice:
        updated = [
            action.price if p.date == action.old_date else p for p in state.stock_prices
        ]
        return replace(state, stock_prices=_sorted_prices(updated))

    if action_type is DeleteStockPrice:
        kept = tuple(p for p in state.stock_prices if p.date != action.date)
        return replace(state, stock_prices=kept)

    raise ConfigError(f"Unknown portfolio action: {action_type.__name__}")
