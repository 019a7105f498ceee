"""
Domain entities for VestLab.

Every entity is a frozen dataclass: the engine only reads them and builds new
report objects, it never mutates a record or a collection it was given.
Attributes use snake_case; ``from_dict``/``to_dict`` translate to and from the
camelCase keys of the JSON interchange format.

Entities carry no validation of their own. ``vestlab.core.validation`` holds
the predicates that the import layer runs before records reach the engine.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .kinds import GrantType, LoanStatus, TaxTreatment


def new_id() -> str:
    """Generate a fresh record id."""
    return str(uuid.uuid4())


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True, slots=True)
class VestingTranche:
    """
    A scheduled portion of a grant that vests on ``vest_date``.

    Vesting happens at 00:00 on the vest date and is permanent: later
    exchanges or sales reduce held shares, never vested shares.
    """

    id: str
    vest_date: str
    number_of_shares: float
    tax_treatment: str = TaxTreatment.NONE

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VestingTranche:
        return cls(
            id=data.get("id") or new_id(),
            vest_date=data["vestDate"],
            number_of_shares=data["numberOfShares"],
            tax_treatment=data.get("taxTreatment", TaxTreatment.NONE),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "vestDate": self.vest_date,
            "numberOfShares": self.number_of_shares,
            "taxTreatment": self.tax_treatment,
        }


@dataclass(frozen=True, slots=True)
class StockGrant:
    """
    Shares allocated to the holder under one grant.

    Attributes:
        id: Unique grant id
        type: One of ``GrantType.all_kinds()``
        grant_date: ISO date of the grant
        total_shares: Shares in the grant; should equal the tranche sum
        price_per_share_at_grant: Grant price, the cost basis for
            capital-gains vesting events
        vesting_schedule: Tranches, in no particular order
        related_grant_id: For free/catch-up grants, the originating purchase
        notes: Free text
    """

    id: str
    type: str
    grant_date: str
    total_shares: float
    price_per_share_at_grant: float
    vesting_schedule: tuple[VestingTranche, ...] = ()
    related_grant_id: str | None = None
    notes: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> StockGrant:
        return cls(
            id=data.get("id") or new_id(),
            type=data["type"],
            grant_date=data["grantDate"],
            total_shares=data["totalShares"],
            price_per_share_at_grant=data["pricePerShareAtGrant"],
            vesting_schedule=tuple(
                VestingTranche.from_dict(t) for t in data.get("vestingSchedule") or []
            ),
            related_grant_id=data.get("relatedGrantId"),
            notes=data.get("notes"),
        )

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "id": self.id,
                "type": self.type,
                "grantDate": self.grant_date,
                "totalShares": self.total_shares,
                "pricePerShareAtGrant": self.price_per_share_at_grant,
                "vestingSchedule": [t.to_dict() for t in self.vesting_schedule],
                "relatedGrantId": self.related_grant_id,
                "notes": self.notes,
            }
        )


@dataclass(frozen=True, slots=True)
class Loan:
    """
    A loan used to fund share purchases, tax bills or crystallised interest.

    Interest is simple and accrues on ``principal_amount``. Each full year of
    interest is expected to be rolled into a separate ``interest`` loan
    (``parent_loan_id`` pointing back here), so accrual on this loan only
    covers the current partial year.

    ``status`` is authoritative. A refinanced loan is marked ``refinanced``
    and its replacement points back through ``refinanced_from_id``.
    """

    id: str
    type: str
    principal_amount: float
    annual_interest_rate: float
    origination_date: str
    maturity_date: str
    status: str = LoanStatus.ACTIVE
    related_grant_id: str | None = None
    parent_loan_id: str | None = None
    refinanced_from_id: str | None = None
    notes: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Loan:
        return cls(
            id=data.get("id") or new_id(),
            type=data["type"],
            principal_amount=data["principalAmount"],
            annual_interest_rate=data["annualInterestRate"],
            origination_date=data["originationDate"],
            maturity_date=data["maturityDate"],
            status=data.get("status", LoanStatus.ACTIVE),
            related_grant_id=data.get("relatedGrantId"),
            parent_loan_id=data.get("parentLoanId"),
            refinanced_from_id=data.get("refinancedFromId"),
            notes=data.get("notes"),
        )

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "id": self.id,
                "type": self.type,
                "principalAmount": self.principal_amount,
                "annualInterestRate": self.annual_interest_rate,
                "originationDate": self.origination_date,
                "maturityDate": self.maturity_date,
                "status": self.status,
                "relatedGrantId": self.related_grant_id,
                "parentLoanId": self.parent_loan_id,
                "refinancedFromId": self.refinanced_from_id,
                "notes": self.notes,
            }
        )


@dataclass(frozen=True, slots=True)
class StockPrice:
    """Share price observed on ``date``. One price per date."""

    date: str
    price_per_share: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> StockPrice:
        return cls(date=data["date"], price_per_share=data["pricePerShare"])

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "pricePerShare": self.price_per_share}


@dataclass(frozen=True, slots=True)
class ShareExchange:
    """
    Vested shares handed over as the down payment on a new purchase grant.

    Not a sale and not taxable. The shares leave ``source_grant_id``'s
    holdings on ``date``. ``value_at_exchange`` is by convention
    ``shares_exchanged * price_per_share_at_exchange`` but is not checked.
    """

    id: str
    date: str
    source_grant_id: str
    target_grant_id: str
    shares_exchanged: float
    price_per_share_at_exchange: float
    value_at_exchange: float
    notes: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ShareExchange:
        shares = data["sharesExchanged"]
        price = data["pricePerShareAtExchange"]
        return cls(
            id=data.get("id") or new_id(),
            date=data["date"],
            source_grant_id=data["sourceGrantId"],
            target_grant_id=data["targetGrantId"],
            shares_exchanged=shares,
            price_per_share_at_exchange=price,
            value_at_exchange=data.get("valueAtExchange", shares * price),
            notes=data.get("notes"),
        )

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "id": self.id,
                "date": self.date,
                "sourceGrantId": self.source_grant_id,
                "targetGrantId": self.target_grant_id,
                "sharesExchanged": self.shares_exchanged,
                "pricePerShareAtExchange": self.price_per_share_at_exchange,
                "valueAtExchange": self.value_at_exchange,
                "notes": self.notes,
            }
        )


@dataclass(frozen=True, slots=True)
class StockSale:
    """
    A sale of held shares. Always a taxable event.

    The realised gain is ``(price_per_share - cost_basis) * shares_sold``,
    with ``cost_basis`` per share.
    """

    id: str
    date: str
    source_grant_id: str
    shares_sold: float
    price_per_share: float
    total_proceeds: float
    cost_basis: float
    reason: str
    related_loan_id: str | None = None
    notes: str | None = None

    @property
    def realized_gain(self) -> float:
        return (self.price_per_share - self.cost_basis) * self.shares_sold

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> StockSale:
        shares = data["sharesSold"]
        price = data["pricePerShare"]
        return cls(
            id=data.get("id") or new_id(),
            date=data["date"],
            source_grant_id=data["sourceGrantId"],
            shares_sold=shares,
            price_per_share=price,
            total_proceeds=data.get("totalProceeds", shares * price),
            cost_basis=data["costBasis"],
            reason=data["reason"],
            related_loan_id=data.get("relatedLoanId"),
            notes=data.get("notes"),
        )

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "id": self.id,
                "date": self.date,
                "sourceGrantId": self.source_grant_id,
                "sharesSold": self.shares_sold,
                "pricePerShare": self.price_per_share,
                "totalProceeds": self.total_proceeds,
                "costBasis": self.cost_basis,
                "reason": self.reason,
                "relatedLoanId": self.related_loan_id,
                "notes": self.notes,
            }
        )


@dataclass(frozen=True, slots=True)
class VestingTemplate:
    """One tranche of a program template, as an offset from the grant date."""

    year_offset: int
    share_fraction: float
    tax_treatment: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VestingTemplate:
        return cls(
            year_offset=data["yearOffset"],
            share_fraction=data["shareFraction"],
            tax_treatment=data["taxTreatment"],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "yearOffset": self.year_offset,
            "shareFraction": self.share_fraction,
            "taxTreatment": self.tax_treatment,
        }


@dataclass(frozen=True, slots=True)
class GrantTypeTemplate:
    """Default vesting schedule for one grant type within a program year."""

    vesting_years: int
    vesting_template: tuple[VestingTemplate, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GrantTypeTemplate:
        return cls(
            vesting_years=data["vestingYears"],
            vesting_template=tuple(
                VestingTemplate.from_dict(t) for t in data.get("vestingTemplate") or []
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "vestingYears": self.vesting_years,
            "vestingTemplate": [t.to_dict() for t in self.vesting_template],
        }


@dataclass(frozen=True, slots=True)
class ProgramConfig:
    """
    Structural rules of one program year.

    A template users apply when creating grants and loans. Nothing in the
    valuation or projection engines reads it.
    """

    id: str
    name: str
    program_year: int
    standard_interest_rate: float
    standard_loan_term_years: int
    down_payment_percent: float
    share_exchange_available: bool
    free_share_ratio: float
    catch_up_share_ratio: float
    grant_templates: Mapping[str, GrantTypeTemplate] = field(default_factory=dict)
    notes: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ProgramConfig:
        return cls(
            id=data.get("id") or new_id(),
            name=data["name"],
            program_year=data["programYear"],
            standard_interest_rate=data["standardInterestRate"],
            standard_loan_term_years=data["standardLoanTermYears"],
            down_payment_percent=data["downPaymentPercent"],
            share_exchange_available=bool(data.get("shareExchangeAvailable", False)),
            free_share_ratio=data["freeShareRatio"],
            catch_up_share_ratio=data["catchUpShareRatio"],
            grant_templates={
                gtype: GrantTypeTemplate.from_dict(tmpl)
                for gtype, tmpl in (data.get("grantTemplates") or {}).items()
            },
            notes=data.get("notes"),
        )

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "id": self.id,
                "name": self.name,
                "programYear": self.program_year,
                "standardInterestRate": self.standard_interest_rate,
                "standardLoanTermYears": self.standard_loan_term_years,
                "downPaymentPercent": self.down_payment_percent,
                "shareExchangeAvailable": self.share_exchange_available,
                "freeShareRatio": self.free_share_ratio,
                "catchUpShareRatio": self.catch_up_share_ratio,
                "grantTemplates": {
                    gtype: tmpl.to_dict() for gtype, tmpl in self.grant_templates.items()
                },
                "notes": self.notes,
            }
        )


@dataclass(frozen=True, slots=True)
class Portfolio:
    """
    Aggregate root: every record the engine works from.

    No referential integrity is enforced between collections. A sale whose
    ``source_grant_id`` matches no grant is simply never counted against any
    grant.
    """

    grants: tuple[StockGrant, ...] = ()
    loans: tuple[Loan, ...] = ()
    stock_prices: tuple[StockPrice, ...] = ()
    program_configs: tuple[ProgramConfig, ...] = ()
    share_exchanges: tuple[ShareExchange, ...] = ()
    stock_sales: tuple[StockSale, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Portfolio:
        """Build a portfolio from already-validated camelCase mappings."""
        return cls(
            grants=tuple(StockGrant.from_dict(g) for g in data.get("grants") or []),
            loans=tuple(Loan.from_dict(x) for x in data.get("loans") or []),
            stock_prices=tuple(
                StockPrice.from_dict(p) for p in data.get("stockPrices") or []
            ),
            program_configs=tuple(
                ProgramConfig.from_dict(c) for c in data.get("programConfigs") or []
            ),
            share_exchanges=tuple(
                ShareExchange.from_dict(e) for e in data.get("shareExchanges") or []
            ),
            stock_sales=tuple(
                StockSale.from_dict(s) for s in data.get("stockSales") or []
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "grants": [g.to_dict() for g in self.grants],
            "loans": [x.to_dict() for x in self.loans],
            "stockPrices": [p.to_dict() for p in self.stock_prices],
            "programConfigs": [c.to_dict() for c in self.program_configs],
            "shareExchanges": [e.to_dict() for e in self.share_exchanges],
            "stockSales": [s.to_dict() for s in self.stock_sales],
        }

    @property
    def is_empty(self) -> bool:
        return not (self.grants or self.loans or self.stock_prices)


def empty_portfolio() -> Portfolio:
    """A portfolio with every collection empty."""
    return Portfolio()


def create_vesting_tranche(**fields: Any) -> VestingTranche:
    """Create a ``VestingTranche`` with a generated id."""
    return VestingTranche(id=new_id(), **fields)


def create_grant(**fields: Any) -> StockGrant:
    """Create a ``StockGrant`` with a generated id."""
    schedule = fields.pop("vesting_schedule", ())
    return StockGrant(id=new_id(), vesting_schedule=tuple(schedule), **fields)


def create_loan(**fields: Any) -> Loan:
    """Create a ``Loan`` with a generated id."""
    return Loan(id=new_id(), **fields)


def create_share_exchange(**fields: Any) -> ShareExchange:
    """Create a ``ShareExchange`` with a generated id.

    ``value_at_exchange`` defaults to shares times price.
    """
    fields.setdefault(
        "value_at_exchange",
        fields["shares_exchanged"] * fields["price_per_share_at_exchange"],
    )
    return ShareExchange(id=new_id(), **fields)


def create_stock_sale(**fields: Any) -> StockSale:
    """Create a ``StockSale`` with a generated id.

    ``total_proceeds`` defaults to shares times price.
    """
    fields.setdefault("total_proceeds", fields["shares_sold"] * fields["price_per_share"])
    return StockSale(id=new_id(), **fields)


def create_program_config(**fields: Any) -> ProgramConfig:
    """Create a ``ProgramConfig`` with a generated id."""
    return ProgramConfig(id=new_id(), **fields)


def default_program_config(year: int) -> ProgramConfig:
    """
    The stock program template for ``year``.

    4% purchase loans over 10 years, 10% down payment (exchange allowed), one
    free and one catch-up share per two purchased, and the standard vesting
    templates per grant type.
    """

    def _even(treatments: list[str], fraction: float) -> tuple[VestingTemplate, ...]:
        return tuple(
            VestingTemplate(year_offset=i + 1, share_fraction=fraction, tax_treatment=t)
            for i, t in enumerate(treatments)
        )

    none, income, gains = TaxTreatment.NONE, TaxTreatment.INCOME, TaxTreatment.CAPITAL_GAINS
    return create_program_config(
        name=f"{year} Stock Purchase Program",
        program_year=year,
        standard_interest_rate=0.04,
        standard_loan_term_years=10,
        down_payment_percent=0.1,
        share_exchange_available=True,
        free_share_ratio=0.5,
        catch_up_share_ratio=0.5,
        grant_templates={
            GrantType.PURCHASE: GrantTypeTemplate(
                vesting_years=5,
                vesting_template=_even([none, none, none, gains, gains], 0.2),
            ),
            GrantType.FREE: GrantTypeTemplate(
                vesting_years=5,
                vesting_template=(VestingTemplate(5, 1.0, income),),
            ),
            GrantType.CATCH_UP: GrantTypeTemplate(
                vesting_years=5,
                vesting_template=_even([income] * 5, 0.2),
            ),
            GrantType.BONUS: GrantTypeTemplate(
                vesting_years=3,
                vesting_template=(
                    VestingTemplate(1, 0.34, income),
                    VestingTemplate(2, 0.33, gains),
                    VestingTemplate(3, 0.33, gains),
                ),
            ),
        },
        notes="",
    )
