"""
Validation predicates and reporting for VestLab records.

The engine assumes it is only ever handed records that passed these checks.
Predicates take the camelCase mapping form of a record (as read from JSON or
YAML, possibly partial) and return human-readable messages; an empty list
means the record is valid. The caller decides whether to skip, warn or abort.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .entities import Portfolio
from .kinds import GrantType, LoanStatus, LoanType, SaleReason
from .utils import is_iso_date

_SHARE_SUM_TOLERANCE = 0.001


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _missing_or_below(value: Any, floor: float, *, inclusive: bool) -> bool:
    """True when ``value`` is absent, not numeric, or under ``floor``."""
    if not _is_number(value):
        return True
    return value < floor if inclusive else value <= floor


def validate_grant(grant: Mapping[str, Any]) -> list[str]:
    """Validate a stock grant mapping."""
    errors: list[str] = []

    if grant.get("type") not in GrantType.all_kinds():
        errors.append("Grant type is required and must be a valid type.")

    if not is_iso_date(grant.get("grantDate")):
        errors.append("Grant date is required (YYYY-MM-DD).")

    total_shares = grant.get("totalShares")
    if _missing_or_below(total_shares, 0, inclusive=False):
        errors.append("Total shares must be a positive number.")

    if _missing_or_below(grant.get("pricePerShareAtGrant"), 0, inclusive=True):
        errors.append("Price per share at grant must be non-negative.")

    schedule = grant.get("vestingSchedule")
    if not isinstance(schedule, list) or not schedule:
        errors.append("At least one vesting tranche is required.")
        return errors

    tranche_total = sum(
        t.get("numberOfShares", 0)
        for t in schedule
        if isinstance(t, Mapping) and _is_number(t.get("numberOfShares"))
    )
    if _is_number(total_shares) and abs(tranche_total - total_shares) > _SHARE_SUM_TOLERANCE:
        errors.append(
            f"Vesting tranche shares ({tranche_total:g}) must equal total shares "
            f"({total_shares:g})."
        )

    # Only the first bad tranche is reported
    for tranche in schedule:
        if not isinstance(tranche, Mapping) or not is_iso_date(tranche.get("vestDate")):
            errors.append("Each vesting tranche must have a valid date (YYYY-MM-DD).")
            break
        if _missing_or_below(tranche.get("numberOfShares"), 0, inclusive=False):
            errors.append("Each vesting tranche must have a positive number of shares.")
            break

    return errors


def validate_loan(loan: Mapping[str, Any]) -> list[str]:
    """Validate a loan mapping."""
    errors: list[str] = []

    if loan.get("type") not in LoanType.all_kinds():
        errors.append("Loan type is required and must be a valid type.")

    if _missing_or_below(loan.get("principalAmount"), 0, inclusive=False):
        errors.append("Principal amount must be a positive number.")

    rate = loan.get("annualInterestRate")
    if _missing_or_below(rate, 0, inclusive=True):
        errors.append("Annual interest rate must be non-negative.")
    elif rate > 1:
        errors.append(
            "Annual interest rate should be a decimal (e.g., 0.04 for 4%), "
            "not a percentage."
        )

    origination = loan.get("originationDate")
    maturity = loan.get("maturityDate")
    if not is_iso_date(origination):
        errors.append("Origination date is required (YYYY-MM-DD).")
    if not is_iso_date(maturity):
        errors.append("Maturity date is required (YYYY-MM-DD).")
    if (
        isinstance(origination, str)
        and isinstance(maturity, str)
        and origination
        and maturity
        and origination >= maturity
    ):
        errors.append("Maturity date must be after origination date.")

    status = loan.get("status")
    if not status:
        errors.append("Loan status is required.")
    elif status not in LoanStatus.all_kinds():
        errors.append(f"Loan status '{status}' is not a valid status.")

    return errors


def validate_stock_price(price: Mapping[str, Any]) -> list[str]:
    """Validate a stock price mapping."""
    errors: list[str] = []
    if not is_iso_date(price.get("date")):
        errors.append("Date is required (YYYY-MM-DD).")
    if _missing_or_below(price.get("pricePerShare"), 0, inclusive=True):
        errors.append("Price per share must be non-negative.")
    return errors


def validate_program_config(config: Mapping[str, Any]) -> list[str]:
    """Validate a program config mapping."""
    errors: list[str] = []

    name = config.get("name")
    if not isinstance(name, str) or not name.strip():
        errors.append("Program name is required.")

    if _missing_or_below(config.get("programYear"), 2000, inclusive=True):
        errors.append("Program year is required and must be 2000 or later.")

    rate = config.get("standardInterestRate")
    if _missing_or_below(rate, 0, inclusive=True) or rate > 1:
        errors.append("Standard interest rate must be between 0 and 1 (decimal).")

    if _missing_or_below(config.get("standardLoanTermYears"), 1, inclusive=True):
        errors.append("Standard loan term must be at least 1 year.")

    down = config.get("downPaymentPercent")
    if _missing_or_below(down, 0, inclusive=True) or down > 1:
        errors.append("Down payment percent must be between 0 and 1.")

    if _missing_or_below(config.get("freeShareRatio"), 0, inclusive=True):
        errors.append("Free share ratio must be non-negative.")

    if _missing_or_below(config.get("catchUpShareRatio"), 0, inclusive=True):
        errors.append("Catch-up share ratio must be non-negative.")

    return errors


def validate_share_exchange(exchange: Mapping[str, Any]) -> list[str]:
    """Validate a share exchange mapping."""
    errors: list[str] = []

    if not is_iso_date(exchange.get("date")):
        errors.append("Exchange date is required (YYYY-MM-DD).")
    if not exchange.get("sourceGrantId"):
        errors.append("Source grant is required.")
    if not exchange.get("targetGrantId"):
        errors.append("Target grant is required.")
    if _missing_or_below(exchange.get("sharesExchanged"), 0, inclusive=False):
        errors.append("Shares exchanged must be a positive number.")
    if _missing_or_below(exchange.get("pricePerShareAtExchange"), 0, inclusive=False):
        errors.append("Price per share at exchange must be positive.")

    return errors


def validate_stock_sale(sale: Mapping[str, Any]) -> list[str]:
    """Validate a stock sale mapping."""
    errors: list[str] = []

    if not is_iso_date(sale.get("date")):
        errors.append("Sale date is required (YYYY-MM-DD).")
    if not sale.get("sourceGrantId"):
        errors.append("Source grant is required.")
    if _missing_or_below(sale.get("sharesSold"), 0, inclusive=False):
        errors.append("Shares sold must be a positive number.")
    if _missing_or_below(sale.get("pricePerShare"), 0, inclusive=False):
        errors.append("Price per share must be positive.")
    if _missing_or_below(sale.get("costBasis"), 0, inclusive=True):
        errors.append("Cost basis must be non-negative.")
    if sale.get("reason") not in SaleReason.all_kinds():
        errors.append("Sale reason is required.")

    return errors


@dataclass
class ValidationReport:
    """
    Structured validation report for a whole portfolio.

    ``errors`` hold per-record problems that would make the record invalid
    on import. ``warnings`` hold structural oddities the engine tolerates:
    dangling references and duplicate price dates.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def has_errors(self) -> bool:
        return bool(self.errors)

    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def is_valid(self) -> bool:
        """Validation passed (warnings are OK)."""
        return not self.has_errors()

    def get_exit_code(self) -> int:
        """
        Get appropriate CLI exit code.

        Returns:
            0: Valid (no errors)
            1: Errors present
            2: Warnings only
        """
        if self.has_errors():
            return 1
        elif self.has_warnings():
            return 2
        else:
            return 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "errors": self.errors,
            "warnings": self.warnings,
            "has_errors": self.has_errors(),
            "has_warnings": self.has_warnings(),
            "is_valid": self.is_valid(),
            "exit_code": self.get_exit_code(),
        }

    def __str__(self) -> str:
        lines = ["Validation passed" if self.is_valid() else "Validation failed"]
        lines.extend(f"  error: {msg}" for msg in self.errors)
        lines.extend(f"  warning: {msg}" for msg in self.warnings)
        return "\n".join(lines)


def validate_portfolio(portfolio: Portfolio) -> ValidationReport:
    """
    Run every record predicate over ``portfolio`` and check cross references.

    Dangling ids are reported as warnings only: the engine treats them as
    "no match found".
    """
    report = ValidationReport()

    checks = [
        ("Grant", portfolio.grants, validate_grant),
        ("Loan", portfolio.loans, validate_loan),
        ("Stock price", portfolio.stock_prices, validate_stock_price),
        ("Program config", portfolio.program_configs, validate_program_config),
        ("Share exchange", portfolio.share_exchanges, validate_share_exchange),
        ("Stock sale", portfolio.stock_sales, validate_stock_sale),
    ]
    for label, records, predicate in checks:
        for idx, record in enumerate(records):
            messages = predicate(record.to_dict())
            if messages:
                report.errors.append(f"{label} {idx}: {'; '.join(messages)}")

    grant_ids = {g.id for g in portfolio.grants}
    loan_ids = {x.id for x in portfolio.loans}

    for exchange in portfolio.share_exchanges:
        for ref in (exchange.source_grant_id, exchange.target_grant_id):
            if ref not in grant_ids:
                report.warnings.append(
                    f"Share exchange {exchange.id} references unknown grant '{ref}'"
                )
    for sale in portfolio.stock_sales:
        if sale.source_grant_id not in grant_ids:
            report.warnings.append(
                f"Stock sale {sale.id} references unknown grant '{sale.source_grant_id}'"
            )
        if sale.related_loan_id and sale.related_loan_id not in loan_ids:
            report.warnings.append(
                f"Stock sale {sale.id} references unknown loan '{sale.related_loan_id}'"
            )
    for loan in portfolio.loans:
        if loan.related_grant_id and loan.related_grant_id not in grant_ids:
            report.warnings.append(
                f"Loan {loan.id} references unknown grant '{loan.related_grant_id}'"
            )
        for attr in ("parent_loan_id", "refinanced_from_id"):
            ref = getattr(loan, attr)
            if ref and ref not in loan_ids:
                report.warnings.append(f"Loan {loan.id} references unknown loan '{ref}'")
    for grant in portfolio.grants:
        if grant.related_grant_id and grant.related_grant_id not in grant_ids:
            report.warnings.append(
                f"Grant {grant.id} references unknown grant '{grant.related_grant_id}'"
            )

    counts = Counter(p.date for p in portfolio.stock_prices)
    for price_date, count in sorted(counts.items()):
        if count > 1:
            report.warnings.append(f"Stock price date {price_date} appears {count} times")

    return report
