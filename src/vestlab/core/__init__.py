"""
Core module for VestLab.

This module contains the data model, validation, state transitions and import
layer that the valuation and projection engines build on.
"""

from . import kinds
from .config import ReportConfig
from .currency import RoundingPolicy, quantize, round_cents, round_whole
from .entities import (
    GrantTypeTemplate,
    Loan,
    Portfolio,
    ProgramConfig,
    ShareExchange,
    StockGrant,
    StockPrice,
    StockSale,
    VestingTemplate,
    VestingTranche,
    create_grant,
    create_loan,
    create_program_config,
    create_share_exchange,
    create_stock_sale,
    create_vesting_tranche,
    default_program_config,
    empty_portfolio,
    new_id,
)
from .errors import ConfigError, PortfolioImportError
from .events import ProjectedEvent
from .kinds import EventKind, GrantType, LoanStatus, LoanType, SaleReason, TaxTreatment
from .portfolio_loader import ImportResult, export_portfolio, load_portfolio, merge_portfolios
from .results import (
    GrantSummary,
    LoanDetail,
    LoanInterest,
    NetValueReport,
    ReportEncoder,
    TaxableEvent,
    VestingMilestone,
    YearlyInterestExpense,
    YearProjection,
    to_frame,
    to_jsonable,
)
from .state import apply_action
from .utils import (
    days_between,
    days_in_year,
    end_of_year,
    format_date,
    get_year,
    is_before,
    is_iso_date,
    is_leap_year,
    is_on_or_before,
    parse_date,
    start_of_year,
    today,
)
from .validation import (
    ValidationReport,
    validate_grant,
    validate_loan,
    validate_portfolio,
    validate_program_config,
    validate_share_exchange,
    validate_stock_price,
    validate_stock_sale,
)

__all__ = [
    # Errors
    "ConfigError",
    "PortfolioImportError",
    # Kinds
    "kinds",
    "GrantType",
    "TaxTreatment",
    "LoanType",
    "LoanStatus",
    "SaleReason",
    "EventKind",
    # Entities
    "VestingTranche",
    "StockGrant",
    "Loan",
    "StockPrice",
    "ShareExchange",
    "StockSale",
    "VestingTemplate",
    "GrantTypeTemplate",
    "ProgramConfig",
    "Portfolio",
    "new_id",
    "empty_portfolio",
    "create_vesting_tranche",
    "create_grant",
    "create_loan",
    "create_share_exchange",
    "create_stock_sale",
    "create_program_config",
    "default_program_config",
    # Results
    "GrantSummary",
    "LoanDetail",
    "NetValueReport",
    "TaxableEvent",
    "LoanInterest",
    "YearlyInterestExpense",
    "VestingMilestone",
    "YearProjection",
    "ProjectedEvent",
    "ReportEncoder",
    "to_frame",
    "to_jsonable",
    # Config
    "ReportConfig",
    # Rounding
    "RoundingPolicy",
    "quantize",
    "round_cents",
    "round_whole",
    # Dates
    "days_between",
    "days_in_year",
    "start_of_year",
    "end_of_year",
    "format_date",
    "get_year",
    "is_before",
    "is_on_or_before",
    "is_iso_date",
    "is_leap_year",
    "parse_date",
    "today",
    # Validation
    "ValidationReport",
    "validate_grant",
    "validate_loan",
    "validate_stock_price",
    "validate_program_config",
    "validate_share_exchange",
    "validate_stock_sale",
    "validate_portfolio",
    # State and I/O
    "apply_action",
    "ImportResult",
    "load_portfolio",
    "export_portfolio",
    "merge_portfolios",
]
