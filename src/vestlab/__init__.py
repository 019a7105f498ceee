"""
VestLab - Valuation and Projection for Employee Stock Grants

VestLab values a portfolio of employer stock grants and the loans used to fund
them. It answers four questions from the same immutable ``Portfolio``: what
the holding is worth today, which vesting events are taxable, how much loan
interest falls into each tax year, and what the holding may be worth in
future years once maturing loans are repaid by selling shares.

Key Features:
- **Pure Engine**: Every calculation is a deterministic function of its inputs
- **Vesting Lifecycle**: Tranches, share exchanges and sales tracked per grant
- **Loan Accrual**: Simple interest on an actual/actual day count
- **Tax Views**: Income and capital-gains vesting events, deductible interest
- **Projection**: Year-by-year simulation with automatic loan-payoff sales
- **Import/Export**: JSON and YAML portfolios with per-record validation
- **Rich Visualizations**: Interactive charts with Plotly integration

Architecture Overview:
- **core.entities**: Frozen dataclasses for grants, loans, prices, exchanges, sales
- **core.validation**: Record predicates and portfolio-wide reports
- **core.state**: ``apply_action(state, action)`` transitions for editing
- **core.portfolio_loader**: JSON/YAML import, export and merge
- **valuation / projection**: The calculation engines
- **kpi / dashboard / charts**: DataFrame histories, composed reports, figures

Quick Start:
    ```python
    from vestlab import calculate_net_value, load_portfolio, project_future_value

    portfolio = load_portfolio("portfolio.json").portfolio

    report = calculate_net_value(portfolio, "2025-06-15")
    print(report.net_value)

    for year in project_future_value(portfolio, 0.08, 2025, 2035):
        print(year.year, year.net_value)
    ```

License:
    This is a proof-of-concept for educational and research purposes.
"""

# Version information
__version__ = "0.1.0"
__author__ = "VestLab Team"
__description__ = "Valuation and projection engine for employee stock grants"

# Import core components for easy access
from .core import (
    ConfigError,
    ImportResult,
    Loan,
    NetValueReport,
    Portfolio,
    PortfolioImportError,
    ProgramConfig,
    ProjectedEvent,
    ReportConfig,
    ShareExchange,
    StockGrant,
    StockPrice,
    StockSale,
    TaxableEvent,
    ValidationReport,
    VestingMilestone,
    VestingTranche,
    YearlyInterestExpense,
    YearProjection,
    apply_action,
    days_between,
    days_in_year,
    default_program_config,
    empty_portfolio,
    end_of_year,
    export_portfolio,
    kinds,
    load_portfolio,
    merge_portfolios,
    start_of_year,
    to_frame,
    validate_portfolio,
)

# Import report composition
from .dashboard import Dashboard, build_dashboard

# Import KPI utilities
from .kpi import loan_to_value, max_drawdown, net_value_history

# Import engines
from .projection import project_future_value
from .valuation import (
    accrued_interest,
    active_loans,
    calculate_net_value,
    cap_gains_taxable_events,
    exchanged_shares,
    held_shares,
    income_taxable_events,
    interest_expense_by_year,
    interest_for_year,
    price_on_date,
    sold_shares,
    total_vested_shares,
    vested_tranches,
    vesting_milestones,
)

# Import chart functions (optional - requires plotly)
try:
    from .charts import (
        net_vs_gross_value,
        projected_value,
        save_chart,
        stock_price_history,
    )

    CHARTS_AVAILABLE = True
except ImportError:
    CHARTS_AVAILABLE = False

# Define what gets imported with "from vestlab import *"
__all__ = [
    # Entities
    "VestingTranche",
    "StockGrant",
    "Loan",
    "StockPrice",
    "ShareExchange",
    "StockSale",
    "ProgramConfig",
    "Portfolio",
    "empty_portfolio",
    "default_program_config",
    # Reports
    "NetValueReport",
    "TaxableEvent",
    "YearlyInterestExpense",
    "VestingMilestone",
    "YearProjection",
    "ProjectedEvent",
    "to_frame",
    # Valuation engine
    "price_on_date",
    "vested_tranches",
    "total_vested_shares",
    "exchanged_shares",
    "sold_shares",
    "held_shares",
    "active_loans",
    "accrued_interest",
    "interest_for_year",
    "calculate_net_value",
    "income_taxable_events",
    "cap_gains_taxable_events",
    "interest_expense_by_year",
    "vesting_milestones",
    # Projection engine
    "project_future_value",
    # Dates
    "days_between",
    "days_in_year",
    "start_of_year",
    "end_of_year",
    # KPI utilities
    "net_value_history",
    "loan_to_value",
    "max_drawdown",
    # Dashboard
    "Dashboard",
    "build_dashboard",
    "ReportConfig",
    # State and I/O
    "apply_action",
    "ImportResult",
    "load_portfolio",
    "export_portfolio",
    "merge_portfolios",
    # Validation and errors
    "ValidationReport",
    "validate_portfolio",
    "ConfigError",
    "PortfolioImportError",
    # Kind constants
    "kinds",
    # Version info
    "__version__",
    "__author__",
    "__description__",
]

# Add chart functions to __all__ if available
if CHARTS_AVAILABLE:
    __all__.extend(
        [
            "stock_price_history",
            "net_vs_gross_value",
            "projected_value",
            "save_chart",
        ]
    )
