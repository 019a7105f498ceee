"""
Command-line interface for VestLab.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from vestlab import __version__
from vestlab.core.config import ReportConfig
from vestlab.core.portfolio_loader import load_portfolio
from vestlab.core.results import ReportEncoder
from vestlab.core.utils import get_year, today
from vestlab.core.validation import validate_portfolio
from vestlab.dashboard import build_dashboard
from vestlab.projection import project_future_value
from vestlab.valuation import (
    calculate_net_value,
    cap_gains_taxable_events,
    income_taxable_events,
    interest_expense_by_year,
)

EXAMPLE_PORTFOLIO = {
    "grants": [
        {
            "id": "grant-2023-purchase",
            "type": "purchase",
            "grantDate": "2023-01-01",
            "totalShares": 1000,
            "pricePerShareAtGrant": 10,
            "vestingSchedule": [
                {"id": "t1", "vestDate": "2024-01-01", "numberOfShares": 250, "taxTreatment": "income"},
                {"id": "t2", "vestDate": "2025-01-01", "numberOfShares": 250, "taxTreatment": "income"},
                {
                    "id": "t3",
                    "vestDate": "2026-01-01",
                    "numberOfShares": 250,
                    "taxTreatment": "capital_gains",
                },
                {"id": "t4", "vestDate": "2027-01-01", "numberOfShares": 250, "taxTreatment": "none"},
            ],
            "notes": "2023 purchase program",
        }
    ],
    "loans": [
        {
            "id": "loan-2023-purchase",
            "type": "purchase",
            "principalAmount": 5000,
            "annualInterestRate": 0.04,
            "originationDate": "2023-01-01",
            "maturityDate": "2033-01-01",
            "status": "active",
            "relatedGrantId": "grant-2023-purchase",
        }
    ],
    "stockPrices": [
        {"date": "2024-01-01", "pricePerShare": 20},
        {"date": "2025-01-01", "pricePerShare": 25},
    ],
    "programConfigs": [],
    "shareExchanges": [],
    "stockSales": [],
}


def _load(path: str):
    """Load a portfolio, echoing skipped records to stderr."""
    result = load_portfolio(path, strict=True)
    for warning in result.warnings:
        print(f"Warning: {warning}", file=sys.stderr)
    return result.portfolio


def _dump(data) -> None:
    json.dump(data, sys.stdout, indent=2, cls=ReportEncoder)
    sys.stdout.write("\n")


def cmd_example(_) -> int:
    """Print a minimal working portfolio JSON."""
    _dump(EXAMPLE_PORTFOLIO)
    return 0


def cmd_validate(args) -> int:
    """Validate a portfolio file."""
    try:
        result = load_portfolio(args.input, strict=True)
        report = validate_portfolio(result.portfolio)
        # Records the loader had to skip are errors from the file's point of view
        report.errors[:0] = result.warnings

        if args.format == "json":
            _dump(report.to_dict())
        else:
            print(str(report))

        return report.get_exit_code()

    except Exception as e:
        if args.format == "json":
            _dump(
                {
                    "has_errors": True,
                    "has_warnings": False,
                    "is_valid": False,
                    "exit_code": 1,
                    "error": str(e),
                }
            )
        else:
            print(f"Validation failed: {e}", file=sys.stderr)
        return 1


def cmd_report(args) -> int:
    """Print the net value snapshot."""
    try:
        portfolio = _load(args.input)
        as_of = args.as_of or today()
        report = calculate_net_value(portfolio, as_of)

        if args.json:
            _dump(report)
            return 0

        price = f"{report.stock_price:,.2f}" if report.stock_price is not None else "n/a"
        print(f"Net value as of {report.as_of_date}")
        print("=" * 50)
        print(f"Stock price:          {price}")
        print(f"Vested shares:        {report.total_vested_shares:,.0f}")
        print(f"Unvested shares:      {report.total_unvested_shares:,.0f}")
        print(f"Held shares:          {report.total_held_shares:,.0f}")
        print(f"Gross share value:    {report.gross_share_value:,.2f}")
        print(f"Loan principal:       {report.total_loan_principal:,.2f}")
        print(f"Accrued interest:     {report.total_accrued_interest:,.2f}")
        print(f"Net value:            {report.net_value:,.2f}")
        print(f"Potential net value:  {report.potential_net_value:,.2f}")
        print(f"Realized gains:       {report.total_realized_gains:,.2f}")
        if report.by_grant:
            print()
            print("By grant:")
            for g in report.by_grant:
                print(
                    f"  {g.grant_id} ({g.grant_type}): {g.held_shares:,.0f} held "
                    f"of {g.total_shares:,.0f}, value {g.share_value:,.2f}"
                )
        if report.by_loan:
            print()
            print("Active loans:")
            for x in report.by_loan:
                print(
                    f"  {x.loan_id} ({x.loan_type}): {x.principal:,.2f} "
                    f"+ {x.accrued_interest_to_date:,.2f} accrued, matures {x.maturity_date}"
                )
        return 0

    except Exception as e:
        print(f"Error building report: {e}", file=sys.stderr)
        return 1


def cmd_taxes(args) -> int:
    """List taxable vesting events."""
    try:
        portfolio = _load(args.input)
        as_of = args.as_of or today()
        income = income_taxable_events(portfolio, as_of)
        gains = cap_gains_taxable_events(portfolio, as_of)

        if args.json:
            _dump({"income": income, "capital_gains": gains})
            return 0

        for title, events in (("Income events", income), ("Capital gains events", gains)):
            print(f"{title} up to {as_of}")
            for ev in events:
                print(
                    f"  {ev.date}  {ev.grant_id}: {ev.shares:,.0f} x {ev.price_per_share:,.2f}"
                    f" -> {ev.total_value:,.2f}"
                )
            print(f"  Total: {sum(ev.total_value for ev in events):,.2f}")
            print()
        return 0

    except Exception as e:
        print(f"Error listing taxable events: {e}", file=sys.stderr)
        return 1


def cmd_interest(args) -> int:
    """Print interest expense per year."""
    try:
        portfolio = _load(args.input)
        years = interest_expense_by_year(portfolio.loans, args.from_year, args.to_year)

        if args.json:
            _dump(years)
            return 0

        for entry in years:
            print(
                f"{entry.year}: {entry.total_interest:,.2f} "
                f"(deductible in {entry.deductible_in_year})"
            )
            for x in entry.by_loan:
                print(f"  {x.loan_id} ({x.loan_type}): {x.interest:,.2f}")
        return 0

    except Exception as e:
        print(f"Error computing interest expense: {e}", file=sys.stderr)
        return 1


def cmd_project(args) -> int:
    """Print the forward projection."""
    try:
        portfolio = _load(args.input)
        from_year = args.from_year or get_year(today())
        projection = project_future_value(
            portfolio, args.growth, from_year, from_year + args.years
        )

        if args.json:
            _dump(projection)
            return 0

        if not projection:
            print("No stock prices recorded; nothing to project.")
            return 0

        for year in projection:
            print(
                f"{year.year}: price {year.projected_stock_price:,.2f}, "
                f"held {year.held_shares:,.0f}, gross {year.gross_value:,}, "
                f"loans {year.loans_outstanding:,.2f}, net {year.net_value:,}"
            )
            for ev in year.events:
                print(f"  {ev.date} [{ev.kind}] {ev.description}")
        return 0

    except Exception as e:
        print(f"Error projecting portfolio: {e}", file=sys.stderr)
        return 1


def cmd_dashboard(args) -> int:
    """Export every report as one JSON document."""
    try:
        portfolio = _load(args.input)
        config = ReportConfig(
            as_of_date=args.as_of or today(),
            growth_rate=args.growth,
            years_ahead=args.years,
        )
        data = build_dashboard(portfolio, config).to_dict()

        if args.output:
            with open(args.output, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, cls=ReportEncoder)
            print(f"Dashboard written to {args.output}")
        else:
            _dump(data)
        return 0

    except Exception as e:
        print(f"Error building dashboard: {e}", file=sys.stderr)
        return 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the ``vestlab`` command."""
    parser = argparse.ArgumentParser(
        prog="vestlab", description="VestLab - Stock grant valuation and projection"
    )
    parser.add_argument("--version", action="version", version=f"VestLab {__version__}")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(
        dest="cmd", required=True, help="Available commands"
    )

    # Example command
    example_parser = subparsers.add_parser(
        "example", help="Print a minimal working portfolio JSON"
    )
    example_parser.set_defaults(func=cmd_example)

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a portfolio file")
    validate_parser.add_argument(
        "-i", "--input", required=True, help="Input portfolio JSON/YAML file"
    )
    validate_parser.add_argument(
        "--format", choices=["human", "json"], default="human", help="Output format"
    )
    validate_parser.set_defaults(func=cmd_validate)

    # Report command
    report_parser = subparsers.add_parser("report", help="Show the net value snapshot")
    report_parser.add_argument(
        "-i", "--input", required=True, help="Input portfolio JSON/YAML file"
    )
    report_parser.add_argument("--as-of", help="Valuation date (YYYY-MM-DD, default: today)")
    report_parser.add_argument(
        "--json", action="store_true", help="Output in JSON format"
    )
    report_parser.set_defaults(func=cmd_report)

    # Taxes command
    taxes_parser = subparsers.add_parser("taxes", help="List taxable vesting events")
    taxes_parser.add_argument(
        "-i", "--input", required=True, help="Input portfolio JSON/YAML file"
    )
    taxes_parser.add_argument("--as-of", help="Include events up to this date (default: today)")
    taxes_parser.add_argument(
        "--json", action="store_true", help="Output in JSON format"
    )
    taxes_parser.set_defaults(func=cmd_taxes)

    # Interest command
    interest_parser = subparsers.add_parser("interest", help="Show interest expense per year")
    interest_parser.add_argument(
        "-i", "--input", required=True, help="Input portfolio JSON/YAML file"
    )
    interest_parser.add_argument("--from-year", type=int, required=True, help="First year")
    interest_parser.add_argument("--to-year", type=int, required=True, help="Last year")
    interest_parser.add_argument(
        "--json", action="store_true", help="Output in JSON format"
    )
    interest_parser.set_defaults(func=cmd_interest)

    # Project command
    project_parser = subparsers.add_parser("project", help="Project the portfolio forward")
    project_parser.add_argument(
        "-i", "--input", required=True, help="Input portfolio JSON/YAML file"
    )
    project_parser.add_argument(
        "--growth", type=float, default=0.08, help="Annual price growth (default: 0.08)"
    )
    project_parser.add_argument(
        "--from-year", type=int, help="First projected year (default: current year)"
    )
    project_parser.add_argument(
        "--years", type=int, default=10, help="Years to project beyond the first (default: 10)"
    )
    project_parser.add_argument(
        "--json", action="store_true", help="Output in JSON format"
    )
    project_parser.set_defaults(func=cmd_project)

    # Dashboard command
    dashboard_parser = subparsers.add_parser(
        "dashboard", help="Export every report as one JSON document"
    )
    dashboard_parser.add_argument(
        "-i", "--input", required=True, help="Input portfolio JSON/YAML file"
    )
    dashboard_parser.add_argument("--as-of", help="Valuation date (YYYY-MM-DD, default: today)")
    dashboard_parser.add_argument(
        "--growth", type=float, default=0.08, help="Annual price growth (default: 0.08)"
    )
    dashboard_parser.add_argument(
        "--years", type=int, default=10, help="Years to project (default: 10)"
    )
    dashboard_parser.add_argument("-o", "--output", help="Output JSON file (default: stdout)")
    dashboard_parser.set_defaults(func=cmd_dashboard)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
