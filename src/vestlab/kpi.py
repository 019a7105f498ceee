"""
KPI calculation utilities for portfolio analysis.

This module builds DataFrame histories from a portfolio and computes
indicators on them. All functions return pandas Series or DataFrames.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from .core.entities import Portfolio
from .valuation import calculate_net_value

HISTORY_COLUMNS = ["date", "stock_price", "gross_value", "net_value", "loan_principal"]


def net_value_history(portfolio: Portfolio) -> pd.DataFrame:
    """
    Value the portfolio on every date that has a stock price.

    Args:
        portfolio: Portfolio to value

    Returns:
        DataFrame with one row per price date in ascending order and columns
        ``date``, ``stock_price``, ``gross_value``, ``net_value`` and
        ``loan_principal``. Empty (with those columns) when there are fewer
        than two prices or the portfolio has neither grants nor loans.
    """
    if len(portfolio.stock_prices) < 2 or not (portfolio.grants or portfolio.loans):
        return pd.DataFrame(columns=HISTORY_COLUMNS)

    rows = []
    for price_date in sorted({p.date for p in portfolio.stock_prices}):
        report = calculate_net_value(portfolio, price_date)
        rows.append(
            {
                "date": price_date,
                "stock_price": report.stock_price,
                "gross_value": report.gross_share_value,
                "net_value": report.net_value,
                "loan_principal": report.total_loan_principal,
            }
        )
    return pd.DataFrame(rows, columns=HISTORY_COLUMNS)


def loan_to_value(
    df: pd.DataFrame,
    debt_col: str = "loan_principal",
    value_col: str = "gross_value",
) -> pd.Series:
    """
    Calculate loan-to-value ratio.

    LTV = loan principal / gross share value

    Args:
        df: DataFrame such as the one from ``net_value_history``
        debt_col: Column name for outstanding principal
        value_col: Column name for gross share value

    Returns:
        Series with LTV per row; ``inf`` when there is debt but no share
        value, 0 when there is neither
    """
    debt = df[debt_col].astype(float)
    value = df[value_col].astype(float)

    ltv = np.where(
        value > 0,
        debt / value.where(value > 0, 1.0),
        np.where(debt > 0, np.inf, 0.0),
    )
    return pd.Series(ltv, index=df.index, name="ltv")


def max_drawdown(series: pd.Series) -> float:
    """
    Largest peak-to-trough fall of a value series, in absolute units.

    Returns 0.0 for an empty or never-falling series.

    Args:
        series: Values in chronological order, e.g. ``net_value``

    Returns:
        The drawdown as a non-negative amount
    """
    if series.empty:
        return 0.0
    running_max = series.expanding().max()
    drawdown = running_max - series
    return float(drawdown.max())
