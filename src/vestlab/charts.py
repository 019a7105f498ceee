"""
Chart functions for visualizing stock grant portfolios.

This module provides chart functions at two levels:
- History: what the portfolio was worth on each date with a known price
- Projection: what it may be worth in future years

All chart functions return (figure, dataframe_used) for consistency.
"""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from .core.entities import Portfolio
from .core.results import YearProjection, to_frame
from .kpi import net_value_history

# Plotly imports with graceful fallback
try:
    import plotly.express as px
    import plotly.graph_objects as go

    PLOTLY_AVAILABLE = True
except ImportError:
    PLOTLY_AVAILABLE = False


def _check_plotly() -> None:
    """Check if Plotly is available and raise helpful error if not."""
    if not PLOTLY_AVAILABLE:
        raise ImportError(
            "Plotly is required for chart functions. Install with:\n"
            "pip install plotly\n"
            "or\n"
            "pip install 'vestlab[viz]'"
        )


# =============================================================================
# History charts
# =============================================================================


def stock_price_history(portfolio: Portfolio) -> tuple[go.Figure, pd.DataFrame]:
    """
    Plot every recorded stock price.

    **Args:**
        portfolio: Portfolio whose ``stock_prices`` are plotted

    **Returns:**
        Tuple of (plotly_figure, dataframe_used)

    **Example:**
        ```python
        from vestlab import load_portfolio, stock_price_history

        fig, data = stock_price_history(load_portfolio("portfolio.json").portfolio)
        fig.show()
        ```
    """
    _check_plotly()

    prices = pd.DataFrame(
        [{"date": p.date, "price_per_share": p.price_per_share} for p in portfolio.stock_prices],
        columns=["date", "price_per_share"],
    ).sort_values("date", ignore_index=True)

    fig = px.line(
        prices,
        x="date",
        y="price_per_share",
        markers=True,
        title="Stock Price History",
        labels={"price_per_share": "Price per Share", "date": "Date"},
    )
    fig.update_layout(hovermode="x unified")

    return fig, prices


def net_vs_gross_value(portfolio: Portfolio) -> tuple[go.Figure, pd.DataFrame]:
    """
    Plot gross share value against net value on each price date.

    The gap between the two lines is outstanding loan principal plus accrued
    interest.

    Args:
        portfolio: Portfolio to value

    Returns:
        Tuple of (plotly_figure, dataframe_used)
    """
    _check_plotly()

    history = net_value_history(portfolio)
    melted = history.melt(
        id_vars=["date"],
        value_vars=["gross_value", "net_value"],
        var_name="measure",
        value_name="value",
    )

    fig = px.line(
        melted,
        x="date",
        y="value",
        color="measure",
        title="Net vs Gross Value",
        labels={"value": "Value", "date": "Date", "measure": "Measure"},
    )
    fig.update_layout(hovermode="x unified", legend_title="Measure")
    fig.add_hline(y=0, line_dash="dash", line_color="gray", opacity=0.5)

    return fig, history


# =============================================================================
# Projection charts
# =============================================================================


def projected_value(
    projection: Sequence[YearProjection],
) -> tuple[go.Figure, pd.DataFrame]:
    """
    Plot projected net value as bars and projected share price as a line.

    Args:
        projection: Output of ``project_future_value``

    Returns:
        Tuple of (plotly_figure, dataframe_used)
    """
    _check_plotly()

    df = to_frame(projection, YearProjection).drop(columns=["events"])

    fig = go.Figure()
    fig.add_trace(go.Bar(x=df["year"], y=df["net_value"], name="Net Value"))
    fig.add_trace(go.Bar(x=df["year"], y=df["gross_value"], name="Gross Value", opacity=0.5))
    fig.add_trace(
        go.Scatter(
            x=df["year"],
            y=df["projected_stock_price"],
            name="Projected Price",
            mode="lines+markers",
            yaxis="y2",
        )
    )
    fig.update_layout(
        title="Projected Value by Year",
        barmode="overlay",
        xaxis_title="Year",
        yaxis={"title": "Value"},
        yaxis2={"title": "Price per Share", "overlaying": "y", "side": "right"},
        legend_title="Series",
    )

    return fig, df


# =============================================================================
# Utility functions
# =============================================================================


def save_chart(fig: go.Figure, filename: str, format: str = "html") -> None:
    """
    Save chart to file.

    Args:
        fig: Plotly figure
        filename: Output filename
        format: Output format ('html', 'png', 'pdf', 'svg')
    """
    _check_plotly()

    if format == "html":
        fig.write_html(filename)
    elif format in {"png", "pdf", "svg"}:
        fig.write_image(filename, format=format)
    else:
        raise ValueError(f"Unsupported format: {format}")
