"""
Tests for chart functions.
"""

import pytest

pytest.importorskip("plotly")

from vestlab.charts import net_vs_gross_value, projected_value, save_chart, stock_price_history  # noqa: E402
from vestlab.projection import project_future_value  # noqa: E402


def test_stock_price_history(scenario_portfolio):
    fig, df = stock_price_history(scenario_portfolio)
    assert df["date"].tolist() == ["2024-01-01", "2025-01-01"]
    assert fig.layout.title.text == "Stock Price History"


def test_net_vs_gross_value(scenario_portfolio):
    fig, df = net_vs_gross_value(scenario_portfolio)
    assert len(df) == 2
    assert len(fig.data) == 2


def test_projected_value(scenario_portfolio):
    projection = project_future_value(scenario_portfolio, 0.08, 2025, 2030)
    fig, df = projected_value(projection)
    assert "events" not in df.columns
    assert df["year"].tolist() == list(range(2025, 2031))
    assert len(fig.data) == 3


def test_projected_value_empty():
    fig, df = projected_value([])
    assert df.empty


def test_save_chart(scenario_portfolio, tmp_path):
    fig, _ = stock_price_history(scenario_portfolio)
    path = tmp_path / "prices.html"
    save_chart(fig, str(path))
    assert path.exists()
    with pytest.raises(ValueError, match="Unsupported format"):
        save_chart(fig, str(tmp_path / "x.gif"), format="gif")
