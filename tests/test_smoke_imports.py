"""
Smoke tests to verify basic imports and functionality.
"""


def test_import_vestlab():
    """Test that we can import the main package."""
    import vestlab

    assert hasattr(vestlab, "__version__")
    assert vestlab.__version__ == "0.1.0"


def test_import_core_components():
    """Test that core components can be imported."""
    from vestlab import (
        Portfolio,
        ReportConfig,
        StockGrant,
        apply_action,
        calculate_net_value,
        load_portfolio,
        project_future_value,
    )

    assert Portfolio is not None
    assert StockGrant is not None
    assert ReportConfig is not None
    assert callable(apply_action)
    assert callable(calculate_net_value)
    assert callable(project_future_value)
    assert callable(load_portfolio)


def test_all_names_resolve():
    """Every name listed in __all__ is importable."""
    import vestlab

    for name in vestlab.__all__:
        assert hasattr(vestlab, name), name


def test_kinds_namespace():
    from vestlab import kinds

    assert "purchase" in kinds.GrantType.all_kinds()
    assert "planned_sale" in kinds.EventKind.all_kinds()


def test_example_portfolio_end_to_end():
    """The bundled example loads cleanly and every engine runs on it."""
    from vestlab import build_dashboard, load_portfolio, ReportConfig, validate_portfolio
    from vestlab.cli import EXAMPLE_PORTFOLIO

    result = load_portfolio(EXAMPLE_PORTFOLIO)
    assert result.success
    assert validate_portfolio(result.portfolio).is_valid()

    dash = build_dashboard(result.portfolio, ReportConfig(as_of_date="2025-06-15"))
    assert dash.net_value.total_held_shares == 500
    assert dash.projection
