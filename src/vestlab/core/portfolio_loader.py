"""Utilities for loading, exporting and merging portfolios from JSON/YAML sources."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from copy import deepcopy
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

import yaml

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
from .errors import PortfolioImportError
from .validation import (
    validate_grant,
    validate_loan,
    validate_program_config,
    validate_share_exchange,
    validate_stock_price,
    validate_stock_sale,
)

__all__ = [
    "ImportResult",
    "load_portfolio",
    "export_portfolio",
    "merge_portfolios",
]

logger = logging.getLogger(__name__)

_ROOT_ERROR = "JSON must be an object with grants, loans, and stockPrices arrays."
_TEXT_PREFIXES = ("{", "[", '"')
_KNOWN_SUFFIXES = {".json", ".yaml", ".yml"}


@dataclass(slots=True)
class _Collection:
    """How one top-level collection is read."""

    key: str
    label: str
    attr: str
    validate: Callable[[Mapping[str, Any]], list[str]]
    build: Callable[[Mapping[str, Any]], Any]


_COLLECTIONS = (
    _Collection("grants", "Grant", "grants", validate_grant, StockGrant.from_dict),
    _Collection("loans", "Loan", "loans", validate_loan, Loan.from_dict),
    _Collection(
        "stockPrices", "Stock price", "stock_prices", validate_stock_price, StockPrice.from_dict
    ),
    _Collection(
        "programConfigs",
        "Program config",
        "program_configs",
        validate_program_config,
        ProgramConfig.from_dict,
    ),
    _Collection(
        "shareExchanges",
        "Share exchange",
        "share_exchanges",
        validate_share_exchange,
        ShareExchange.from_dict,
    ),
    _Collection(
        "stockSales", "Stock sale", "stock_sales", validate_stock_sale, StockSale.from_dict
    ),
)


@dataclass(slots=True)
class ImportResult:
    """
    Outcome of reading a portfolio source.

    ``success`` is False only when the source itself could not be read; the
    portfolio is then empty and ``errors`` says why. Records that fail
    validation are skipped and listed in ``warnings`` without affecting
    ``success``.
    """

    success: bool
    portfolio: Portfolio
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    source: str = "<memory>"


def load_portfolio(
    source: str | Path | Mapping[str, Any],
    *,
    format: str | None = None,
    strict: bool = False,
) -> ImportResult:
    """
    Read a portfolio from a file path, JSON/YAML text, or a mapping.

    **Args:**
        source: Path to a ``.json``/``.yaml``/``.yml`` file, the document
            text itself, or an already-parsed mapping
        format: ``"json"`` or ``"yaml"``; inferred from the file suffix when
            omitted (text defaults to JSON)
        strict: Raise ``PortfolioImportError`` instead of returning a failed
            result when the source cannot be read

    **Raises:**
        FileNotFoundError: If ``source`` names a file that does not exist
        PortfolioImportError: In strict mode, if the source is unreadable

    **Example:**
        ```python
        from vestlab.core.portfolio_loader import load_portfolio

        result = load_portfolio("portfolio.yaml")
        for warning in result.warnings:
            print(warning)
        report = calculate_net_value(result.portfolio, "2025-06-15")
        ```
    """
    try:
        data, label = _read_source(source, format=format)
    except PortfolioImportError as exc:
        if strict:
            raise
        logger.warning("Could not read portfolio from %s: %s", exc.source, exc)
        return ImportResult(
            success=False,
            portfolio=empty_portfolio(),
            errors=exc.messages,
            source=exc.source,
        )

    warnings: list[str] = []
    collected: dict[str, list[Any]] = {}
    for collection in _COLLECTIONS:
        collected[collection.attr] = _read_collection(data, collection, warnings, label)

    portfolio = Portfolio(**{attr: tuple(items) for attr, items in collected.items()})
    logger.info(
        "Loaded portfolio from %s: %d grants, %d loans, %d prices, %d exchanges, "
        "%d sales (%d warnings)",
        label,
        len(portfolio.grants),
        len(portfolio.loans),
        len(portfolio.stock_prices),
        len(portfolio.share_exchanges),
        len(portfolio.stock_sales),
        len(warnings),
    )
    return ImportResult(success=True, portfolio=portfolio, warnings=warnings, source=label)


def export_portfolio(portfolio: Portfolio, path: str | Path | None = None) -> str:
    """
    Serialise ``portfolio`` with camelCase keys and return the text.

    When ``path`` is given the text is also written there; a ``.yaml`` or
    ``.yml`` suffix selects YAML, anything else JSON.
    """
    data = portfolio.to_dict()
    fmt = Path(path).suffix.lower() if path is not None else ".json"
    if fmt in {".yaml", ".yml"}:
        text = yaml.safe_dump(data, sort_keys=False)
    else:
        text = json.dumps(data, indent=2)
    if path is not None:
        Path(path).write_text(text, encoding="utf-8")
        logger.info("Exported portfolio to %s", path)
    return text


def merge_portfolios(existing: Portfolio, incoming: Portfolio) -> Portfolio:
    """
    Upsert ``incoming`` into ``existing``.

    Records are matched by id and incoming records win; records keep the
    position where their id was first seen. Stock prices are matched by date
    and the merged prices are sorted by date.
    """
    prices = {p.date: p for p in existing.stock_prices}
    prices.update((p.date, p) for p in incoming.stock_prices)
    return Portfolio(
        grants=_merge_by_id(existing.grants, incoming.grants),
        loans=_merge_by_id(existing.loans, incoming.loans),
        stock_prices=tuple(prices[d] for d in sorted(prices)),
        program_configs=_merge_by_id(existing.program_configs, incoming.program_configs),
        share_exchanges=_merge_by_id(existing.share_exchanges, incoming.share_exchanges),
        stock_sales=_merge_by_id(existing.stock_sales, incoming.stock_sales),
    )


def _merge_by_id(existing, incoming) -> tuple:
    merged = {item.id: item for item in existing}
    merged.update((item.id, item) for item in incoming)
    return tuple(merged.values())


def _read_collection(
    data: Mapping[str, Any], collection: _Collection, warnings: list[str], label: str
) -> list[Any]:
    if collection.key not in data or data[collection.key] is None:
        return []
    entries = data[collection.key]
    if not isinstance(entries, list):
        message = f"{collection.key} field is not an array, skipping."
        logger.warning("%s: %s", label, message)
        warnings.append(message)
        return []

    records: list[Any] = []
    for idx, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            messages = ["Record must be an object."]
        else:
            messages = collection.validate(entry)
        if messages:
            message = f"{collection.label} {idx}: {'; '.join(messages)}"
            logger.warning("%s: skipping %s", label, message)
            warnings.append(message)
            continue
        records.append(collection.build(entry))
    return records


def _read_source(
    source: str | Path | Mapping[str, Any], *, format: str | None
) -> tuple[dict[str, Any], str]:
    if isinstance(source, Mapping):
        return _ensure_root(_normalize_dates(deepcopy(dict(source))), "<mapping>"), "<mapping>"

    if isinstance(source, Path) or _looks_like_path(source):
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(path)
        fmt = (format or path.suffix.lstrip(".") or "json").lower()
        text = path.read_text(encoding="utf-8")
        label = str(path)
    else:
        fmt = (format or "json").lower()
        text = source
        label = "<text>"

    if fmt in {"yaml", "yml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise PortfolioImportError(label, [f"Invalid YAML: {exc}"]) from exc
    elif fmt == "json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise PortfolioImportError(label, [f"Invalid JSON: {exc}"]) from exc
    else:
        raise PortfolioImportError(label, [f"Unsupported portfolio format '{fmt}'"])

    return _ensure_root(_normalize_dates(data), label), label


def _looks_like_path(value: str) -> bool:
    text = value.strip()
    if not text or "\n" in text or text.startswith(_TEXT_PREFIXES):
        return False
    path = Path(text)
    return path.suffix.lower() in _KNOWN_SUFFIXES or path.exists()


def _ensure_root(data: Any, label: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise PortfolioImportError(label, [_ROOT_ERROR])
    return data


def _normalize_dates(value: Any) -> Any:
    """YAML reads unquoted ``2024-01-01`` as a date; carry it as an ISO string."""
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _normalize_dates(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_normalize_dates(v) for v in value]
    return value
