"""
Error classes for VestLab.

The valuation and projection engines never raise for well-typed input: they
degrade to ``None``, zero or empty results instead. The exceptions below are
raised only at the edges of the system, where a caller hands over something
that cannot be interpreted at all.
"""

from __future__ import annotations


class ConfigError(Exception):
    """
    Configuration error raised outside the calculation engine.

    **Common Causes:**
    - Date strings that are not ``YYYY-MM-DD`` passed to the date utilities
    - Invalid ``ReportConfig`` values (negative horizons, inverted windows)
    - Unknown action objects handed to ``apply_action``

    **Example Usage:**
        ```python
        from vestlab.core.errors import ConfigError
        from vestlab.core.utils import parse_date

        try:
            parse_date("15/06/2025")
        except ConfigError as e:
            print(f"Configuration error: {e}")
        ```
    """

    pass


class PortfolioImportError(ValueError):
    """
    Raised when a portfolio source cannot be read at all.

    Individual invalid records are not errors: the loader skips them and
    records a warning. This exception covers unreadable sources only
    (malformed JSON/YAML, a root that is not a mapping) and is raised only
    when the caller asks for strict loading.

    Attributes:
        source: Label of the source that failed (path or ``<mapping>``)
        messages: Human-readable error messages collected while loading
    """

    def __init__(self, source: str, messages: list[str]):
        self.source = source
        self.messages = list(messages)
        super().__init__(self._fmt())

    def _fmt(self) -> str:
        """Format the error message with the source label."""
        joined = "; ".join(self.messages) if self.messages else "unknown error"
        return f"[{self.source}] {joined}"
