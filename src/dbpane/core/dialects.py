"""Backend-specific preview query strategies.

Backends differ in how they cap the number of returned rows. The registry maps
a normalized product name to a strategy; unknown products use the common
`LIMIT` syntax (MySQL, PostgreSQL, DB2, Snowflake, Databricks, SQLite, ...).
"""

from __future__ import annotations

import math
from numbers import Integral, Real
from typing import Callable

from dbpane.core.errors import UsageError

PreviewStrategy = Callable[[str, int], str]


def limit_query(qualified_name: str, row_limit: int) -> str:
    """Common top-N syntax."""
    return f"SELECT * FROM {qualified_name} LIMIT {row_limit}"


def top_query(qualified_name: str, row_limit: int) -> str:
    """SQL Server / Teradata top-N syntax."""
    return f"SELECT TOP {row_limit} * FROM {qualified_name}"


def rownum_query(qualified_name: str, row_limit: int) -> str:
    """Oracle top-N syntax."""
    return f"SELECT * FROM {qualified_name} WHERE ROWNUM <= {row_limit}"


DEFAULT_STRATEGY: PreviewStrategy = limit_query

_STRATEGIES: dict[str, PreviewStrategy] = {
    "microsoft sql server": top_query,
    "teradata": top_query,
    "oracle": rownum_query,
}


def normalize_product_name(product_name: str | None) -> str:
    """Normalize a backend product name for registry lookup."""
    return " ".join((product_name or "").split()).casefold()


def strategy_for(product_name: str | None) -> PreviewStrategy:
    """Return the preview strategy for a product (exact match, else default)."""
    return _STRATEGIES.get(normalize_product_name(product_name), DEFAULT_STRATEGY)


def validate_row_limit(row_limit) -> int:
    """
    Check that `row_limit` is a whole, non-negative number and return it as int.

    Raises:
        UsageError: If `row_limit` is a bool, not a number, fractional,
            non-finite, or negative.
    """
    if isinstance(row_limit, bool) or not isinstance(row_limit, Real):
        raise UsageError(f"row_limit must be a whole number, got {row_limit!r}.")
    if isinstance(row_limit, Integral):
        value = int(row_limit)
    else:
        as_float = float(row_limit)
        if not math.isfinite(as_float) or not as_float.is_integer():
            raise UsageError(f"row_limit must be a whole number, got {row_limit!r}.")
        value = int(as_float)
    if value < 0:
        raise UsageError(f"row_limit must be non-negative, got {row_limit!r}.")
    return value


def preview_query(product_name: str | None, qualified_name: str, row_limit) -> str:
    """
    Build a row-limited SELECT for a backend.

    Args:
        product_name: Backend product name (e.g. "Oracle").
        qualified_name: Already-quoted object reference.
        row_limit: Maximum number of rows (whole, non-negative).

    Returns:
        The SQL text.
    """
    limit = validate_row_limit(row_limit)
    return strategy_for(product_name)(qualified_name, limit)
