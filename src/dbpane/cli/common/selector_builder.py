"""Object selector construction from CLI arguments.

Translates `--table`, `--view` and repeated `--alias type=name` options into
an `ObjectSelector`. Validation of the exclusive choice itself happens in the
selector.
"""

from typing import Iterable

from dbpane.core.errors import UsageError
from dbpane.core.selectors import ObjectSelector


def build_object_selector(
    *,
    table: str | None,
    view: str | None,
    aliases: Iterable[str],
) -> ObjectSelector:
    """
    Build an ObjectSelector from user-provided options.

    Args:
        table: Optional table name.
        view: Optional view name.
        aliases: Strings of the form `type=name`, where type is view-like
                 (e.g. `materialized view=mv_sales`).

    Raises:
        UsageError: If an alias is not `type=name`, or the selector does not
                    name exactly one object.
    """
    parsed: dict[str, str] = {}
    for alias in aliases:
        if "=" not in alias:
            raise UsageError(f"Invalid alias '{alias}' (expected type=name).")
        kind, name = alias.split("=", 1)
        kind = kind.strip().lower()
        if not kind or not name:
            raise UsageError(f"Invalid alias '{alias}' (expected type=name).")
        parsed[kind] = name

    return ObjectSelector(table=table, view=view, aliases=parsed).validate()
