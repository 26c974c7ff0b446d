"""Object selector used by column listing and preview.

An object is addressed by exactly one of `table`, `view`, or a backend-specific
view-like alias (e.g. `"materialized view"`). Selectors are pure,
side-effect-free values; validation happens before any connection I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from dbpane.core.errors import UsageError

_SCOPE_KEYS = ("catalog", "schema")


def check_optional_string(value: Any, argument: str) -> str | None:
    """Return `value` if it is a string or None, otherwise raise UsageError."""
    if value is None or isinstance(value, str):
        return value
    raise UsageError(
        f"`{argument}` must be a single string or None, not {type(value).__name__}."
    )


@dataclass(frozen=True)
class ObjectSelector:
    """
    Exclusive table/view selector.

    Attributes:
        table: Table name.
        view: View name.
        aliases: View-like aliases keyed by lowercased object type
                 (e.g. {"materialized view": "mv_sales"}).
    """

    table: str | None = None
    view: str | None = None
    aliases: Mapping[str, str | None] = field(default_factory=dict)

    def populated(self) -> list[tuple[str, str]]:
        """Return (kind, name) for every field that carries a name."""
        found: list[tuple[str, str]] = []
        if self.table is not None:
            found.append(("table", self.table))
        if self.view is not None:
            found.append(("view", self.view))
        for kind, name in self.aliases.items():
            if name is not None:
                found.append((kind, name))
        return found

    def validate(self) -> ObjectSelector:
        """
        Check the selector shape.

        Raises:
            UsageError: If a value is not a string, an alias key is not
                view-like, or the number of populated fields is not one.
        """
        check_optional_string(self.table, "table")
        check_optional_string(self.view, "view")
        for kind, name in self.aliases.items():
            if "view" not in str(kind).lower():
                raise UsageError(f"`{kind}` is not a view-like object type.")
            check_optional_string(name, kind)

        count = len(self.populated())
        if count != 1:
            supplied = "none" if count == 0 else f"{count}"
            raise UsageError(
                "Exclusive selector violated: exactly one of `table`, `view` "
                f"or a view-like alias must be supplied ({supplied} given)."
            )
        return self

    @property
    def kind(self) -> str:
        """Object type of the selected object (validates first)."""
        return self.validate().populated()[0][0]

    @property
    def name(self) -> str:
        """Name of the selected object (validates first)."""
        return self.validate().populated()[0][1]


def parse_object_filters(
    filters: Mapping[str, Any],
) -> tuple[ObjectSelector, str | None, str | None]:
    """
    Split free-form host filters into a selector plus catalog/schema scope.

    `table`, `view`, `catalog` and `schema` are recognized; any other key
    containing "view" becomes an alias. Unknown keys are rejected.

    Returns:
        (selector, catalog, schema)
    """
    aliases: dict[str, str | None] = {}
    for key, value in filters.items():
        if key in ("table", "view") or key in _SCOPE_KEYS:
            continue
        if "view" in key.lower():
            aliases[key.lower()] = value
            continue
        raise UsageError(f"Unknown object filter `{key}`.")

    selector = ObjectSelector(
        table=filters.get("table"),
        view=filters.get("view"),
        aliases=aliases,
    )
    catalog = check_optional_string(filters.get("catalog"), "catalog")
    schema = check_optional_string(filters.get("schema"), "schema")
    return selector, catalog, schema
