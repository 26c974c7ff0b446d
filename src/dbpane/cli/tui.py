"""Interactive hierarchy browser.

Walks catalogs and schemas with questionary prompts, then shows columns or a
preview for the chosen table/view. All data access goes through the callbacks
handed to the observer when the connection was opened.
"""

from __future__ import annotations

from typing import Any

from dbpane.cli.common.output import out
from dbpane.core.events import ConnectionAction, ConnectionCallbacks
from dbpane.core.models import ObjectDescriptor

_MAX_NAME_WIDTH = 64
_UP = ".. (up)"
_QUIT = "(quit)"
_COLUMNS = "Columns"
_PREVIEW = "Preview"
_BACK = "Back"


def _truncate(text: str, max_len: int) -> str:
    """Return text capped at max_len characters using an ASCII ellipsis."""
    if max_len <= 3 or len(text) <= max_len:
        return text[:max_len]
    return f"{text[: max_len - 3]}..."


def object_choice_title(obj: ObjectDescriptor, *, name_width: int) -> str:
    """Format one object as `<name>  (<type>)` with an aligned type column."""
    short_name = _truncate(obj.name, _MAX_NAME_WIDTH)
    return f"{short_name.ljust(name_width)}  ({obj.type})"


def object_filters(path: dict[str, str], obj: ObjectDescriptor) -> dict[str, Any]:
    """
    Return the callback filters addressing `obj` under `path`.

    View-like types are passed under their own type name; every other
    non-container type is addressed as a table.
    """
    key = obj.type if "view" in obj.type else "table"
    return {**path, key: obj.name}


def _leaf_menu(
    callbacks: ConnectionCallbacks,
    path: dict[str, str],
    obj: ObjectDescriptor,
    row_limit: int,
) -> None:
    filters = object_filters(path, obj)
    while True:
        picked = out.select_one(f"{obj.name}:", [_COLUMNS, _PREVIEW, _BACK])
        if picked in (None, _BACK):
            return
        if picked == _COLUMNS:
            with out.status("Loading columns..."):
                columns = callbacks.list_columns(**filters)
            if columns:
                out.columns_table(columns, title=obj.name)
            else:
                out.warn("No columns found.")
        elif picked == _PREVIEW:
            with out.status("Running preview..."):
                result = callbacks.preview_object(row_limit, **filters)
            out.result_table(result, title=f"{obj.name} (first {row_limit} rows)")


def browse(
    callbacks: ConnectionCallbacks,
    *,
    row_limit: int,
    actions: dict[str, ConnectionAction] | None = None,
) -> None:
    """Run the interactive browser until the user quits."""
    path: dict[str, str] = {}
    levels: list[str] = []
    action_titles = [f"[{name}]" for name in (actions or {})]

    while True:
        with out.status("Loading objects..."):
            objects = callbacks.list_objects(**path)

        shown = [_truncate(o.name, _MAX_NAME_WIDTH) for o in objects]
        name_width = max((len(n) for n in shown), default=0)
        by_title = {object_choice_title(o, name_width=name_width): o for o in objects}

        choices = list(by_title)
        if levels:
            choices.insert(0, _UP)
        choices += action_titles + [_QUIT]

        where = " / ".join(path.values()) or "root"
        picked = out.select_one(f"Browse {where}:", choices)

        if picked in (None, _QUIT):
            return
        if picked == _UP:
            path.pop(levels.pop())
            continue
        if picked in action_titles:
            (actions or {})[picked[1:-1]].callback()
            continue

        obj = by_title[picked]
        if obj.type in ("catalog", "schema"):
            path[obj.type] = obj.name
            levels.append(obj.type)
            continue

        _leaf_menu(callbacks, path, obj, row_limit)
