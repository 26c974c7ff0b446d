"""Output formatting utilities for the CLI."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import questionary
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text
from rich.theme import Theme
from rich.tree import Tree

from dbpane.cli.common.tui_style import QUESTIONARY_STYLE_SELECT
from dbpane.core.models import Children, QueryResult

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)
err_console = Console(theme=_THEME, stderr=True)


def configure_logging(level: int) -> None:
    """Route stdlib logging through Rich on stderr."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def _q(self, message: str) -> str:
        """Prefix Questionary prompts to be DBPANE consistent."""
        return f"[DBPANE] {message}"

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        console.print(f"[err]✗[/] {msg}")

    def header(self, title: str) -> None:
        console.print(f"[title]{title}[/]")

    def plain(self, text: str) -> None:
        """Print text without Rich markup or highlighting."""
        console.print(text, markup=False, highlight=False)

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {v}")

    def select_one(self, message: str, choices: list[str]) -> str | None:
        """
        Prompt the user to select a single item from a list.

        Returns:
            The selected value, or None if cancelled.
        """
        if not choices:
            return None

        return questionary.select(
            self._q(message),
            choices=choices,
            style=QUESTIONARY_STYLE_SELECT,
            qmark="✦",
            instruction="Use ↑/↓ then Enter",
        ).ask()

    def objects_table(self, objects: Iterable[Any], title: str = "Objects") -> None:
        """Expects objects with .name and .type (like ObjectDescriptor)."""
        t = Table(title=title, show_lines=False)
        t.add_column("Name", style="ok")
        t.add_column("Type", style="meta")

        for o in objects:
            t.add_row(str(o.name), str(o.type))

        console.print(t)

    def columns_table(self, columns: Iterable[Any], title: str = "Columns") -> None:
        """Expects objects with .name and .type (like ColumnDescriptor)."""
        t = Table(title=title, show_lines=False)
        t.add_column("Column", style="ok")
        t.add_column("Type", style="meta")

        for c in columns:
            t.add_row(str(c.name), str(c.type))

        console.print(t)

    def result_table(self, result: QueryResult, title: str = "Preview") -> None:
        """Render a preview result; NULLs show as dim `NULL`."""
        t = Table(title=title, show_lines=False)
        for name in result.columns:
            t.add_column(str(name))

        for row in result.rows:
            t.add_row(
                *(Text("NULL", style="meta") if v is None else Text(str(v)) for v in row)
            )

        console.print(t)

    def hierarchy_tree(self, types: Children, title: str = "Object types") -> None:
        """Render an object-type hierarchy as a tree."""
        root = Tree(f"[title]{title}[/]")

        def _add(branch: Tree, children: Children) -> None:
            for name, node in children.items():
                if isinstance(node.contains, Children):
                    _add(branch.add(f"[ok]{name}[/]"), node.contains)
                else:
                    branch.add(f"{name} [meta](data)[/]")

        _add(root, types)
        console.print(root)


out = Out()
