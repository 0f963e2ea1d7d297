"""Render the environment variables a record understands.

Purpose
-------
Give operators a readable inventory of keys, expected types, defaults and
required-ness without reading the application's source.

Contents
--------
* :data:`USAGE_STYLES` – supported layouts (``table`` and ``list``).
* :func:`render_usage` – produce the text for a sequence of leaf fields.
"""

from __future__ import annotations

from typing import Final, Iterable

from .fields import LeafField
from ..domain.shapes import describe

USAGE_STYLES: Final[tuple[str, ...]] = ("table", "list")

_HEADER: Final[str] = (
    "This application is configured via the environment. The following environment\n"
    "variables can be used:\n"
)
_COLUMNS: Final[tuple[str, ...]] = ("KEY", "TYPE", "DEFAULT", "REQUIRED", "DESCRIPTION")
_PADDING: Final[int] = 4


def render_usage(leaves: Iterable[LeafField], *, style: str = "table") -> str:
    """Return the usage text for *leaves* in the requested *style*.

    Raises
    ------
    ValueError
        When *style* is not one of :data:`USAGE_STYLES`.
    """

    rows = [_row(leaf) for leaf in leaves]
    if style == "table":
        return _render_table(rows)
    if style == "list":
        return _render_list(rows)
    raise ValueError(f"unknown usage style {style!r}; expected one of {', '.join(USAGE_STYLES)}")


def _row(leaf: LeafField) -> tuple[str, str, str, str, str]:
    tags = leaf.info.tags
    return (
        leaf.keys.primary,
        describe(leaf.info.shape),
        tags.default or "",
        "true" if tags.required else "",
        tags.desc,
    )


def _render_table(rows: list[tuple[str, ...]]) -> str:
    grid = [_COLUMNS, *rows]
    widths = [max(len(row[column]) for row in grid) + _PADDING for column in range(len(_COLUMNS) - 1)]
    lines = []
    for row in grid:
        cells = [cell.ljust(width) for cell, width in zip(row, widths)]
        lines.append(("".join(cells) + row[-1]).rstrip())
    return _HEADER + "\n" + "\n".join(lines) + "\n"


def _render_list(rows: list[tuple[str, ...]]) -> str:
    blocks = []
    for key, type_text, default, required, desc in rows:
        blocks.append(
            f"\n{key}\n"
            f"  [description] {desc}\n"
            f"  [type]        {type_text}\n"
            f"  [default]     {default}\n"
            f"  [required]    {required}"
        )
    return _HEADER + "".join(blocks) + "\n"
