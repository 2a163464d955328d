"""
Header-shape classification for parsed technical-data tables.

Authors expressed value columns ("variants") in four different ways.  Each
shape is a rule made of a predicate and a builder; rules are tried in
``HEADER_RULES`` order and the first rule whose predicate holds decides the
layout, even when its builder then finds no usable variants.

Shapes
------
* ``ROWSPAN_COLSPAN``: standalone variants with ``rowspan=2`` next to a
  group header with ``colspan=N`` whose sub-variants sit in the second row::

      [ (rowspan=2) ] [SR30 (rowspan=2)] [Atmosphere SX (colspan=3)]
                                         [Alive] [Excite] [Euphoria]

  → ``SR30, Atmosphere SX Alive, Atmosphere SX Excite, Atmosphere SX Euphoria``

* ``COLSPAN_GROUPS``: a first row of group prefixes expanded over their
  colspans, combined column by column with the second row.
* ``TITLE_ROW``: a first-row cell spanning three or more columns is a
  section title; variants come from the second row.
* ``DIRECT``: the first row holds the variants after the label cell.
* ``NONE``: no header; every row is data with a single value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from config import MIN_LABEL_LENGTH, MIN_VARIANT_LENGTH, TITLE_ROW_MIN_COLSPAN
from table_parser import MatrixRow, ParsedTable


class HeaderShape(str, Enum):
    ROWSPAN_COLSPAN = "rowspan_colspan"
    COLSPAN_GROUPS = "colspan_groups"
    TITLE_ROW = "title_row"
    DIRECT = "direct"
    NONE = "none"


@dataclass
class HeaderLayout:
    """Outcome of classifying the leading rows of a table."""

    shape: HeaderShape = HeaderShape.NONE
    variants: list[str] = field(default_factory=list)
    header_rows: int = 0
    group_title: str | None = None


def _is_variant_text(text: str) -> bool:
    return len(text) >= MIN_VARIANT_LENGTH


# ── ROWSPAN_COLSPAN ───────────────────────────────────────────────────────


def _has_rowspan_and_colspan(table: ParsedTable) -> bool:
    if len(table.rows) < 2:
        return False
    first = table.rows[0].cells
    has_rowspan = any(c.rowspan > 1 and _is_variant_text(c.text.strip()) for c in first)
    has_colspan = any(c.colspan > 1 and c.text.strip() for c in first)
    return has_rowspan and has_colspan


def _build_rowspan_colspan(table: ParsedTable) -> HeaderLayout:
    first, second = table.rows[0], table.rows[1]
    variants: list[str] = []
    sub_idx = 0

    for cell in first.cells:
        text = cell.text.strip()
        if cell.rowspan > 1:
            # Standalone variant; the short one is the label column
            if _is_variant_text(text):
                variants.append(text)
        elif cell.colspan > 1:
            for _ in range(cell.colspan):
                if sub_idx >= len(second.cells):
                    break
                sub_text = second.cells[sub_idx].text.strip()
                if sub_text:
                    variants.append(f"{text} {sub_text}".strip())
                sub_idx += 1
        elif _is_variant_text(text):
            variants.append(text)

    return HeaderLayout(HeaderShape.ROWSPAN_COLSPAN, variants, header_rows=2)


# ── COLSPAN_GROUPS ────────────────────────────────────────────────────────


def _has_grouped_colspan(table: ParsedTable) -> bool:
    if len(table.rows) < 2:
        return False
    return any(c.colspan > 1 and c.text.strip() for c in table.rows[0].cells)


def _expand(row: MatrixRow) -> list[str]:
    """Repeat each cell's text once per spanned column."""
    expanded: list[str] = []
    for cell in row.cells:
        expanded.extend([cell.text.strip()] * cell.colspan)
    return expanded


def _build_colspan_groups(table: ParsedTable) -> HeaderLayout:
    prefixes = _expand(table.rows[0])
    names: list[str] = []
    for idx, raw in enumerate(_expand(table.rows[1])):
        prefix = prefixes[idx] if idx < len(prefixes) else ""
        if prefix and prefix != raw:
            names.append(f"{prefix} {raw}".strip())
        else:
            names.append(raw)

    if names and not _is_variant_text(names[0]):
        names = names[1:]
    variants = [n for n in names if n]
    return HeaderLayout(HeaderShape.COLSPAN_GROUPS, variants, header_rows=2)


# ── TITLE_ROW ─────────────────────────────────────────────────────────────


def _has_title_row(table: ParsedTable) -> bool:
    if len(table.rows) < 2:
        return False
    return any(c.colspan >= TITLE_ROW_MIN_COLSPAN for c in table.rows[0].cells)


def _build_title_row(table: ParsedTable) -> HeaderLayout:
    cells = table.rows[1].cells
    candidates = [c for c in cells if c.is_header or c.text]
    if len(candidates) < 2:
        return HeaderLayout()

    if len(cells[0].text) < MIN_LABEL_LENGTH:
        cells = cells[1:]
    variants = [c.text for c in cells if c.text]
    return HeaderLayout(HeaderShape.TITLE_ROW, variants, header_rows=2)


# ── DIRECT ────────────────────────────────────────────────────────────────


def _has_direct_header(table: ParsedTable) -> bool:
    if not table.rows:
        return False
    cells = table.rows[0].cells
    return len(cells) > 2 and any(c.is_header for c in cells[1:])


def _build_direct(table: ParsedTable) -> HeaderLayout:
    label, *rest = table.rows[0].cells
    variants = [c.text for c in rest if c.text]

    # A plain (non-header) label cell names the group
    label_text = label.text.strip()
    group_title = None
    if label_text and not label.is_header and _is_variant_text(label_text):
        group_title = label_text

    return HeaderLayout(HeaderShape.DIRECT, variants, header_rows=1, group_title=group_title)


HEADER_RULES: tuple[
    tuple[Callable[[ParsedTable], bool], Callable[[ParsedTable], HeaderLayout]], ...
] = (
    (_has_rowspan_and_colspan, _build_rowspan_colspan),
    (_has_grouped_colspan, _build_colspan_groups),
    (_has_title_row, _build_title_row),
    (_has_direct_header, _build_direct),
)


def classify_header(table: ParsedTable) -> HeaderLayout:
    """Classify the leading rows of *table*; ``NONE`` when no rule applies."""
    for applies, build in HEADER_RULES:
        if applies(table):
            return build(table)
    return HeaderLayout()
