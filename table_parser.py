"""
HTML ``<table>`` → cell matrix.

The matrix keeps each cell as authored (no colspan/rowspan expansion); the
header classifier and the row projector interpret the spans.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from bs4 import Tag

from config import BOLD_TAGS, CELL_TAGS
from markup_tree import element_text, find_all_tags, inner_html, span_attr, tag_name


@dataclass
class MatrixCell:
    """Represents a cell of a parsed table."""
    text: str
    html: str = ""
    colspan: int = 1
    rowspan: int = 1
    is_header: bool = False  # <th>, or bold content inside a <td>


@dataclass
class MatrixRow:
    """Represents a row of a parsed table."""
    cells: list[MatrixCell] = field(default_factory=list)

    @property
    def first_text(self) -> str:
        return self.cells[0].text if self.cells else ""


@dataclass
class ParsedTable:
    """Rows of one table; rows without cells are never stored."""
    rows: list[MatrixRow] = field(default_factory=list)


def parse_cell(cell: Tag) -> MatrixCell:
    is_header = tag_name(cell) == "th" or cell.find(list(BOLD_TAGS)) is not None
    return MatrixCell(
        text=element_text(cell),
        html=inner_html(cell),
        colspan=span_attr(cell, "colspan"),
        rowspan=span_attr(cell, "rowspan"),
        is_header=is_header,
    )


def parse_table(table: Tag) -> ParsedTable:
    """Extract rows from a single table element.

    Args:
        table: A table element

    Returns:
        ParsedTable with one MatrixRow per ``<tr>`` holding at least one cell
    """
    rows = []
    for tr in find_all_tags(table, "tr"):
        cells = [parse_cell(td) for td in find_all_tags(tr, CELL_TAGS)]
        if cells:
            rows.append(MatrixRow(cells=cells))
    return ParsedTable(rows=rows)
