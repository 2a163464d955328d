"""
Project data rows of a parsed table onto the variant columns.
"""

from __future__ import annotations

import logging

from config import PLACEHOLDER_TEXT, is_meaningful_text
from header_shapes import HeaderLayout
from models import (
    CellValue,
    ExtractionStats,
    RichTextBlock,
    Span,
    TechnicalDataRow,
    placeholder_value,
)
from rich_text import html_to_blocks
from table_parser import MatrixCell, MatrixRow, ParsedTable

logger = logging.getLogger(__name__)


def cell_content(cell: MatrixCell) -> list[RichTextBlock]:
    """Rich-text content of a value cell, never empty.

    Cells whose markup yields no blocks, or is nested too deeply to walk,
    fall back to their plain text, or to the placeholder when that is blank
    too.
    """
    try:
        blocks = html_to_blocks(cell.html)
    except RecursionError:
        logger.warning("Cell markup nested too deeply (%d chars); using plain text", len(cell.html))
        blocks = []
    if blocks:
        return blocks
    return [RichTextBlock(spans=[Span(text=cell.text or PLACEHOLDER_TEXT)])]


def project_row(row: MatrixRow, column_count: int) -> TechnicalDataRow | None:
    """Turn one matrix row into a parameter row of *column_count* values.

    Returns ``None`` for rows without a meaningful title or without values.
    """
    title = row.first_text
    if not is_meaningful_text(title) or len(row.cells) == 1:
        return None

    values: list[CellValue] = []
    for cell in row.cells[1:]:
        if len(values) >= column_count:
            break
        # A spanning cell repeats its value in every covered column, each
        # copy with its own blocks and keys
        for _ in range(cell.colspan):
            if len(values) >= column_count:
                break
            values.append(CellValue(content=cell_content(cell)))

    while len(values) < column_count:
        values.append(placeholder_value())

    return TechnicalDataRow(title=title, values=values)


def project_rows(
    table: ParsedTable,
    layout: HeaderLayout,
    stats: ExtractionStats | None = None,
) -> list[TechnicalDataRow]:
    """Project every data row below the header of *table*."""
    column_count = max(1, len(layout.variants))
    rows: list[TechnicalDataRow] = []

    for idx, matrix_row in enumerate(table.rows[layout.header_rows:], start=layout.header_rows):
        row = project_row(matrix_row, column_count)
        if row is None:
            logger.debug("Dropped table row %d (%r)", idx, matrix_row.first_text[:40])
            if stats is not None:
                stats.rows_dropped += 1
            continue
        rows.append(row)

    if stats is not None:
        stats.rows += len(rows)
    return rows
