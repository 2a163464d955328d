"""
HTML parser for technical-data tabs.

Implements ``BaseExtractor`` for hand-authored HTML: headings and paragraphs
name the next table, tables (top-level, inside paragraphs, or inside
wrapper divs) become groups, and media blocks are ignored.
"""

from __future__ import annotations

import json
import logging
from typing import Iterable

from bs4 import Tag

from base_parser import BaseExtractor, TabResult
from config import CONTAINER_TAGS, HEADING_TAGS, is_meaningful_text, strip_title_suffix
from header_shapes import classify_header
from markup_tree import (
    child_elements,
    contains_media,
    element_text,
    find_all_tags,
    parse_fragment,
    tag_name,
)
from models import ExtractionStats, Fragment, TechnicalData, TechnicalDataGroup
from row_projector import project_rows
from table_parser import parse_table

logger = logging.getLogger(__name__)


class HtmlTechnicalDataParser(BaseExtractor):
    """Parser for technical-data tabs written in HTML."""

    # ── BaseExtractor interface ──

    def _parse_fragment(self, markup: str, stats: ExtractionStats) -> TabResult:
        soup = parse_fragment(markup)
        root = soup.body or soup

        result = TabResult()
        pending_title: str | None = None
        for el in child_elements(root):
            pending_title, found = self._visit(el, pending_title, stats)
            for variants, group in found:
                if len(variants) > len(result.variants):
                    result.variants = variants
                if group is not None:
                    result.groups.append(group)
        return result

    # ── top-level elements ──

    def _visit(
        self,
        el: Tag,
        pending_title: str | None,
        stats: ExtractionStats,
    ) -> tuple[str | None, list[tuple[list[str], TechnicalDataGroup | None]]]:
        """Handle one top-level element.

        Returns the pending title for the next table and the tables found in
        *el* as ``(variants, group)`` pairs.
        """
        name = tag_name(el)

        # Embedded players are not specification content
        if contains_media(el):
            stats.media_skipped += 1
            return pending_title, []

        if name in HEADING_TAGS:
            return self._visit_heading(el, pending_title, stats)

        if name == "table":
            return None, [self._table_to_group(el, pending_title, stats)]

        if name in CONTAINER_TAGS:
            found = []
            for table in find_all_tags(el, "table"):
                found.append(self._table_to_group(table, pending_title, stats))
                pending_title = None
            return pending_title, found

        return pending_title, []

    def _visit_heading(
        self,
        el: Tag,
        pending_title: str | None,
        stats: ExtractionStats,
    ) -> tuple[str | None, list[tuple[list[str], TechnicalDataGroup | None]]]:
        text = element_text(el)
        if not is_meaningful_text(text):
            return pending_title, []

        tables = find_all_tags(el, "table")
        if not tables:
            # Group title for the next table ("Audio:" → "Audio")
            return strip_title_suffix(text), []

        # A paragraph wrapping a table; the accumulated title goes to the table
        title = pending_title
        found = []
        for table in tables:
            found.append(self._table_to_group(table, title, stats))
            title = None
        return None, found

    # ── tables ──

    def _table_to_group(
        self,
        table: Tag,
        title: str | None,
        stats: ExtractionStats,
    ) -> tuple[list[str], TechnicalDataGroup | None]:
        stats.tables += 1
        parsed = parse_table(table)
        layout = classify_header(parsed)
        rows = project_rows(parsed, layout, stats)

        if not rows:
            stats.tables_dropped += 1
            logger.debug("Dropped table without data rows (%d matrix rows)", len(parsed.rows))
            return layout.variants, None

        logger.debug(
            "Table %r: %s header, %d variants, %d rows",
            title or layout.group_title,
            layout.shape.value,
            len(layout.variants),
            len(rows),
        )
        return layout.variants, TechnicalDataGroup(title=title or layout.group_title, rows=rows)


def parse_tab_content(markup: str | None) -> TabResult:
    """Parse the HTML of a single tab."""
    if not markup or not markup.strip():
        return TabResult()
    return HtmlTechnicalDataParser()._parse_fragment(markup, ExtractionStats())


def parse_technical_data(fragments: Iterable[Fragment]) -> TechnicalData:
    """Parse all tabs of one catalog item and combine them."""
    return HtmlTechnicalDataParser().extract(fragments)


# Debug a single tab
if __name__ == "__main__":
    import sys
    from pathlib import Path

    logging.basicConfig(level=logging.INFO)

    if len(sys.argv) > 1:
        file_path = Path(sys.argv[1])
        if file_path.exists():
            html_content = file_path.read_text(encoding="utf-8")
            data = parse_technical_data([Fragment(markup=html_content)])
            print(json.dumps(data.to_dict(), ensure_ascii=False, indent=2))
        else:
            print(f"File not found: {file_path}")
    else:
        print("Usage: python parser_html.py <html_file>")
