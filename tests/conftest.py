"""Shared fixtures for the technical-data parser tests."""

from __future__ import annotations

from typing import Callable

import pytest

from markup_tree import parse_fragment
from parser_html import HtmlTechnicalDataParser
from table_parser import ParsedTable, parse_table


@pytest.fixture
def parser() -> HtmlTechnicalDataParser:
    return HtmlTechnicalDataParser()


@pytest.fixture
def make_table() -> Callable[[str], ParsedTable]:
    """Parse ``<tr>`` markup (without the ``<table>`` wrapper) into a matrix."""

    def _make(rows_html: str) -> ParsedTable:
        soup = parse_fragment(f"<table>{rows_html}</table>")
        return parse_table(soup.find("table"))

    return _make


@pytest.fixture
def power_amp_tab() -> str:
    return (
        "<h3>Specyfikacja</h3>"
        "<table>"
        "<tr><th></th><th>Power Amp A</th><th>Power Amp B</th></tr>"
        "<tr><td>Impedance</td><td>4Ω</td><td>8Ω</td></tr>"
        "<tr><td>Weight</td><td colspan=\"2\">12 kg</td></tr>"
        "</table>"
    )
