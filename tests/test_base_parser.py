"""Tests for merging the tabs of one catalog item."""

from __future__ import annotations

import pytest

from base_parser import BaseExtractor
from models import ExtractionStats, Fragment, TechnicalData
from parser_html import HtmlTechnicalDataParser

SIMPLE_TABLE = "<table><tr><td>Gain</td><td>20 dB</td></tr></table>"
TWO_VARIANTS = (
    "<table><tr><td></td><th>Basic</th><th>Pro</th></tr>"
    "<tr><td>Power</td><td>50 W</td><td>100 W</td></tr></table>"
)
THREE_VARIANTS = (
    "<table><tr><td></td><th>S</th><th>M</th><th>L</th></tr>"
    "<tr><td>Height</td><td>1 m</td><td>2 m</td><td>3 m</td></tr></table>"
)


class FlakyParser(HtmlTechnicalDataParser):
    def _parse_fragment(self, markup, stats):
        if "boom" in markup:
            raise RuntimeError("boom")
        return super()._parse_fragment(markup, stats)


class FailsAfterParsing(HtmlTechnicalDataParser):
    def _parse_fragment(self, markup, stats):
        tab = super()._parse_fragment(markup, stats)
        if "boom" in markup:
            raise RuntimeError("boom")
        return tab


def test_base_extractor_is_abstract() -> None:
    with pytest.raises(TypeError):
        BaseExtractor()


def test_tabs_run_in_sort_order_with_stable_ties(parser) -> None:
    data = parser.extract([
        Fragment(markup="<h3>Third</h3>" + SIMPLE_TABLE, order=2),
        Fragment(markup="<h3>First</h3>" + SIMPLE_TABLE, order=1),
        Fragment(markup="<h3>Fourth</h3>" + SIMPLE_TABLE, order=2),
        Fragment(markup="<h3>Zero</h3>" + SIMPLE_TABLE),
    ])

    assert [g.title for g in data.groups] == ["Zero", "First", "Third", "Fourth"]


def test_tab_title_names_untitled_first_group(parser) -> None:
    data = parser.extract([Fragment(markup=SIMPLE_TABLE + SIMPLE_TABLE, title="Wymiary")])
    assert [g.title for g in data.groups] == ["Wymiary", None]


def test_tab_title_does_not_override_heading(parser) -> None:
    data = parser.extract([Fragment(markup="<h3>Audio</h3>" + SIMPLE_TABLE, title="Tab")])
    assert [g.title for g in data.groups] == ["Audio"]


def test_rows_are_padded_to_widest_variant_set(parser) -> None:
    data = parser.extract([
        Fragment(markup=TWO_VARIANTS, order=0),
        Fragment(markup=THREE_VARIANTS + SIMPLE_TABLE, order=1),
    ])

    assert data.variants == ["S", "M", "L"]
    for group in data.groups:
        for row in group.rows:
            assert len(row.values) == 3

    power = data.groups[0].rows[0]
    assert [v.content[0].text for v in power.values] == ["50 W", "100 W", "-"]
    gain = data.groups[2].rows[0]
    assert [v.content[0].text for v in gain.values] == ["20 dB", "-", "-"]


def test_equal_width_variant_sets_keep_the_first(parser) -> None:
    other = TWO_VARIANTS.replace("Basic", "Eco").replace("Pro", "Max")

    data = parser.extract([Fragment(markup=TWO_VARIANTS), Fragment(markup=other)])

    assert data.variants == ["Basic", "Pro"]


def test_no_variants_gives_single_values(parser) -> None:
    data = parser.extract([Fragment(markup=SIMPLE_TABLE)])

    assert data.variants is None
    assert "variants" not in data.to_dict()
    assert len(data.groups[0].rows[0].values) == 1


def test_failing_tab_is_skipped_and_counted() -> None:
    parser = FlakyParser()

    data = parser.extract([
        Fragment(markup="<p>boom</p>", title="Broken"),
        Fragment(markup=SIMPLE_TABLE, title="Ok"),
    ])

    assert [g.title for g in data.groups] == ["Ok"]
    assert parser.last_stats.failed_fragments == 1
    assert parser.last_stats.fragments == 2


def test_empty_input_and_blank_tabs(parser) -> None:
    assert parser.extract([]).is_empty

    data = parser.extract([Fragment(markup=None), Fragment(markup="  \n ")])

    assert data == TechnicalData()
    assert parser.last_stats.empty_fragments == 2


def test_stats_describe_the_extraction(parser, power_amp_tab) -> None:
    parser.extract([
        Fragment(markup=power_amp_tab),
        Fragment(markup="<table><tr><td>-</td><td>x</td></tr></table>"),
    ])

    stats = parser.last_stats
    assert stats.tables == 2
    assert stats.tables_dropped == 1
    assert stats.rows == 2
    assert stats.rows_dropped == 1


def test_repeated_extraction_is_stable(parser, power_amp_tab) -> None:
    fragments = [Fragment(markup=power_amp_tab, title="Specs")]
    assert parser.extract(fragments).to_plain() == parser.extract(fragments).to_plain()


def test_extract_rows_reads_legacy_columns(parser) -> None:
    data = parser.extract_rows([
        {"TabContent": SIMPLE_TABLE, "TabTitle": "Second", "TabSort": "5"},
        {"TabContent": SIMPLE_TABLE, "TabTitle": "First", "TabSort": "x"},
        {"TabContent": None, "TabTitle": "Empty", "TabSort": 1},
    ])

    assert [g.title for g in data.groups] == ["First", "Second"]
    assert parser.last_stats.empty_fragments == 1


@pytest.mark.parametrize("workers", [1, 2])
def test_extract_batch_keeps_item_order(workers) -> None:
    items = {
        "amp": [Fragment(markup=TWO_VARIANTS)],
        "stand": [Fragment(markup=THREE_VARIANTS)],
        "empty": [],
    }

    results = HtmlTechnicalDataParser.extract_batch(items, max_workers=workers, use_processes=False)

    assert list(results) == ["amp", "stand", "empty"]
    assert results["amp"].variants == ["Basic", "Pro"]
    assert results["stand"].variants == ["S", "M", "L"]
    assert results["empty"].is_empty


def test_extract_batch_isolates_failures() -> None:
    items = {
        "bad": [Fragment(markup="<p>boom</p>")],
        "good": [Fragment(markup=SIMPLE_TABLE)],
    }

    results = FlakyParser.extract_batch(items, max_workers=2, use_processes=False)

    assert results["bad"].is_empty
    assert results["good"].row_count == 1


def test_stats_merge() -> None:
    total = ExtractionStats(fragments=1, rows=3)
    total.merge(ExtractionStats(fragments=2, rows_dropped=1))

    assert total == ExtractionStats(fragments=3, rows=3, rows_dropped=1)


def test_failing_tab_leaves_no_partial_counters() -> None:
    parser = FailsAfterParsing()

    parser.extract([
        Fragment(markup="<h3>boom</h3>" + TWO_VARIANTS),
        Fragment(markup=SIMPLE_TABLE),
    ])

    stats = parser.last_stats
    assert stats.failed_fragments == 1
    assert stats.tables == 1
    assert stats.rows == 1
