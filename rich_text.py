"""
Cell markup → rich-text blocks.

A cell becomes either a list of bullet blocks (one per ``<li>``) or a list of
paragraph blocks split at ``<br>`` and nested ``<p>`` boundaries.  Marks are
passed down the recursion explicitly and only ever grow.
"""

from __future__ import annotations

import re

from bs4 import Tag

from config import BOLD_TAGS, ITALIC_TAGS, SKIPPED_TAGS, Mark, normalize_spaces
from markup_tree import child_nodes, find_all_tags, parse_fragment, tag_name
from models import RichTextBlock, Span

# Block boundary marker inside a span sequence
BREAK = None

_LIST_TAGS = {"ul", "ol"}


def _marks_for(name: str, marks: frozenset[Mark]) -> frozenset[Mark]:
    if name in BOLD_TAGS:
        marks = marks | {Mark.STRONG}
    if name in ITALIC_TAGS:
        marks = marks | {Mark.EM}
    return marks


def _text_span(raw: str, marks: frozenset[Mark]) -> Span | None:
    # HTML whitespace semantics: any run renders as one space
    text = re.sub(r"\s+", " ", normalize_spaces(raw))
    if not text.strip() and text != " ":
        return None
    return Span(text=text, marks=marks)


def extract_spans(
    el: Tag,
    marks: frozenset[Mark] = frozenset(),
    top_level: bool = True,
    skip_lists: bool = False,
) -> list[Span | None]:
    """Flatten *el* into spans, with ``BREAK`` where a new block starts.

    ``<br>`` always breaks; a ``<p>`` below the outermost element breaks
    before its content.  With *skip_lists* nested ``<ul>``/``<ol>`` are left
    out (their items are converted on their own).
    """
    name = tag_name(el)
    if name in SKIPPED_TAGS:
        return []
    if name == "br":
        return [BREAK]

    spans: list[Span | None] = []
    if name == "p" and not top_level:
        spans.append(BREAK)

    marks = _marks_for(name, marks)
    for child in child_nodes(el):
        if isinstance(child, Tag):
            if skip_lists and tag_name(child) in _LIST_TAGS:
                continue
            spans.extend(extract_spans(child, marks, top_level=False, skip_lists=skip_lists))
        else:
            span = _text_span(str(child), marks)
            if span is not None:
                spans.append(span)
    return spans


def merge_spans(spans: list[Span | None]) -> list[Span | None]:
    """Join neighbouring spans with identical marks; breaks are kept apart."""
    merged: list[Span | None] = []
    for span in spans:
        last = merged[-1] if merged else BREAK
        if span is BREAK or last is BREAK or last.marks != span.marks:
            merged.append(span if span is BREAK else Span(text=span.text, marks=span.marks))
        else:
            last.text += span.text
    return merged


def trim_spans(spans: list[Span]) -> list[Span]:
    """Strip whitespace at both block edges and drop spans left empty."""
    spans = [Span(text=s.text, marks=s.marks) for s in spans]
    while spans and not spans[0].text.strip():
        spans.pop(0)
    while spans and not spans[-1].text.strip():
        spans.pop()
    if not spans:
        return []
    spans[0].text = spans[0].text.lstrip()
    spans[-1].text = spans[-1].text.rstrip()
    return [s for s in spans if s.text]


def _split_blocks(spans: list[Span | None]) -> list[RichTextBlock]:
    blocks: list[RichTextBlock] = []
    current: list[Span] = []
    for span in spans + [BREAK]:
        if span is not BREAK:
            current.append(span)
            continue
        trimmed = trim_spans(current)
        if trimmed:
            blocks.append(RichTextBlock(spans=trimmed))
        current = []
    return blocks


def _list_blocks(items: list[Tag]) -> list[RichTextBlock]:
    blocks: list[RichTextBlock] = []
    for li in items:
        merged = merge_spans(extract_spans(li, skip_lists=True))
        trimmed = trim_spans([s for s in merged if s is not BREAK])
        if trimmed:
            blocks.append(RichTextBlock(spans=trimmed, list_item=True))
    return blocks


def element_to_blocks(el: Tag) -> list[RichTextBlock]:
    """Convert the content of *el* (usually a table cell) to blocks."""
    items = find_all_tags(el, "li")
    if items:
        return _list_blocks(items)
    return _split_blocks(merge_spans(extract_spans(el)))


def html_to_blocks(markup: str | None) -> list[RichTextBlock]:
    """Convert inner cell markup to blocks; blank markup gives ``[]``."""
    if not markup or not normalize_spaces(markup).strip():
        return []
    return element_to_blocks(parse_fragment(markup))
