"""
Read-only traversal helpers over BeautifulSoup trees.

Every stage above this module sees a node as either an ``Element`` (a
``bs4.Tag``) or a ``Text`` (a plain ``bs4.NavigableString``).  Comments,
doctypes, CDATA and processing instructions are never yielded.
"""

from __future__ import annotations

import logging
import re
import warnings
from typing import Collection, Iterator, Union

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning, NavigableString, Tag
from bs4.element import PreformattedString

from config import HTML_PARSER, MEDIA_TAGS, SKIPPED_TAGS, normalize_spaces

logger = logging.getLogger(__name__)

Element = Tag
Text = NavigableString
Node = Union[Element, Text]


def parse_fragment(markup: str | None) -> BeautifulSoup:
    """Parse an HTML fragment.

    Never raises: blank input and markup the tree builder rejects both give
    an empty tree, so extraction degrades to "no groups".
    """
    if not markup or not markup.strip():
        return BeautifulSoup("", HTML_PARSER)
    try:
        with warnings.catch_warnings():
            # Short cell values like "4.5" look like file names to bs4
            warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
            return BeautifulSoup(markup, HTML_PARSER)
    except Exception as exc:
        logger.warning("Unparsable markup (%d chars): %s", len(markup), exc)
        return BeautifulSoup("", HTML_PARSER)


def child_nodes(el: Tag) -> Iterator[Node]:
    """Yield the element and text children of *el* in document order."""
    for child in el.children:
        if isinstance(child, Tag):
            yield child
        elif isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
            yield child


def child_elements(el: Tag) -> Iterator[Element]:
    for child in el.children:
        if isinstance(child, Tag):
            yield child


def tag_name(el: Tag) -> str:
    return (el.name or "").lower()


def span_attr(el: Tag, name: str) -> int:
    """Read a ``colspan``/``rowspan`` style attribute.

    Leading digits are used (``"2px"`` → 2); missing, non-numeric or
    non-positive values give 1.
    """
    value = el.get(name)
    if isinstance(value, list):
        value = value[0] if value else None
    if not value:
        return 1
    match = re.match(r"\s*(\d+)", str(value))
    if not match:
        return 1
    return max(1, int(match.group(1)))


def inner_html(el: Tag) -> str:
    """Return the inner HTML of an element as a string."""
    return "".join(str(c) for c in el.children).strip()


def find_all_tags(el: Tag, names: str | list[str]) -> list[Element]:
    """Return descendants of *el* named *names*, in document order."""
    return list(el.find_all(names))


def contains_media(el: Tag) -> bool:
    """Check if *el* embeds an iframe or video anywhere below it."""
    return el.find(MEDIA_TAGS) is not None


def _raw_text(el: Tag, skip: Collection[str]) -> str:
    parts: list[str] = []
    for child in child_nodes(el):
        if isinstance(child, Tag):
            name = tag_name(child)
            if name in SKIPPED_TAGS or name in skip:
                continue
            if name == "br":
                parts.append("\n")
                continue
            parts.append(_raw_text(child, skip))
        else:
            parts.append(str(child))
    return "".join(parts)


def element_text(el: Tag, skip: Collection[str] = ()) -> str:
    """Extract the text of *el*, keeping ``<br>`` line breaks.

    Whitespace other than newlines is collapsed, blank lines are removed and the
    result is stripped.  Subtrees named in *skip* are left out.
    """
    try:
        raw = _raw_text(el, skip)
    except RecursionError:
        # Flat text without line breaks or skipping
        logger.warning("<%s> nested too deeply; extracting flat text", tag_name(el))
        raw = el.get_text()
    text = normalize_spaces(raw)
    text = re.sub(r"[^\S\n]+", " ", text)
    text = re.sub(r" ?\n ?", "\n", text)
    text = re.sub(r"\n\s*\n", "\n", text)
    return text.strip()
