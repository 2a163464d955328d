"""
Data models for the technical-data structure.

Contains the rich-text, row, group and aggregate dataclasses, the input
``Fragment`` and the ``ExtractionStats`` counters.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, fields
from typing import Any, Mapping

from config import PLACEHOLDER_TEXT, Mark


def generate_key() -> str:
    """Return a new opaque key for a stored array item."""
    return uuid.uuid4().hex[:12]


# ── Rich text ─────────────────────────────────────────────────────────────


@dataclass
class Span:
    """A run of text sharing one set of marks."""

    text: str
    marks: frozenset[Mark] = frozenset()
    key: str = field(default_factory=generate_key)

    def to_dict(self) -> dict[str, Any]:
        return {
            "_type": "span",
            "_key": self.key,
            "text": self.text,
            "marks": sorted(m.value for m in self.marks),
        }


@dataclass
class RichTextBlock:
    """A paragraph, or a bullet item when ``list_item`` is set."""

    spans: list[Span] = field(default_factory=list)
    list_item: bool = False
    key: str = field(default_factory=generate_key)

    @property
    def text(self) -> str:
        return "".join(s.text for s in self.spans)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "_type": "block",
            "_key": self.key,
            "style": "normal",
            "markDefs": [],
            "children": [s.to_dict() for s in self.spans],
        }
        if self.list_item:
            d["listItem"] = "bullet"
            d["level"] = 1
        return d


def placeholder_block() -> RichTextBlock:
    """One-span block standing in for a missing value."""
    return RichTextBlock(spans=[Span(text=PLACEHOLDER_TEXT)])


# ── Technical data ────────────────────────────────────────────────────────


@dataclass
class CellValue:
    """The rich-text content of one row for one variant."""

    content: list[RichTextBlock] = field(default_factory=list)
    key: str = field(default_factory=generate_key)

    def to_dict(self) -> dict[str, Any]:
        return {
            "_key": self.key,
            "content": [b.to_dict() for b in self.content],
        }


def placeholder_value() -> CellValue:
    return CellValue(content=[placeholder_block()])


@dataclass
class TechnicalDataRow:
    """A named parameter with one value per variant."""

    title: str
    values: list[CellValue] = field(default_factory=list)
    key: str = field(default_factory=generate_key)

    def fit_to(self, width: int) -> None:
        """Pad with placeholders or truncate so that ``len(values) == width``."""
        while len(self.values) < width:
            self.values.append(placeholder_value())
        del self.values[width:]

    def to_dict(self) -> dict[str, Any]:
        return {
            "_type": "technicalDataRow",
            "_key": self.key,
            "title": self.title,
            "values": [v.to_dict() for v in self.values],
        }


@dataclass
class TechnicalDataGroup:
    """A titled (or untitled) section built from one source table."""

    title: str | None = None
    rows: list[TechnicalDataRow] = field(default_factory=list)
    key: str = field(default_factory=generate_key)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"_type": "technicalDataGroup", "_key": self.key}
        if self.title:
            d["title"] = self.title
        d["rows"] = [r.to_dict() for r in self.rows]
        return d


@dataclass
class TechnicalData:
    """Aggregate technical data of one catalog item.

    ``variants`` is ``None`` when no table declared value columns; every row
    then carries exactly one value.
    """

    variants: list[str] | None = None
    groups: list[TechnicalDataGroup] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return sum(len(g.rows) for g in self.groups)

    @property
    def is_empty(self) -> bool:
        return not self.groups

    def to_dict(self) -> dict[str, Any]:
        """Return the stored document shape (Portable Text compatible)."""
        d: dict[str, Any] = {}
        if self.variants:
            d["variants"] = list(self.variants)
        d["groups"] = [g.to_dict() for g in self.groups]
        return d

    def to_plain(self) -> dict[str, Any]:
        """Return a key-free structure, stable across repeated extractions.

        Values are lists of block texts; list items are prefixed with
        ``"• "``; bold/italic spans are wrapped in ``**``/``*``.
        """

        def _span(span: Span) -> str:
            text = span.text
            if Mark.EM in span.marks:
                text = f"*{text}*"
            if Mark.STRONG in span.marks:
                text = f"**{text}**"
            return text

        def _block(block: RichTextBlock) -> str:
            text = "".join(_span(s) for s in block.spans)
            return f"• {text}" if block.list_item else text

        return {
            "variants": list(self.variants or []),
            "groups": [
                {
                    "title": g.title,
                    "rows": [
                        {
                            "title": r.title,
                            "values": [[_block(b) for b in v.content] for v in r.values],
                        }
                        for r in g.rows
                    ],
                }
                for g in self.groups
            ],
        }


# ── Input ─────────────────────────────────────────────────────────────────


@dataclass
class Fragment:
    """One technical-data tab: raw HTML plus an optional author title."""

    markup: str | None
    title: str | None = None
    order: int = 0

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Fragment:
        """Build a fragment from a legacy export row.

        Reads ``TabContent``, ``TabTitle`` and ``TabSort``; a missing or
        non-numeric ``TabSort`` sorts as 0.
        """
        try:
            order = int(str(row.get("TabSort") or 0).strip())
        except ValueError:
            order = 0
        title = row.get("TabTitle")
        return cls(
            markup=row.get("TabContent"),
            title=title.strip() if isinstance(title, str) and title.strip() else None,
            order=order,
        )


# ── Observability ─────────────────────────────────────────────────────────


@dataclass
class ExtractionStats:
    """Counters describing what an extraction kept and dropped.

    Dropping rows, tables and media is expected behaviour; the counters make
    it visible without changing the returned data.
    """

    fragments: int = 0
    empty_fragments: int = 0
    failed_fragments: int = 0
    tables: int = 0
    tables_dropped: int = 0
    rows: int = 0
    rows_dropped: int = 0
    media_skipped: int = 0

    def merge(self, other: ExtractionStats) -> None:
        for f in fields(self):
            setattr(self, f.name, getattr(self, f.name) + getattr(other, f.name))
