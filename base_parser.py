"""
Abstract base extractor for technical data.

Concrete subclasses (``HtmlTechnicalDataParser``) turn the markup of a single
tab into groups, while this base class merges all tabs of one catalog item:
ordering, tab-title inheritance, the shared variant set and value padding.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Sequence

from config import batch_executor_settings
from models import ExtractionStats, Fragment, TechnicalData, TechnicalDataGroup

logger = logging.getLogger(__name__)


@dataclass
class TabResult:
    """Groups of one tab plus the widest variant set seen in it."""

    variants: list[str] = field(default_factory=list)
    groups: list[TechnicalDataGroup] = field(default_factory=list)


class BaseExtractor(ABC):
    """Base class for all technical-data extractors."""

    def __init__(self) -> None:
        self.last_stats = ExtractionStats()

    # ── public entry point ──

    def extract(self, fragments: Iterable[Fragment]) -> TechnicalData:
        """Merge every tab of one catalog item into a ``TechnicalData``.

        Tabs run in ``order`` (ties keep input order).  Never raises: a tab
        that fails is logged and contributes nothing.
        """
        stats = ExtractionStats()
        best_variants: list[str] = []
        groups: list[TechnicalDataGroup] = []

        for fragment in sorted(fragments, key=lambda f: f.order):
            stats.fragments += 1
            if not fragment.markup or not fragment.markup.strip():
                stats.empty_fragments += 1
                continue

            # Counters of a failing tab are discarded with its groups
            tab_stats = ExtractionStats()
            try:
                tab = self._parse_fragment(fragment.markup, tab_stats)
            except Exception:
                logger.exception("Failed to extract technical data from tab %r", fragment.title)
                stats.failed_fragments += 1
                continue
            stats.merge(tab_stats)

            # Widest table wins; on a tie the earlier tab keeps its names
            if len(tab.variants) > len(best_variants):
                best_variants = list(tab.variants)

            if fragment.title and tab.groups and not tab.groups[0].title:
                tab.groups[0].title = fragment.title

            groups.extend(tab.groups)

        if best_variants:
            for group in groups:
                for row in group.rows:
                    row.fit_to(len(best_variants))

        self.last_stats = stats
        logger.info(
            "Extracted %d groups, %d rows, %d variants from %d tabs",
            len(groups),
            sum(len(g.rows) for g in groups),
            len(best_variants),
            stats.fragments,
        )
        return TechnicalData(variants=best_variants or None, groups=groups)

    def extract_rows(self, rows: Iterable[Mapping[str, Any]]) -> TechnicalData:
        """``extract`` for legacy export rows (``TabContent``/``TabTitle``/``TabSort``)."""
        return self.extract(Fragment.from_row(row) for row in rows)

    # ── abstract methods ── (to be implemented by subclasses)

    @abstractmethod
    def _parse_fragment(self, markup: str, stats: ExtractionStats) -> TabResult:
        """Extract the groups of a single tab."""
        ...

    # ── batch ──

    @classmethod
    def extract_batch(
        cls,
        items: Mapping[str, Sequence[Fragment]],
        max_workers: int | None = None,
        use_processes: bool | None = None,
    ) -> dict[str, TechnicalData]:
        """Extract many catalog items in parallel, one task per item.

        The tabs of one item always run sequentially in a single worker.
        Defaults come from ``config.batch_executor_settings``; with a single
        worker everything runs inline.  Results keep the key order of *items*.
        """
        env_workers, env_processes = batch_executor_settings()
        workers = max_workers or env_workers
        processes = env_processes if use_processes is None else use_processes

        if workers <= 1 or len(items) <= 1:
            return {key: _extract_item(cls, fragments) for key, fragments in items.items()}

        executor_cls: type[Executor] = ProcessPoolExecutor if processes else ThreadPoolExecutor
        results: dict[str, TechnicalData] = {}
        with executor_cls(max_workers=workers) as executor:
            futures = {
                key: executor.submit(_extract_item, cls, list(fragments))
                for key, fragments in items.items()
            }
            for key, future in futures.items():
                try:
                    results[key] = future.result()
                except Exception:
                    logger.exception("Batch extraction failed for item %r", key)
                    results[key] = TechnicalData()
        return results


def _extract_item(cls: type[BaseExtractor], fragments: Sequence[Fragment]) -> TechnicalData:
    return cls().extract(fragments)
