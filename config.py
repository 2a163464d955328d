"""
Configuration for the technical-data table extractor.

Contains the Mark enum, tag classifications, header-detection thresholds,
batch executor settings, and the text utilities shared by every stage.
"""

import os
import re
from enum import Enum


class Mark(str, Enum):
    """Inline formatting marks attached to rich-text spans.

    Values match the Portable Text decorator names used by the storage
    collaborator.
    """

    STRONG = "strong"
    EM = "em"


# ---------------------------------------------------------------------------
# Tag classifications
# ---------------------------------------------------------------------------

HTML_PARSER = "html.parser"

# Elements whose text may become the title of the next table
HEADING_TAGS: set[str] = {"h1", "h2", "h3", "h4", "h5", "h6", "p"}

# Wrappers searched for nested tables
CONTAINER_TAGS: set[str] = {"div", "section", "article"}

CELL_TAGS: list[str] = ["td", "th"]

BOLD_TAGS: set[str] = {"strong", "b"}
ITALIC_TAGS: set[str] = {"em", "i"}

# Subtrees never contributing text
SKIPPED_TAGS: set[str] = {"script", "style", "iframe"}

# Top-level elements containing any of these are media, not specification data
MEDIA_TAGS: list[str] = ["iframe", "video"]


# ---------------------------------------------------------------------------
# Header detection thresholds
# ---------------------------------------------------------------------------

# Shortest header text accepted as a variant name
MIN_VARIANT_LENGTH = 2

# Second-row label cells shorter than this are dropped in title-row tables
MIN_LABEL_LENGTH = 3

# A first-row cell spanning at least this many columns is a section title
TITLE_ROW_MIN_COLSPAN = 3

# Text of the value used to fill missing variant slots
PLACEHOLDER_TEXT = "-"


# ---------------------------------------------------------------------------
# Batch processing
# ---------------------------------------------------------------------------

ENV_WORKERS = "TECHDATA_WORKERS"
ENV_USE_PROCESSES = "TECHDATA_USE_PROCESSES"


def batch_executor_settings() -> tuple[int, bool]:
    """Return ``(max_workers, use_processes)`` for batch extraction.

    Defaults to a thread pool with ``os.cpu_count()`` workers.  Override with:

    * ``TECHDATA_WORKERS=N``: number of workers
    * ``TECHDATA_USE_PROCESSES=1``: use a process pool instead of threads
    """
    use_processes = os.getenv(ENV_USE_PROCESSES, "0").lower() in ("1", "true", "yes")
    default_workers = os.cpu_count() or 4
    try:
        max_workers = int(os.getenv(ENV_WORKERS, str(default_workers)))
    except ValueError:
        max_workers = default_workers
    return max(1, max_workers), use_processes


# ---------------------------------------------------------------------------
# Text normalization
# ---------------------------------------------------------------------------

# Non-breaking and fixed-width spaces produced by "&nbsp;" and friends
NBSP_CHARS = "\u00a0\u2007\u202f"

_NBSP_RE = re.compile(f"[{NBSP_CHARS}]")
_DASHES_ONLY_RE = re.compile(r"^[\s\-–—]+$")


def normalize_spaces(text: str) -> str:
    """Replace non-breaking spaces with plain spaces."""
    return _NBSP_RE.sub(" ", text)


def clean_text(text: str | None) -> str:
    """Normalize spaces, collapse all whitespace runs and strip."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", normalize_spaces(text)).strip()


def is_meaningful_text(text: str | None) -> bool:
    """Check that *text* is more than whitespace and dashes.

    >>> is_meaningful_text("Impedance")
    True
    >>> is_meaningful_text(" - ")
    False
    >>> is_meaningful_text("—–")
    False
    """
    cleaned = clean_text(text)
    return bool(cleaned) and not _DASHES_ONLY_RE.match(cleaned)


def strip_title_suffix(text: str) -> str:
    """Drop one trailing colon from a group title (``"Audio:"`` → ``"Audio"``)."""
    text = text.strip()
    if text.endswith(":"):
        text = text[:-1]
    return text.strip()
