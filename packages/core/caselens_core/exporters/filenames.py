"""Download filenames derived from user-facing titles."""

import re

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]", re.IGNORECASE)

DEFAULT_STEM = "case_analysis"

WORD_MIME_TYPE = "application/msword"
PPTX_MIME_TYPE = (
    "application/vnd.openxmlformats-officedocument.presentationml.presentation"
)


def normalize_title(title: str | None) -> str:
    """Lower-case a title and replace every non-alphanumeric character with ``_``."""
    stem = _NON_ALNUM_RE.sub("_", (title or "").strip()).lower()
    return stem if stem.strip("_") else DEFAULT_STEM


def word_filename(title: str | None) -> str:
    return f"{normalize_title(title)}.doc"


def pptx_filename(title: str | None) -> str:
    return f"{normalize_title(title)}_deck.pptx"
