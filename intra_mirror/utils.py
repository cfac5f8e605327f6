"""
Utility Functions
Label normalization and file-extension bucketing.
"""

import os
import re
import unicodedata

NO_EXTENSION = "(no ext)"

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def normalize_label(text: str) -> str:
    """
    Turn a display label into a filesystem-safe directory name.

    Lower-cases, strips diacritics, drops anything outside ``[a-z0-9\\s-]``,
    turns whitespace runs into hyphens, collapses repeated hyphens and trims
    hyphens from both ends.

    Two different labels may normalize to the same name; their contents
    then share one directory.

    >>> normalize_label("Épreuve Finale!")
    'epreuve-finale'
    """
    decomposed = unicodedata.normalize("NFD", text.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    cleaned = _DISALLOWED.sub("", stripped)
    cleaned = _WHITESPACE.sub("-", cleaned)
    cleaned = _HYPHENS.sub("-", cleaned)
    return cleaned.strip("-")


def extension_bucket(filename: str) -> str:
    """Lower-cased extension of *filename* (with the dot), or ``(no ext)``."""
    ext = os.path.splitext(filename)[1].lower()
    return ext or NO_EXTENSION


def safe_filename(name: str) -> str:
    """Reduce a page-supplied file name to its final path component."""
    return os.path.basename(name.replace("\\", "/").rstrip("/")).strip()
