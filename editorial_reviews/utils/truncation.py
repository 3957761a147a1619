"""Sentence-aware excerpt capping.

Excerpts are capped at ``MAX_EXCERPT_CHARS``.  A long text is cut right
after the last ``". "`` inside the cap so the excerpt ends on a full
sentence; if there is no sentence boundary the text is hard-cut and an
ellipsis marker is appended.
"""

from __future__ import annotations

from editorial_reviews.utils.html_scanner import collapse_whitespace

MAX_EXCERPT_CHARS = 2000
ELLIPSIS = "..."

_SENTENCE_END = ". "
_PARAGRAPH_BREAK = "\n\n"


def truncate_excerpt(text: str, limit: int = MAX_EXCERPT_CHARS) -> str:
    """Cap *text* at *limit* characters on a sentence boundary when possible.

    Args:
        text: Already-cleaned excerpt text.
        limit: Maximum number of characters kept before the ellipsis.

    Returns:
        *text* unchanged if it fits, otherwise the prefix ending in the last
        period of the window, otherwise the hard-cut prefix plus ``"..."``.
    """
    if len(text) <= limit:
        return text
    window = text[:limit]
    pos = window.rfind(_SENTENCE_END)
    if pos != -1:
        return window[: pos + 1]
    return window + ELLIPSIS


def prepare_excerpt(text: str | None, limit: int = MAX_EXCERPT_CHARS) -> str | None:
    """Trim and truncate *text*; empty input yields ``None``."""
    if text is None:
        return None
    trimmed = text.strip()
    if not trimmed:
        return None
    return truncate_excerpt(trimmed, limit)


def truncate_paragraphs(text: str, limit: int = MAX_EXCERPT_CHARS) -> str | None:
    """Normalize paragraph text and truncate it.

    The text is split on blank lines, whitespace inside each paragraph is
    collapsed to single spaces, empty paragraphs are dropped and the rest
    rejoined with ``"\\n\\n"`` before :func:`truncate_excerpt` runs.

    Returns:
        The excerpt, or ``None`` when no paragraph has any text.
    """
    paragraphs = [collapse_whitespace(part) for part in text.split(_PARAGRAPH_BREAK)]
    paragraphs = [part for part in paragraphs if part]
    if not paragraphs:
        return None
    return truncate_excerpt(_PARAGRAPH_BREAK.join(paragraphs), limit)
