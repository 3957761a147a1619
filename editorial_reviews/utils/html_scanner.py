"""Substring-scanning primitives for semi-structured review pages.

Review pages are parsed without building a DOM.  Every extractor in the
project is composed from the small set of named primitives in this
module:

* **find-marker scans** -- :func:`iter_script_blocks`,
  :func:`extract_script_content`, :func:`iter_link_paths` and
  :func:`iter_tag_inner` walk the page from left to right, each time
  locating a literal marker and taking the text up to the next closing
  marker.
* **balanced container** -- :func:`extract_balanced_div` follows
  ``<div`` / ``</div>`` nesting so an article body that contains nested
  divs is not cut at the first ``</div>``.
* **tag stripping / entity decoding** -- :func:`strip_html_tags` and
  :func:`decode_entities`.

All scans stop once fewer than ``_MIN_TAIL`` characters remain after the
current position; nothing useful fits in that tail.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

_MIN_TAIL = 50

JSON_LD_MARKER = "application/ld+json"
_SCRIPT_OPEN = "<script"
_SCRIPT_CLOSE = "</script>"
_DIV_OPEN = "<div"
_DIV_CLOSE = "</div>"

# Named and numeric entities decoded by decode_entities().  Anything else
# is left as literal text.
_ENTITIES: dict[str, str] = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&#039;": "'",
    "&apos;": "'",
    "&#x27;": "'",
    "&ndash;": "–",
    "&mdash;": "—",
}
_ENTITY_PATTERN = re.compile("|".join(re.escape(entity) for entity in _ENTITIES))

_WHITESPACE_RUN = re.compile(r"\s+")


def _exhausted(html: str, position: int) -> bool:
    return position >= len(html) - _MIN_TAIL


# ---------------------------------------------------------------------------
# Script blocks
# ---------------------------------------------------------------------------


def iter_script_blocks(html: str, marker: str = JSON_LD_MARKER) -> Iterator[str]:
    """Yield the trimmed content of each script block introduced by *marker*.

    For every occurrence of *marker* (by default the JSON-LD media type)
    the content runs from the next ``>`` to the following ``</script>``.
    """
    search_from = 0
    while True:
        marker_pos = html.find(marker, search_from)
        if marker_pos == -1:
            return
        tag_end = html.find(">", marker_pos)
        if tag_end == -1:
            return
        content_start = tag_end + 1
        content_end = html.find(_SCRIPT_CLOSE, content_start)
        if content_end == -1:
            return

        yield html[content_start:content_end].strip()

        search_from = content_end
        if _exhausted(html, search_from):
            return


def extract_script_content(html: str, marker: str) -> str | None:
    """Return the body of the first ``<script>`` whose content contains *marker*."""
    search_from = 0
    while True:
        tag_pos = html.find(_SCRIPT_OPEN, search_from)
        if tag_pos == -1:
            return None
        tag_end = html.find(">", tag_pos)
        if tag_end == -1:
            return None
        content_start = tag_end + 1
        content_end = html.find(_SCRIPT_CLOSE, content_start)
        if content_end == -1:
            return None

        content = html[content_start:content_end]
        if marker in content:
            return content

        search_from = content_end
        if _exhausted(html, search_from):
            return None


# ---------------------------------------------------------------------------
# Links and tag pairs
# ---------------------------------------------------------------------------


def iter_link_paths(
    html: str, prefix: str, stop_near_end: bool = True
) -> Iterator[tuple[str, int]]:
    """Yield ``(href_value, end_offset)`` for each ``href="{prefix}..."`` link.

    *end_offset* is the index of the closing quote, so callers can take a
    trailing context window from it.  With *stop_near_end* the scan ends
    once fewer than 50 characters follow the last link.
    """
    pattern = f'href="{prefix}'
    search_from = 0
    while True:
        pos = html.find(pattern, search_from)
        if pos == -1:
            return
        value_start = pos + len('href="')
        value_end = html.find('"', value_start)
        if value_end == -1:
            return

        yield html[value_start:value_end], value_end

        search_from = value_end
        if stop_near_end and _exhausted(html, search_from):
            return


def iter_tag_inner(html: str, open_tag: str, close_tag: str) -> Iterator[str]:
    """Yield the raw inner markup of successive ``open_tag ... close_tag`` pairs."""
    search_from = 0
    while True:
        pos = html.find(open_tag, search_from)
        if pos == -1:
            return
        inner_start = pos + len(open_tag)
        inner_end = html.find(close_tag, inner_start)
        if inner_end == -1:
            return

        yield html[inner_start:inner_end]

        search_from = inner_end + len(close_tag)
        if _exhausted(html, search_from):
            return


def first_tag_inner(html: str, open_tag: str, close_tag: str) -> str | None:
    """Return the inner markup of the first ``open_tag ... close_tag`` pair."""
    start = html.find(open_tag)
    if start == -1:
        return None
    inner_start = start + len(open_tag)
    inner_end = html.find(close_tag, inner_start)
    if inner_end == -1:
        return None
    return html[inner_start:inner_end]


def text_after_marker(html: str, marker: str) -> str | None:
    """Return the trimmed text after *marker* up to the next ``<`` or newline.

    Empty results count as absent.
    """
    pos = html.find(marker)
    if pos == -1:
        return None
    rest = html[pos + len(marker):]
    end = len(rest)
    for stop in ("<", "\n"):
        idx = rest.find(stop)
        if idx != -1:
            end = min(end, idx)
    value = rest[:end].strip()
    return value or None


# ---------------------------------------------------------------------------
# Balanced container
# ---------------------------------------------------------------------------


def extract_balanced_div(html: str, marker: str) -> str | None:
    """Return the inner markup of the ``<div>`` whose opening tag contains *marker*.

    Depth starts at 1 after the opening tag.  Each ``<div`` found before the
    next ``</div>`` increments it; each ``</div>`` decrements it.  The
    container ends at the ``</div>`` that brings depth to 0.

    Returns:
        The container's inner markup, or ``None`` when the marker is
        missing or the container is never closed.
    """
    marker_pos = html.find(marker)
    if marker_pos == -1:
        return None
    tag_end = html.find(">", marker_pos)
    if tag_end == -1:
        return None
    content_start = tag_end + 1

    depth = 1
    pos = content_start
    while True:
        close_pos = html.find(_DIV_CLOSE, pos)
        if close_pos == -1:
            return None
        open_pos = html.find(_DIV_OPEN, pos)
        if open_pos != -1 and open_pos < close_pos:
            depth += 1
            pos = open_pos + len(_DIV_OPEN)
            continue

        depth -= 1
        if depth == 0:
            return html[content_start:close_pos]
        pos = close_pos + len(_DIV_CLOSE)


# ---------------------------------------------------------------------------
# Tag stripping and entity decoding
# ---------------------------------------------------------------------------


def strip_html_tags(html: str) -> str:
    """Drop everything inside ``<...>`` spans, keeping the text between them.

    A ``>`` inside a quoted attribute value ends the tag early; review
    markup does not contain that case.
    """
    kept: list[str] = []
    in_tag = False
    for ch in html:
        if ch == "<":
            in_tag = True
        elif ch == ">":
            in_tag = False
        elif not in_tag:
            kept.append(ch)
    return "".join(kept)


def decode_entities(text: str) -> str:
    """Decode the fixed entity table in a single pass."""
    return _ENTITY_PATTERN.sub(lambda match: _ENTITIES[match.group(0)], text)


def collapse_whitespace(text: str) -> str:
    """Collapse every whitespace run to one space and trim the ends."""
    return _WHITESPACE_RUN.sub(" ", text).strip()
