"""Title cleanup and slug generation for album and artist names.

Review sites build their page URLs from a lossy slug of the artist and
album names.  Matching a free-text query against those URLs only works if
we reproduce the same slug scheme, so these helpers are deliberately
simple:

1. **clean_title** -- drop a trailing edition suffix such as
   ``"(Deluxe Edition)"`` before slugging.
2. **slugify** -- keep ASCII alphanumerics, turn space / hyphen / colon
   into ``-`` and drop everything else.  Accented characters disappear
   rather than being transliterated (``"Björk"`` -> ``"bjrk"``), which is
   what the sites themselves do.
3. **url_encode** / **percent_decode** -- form-style query encoding and
   UTF-8 aware decoding of slugs found in result links.
"""

from __future__ import annotations

import re
from urllib.parse import quote_plus, unquote

_HYPHEN_RUN = re.compile(r"-{2,}")

# Characters that map to a hyphen; every other non-alphanumeric is dropped.
_HYPHENATED = frozenset(" -:")


def clean_title(title: str) -> str:
    """Strip a trailing parenthetical suffix from *title*.

    The cut happens at the last ``(`` when it is not the first character,
    so ``"Album (Deluxe Edition)"`` becomes ``"Album"`` while a title that
    is itself parenthetical, like ``"(Untitled)"``, is returned unchanged.

    Args:
        title: Raw album title.

    Returns:
        The cleaned title with trailing whitespace removed.
    """
    pos = title.rfind("(")
    if pos > 0:
        return title[:pos].rstrip()
    return title


def slugify(text: str) -> str:
    """Convert *text* into a lowercase, hyphen-delimited slug.

    ``"good kid, m.A.A.d city"`` -> ``"good-kid-maad-city"``

    Args:
        text: Any artist or album string.

    Returns:
        The slug; empty if *text* has no ASCII alphanumerics.
    """
    chars: list[str] = []
    for ch in text:
        if ch.isascii() and ch.isalnum():
            chars.append(ch.lower())
        elif ch in _HYPHENATED:
            chars.append("-")
    return _HYPHEN_RUN.sub("-", "".join(chars)).strip("-")


def url_encode(text: str) -> str:
    """Form-encode *text* for a query string (space becomes ``+``).

    Unreserved characters ``A-Z a-z 0-9 - _ . ~`` pass through; every
    other UTF-8 byte becomes ``%XX``.
    """
    return quote_plus(text, safe="")


def percent_decode(text: str) -> str:
    """Decode ``%XX`` escapes in a URL path segment as UTF-8.

    Malformed escapes are left as literal text.
    """
    return unquote(text, errors="replace")
