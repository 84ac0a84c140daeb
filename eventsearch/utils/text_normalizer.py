"""Text normalization for search queries and expansion terms.

Three concerns live here:

1. **Query normalization** -- trimming, plus a case-folded,
   whitespace-collapsed form used as the expansion cache key so that
   ``"  Sunrise   yoga "`` and ``"sunrise yoga"`` share one entry.

2. **Term deduplication** -- expansion terms come back from a language
   model and routinely repeat the original with different casing
   (``"Coffee"``, ``"coffee"``).  Duplicates are dropped case-insensitively,
   keeping the first spelling seen.

3. **Search slugs** -- the full results page lives at ``/search/{slug}``.
   Slugs are lower-cased, whitespace becomes ``-`` and anything outside
   ``[a-z0-9-]`` is dropped; decoding turns hyphens back into spaces.
"""

import re
from collections.abc import Iterable

_WHITESPACE_RE = re.compile(r"\s+")
_SLUG_STRIP_RE = re.compile(r"[^a-z0-9-]")


def normalize_query(text: str | None) -> str:
    """Trim surrounding whitespace from *text*.

    ``None`` normalizes to the empty string so callers can pass raw query
    parameters straight through.
    """
    if not text:
        return ""
    return text.strip()


def query_cache_key(text: str) -> str:
    """Return the case-folded, whitespace-collapsed form of *text*."""
    return _WHITESPACE_RE.sub(" ", normalize_query(text)).casefold()


def dedupe_terms(terms: Iterable[str]) -> list[str]:
    """Normalize and deduplicate *terms* case-insensitively, preserving order.

    Blank entries (after trimming) are dropped.

    Args:
        terms: Candidate strings, in priority order.

    Returns:
        The surviving terms, first spelling wins.
    """
    seen: set[str] = set()
    result: list[str] = []
    for term in terms:
        cleaned = normalize_query(term)
        if not cleaned:
            continue
        key = cleaned.casefold()
        if key in seen:
            continue
        seen.add(key)
        result.append(cleaned)
    return result


def to_search_slug(query: str) -> str:
    """Convert a free-text query into the ``/search/{slug}`` path segment.

    >>> to_search_slug("  Sunrise Yoga ")
    'sunrise-yoga'
    """
    slug = _WHITESPACE_RE.sub("-", query.strip().lower())
    return _SLUG_STRIP_RE.sub("", slug)


def from_search_slug(slug: str) -> str:
    """Decode a path segment back into a query (hyphens become spaces).

    *slug* arrives already percent-decoded by the router, so a literal
    ``%41`` in it stays as typed.
    """
    return normalize_query(slug.replace("-", " "))
