"""Substring filter construction for the event store.

The store is queried with a disjunctive ``ilike`` filter: every expansion
term is matched as a case-insensitive *literal* substring against every
searchable text field.  Because the terms originate from user input (and
from a language model), they are escaped in two layers before being
spliced into a PostgREST ``or=(...)`` clause:

1. LIKE: ``\\``, ``%`` and ``_`` are metacharacters and get a backslash,
   so ``"50%"`` matches the text ``50%`` and not ``50<anything>``.
2. PostgREST: each value is wrapped in double quotes so that reserved
   characters (``,``, ``.``, ``(``, ``)``) in a term cannot split the
   clause.  Inside the quotes PostgREST reads ``\\x`` as ``x``, so every
   backslash from layer 1 and every ``"`` gets one more backslash.

``"50%"`` therefore goes over the wire as ``50\\\\%``, PostgREST hands
``50\\%`` to ``ilike``, and the database sees a literal percent sign.

:func:`contains_literal` applies the same matching rule in-process and is
what :class:`~eventsearch.providers.event_store.memory_store.MemoryEventStore`
uses, so both stores agree on what a term matches.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

# Default searchable columns on the ``events`` table, in clause order.
SEARCH_FIELDS: tuple[str, ...] = ("title", "description", "location_name")

_LIKE_METACHARACTERS = ("\\", "%", "_")


def escape_like_term(term: str) -> str:
    """Escape LIKE metacharacters in *term*.

    Backslash goes first so the escapes added for ``%`` and ``_`` are not
    themselves doubled.
    """
    escaped = term
    for char in _LIKE_METACHARACTERS:
        escaped = escaped.replace(char, "\\" + char)
    return escaped


def quote_filter_value(value: str) -> str:
    """Escape *value* for the inside of a double-quoted PostgREST value."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def escape_pattern_term(term: str) -> str:
    """Escape *term* for use inside a quoted ``ilike`` value.

    >>> escape_pattern_term('50% "deal"')
    '50\\\\\\\\% \\\\"deal\\\\"'
    """
    return quote_filter_value(escape_like_term(term))


def build_or_filter(
    terms: Iterable[str],
    fields: Sequence[str] = SEARCH_FIELDS,
) -> str:
    """Build the body of a PostgREST ``or=(...)`` filter.

    Parameters
    ----------
    terms:
        Expansion terms, already trimmed and deduplicated.
    fields:
        Columns to match each term against.

    Returns
    -------
    str
        Comma-joined ``field.ilike."%term%"`` clauses, one per
        term x field pair, in term-major order.  Empty when *terms* is.
    """
    clauses: list[str] = []
    for term in terms:
        escaped = escape_pattern_term(term)
        for field in fields:
            clauses.append(f'{field}.ilike."%{escaped}%"')
    return ",".join(clauses)


def contains_literal(haystack: str | None, needle: str) -> bool:
    """Case-insensitive literal substring test (the in-process ``ilike``)."""
    if not haystack or not needle:
        return False
    return needle.casefold() in haystack.casefold()
