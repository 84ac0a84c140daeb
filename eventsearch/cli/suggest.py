"""Command-line search against the configured event store.

Usage::

    python -m eventsearch.cli "coffee"
    python -m eventsearch.cli "cà phê" --locale vi --json
    python -m eventsearch.cli "yoga" --full

Runs the same pipeline as ``GET /search/suggestions`` (or, with
``--full``, ``GET /search/{query}``) using the collaborators selected by
the environment: Supabase or the local fixture file, and whichever LLM
provider has credentials.  Output is a plain-text table or JSON.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

from eventsearch.models.event import EventSuggestion
from eventsearch.models.search import ExpandedTermSet, SearchResults, SuggestionResult


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def _format_row(suggestion: EventSuggestion) -> str:
    when = suggestion.starts_at.strftime("%Y-%m-%d %H:%M")
    location = suggestion.location or "-"
    return f"  [{suggestion.lifecycle.value:<9}] {when}  {suggestion.title}  ({location})"


def _format_terms(term_set: ExpandedTermSet | None) -> list[str]:
    if term_set is None or not term_set.is_expanded:
        return []
    return [f"Searched: {', '.join(term_set.terms)}", ""]


def _format_suggestions_text(query: str, result: SuggestionResult) -> str:
    lines = [f"Suggestions for {query!r}", "-" * 40]
    lines.extend(_format_terms(result.expanded_terms))
    if not result.suggestions:
        lines.append("  (no matches)")
    lines.extend(_format_row(s) for s in result.suggestions)
    return "\n".join(lines)


def _format_search_text(results: SearchResults) -> str:
    lines = [f"Results for {results.query!r}  ({results.buckets.total} total)", "=" * 60]
    lines.extend(_format_terms(results.expanded_terms))
    for label, bucket in (
        ("HAPPENING NOW", results.buckets.happening),
        ("UPCOMING", results.buckets.upcoming),
        ("PAST", results.buckets.past),
    ):
        if not bucket:
            continue
        lines.append(label)
        lines.extend(_format_row(s) for s in bucket)
        lines.append("")
    if results.buckets.total == 0:
        lines.append("  (no matches)")
    return "\n".join(lines).rstrip()


def _format_json(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False, default=str)


def _suggestions_payload(result: SuggestionResult) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "suggestions": [s.model_dump(mode="json", by_alias=True) for s in result.suggestions],
    }
    if result.expanded_terms is not None and result.expanded_terms.is_expanded:
        payload["expandedTerms"] = list(result.expanded_terms.terms)
    return payload


def _search_payload(results: SearchResults) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "query": results.query,
        "total": results.buckets.total,
    }
    for name in ("upcoming", "happening", "past"):
        bucket = getattr(results.buckets, name)
        payload[name] = [s.model_dump(mode="json", by_alias=True) for s in bucket]
    if results.expanded_terms is not None and results.expanded_terms.is_expanded:
        payload["expandedTerms"] = list(results.expanded_terms.terms)
    return payload


def _suppress_logs() -> None:
    """Send all log output to stderr at WARNING+ so stdout stays parseable."""
    import logging

    import structlog

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.WARNING)
    root.addHandler(handler)
    root.setLevel(logging.WARNING)


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


async def _run(query: str, *, full: bool, locale: str | None, json_output: bool, quiet: bool) -> int:
    """Build the collaborators, run one query, print the result.

    Returns 0 on success, 1 when the query is unusable.
    """
    from eventsearch.main import _build_all, settings

    if quiet:
        _suppress_logs()

    components = _build_all(settings)
    service = components["suggestion_service"]

    try:
        if full:
            if not query.strip():
                print("Error: query is empty", file=sys.stderr)
                return 1
            results = await service.search(query, locale=locale)
            text = _format_json(_search_payload(results)) if json_output else _format_search_text(results)
        else:
            result = await service.suggest(query, locale=locale)
            text = (
                _format_json(_suggestions_payload(result))
                if json_output
                else _format_suggestions_text(query.strip(), result)
            )
    finally:
        await components["http_client"].aclose()

    print(text)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m eventsearch.cli",
        description="Search published events from the command line.",
    )
    parser.add_argument("query", type=str, help="Search text, as typed into the search box.")
    parser.add_argument(
        "--full",
        action="store_true",
        help="Run the full results-page search (bucketed, larger limit).",
    )
    parser.add_argument(
        "--locale",
        type=str,
        default=None,
        help="Visitor UI locale code, e.g. 'vi' or 'ko'.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output results as JSON instead of a text table.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress log output (implied by --json).",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    args = _build_parser().parse_args(argv)
    quiet = args.quiet or args.json_output
    exit_code = asyncio.run(
        _run(
            args.query,
            full=args.full,
            locale=args.locale,
            json_output=args.json_output,
            quiet=quiet,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
