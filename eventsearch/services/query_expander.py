"""LLM-backed query expansion for the event search box.

Turns one free-text query into a short, ordered list of alternative
strings (translations into the site's content locales, common synonyms,
spelling fixes) so that a plain substring search still finds
"Cà phê acoustic night" when someone types "coffee".

The expander never fails the caller.  Any of

    - no LLM configured,
    - query too long to be worth expanding,
    - LLM error or timeout,
    - unparseable / wrongly-shaped model output

yields the identity set ``[query]``.  Successful expansions are cached per
(locale, case-folded query) for a few minutes; failures are not cached so
a transient outage does not pin degraded results.
"""

from __future__ import annotations

import asyncio
import json
import re
from collections.abc import Sequence
from typing import Any

import structlog

from eventsearch.config.loader import DEFAULT_LOCALES
from eventsearch.interfaces.cache_provider import ICacheProvider
from eventsearch.interfaces.llm_provider import ILLMProvider
from eventsearch.models.search import ExpandedTermSet
from eventsearch.utils.errors import LLMError
from eventsearch.utils.logging import get_logger
from eventsearch.utils.text_normalizer import normalize_query, query_cache_key

# Matches markdown code fences (```json ... ``` or ``` ... ```).
_JSON_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?\s*```", re.DOTALL)

LOCALE_NAMES: dict[str, str] = {
    "en": "English",
    "vi": "Vietnamese",
    "ko": "Korean",
    "zh": "Chinese",
    "ru": "Russian",
    "fr": "French",
    "ja": "Japanese",
    "ms": "Malay",
    "th": "Thai",
    "de": "German",
    "es": "Spanish",
    "id": "Indonesian",
}

_SYSTEM_PROMPT = (
    "You expand search queries for an events listing website in {city}. "
    "Events are written in many languages. You reply with JSON only."
)
_USER_PROMPT = (
    "Search query: {query}\n"
    "{locale_hint}"
    "Return a JSON array of at most {max_terms} short strings that would help a "
    "case-insensitive substring search find matching events: the query itself, "
    "its translations into {languages}, close synonyms, and the corrected spelling "
    "if the query looks misspelled. Use the native script for each language. "
    "No explanations, no markdown."
)


def parse_expansion_response(response: str) -> list[str]:
    """Extract the list of candidate terms from a raw LLM response.

    Accepts a bare JSON array or an object with a ``terms`` array, with or
    without markdown fences or preamble text.  Non-string items are
    dropped.

    Raises
    ------
    ValueError
        If no JSON array of terms can be recovered (``json.JSONDecodeError``
        is a subclass).
    """
    text = response.strip()

    fence_match = _JSON_FENCE_RE.search(text)
    if fence_match:
        text = fence_match.group(1).strip()

    if not text.startswith(("[", "{")):
        start = min((i for i in (text.find("["), text.find("{")) if i != -1), default=-1)
        if start == -1:
            raise ValueError("LLM response contains no JSON")
        closing = "]" if text[start] == "[" else "}"
        end = text.rfind(closing)
        if end <= start:
            raise ValueError("LLM response contains unterminated JSON")
        text = text[start : end + 1]

    parsed: Any = json.loads(text)
    if isinstance(parsed, dict):
        parsed = parsed.get("terms")
    if not isinstance(parsed, list):
        raise ValueError("LLM response is not a JSON array of terms")

    return [item for item in parsed if isinstance(item, str)]


class QueryExpander:
    """Expands search queries into translation/synonym term sets.

    Parameters
    ----------
    llm:
        Language model to ask; ``None`` disables expansion entirely.
    cache:
        Optional cache for successful expansions.
    locales:
        Content locale codes the site publishes in.
    city:
        Site location, used to ground the prompt.
    timeout_seconds:
        Hard deadline for the LLM call.
    max_terms:
        Cap on the returned set, original included.
    cache_ttl:
        Seconds to keep a successful expansion.
    max_query_length:
        Longer queries are returned unexpanded.
    """

    def __init__(
        self,
        llm: ILLMProvider | None,
        cache: ICacheProvider | None = None,
        *,
        locales: Sequence[str] = DEFAULT_LOCALES,
        city: str = "Da Lat, Vietnam",
        timeout_seconds: float = 1.5,
        max_terms: int = 8,
        cache_ttl: int = 300,
        max_query_length: int = 80,
    ) -> None:
        self._llm = llm
        self._cache = cache
        self._locales = [code for code in locales if code in LOCALE_NAMES]
        self._city = city
        self._timeout = timeout_seconds
        self._max_terms = max_terms
        self._cache_ttl = cache_ttl
        self._max_query_length = max_query_length
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # -- Public API -----------------------------------------------------------

    async def expand(self, query: str, locale: str | None = None) -> ExpandedTermSet:
        """Return the expansion term set for *query*.

        Parameters
        ----------
        query:
            A non-empty search string; surrounding whitespace is trimmed.
        locale:
            The visitor's UI locale, if known.  Unknown codes are ignored.

        Returns
        -------
        ExpandedTermSet
            Always contains the trimmed query as its first term.

        Raises
        ------
        ValueError
            If *query* is blank.  Callers filter short queries first.
        """
        original = normalize_query(query)
        if not original:
            raise ValueError("Cannot expand an empty query")

        # Long queries are usually pasted text; a model call would only add
        # latency, and substring search on the original already works.
        if self._llm is None or len(original) > self._max_query_length:
            return ExpandedTermSet.identity(original)

        # Unknown locales would split the cache without changing the prompt.
        if locale not in LOCALE_NAMES:
            locale = None
        cache_key = f"expansion:{locale or '*'}:{query_cache_key(original)}"

        if self._cache is not None:
            cached = await self._cache.get(cache_key)
            if cached is not None:
                # Re-validate: the cap may have changed since the entry was stored.
                return ExpandedTermSet.from_candidates(original, cached, self._max_terms)

        try:
            raw = await asyncio.wait_for(
                self._llm.complete(
                    system_prompt=_SYSTEM_PROMPT.format(city=self._city),
                    user_prompt=self._build_prompt(original, locale),
                    temperature=0.0,
                    max_tokens=300,
                ),
                timeout=self._timeout,
            )
            candidates = parse_expansion_response(raw)
        except asyncio.TimeoutError:
            # The dropdown is latency-bound; searching the bare query now beats
            # a better term set after the user has moved on.
            self._logger.warning(
                "query_expansion_timeout",
                query_preview=original[:50],
                timeout_s=self._timeout,
            )
            return ExpandedTermSet.identity(original)
        except LLMError as exc:
            # Provider outages degrade to the identity set and are retried on
            # the next keystroke, since nothing is cached.
            self._logger.warning(
                "query_expansion_failed",
                query_preview=original[:50],
                provider=exc.provider_name,
                error=exc.message,
            )
            return ExpandedTermSet.identity(original)
        except ValueError as exc:
            # Models sometimes answer in prose despite the prompt.
            self._logger.warning(
                "query_expansion_unparseable",
                query_preview=original[:50],
                error=str(exc),
            )
            return ExpandedTermSet.identity(original)
        except Exception:
            # Transport errors that bypass LLMError.
            self._logger.exception("query_expansion_error", query_preview=original[:50])
            return ExpandedTermSet.identity(original)

        term_set = ExpandedTermSet.from_candidates(original, candidates, self._max_terms)

        # Only successes are cached so a transient failure is not pinned
        # for the whole TTL.
        if self._cache is not None:
            await self._cache.set(cache_key, list(term_set.terms), ttl=self._cache_ttl)

        self._logger.info(
            "query_expanded",
            query_preview=original[:50],
            locale=locale,
            terms=len(term_set.terms),
        )
        return term_set

    # -- Prompt building ------------------------------------------------------

    def _build_prompt(self, query: str, locale: str | None) -> str:
        languages = ", ".join(LOCALE_NAMES[code] for code in self._locales)
        locale_hint = (
            f"The visitor is browsing in {LOCALE_NAMES[locale]}.\n" if locale else ""
        )
        return _USER_PROMPT.format(
            query=query,
            locale_hint=locale_hint,
            max_terms=self._max_terms,
            languages=languages,
        )
