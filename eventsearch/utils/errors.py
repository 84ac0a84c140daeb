"""Custom exception hierarchy for eventsearch.

All application exceptions inherit from :class:`EventSearchError`, which
carries an optional ``provider_name`` so error handlers can identify which
external collaborator (e.g. "anthropic", "supabase") caused the failure.

    EventSearchError  (base -- catch-all for any eventsearch error)
    +-- LLMError                 (any language-model API call failure)
    +-- EventStoreError          (event store query or response failure)
    +-- ProviderUnavailableError (external service down / unreachable)
    +-- ConfigurationError       (startup / missing config)

Only the providers raise these.  The search services catch them and
degrade (identity expansion, empty suggestion list), so none of them
should reach a client on the type-ahead path.
"""


class EventSearchError(Exception):
    """Base exception for all eventsearch errors.

    The ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[supabase] HTTP 503``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# External collaborator errors
# ---------------------------------------------------------------------------

class LLMError(EventSearchError):
    """Raised when an LLM API call fails or returns an unusable response."""

    def __init__(
        self,
        message: str = "LLM API call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class EventStoreError(EventSearchError):
    """Raised when the event store rejects a query or returns garbage."""

    def __init__(
        self,
        message: str = "Event store query failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ProviderUnavailableError(EventSearchError):
    """Raised when an external service is unreachable (DNS, connect, timeout)."""

    def __init__(
        self,
        message: str = "External service is unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Startup errors
# ---------------------------------------------------------------------------

class ConfigurationError(EventSearchError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
