"""eventsearch: multilingual type-ahead search over published events."""

__version__ = "0.1.0"
