"""Concrete adapters for the interfaces in ``eventsearch.interfaces``."""
