"""HTTP layer: routes, response schemas and middleware."""

from eventsearch.api.routes import router

__all__ = ["router"]
