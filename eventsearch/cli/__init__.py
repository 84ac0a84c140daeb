# =============================================================================
# eventsearch/cli/__init__.py
# =============================================================================
#
# Command-line tools for operators and developers working outside the web
# frontend:
#
#   suggest.py  Run one query through the suggestion (or --full search)
#               pipeline against the configured store and LLM, and print
#               a table or JSON.  Also the package default:
#
#                   python -m eventsearch.cli "coffee" --locale vi
# =============================================================================

"""Command-line tools for eventsearch."""
