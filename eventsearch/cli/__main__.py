"""Allow ``python -m eventsearch.cli`` execution."""

from eventsearch.cli.suggest import main

main()
