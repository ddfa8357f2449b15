"""Logging setup for the command-line entry point."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_configured = False


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once per process; later calls are no-ops."""
    global _configured
    if _configured:
        return
    logging.basicConfig(
        level=getattr(logging, str(level or "WARNING").upper(), logging.WARNING),
        format=LOG_FORMAT,
    )
    _configured = True
