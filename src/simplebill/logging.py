"""Logging configuration for the command line entry point."""

from __future__ import annotations

import logging

LOG_FORMAT = "[%(levelname)s] %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Send diagnostics to stderr; ``verbose`` lowers the level to DEBUG."""

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.captureWarnings(True)


__all__ = ["LOG_FORMAT", "configure_logging"]
