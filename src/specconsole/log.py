"""Logging setup for the CLI."""
from __future__ import annotations

import logging

from rich.logging import RichHandler


def setup_logging(level: str = "WARNING") -> logging.Logger:
    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=[RichHandler(rich_tracebacks=True)])
    return logging.getLogger("specconsole")
