"""Logging setup for CLI entry points."""

import logging
import sys

from project_intake.config import settings


def setup_logging(verbose: bool = False, level: str | None = None) -> None:
    """Setup logging with visible output on stderr."""
    if level is None:
        level = "DEBUG" if verbose else settings.log_level

    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    # Quiet down noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
