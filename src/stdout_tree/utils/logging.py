"""Logging configuration."""

import logging
import sys


def setup_logging(
    level: str = "INFO",
    format: str | None = None,
) -> logging.Logger:
    """Configure logging.

    Log records go to stderr, stdout carries the rendered trees.

    Args:
        level: Log level
        format: Log format

    Returns:
        Package logger
    """
    if format is None:
        format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=format,
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )

    # Set third-party library log levels
    logging.getLogger("opentelemetry").setLevel(logging.WARNING)

    return logging.getLogger("stdout_tree")
