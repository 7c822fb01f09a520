"""
Central logging configuration.

Call configure_logging() once from an entrypoint (run.py does). Library
modules only create loggers, they never attach handlers.
"""

import logging
import sys


def configure_logging(level: int = logging.INFO) -> None:
    """
    Configure root logging if no handlers are attached yet.

    Args:
        level: Default logging level (e.g. logging.INFO, logging.DEBUG).
    """
    root = logging.getLogger()

    if root.handlers:
        return

    handler = logging.StreamHandler(stream=sys.stdout)
    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )
    handler.setFormatter(formatter)
    root.addHandler(handler)
    root.setLevel(level)
