"""Configure logging for the command-line tools."""

import logging
import sys


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Attach a stderr handler to the ``splice`` logger.

    INFO by default, DEBUG when ``verbose`` is set.
    """
    root = logging.getLogger("splice")
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    root.handlers.clear()

    fmt = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    eh = logging.StreamHandler(sys.stderr)
    eh.setLevel(logging.DEBUG if verbose else logging.INFO)
    eh.setFormatter(fmt)
    root.addHandler(eh)
    return root
