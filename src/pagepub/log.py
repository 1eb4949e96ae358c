"""Package logger and CLI logging setup"""

import logging


LOG = logging.getLogger("pagepub")


def _level(verbose: bool, debug: bool) -> int:
    return logging.DEBUG if debug else (logging.INFO if verbose else logging.WARNING)


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Attach a single stderr handler to the pagepub logger at the requested level."""
    level = _level(verbose, debug)
    LOG.setLevel(level)
    if not LOG.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        LOG.addHandler(handler)
    for handler in LOG.handlers:
        handler.setLevel(level)
