"""
Logging configuration for Branch Lens.

Log records go to stderr through rich so stdout stays free for
tables and ``--json`` documents.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import Verbosity

_VERBOSITY_LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """
    Install the rich stderr handler for the ``branchlens`` logger tree.

    Args:
        verbose: Enable DEBUG level logging
        quiet: Suppress all but ERROR level logging (wins over verbose)

    Returns:
        Configured logger instance for branchlens
    """
    if quiet:
        verbosity: Verbosity = "quiet"
    elif verbose:
        verbosity = "verbose"
    else:
        verbosity = "normal"
    return apply_verbosity(verbosity)


def apply_verbosity(verbosity: Verbosity) -> logging.Logger:
    """Reconfigure logging for a resolved ``BranchLensConfig.verbosity``."""
    level = _VERBOSITY_LEVELS[verbosity]
    detailed = verbosity == "verbose"

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=detailed,
        markup=False,
        show_time=True,
        show_path=detailed,
    )
    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]", handlers=[handler], force=True
    )

    logger = logging.getLogger("branchlens")
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name (e.g., 'branchlens.analysis.service')
              If None, returns the root branchlens logger
    """
    if name is None:
        return logging.getLogger("branchlens")

    if not name.startswith("branchlens"):
        name = f"branchlens.{name}"

    return logging.getLogger(name)
