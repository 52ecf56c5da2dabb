"""Logging configuration for hpgroups.

Records go to stderr so that command output on stdout stays valid JSON.
"""

import logging
import sys

# Create logger for hpgroups
logger = logging.getLogger("hpgroups")


def setup_logger(level: int | str = logging.WARNING) -> None:
    """Setup the hpgroups logger, or change its level once set up.

    Args:
        level: Logging level, as a number or a name such as "DEBUG"
            (default: WARNING)
    """
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("hpgroups %(levelname)s: %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False

    logger.setLevel(level)


# Initialize logger on import
setup_logger()
