"""Logging setup for the saltbox command line tool.

Log records go to stderr so that hashes, keys and store JSON printed on stdout
can be piped without filtering.
"""

import logging
import sys

# third-party loggers that are chatty below WARNING
_NOISY_LOGGERS = ("keyring",)


def configure_logging(level: int = logging.WARNING) -> None:
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    logging.getLogger("saltbox").setLevel(level)
    # backend probing noise is only interesting when debugging
    if level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
