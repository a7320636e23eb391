"""Logging configuration for the checkdate command line."""

import logging

LOG_FORMAT = "%(levelname)-5.5s [%(name)s] %(message)s"


def configure_logging(debug: bool = False) -> None:
    """Route checkdate logs to stderr.

    Debug output (matched lines, stamp counts, per-batch progress) is only
    emitted when ``debug`` is set, which mirrors the ``enableDebugLogging``
    setting.
    """
    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)
    logging.getLogger("checkdate").setLevel(logging.DEBUG if debug else logging.WARNING)
