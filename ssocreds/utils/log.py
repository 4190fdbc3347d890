"""
Logging setup for the command line entry point.

Library modules only ever call logging.getLogger(__name__); handlers are
attached here, once, by whoever owns the process.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


class _SkipChildOutput(logging.Filter):
    """Drop records carrying AWS CLI output; the CLI prints those itself."""

    def filter(self, record: logging.LogRecord) -> bool:
        return not getattr(record, "child_output", False)


def configure_logging(verbose: bool = False) -> logging.Logger:
    """
    Attach a stderr handler to the ssocreds logger.

    Args:
        verbose: Log at DEBUG instead of WARNING

    Returns:
        logging.Logger: The configured package logger
    """
    logger = logging.getLogger("ssocreds")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.addFilter(_SkipChildOutput())
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return logger
