"""Common logging configuration for the Soapbox Portal application"""

import logging
import sys

from soapbox_portal.config import config

# Third-party loggers that are chatty at INFO (S3 uploads, JWKS fetches)
NOISY_LOGGERS = ("boto3", "botocore", "s3transfer", "urllib3", "httpx")


class BelowWarningFilter(logging.Filter):
    """Only let records below WARNING through"""

    def filter(self, record):
        return record.levelno < logging.WARNING


def setup_logging(level_name: str | None = None):
    """
    Send INFO/DEBUG to stdout and WARNING/ERROR to stderr.

    Args:
        level_name: Overrides the LOG_LEVEL from config when given
    """
    level_name = level_name or config.get("log_level", "INFO")
    level = getattr(logging, level_name.upper(), logging.INFO)

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s:%(name)s:%(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(logging.DEBUG)
    stdout_handler.addFilter(BelowWarningFilter())
    stdout_handler.setFormatter(formatter)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(stdout_handler)
    root_logger.addHandler(stderr_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given module name"""
    return logging.getLogger(name)
