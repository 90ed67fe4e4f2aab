"""Structured logging setup.

Log records go to stderr through the standard library so they never mix
with the rich output on stdout.
"""

import logging
import os
import sys

import structlog

LOG_LEVEL_ENV = "TALLY_LOG_LEVEL"


def configure(verbose: bool = False) -> None:
    """Configure structlog and the root logger.

    Args:
        verbose: Force debug level. Otherwise TALLY_LOG_LEVEL, default WARNING.
    """
    level_name = "DEBUG" if verbose else os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level, force=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
