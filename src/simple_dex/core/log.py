"""
Logging setup for simple_dex (structlog over the stdlib logging module).

Modules create their logger with `structlog.get_logger()` at import time and
log key/value events. Script entry points call `configure_logging()` to
route those events through stdlib logging with a level filter; before that,
structlog's default console output applies.
"""

from __future__ import annotations

import logging
import logging.config
import os
from collections import OrderedDict
from typing import Any, Optional

import structlog

#: Environment toggle for DEBUG verbosity. Values in TRUTHY_VALUES enable it;
#: anything else, including unset, leaves it off.
DEBUG_ENV_VAR = "SIMPLE_DEX_DEBUG"
TRUTHY_VALUES = frozenset({"1", "true", "yes", "on"})


def debug_from_env() -> bool:
    return os.environ.get(DEBUG_ENV_VAR, "").strip().lower() in TRUTHY_VALUES


def configure_logging(*, debug: Optional[bool] = None, json: bool = False) -> None:
    """Route structlog events through stdlib logging to stderr.

    `debug=None` reads SIMPLE_DEX_DEBUG. `json=True` renders one JSON object
    per line instead of the console format.
    """
    if debug is None:
        debug = debug_from_env()

    timestamper = structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S")
    pre_chain = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        timestamper,
    ]

    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'pretty': {
                '()': structlog.stdlib.ProcessorFormatter,
                'processor': structlog.dev.ConsoleRenderer(colors=False),
                'foreign_pre_chain': pre_chain,
            },
            'json': {
                '()': structlog.stdlib.ProcessorFormatter,
                'processor': structlog.processors.JSONRenderer(),
                'foreign_pre_chain': pre_chain,
            },
        },
        'handlers': {
            'default': {
                'level': 'DEBUG',
                'class': 'logging.StreamHandler',
                'formatter': 'json' if json else 'pretty',
            },
        },
        'loggers': {
            '': {
                'handlers': ['default'],
                'level': 'DEBUG' if debug else 'INFO',
            },
        },
    })

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        timestamper,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]

    structlog.configure(
        processors=processors,
        context_class=OrderedDict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


__all__ = ["DEBUG_ENV_VAR", "TRUTHY_VALUES", "debug_from_env", "configure_logging"]
