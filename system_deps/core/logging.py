"""Logging for build-time runs — structlog events rendered by stdlib logging.

stdout carries only the directive lines, so every record goes to stderr.
"""

from __future__ import annotations

import logging
import logging.config
import os

import structlog

LOG_LEVEL_VAR = "SYSTEM_DEPS_LOG_LEVEL"
LOG_FORMAT_VAR = "SYSTEM_DEPS_LOG_FORMAT"

# Enough to tell which step logged what; no timestamps or call-site details
_PRE_CHAIN: list[structlog.types.Processor] = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.format_exc_info,
]


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=False, pad_event=0)


def setup_logging(verbose: bool = False) -> None:
    """Route structlog and stdlib records from ``system_deps`` to stderr.

    ``SYSTEM_DEPS_LOG_LEVEL`` overrides the level (WARNING, or DEBUG with
    ``verbose``); ``SYSTEM_DEPS_LOG_FORMAT`` picks ``console`` or ``json``.
    """
    level = os.environ.get(LOG_LEVEL_VAR, "DEBUG" if verbose else "WARNING").upper()
    log_format = os.environ.get(LOG_FORMAT_VAR, "console").lower()

    structlog.configure(
        processors=_PRE_CHAIN + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "events": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": _PRE_CHAIN,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        _renderer(log_format),
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "events",
                },
            },
            "loggers": {
                "system_deps": {
                    "handlers": ["stderr"],
                    "level": level,
                    "propagate": False,
                },
            },
        }
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """structlog logger backed by the stdlib logger ``name``.

    Until :func:`setup_logging` runs, records fall through to stdlib defaults
    (warnings and above on stderr), so nothing leaks onto stdout.
    """
    return structlog.wrap_logger(logging.getLogger(name))
