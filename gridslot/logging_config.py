"""structlog configuration for gridslot.

Output goes to stderr, routed through stdlib logging so uvicorn and
library loggers share one format:
- Human (default): colored console output
- JSON (--log-json / GRIDSLOT_LOG_JSON): one JSON object per line,
  stamped with the deployment env
"""

from __future__ import annotations

import logging
import sys

import structlog

from .config import Settings


def _stamp_env(env: str) -> structlog.types.Processor:
    def processor(logger, method_name, event_dict):
        event_dict.setdefault("env", env)
        return event_dict
    return processor


def configure_logging(
    settings: Settings | None = None,
    *,
    verbose: bool | None = None,
    log_json: bool | None = None,
) -> None:
    """Configure structlog processors and output routing.

    Args:
        settings: Source of the verbose/log_json/env defaults.
        verbose: Override settings.verbose. DEBUG when true, else WARNING+.
        log_json: Override settings.log_json.
    """
    settings = settings or Settings()
    verbose = settings.verbose if verbose is None else verbose
    log_json = settings.log_json if log_json is None else log_json

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_json:
        shared_processors.append(_stamp_env(settings.env))
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    # Engine and session events are debug/info; keep them behind --verbose
    logging.getLogger("gridslot").setLevel(logging.DEBUG if verbose else logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
