from __future__ import annotations

"""
Structured logging setup for oscript-price.

This module configures **structlog** + the stdlib ``logging`` package so that:
- Contract events (initialization, updates, aggregation) are emitted as
  structured key/value records.
- Output is a console renderer by default, or JSON for log shippers.
- Exceptions include a structured stack trace when JSON is selected.

Quick start
-----------
    from oscript_price.logging import setup_logging, get_logger

    setup_logging()  # call once on process start (the CLI does this)
    log = get_logger(__name__)
    log.info("config_updated", field="ai_data_source")

Level and format default to ``OSCRIPT_PRICE_LOG_LEVEL`` and
``OSCRIPT_PRICE_LOG_FORMAT`` (see oscript_price.config).
"""

import logging
from typing import Any, Dict, Iterable, Optional, Union

import structlog
from structlog.processors import JSONRenderer

from .config import load_config


def _base_processors(service_name: str, include_stacktrace: bool) -> Iterable:
    yield structlog.stdlib.add_log_level
    yield structlog.processors.TimeStamper(fmt="iso", utc=True)
    yield structlog.contextvars.merge_contextvars
    yield structlog.processors.StackInfoRenderer()
    if include_stacktrace:
        yield structlog.processors.format_exc_info
    yield structlog.processors.UnicodeDecoder()

    def _ensure_service(_: logging.Logger, __: str, ev: Dict[str, Any]) -> Dict[str, Any]:
        ev.setdefault("service", service_name)
        return ev

    yield _ensure_service


def setup_logging(
    *,
    service_name: str = "oscript-price",
    level: Optional[Union[str, int]] = None,
    log_format: Optional[str] = None,
) -> None:
    """
    Configure structlog + stdlib logging. Safe to call more than once; the
    root handler is replaced each time.

    Parameters
    ----------
    service_name: str
        Value injected as "service" into every event.
    level: str|int
        Log level (e.g., "INFO"). Defaults to the configured level.
    log_format: str
        "console" or "json". Defaults to the configured format.
    """
    cfg = load_config()
    level = level or cfg.log_level
    log_format = (log_format or cfg.log_format).lower()
    include_stacktrace = log_format == "json"

    processors = list(_base_processors(service_name, include_stacktrace))

    if log_format == "json":
        renderer = JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False, sort_keys=False)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            *processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
            foreign_pre_chain=[structlog.stdlib.add_logger_name, *processors],
        )
    )

    root = logging.getLogger()
    root.setLevel(level)
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Return a structlog logger; bind module name if provided.
    """
    if name:
        return structlog.get_logger(name)
    return structlog.get_logger()


__all__ = ["setup_logging", "get_logger"]
