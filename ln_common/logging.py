"""Logging for the local node CLI: stdlib handlers rendered through structlog.

States log through a ``LoggerAdapter`` that carries their ``state`` name. The
console renderer prefixes every line with it, the JSON renderer keeps it as a
field. ``--verbose trace`` maps to the custom ``TRACE`` level, which also
lets the chatty client libraries through.
"""

from __future__ import annotations

import logging
import os
import sys

import structlog

from ln_common.config.env import parse_bool_env, parse_int_env

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LEVEL_ENV = "LN_LOG_LEVEL"
JSON_ENV = "LN_LOG_JSON"
FILE_ENV = "LN_LOG_FILE"

# Fields lifted from ``extra=`` into the structured event.
LOG_CONTEXT_FIELDS = ("state",)
QUIET_LOGGERS = ("docker", "urllib3")


def _resolve_level(value: str | int | None, debug: bool) -> int:
    if debug:
        return logging.DEBUG
    if value is None:
        return logging.INFO
    if isinstance(value, int):
        return value
    numeric = parse_int_env(value)
    if numeric is not None:
        return numeric
    return logging.getLevelNamesMapping().get(value.strip().upper(), logging.INFO)


def prefix_state(
    _logger: object, _method: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Render ``state=InitState`` as a ``[InitState]`` prefix on the message."""
    state = event_dict.pop("state", None)
    if state:
        event_dict["event"] = f"[{state}] {event_dict.get('event', '')}"
    return event_dict


def _pre_chain(json: bool) -> list[structlog.types.Processor]:
    chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.ExtraAdder(allow=LOG_CONTEXT_FIELDS),
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if not json:
        chain.append(prefix_state)
    return chain


def _configure_structlog() -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _quiet_libraries(level: int) -> None:
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET if level <= TRACE else logging.WARNING)


def configure_logging(
    *,
    level: str | int | None = None,
    debug: bool = False,
    log_file: str | None = None,
    json: bool | None = None,
    force: bool = False,
) -> None:
    """Configure stdlib logging and structlog with a shared formatter.

    Explicit arguments win over ``LN_LOG_LEVEL``, ``LN_LOG_JSON`` and
    ``LN_LOG_FILE``. Without ``force`` an already configured root logger is
    left alone.
    """
    resolved_level = _resolve_level(level or os.environ.get(LEVEL_ENV), debug)
    env_json = parse_bool_env(os.environ.get(JSON_ENV))
    resolved_json = bool(env_json if json is None else json)
    resolved_log_file = os.environ.get(FILE_ENV) if log_file is None else log_file

    root_logger = logging.getLogger()
    if root_logger.handlers and not force:
        _configure_structlog()
        return

    renderer: structlog.types.Processor
    if resolved_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=_pre_chain(resolved_json),
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if resolved_log_file:
        handlers.append(logging.FileHandler(resolved_log_file))

    if force:
        root_logger.handlers.clear()
    root_logger.setLevel(resolved_level)
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    _quiet_libraries(resolved_level)
    _configure_structlog()
