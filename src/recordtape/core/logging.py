# src/recordtape/core/logging.py
"""Structured logging for recordtape.

recordtape is a library embedded in test suites and workflow runners, so it
never takes over the host's logging on import or by default:

- get_logger() wraps a stdlib logger under the "recordtape" namespace with
  structlog directly. The host's global structlog configuration is left
  untouched.
- configure_logging() attaches one handler to the "recordtape" logger. The
  host's root logger and its handlers are only touched when the host asks
  for it with replace_root=True.

Events are rendered by a structlog ProcessorFormatter, as JSON lines or as
console text.
"""

import logging
import sys
from typing import Any, TextIO

import structlog
from structlog.stdlib import ProcessorFormatter

LIBRARY_LOGGER = "recordtape"

# Applied to every tape event before it reaches a stdlib handler
_EVENT_PROCESSORS: list[Any] = [
    structlog.stdlib.filter_by_level,
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
]

# asyncio reports its selector each time async load/save starts a loop
_NOISY_LOGGERS: tuple[str, ...] = ("asyncio",)


class _TapeLogHandler(logging.StreamHandler):  # type: ignore[type-arg]
    """Handler installed by configure_logging(), replaced on reconfigure."""


def _drop_formatter_fields(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    # ProcessorFormatter adds these to every record it renders
    event_dict.pop("_record", None)
    event_dict.pop("_from_structlog", None)
    return event_dict


def _build_handler(stream: TextIO, json_output: bool) -> _TapeLogHandler:
    renderer: Any = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=False)
    handler = _TapeLogHandler(stream)
    handler.setFormatter(
        ProcessorFormatter(
            processors=[_drop_formatter_fields, structlog.processors.format_exc_info, renderer],
            foreign_pre_chain=[
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
            ],
        )
    )
    return handler


def _detach(logger: logging.Logger) -> None:
    for handler in [h for h in logger.handlers if isinstance(h, _TapeLogHandler)]:
        logger.removeHandler(handler)


def _parse_level(level: str) -> int:
    levels = logging.getLevelNamesMapping()
    try:
        return levels[level.upper()]
    except KeyError:
        raise ValueError(f"Unknown log level: {level!r}") from None


def configure_logging(
    *,
    json_output: bool = False,
    level: str = "INFO",
    replace_root: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Route recordtape events to a stream.

    Args:
        json_output: Render JSON lines instead of console text
        level: Minimum level of recordtape events (DEBUG shows appends)
        replace_root: Install the handler on the root logger instead, so
            the host's stdlib loggers share the format. Existing root
            handlers are removed in this mode only.
        stream: Output stream (default: sys.stdout at call time)

    Calling it again replaces the handler it installed before.
    """
    log_level = _parse_level(level)
    handler = _build_handler(stream or sys.stdout, json_output)

    tape_logger = logging.getLogger(LIBRARY_LOGGER)
    root = logging.getLogger()
    _detach(tape_logger)
    _detach(root)
    tape_logger.setLevel(log_level)

    if not replace_root:
        tape_logger.addHandler(handler)
        tape_logger.propagate = False
        return

    tape_logger.propagate = True
    root.handlers = [handler]
    root.setLevel(log_level)
    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(max(log_level, logging.WARNING))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger for a recordtape module.

    Names outside the "recordtape" namespace are nested under it, so every
    logger this returns is governed by configure_logging().
    """
    if name != LIBRARY_LOGGER and not name.startswith(f"{LIBRARY_LOGGER}."):
        name = f"{LIBRARY_LOGGER}.{name}"
    logger: structlog.stdlib.BoundLogger = structlog.wrap_logger(
        logging.getLogger(name),
        processors=[*_EVENT_PROCESSORS, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
    )
    return logger
