"""Structured logging for the QIF reader and the ``qif`` command.

Loggers from get_logger() hand their events to the standard library logger
of the same name. Until configure_logging() runs, the ``qif_ledger`` logger
only holds a NullHandler, so reading a file from library code prints
nothing. The command configures logging once at startup, writing either
console or JSON lines to stderr and optionally to a log file.
"""

import logging
import sys
from pathlib import Path
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from qif_ledger.config import Settings, get_settings

PACKAGE_LOGGER = "qif_ledger"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def _app_context(settings: Settings) -> Processor:
    def add_app_context(
        logger: WrappedLogger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        event_dict["app"] = settings.app_name
        event_dict["environment"] = settings.environment.value
        return event_dict

    return add_app_context


def get_processors(settings: Settings) -> list[Processor]:
    """Build the processor chain for the configured ``console`` or ``json`` output.

    Both chains drop events below the level of the target logger before
    rendering them.
    """
    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.log_format == "json":
        processors += [
            _app_context(settings),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    return processors


def configure_logging(settings: Settings | None = None) -> None:
    """Send ``qif_ledger`` log events to stderr and the optional log file.

    Args:
        settings: Application settings. If None, loads from environment.

    Calling it again replaces the handlers of the previous call.
    """
    if settings is None:
        settings = get_settings()

    level = getattr(logging, settings.log_level.value)

    structlog.configure(
        processors=get_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)
    for handler in list(package_logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            package_logger.removeHandler(handler)
            handler.close()

    # stderr keeps stdout free for command output such as --json
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(stream_handler)

    if settings.log_file:
        package_logger.addHandler(_file_handler(settings.log_file))


def _file_handler(log_file: Path) -> logging.FileHandler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
    return handler


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger backed by the standard library logger ``name``.

    Example:
        logger = get_logger(__name__)
        logger.debug("qif_section_started", section="account", line_number=12)
    """
    return structlog.wrap_logger(
        logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger
    )


class LogContext:
    """Bind key/value pairs to every event logged inside a ``with`` block.

    Example:
        with LogContext(source="export.qif", command="summary"):
            document = load_qif("export.qif")
    """

    def __init__(self, **kwargs: Any) -> None:
        self.kwargs = kwargs

    def __enter__(self) -> "LogContext":
        structlog.contextvars.bind_contextvars(**self.kwargs)
        return self

    def __exit__(self, *args: Any) -> None:
        structlog.contextvars.unbind_contextvars(*self.kwargs)
