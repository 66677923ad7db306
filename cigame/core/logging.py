"""Logging setup for CI Game.

Library modules log through ``logging.getLogger(__name__)`` and pass their
structured fields (build number, rule name, points) in ``extra``. Nothing
is rendered until the host calls configure_logging(), which installs a
structlog ProcessorFormatter on the root logger so those records come out
as console lines or JSON objects.

Example usage:
    from cigame.core.logging import configure_logging

    configure_logging(level="DEBUG", module_levels={"cigame.history": "INFO"})
"""

import logging
import sys

import structlog
from structlog.types import Processor

# Loggers whose level was set through module_levels
_module_loggers: set[str] = set()


def _pre_chain() -> list[Processor]:
    return [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _to_level(level: str | int) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def configure_logging(
    level: str | int = logging.INFO,
    json_output: bool | None = None,
    log_file: str | None = None,
    module_levels: dict[str, str | int] | None = None,
) -> None:
    """Route CI Game log records through structlog rendering.

    Args:
        level: Root log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Use JSON output format. If None, auto-detects:
                     True if not a TTY (production), False otherwise (dev)
        log_file: Optional file path for log output
        module_levels: Logger name to level overrides, e.g.
            ``{"cigame.history": "DEBUG"}`` to trace baseline resolution
            while the rest of the package logs at ``level``.
    """
    if json_output is None:
        json_output = not sys.stdout.isatty()

    if json_output:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=_pre_chain(),
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(_to_level(level))
    _remove_handlers(root_logger)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for module, module_level in (module_levels or {}).items():
        logging.getLogger(module).setLevel(_to_level(module_level))
        _module_loggers.add(module)


def configure_logging_from_settings() -> None:
    """Configure logging from the cached CI Game settings."""
    # Import here to avoid circular imports
    from cigame.core.settings import get_cached_settings

    settings = get_cached_settings()

    configure_logging(
        level=settings.logging.level,
        json_output=settings.logging.json_output,
        log_file=settings.logging.file,
        module_levels=dict(settings.logging.module_levels) or None,
    )


def reset_logging() -> None:
    """Undo configure_logging().

    Used by tests to ensure clean state between runs.
    """
    for module in _module_loggers:
        logging.getLogger(module).setLevel(logging.NOTSET)
    _module_loggers.clear()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.WARNING)
    _remove_handlers(root_logger)


def _remove_handlers(root_logger: logging.Logger) -> None:
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
