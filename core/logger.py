"""
📝 Logging System
Console logging through Rich, optional rotating JSON files and structlog events

Handlers are attached to the ``genetic`` logger namespace only. The root
logger and the global structlog configuration belong to the host application.
"""

import json
import logging
import logging.handlers
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog
from rich.console import Console
from rich.logging import RichHandler

from .config import get_settings

LOGGER_NAMESPACE = "genetic"

EVENT_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
    structlog.processors.JSONRenderer(default=str)
]


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured file logs"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if hasattr(record, 'extra_data'):
            log_data.update(record.extra_data)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging() -> None:
    """
    Configure the engine loggers

    Replaces the handlers of the ``genetic`` logger and stops propagation to
    the root logger. Calling it again applies changed settings.
    """
    settings = get_settings()

    package_logger = logging.getLogger(LOGGER_NAMESPACE)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.DEBUG)
    package_logger.propagate = False

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=True,
        show_path=settings.debug,
        rich_tracebacks=True
    )
    console_handler.setLevel(getattr(logging, settings.log_level))
    console_handler.setFormatter(logging.Formatter("%(name)s - %(message)s"))
    package_logger.addHandler(console_handler)

    if settings.logs_dir is not None:
        settings.logs_dir.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=settings.logs_dir / "genetic_engine.log",
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding="utf-8"
        )
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(JSONFormatter())

        error_handler = logging.handlers.RotatingFileHandler(
            filename=settings.logs_dir / "errors.log",
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=3,
            encoding="utf-8"
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(JSONFormatter())

        package_logger.addHandler(file_handler)
        package_logger.addHandler(error_handler)

    logger = get_logger("genetic.startup")
    logger.debug("Logging system initialized", extra={
        "extra_data": {
            "log_level": settings.log_level,
            "logs_dir": str(settings.logs_dir),
            "environment": settings.environment
        }
    })


def get_logger(name: str, extra_data: Optional[Dict[str, Any]] = None) -> logging.Logger:
    """
    Return a logger, wrapped in an adapter when extra data is given

    Args:
        name: Logger name (e.g. "genetic.population")
        extra_data: Extra fields attached to every record, written to the JSON files

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)

    if extra_data:
        logger = logging.LoggerAdapter(logger, {"extra_data": dict(extra_data)})

    return logger


def get_ga_logger(run_id: Optional[str] = None) -> logging.Logger:
    """
    Return the logger used for genetic algorithm runs

    Args:
        run_id: Identifier of the run (e.g. "a1b2c3d4")
    """
    extra_data = {}
    if run_id:
        extra_data["run_id"] = run_id

    return get_logger("genetic.run", extra_data)


def get_event_logger(name: str, **context: Any):
    """
    Return a structlog logger bound to the given context

    Used for one structured event per generation or state change. Events are
    rendered as JSON and emitted through the stdlib logger ``name``.
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=EVENT_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict
    ).bind(**context)


# Initialize logging when the module is imported
try:
    setup_logging()
except Exception as e:
    fallback_logger = logging.getLogger(LOGGER_NAMESPACE)
    fallback_logger.addHandler(logging.StreamHandler())
    fallback_logger.error(f"Failed to setup advanced logging: {e}")
