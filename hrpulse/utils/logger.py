"""Logging setup for HRPulse.

Production and staging write JSON lines (python-json-logger) to stdout and
to rotating files under ``logs/``; development gets a readable console
format; tests only see warnings. Every record carries the current request
ID when one is set, and component loggers (``api``, ``database``, ``cache``,
``scoring``) tag their records with ``component``.
"""

import contextvars
import logging
import logging.handlers
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from pythonjsonlogger import jsonlogger

# Set by RequestIDMiddleware for the lifetime of a request
request_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "request_id",
    default=None
)

COMPONENT_LOGGERS: Dict[str, str] = {
    "api": "hrpulse.api",
    "database": "hrpulse.database",
    "cache": "hrpulse.cache",
    "scoring": "hrpulse.scoring",
}

SLOW_OPERATION_MS = 5000

DEV_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-24s | %(request_id)s | %(message)s"


class HRPulseFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding service identity and source location."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["location"] = f"{record.module}.{record.funcName}:{record.lineno}"
        log_record["service"] = "hrpulse-psychometrics"
        if record.exc_info and "exc_info" not in log_record:
            log_record["exception"] = self.formatException(record.exc_info)


class ContextFilter(logging.Filter):
    """Stamp fixed attributes (``component``) onto every record."""

    def __init__(self, **context: Any):
        super().__init__()
        self.context = context

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.context.items():
            setattr(record, key, value)
        return True


class RequestContextFilter(logging.Filter):
    """Attach the request ID of the current request, ``-`` outside requests."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", None):
            record.request_id = request_id_var.get() or "-"
        return True


class LoggerConfig:
    """Configures the root logger and component loggers for one environment."""

    def __init__(self, environment: str = "development", log_level: str = "INFO", log_dir: str = "logs"):
        self.environment = environment
        self.log_level = getattr(logging, log_level.upper(), logging.INFO)
        self.log_dir = Path(log_dir)

        root = logging.getLogger()
        root.setLevel(self.log_level)
        root.handlers.clear()
        for handler in self._handlers():
            handler.addFilter(RequestContextFilter())
            root.addHandler(handler)

        for component, logger_name in COMPONENT_LOGGERS.items():
            component_logger = logging.getLogger(logger_name)
            component_logger.setLevel(self.log_level)
            component_logger.filters.clear()
            component_logger.addFilter(ContextFilter(component=component))

    def _handlers(self) -> List[logging.Handler]:
        if self.environment in ("production", "staging"):
            return self._json_handlers()

        console = logging.StreamHandler(sys.stdout)
        if self.environment == "test":
            console.setLevel(logging.WARNING)
            console.setFormatter(logging.Formatter("TEST | %(levelname)s | %(name)s | %(message)s"))
        else:
            console.setLevel(logging.DEBUG)
            console.setFormatter(logging.Formatter(DEV_FORMAT, datefmt="%H:%M:%S"))
        return [console]

    def _json_handlers(self) -> List[logging.Handler]:
        self.log_dir.mkdir(exist_ok=True)
        formatter = HRPulseFormatter("%(timestamp)s %(level)s %(logger)s %(message)s")

        console = logging.StreamHandler(sys.stdout)
        console.setLevel(logging.INFO)

        application_file = logging.handlers.RotatingFileHandler(
            self.log_dir / "application.log", maxBytes=50 * 1024 * 1024, backupCount=10, encoding="utf-8"
        )
        application_file.setLevel(logging.INFO)

        error_file = logging.handlers.RotatingFileHandler(
            self.log_dir / "error.log", maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8"
        )
        error_file.setLevel(logging.ERROR)

        handlers: List[logging.Handler] = [console, application_file, error_file]
        for handler in handlers:
            handler.setFormatter(formatter)
        return handlers


_logger_config: Optional[LoggerConfig] = None


def setup_logging(environment: str = "development", log_level: str = "INFO") -> LoggerConfig:
    """(Re)configure logging; called by ``get_settings`` and the seed script."""
    global _logger_config
    _logger_config = LoggerConfig(environment, log_level)
    return _logger_config


def get_logger(name: str = __name__) -> logging.Logger:
    if _logger_config is None:
        setup_logging()
    return logging.getLogger(name)


def get_component_logger(component: str) -> logging.Logger:
    """Logger for one of ``COMPONENT_LOGGERS``.

    Raises:
        ValueError: If component is not recognized
    """
    if component not in COMPONENT_LOGGERS:
        raise ValueError(f"Unknown component: {component}. Available: {sorted(COMPONENT_LOGGERS)}")
    return get_logger(COMPONENT_LOGGERS[component])


def get_api_logger() -> logging.Logger:
    return get_component_logger("api")


def get_database_logger() -> logging.Logger:
    return get_component_logger("database")


def get_cache_logger() -> logging.Logger:
    return get_component_logger("cache")


def get_scoring_logger() -> logging.Logger:
    return get_component_logger("scoring")


def log_api_request(method: str, path: str, logger: Optional[logging.Logger] = None) -> None:
    (logger or get_api_logger()).info(
        f"{method} {path}",
        extra={"http_method": method, "request_path": path, "event_type": "api_request"},
    )


def log_api_response(
    method: str,
    path: str,
    status_code: int,
    duration_ms: float,
    logger: Optional[logging.Logger] = None,
) -> None:
    """Log a finished request; 4xx and 5xx responses log at WARNING."""
    level = logging.WARNING if status_code >= 400 else logging.INFO
    (logger or get_api_logger()).log(
        level,
        f"{method} {path} -> {status_code} ({duration_ms:.1f} ms)",
        extra={
            "http_method": method,
            "request_path": path,
            "status_code": status_code,
            "duration_ms": round(duration_ms, 2),
            "event_type": "api_response",
        },
    )


def log_database_operation(
    operation: str,
    collection: str,
    duration_ms: float,
    logger: Optional[logging.Logger] = None,
) -> None:
    (logger or get_database_logger()).debug(
        f"DB {operation} on {collection}",
        extra={
            "database_operation": operation,
            "collection": collection,
            "duration_ms": round(duration_ms, 2),
            "event_type": "database_operation",
        },
    )


class PerformanceLogger:
    """Time a block and log its duration.

    Example:
        with PerformanceLogger("score_attempt", logger=logger, extra={"test_id": 3}):
            engine.apply(attempt, test, questions)

    Blocks slower than ``SLOW_OPERATION_MS`` log at WARNING.
    """

    def __init__(self, operation: str, logger: Optional[logging.Logger] = None, extra: Optional[Dict[str, Any]] = None):
        self.operation = operation
        self.logger = logger or get_logger()
        self.extra = extra or {}
        self.duration_ms: Optional[float] = None
        self._started: Optional[float] = None

    def __enter__(self) -> "PerformanceLogger":
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.duration_ms = (time.perf_counter() - self._started) * 1000
        level = logging.WARNING if self.duration_ms > SLOW_OPERATION_MS else logging.DEBUG
        self.logger.log(
            level,
            f"{self.operation} took {self.duration_ms:.1f} ms",
            extra={
                "operation": self.operation,
                "duration_ms": round(self.duration_ms, 2),
                "success": exc_type is None,
                "event_type": "performance",
                **self.extra,
            },
        )
