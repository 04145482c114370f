import logging
import logging.handlers
import sys
import json
import time
import traceback
from datetime import datetime, timezone
from typing import Optional
from pathlib import Path
from contextlib import contextmanager

from quizdesk.core.config import settings


class EnhancedJSONFormatter(logging.Formatter):
    """JSON formatter carrying request context and metrics"""

    context_fields = (
        'correlation_id', 'learner_id', 'quiz_id', 'client_ip',
        'endpoint', 'method', 'status_code', 'execution_time_ms', 'operation'
    )

    def format(self, record: logging.LogRecord) -> str:

        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for field in self.context_fields:
            if getattr(record, field, None) is not None:
                log_entry[field] = getattr(record, field)

        if getattr(record, 'metrics', None):
            log_entry['metrics'] = record.metrics

        if record.exc_info:
            log_entry['exception'] = {
                'type': record.exc_info[0].__name__ if record.exc_info[0] else None,
                'message': str(record.exc_info[1]) if record.exc_info[1] else None,
                'traceback': self.formatException(record.exc_info).split('\n')
            }

        # Stack trace for errors logged without an exception
        if record.levelno >= logging.ERROR and not record.exc_info:
            log_entry['stack_trace'] = traceback.format_stack()

        return json.dumps(log_entry, default=str)


class PerformanceLogger:
    def __init__(self, logger: logging.Logger):
        self.logger = logger

    @contextmanager
    def measure_time(self, operation: str, **context):
        """Context manager to measure execution time"""
        start_time = time.perf_counter()

        try:
            yield

        finally:
            execution_time = (time.perf_counter() - start_time) * 1000

            extra_data = {
                'operation': operation,
                'execution_time_ms': round(execution_time, 2),
                **context
            }

            if execution_time > settings.VERY_SLOW_REQUEST_THRESHOLD * 1000:
                self.logger.error(
                    f"Very slow operation: {operation} took {execution_time:.2f}ms",
                    extra=extra_data
                )
            elif execution_time > settings.SLOW_REQUEST_THRESHOLD * 1000:
                self.logger.warning(
                    f"Slow operation: {operation} took {execution_time:.2f}ms",
                    extra=extra_data
                )
            else:
                self.logger.debug(
                    f"Operation completed: {operation} took {execution_time:.2f}ms",
                    extra=extra_data
                )


class APILogger:
    """Logger for API requests and responses"""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def log_request(
            self,
            method: str,
            path: str,
            client_ip: str,
            correlation_id: Optional[str] = None
    ):
        self.logger.info(
            f"{method} {path} from {client_ip}",
            extra={
                'method': method,
                'endpoint': path,
                'client_ip': client_ip,
                'correlation_id': correlation_id,
                'event_type': 'api_request'
            }
        )

    def log_response(
            self,
            method: str,
            path: str,
            status_code: int,
            response_time_ms: float,
            correlation_id: Optional[str] = None
    ):
        extra_data = {
            'method': method,
            'endpoint': path,
            'status_code': status_code,
            'execution_time_ms': round(response_time_ms, 2),
            'correlation_id': correlation_id,
            'event_type': 'api_response'
        }

        # Log level based on status code and response time
        if status_code >= 500:
            log_level = logging.ERROR
        elif status_code >= 400:
            log_level = logging.WARNING
        elif response_time_ms > settings.VERY_SLOW_REQUEST_THRESHOLD * 1000:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        self.logger.log(
            log_level,
            f"{method} {path} -> {status_code} in {response_time_ms:.2f}ms",
            extra=extra_data
        )


class APIFilter(logging.Filter):
    def filter(self, record):
        return getattr(record, 'event_type', None) in ('api_request', 'api_response')


LOG_FILE_MAX_BYTES = 50 * 1024 * 1024
LOG_FILE_BACKUPS = 10


def _rotating_file_handler(path: Path, level: int, log_filter: Optional[logging.Filter] = None) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS
    )
    handler.setLevel(level)
    handler.setFormatter(EnhancedJSONFormatter())
    if log_filter is not None:
        handler.addFilter(log_filter)
    return handler


def setup_logging():
    """Console logging, plus rotating JSON files when ENABLE_FILE_LOGGING is set"""

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL, logging.INFO))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    # Plain text while developing, JSON everywhere else
    if settings.ENVIRONMENT == "development":
        console_handler.setFormatter(logging.Formatter(settings.LOG_FORMAT))
    else:
        console_handler.setFormatter(EnhancedJSONFormatter())
    root_logger.addHandler(console_handler)

    if settings.ENABLE_FILE_LOGGING:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        root_logger.addHandler(_rotating_file_handler(log_dir / "quizdesk.log", logging.DEBUG))
        root_logger.addHandler(_rotating_file_handler(log_dir / "errors.log", logging.ERROR))
        root_logger.addHandler(_rotating_file_handler(log_dir / "api_access.log", logging.INFO, APIFilter()))

    for name, level in (("uvicorn", logging.INFO), ("sqlalchemy.engine", logging.WARNING), ("aiosqlite", logging.WARNING)):
        logging.getLogger(name).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Get logger instance with proper configuration"""
    return logging.getLogger(name)


def get_performance_logger(name: str) -> PerformanceLogger:
    return PerformanceLogger(get_logger(name))


def get_api_logger(name: str) -> APILogger:
    return APILogger(get_logger(name))
