"""
Structured logging for farmdesk.

Every line carries the current request id (set by RequestContextMiddleware)
and any keyword context passed by the caller. Production emits one JSON
object per line; other environments get a readable single line.
"""
import json
import logging
import time
import uuid
from contextvars import ContextVar
from functools import wraps
from typing import Any, Optional

from farmdesk.core.config import settings

request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)


def get_request_id() -> Optional[str]:
    return request_id_var.get()


def generate_request_id() -> str:
    return uuid.uuid4().hex[:8]


def _elapsed_ms(start: float) -> float:
    return round((time.time() - start) * 1000, 2)


class StructuredLogger:
    """Thin wrapper over ``logging.Logger`` that renders context as fields."""

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(name)
        self.json_output = settings.APP_ENV == 'production'

    def _render(self, level: str, message: str, context: dict[str, Any],
                error: Optional[BaseException]) -> str:
        request_id = get_request_id()

        if self.json_output:
            payload: dict[str, Any] = {
                'ts': time.strftime('%Y-%m-%dT%H:%M:%S%z'),
                'level': level,
                'logger': self.name,
                'env': settings.APP_ENV,
                'msg': message,
            }
            if request_id:
                payload['request_id'] = request_id
            if context:
                payload['ctx'] = context
            if error is not None:
                payload['error'] = {'type': type(error).__name__, 'message': str(error)}
            return json.dumps(payload, default=str, ensure_ascii=False)

        line = f"[{request_id or '-'}] {message}"
        if context:
            line += ' ' + ' '.join(f"{k}={v}" for k, v in context.items())
        if error is not None:
            line += f" error={type(error).__name__}: {error}"
        return line

    def _emit(self, level: int, message: str, context: dict[str, Any],
              error: Optional[BaseException] = None, exc_info: bool = False) -> None:
        if not self.logger.isEnabledFor(level):
            return
        text = self._render(logging.getLevelName(level), message, context, error)
        self.logger.log(level, text, exc_info=exc_info)

    def debug(self, message: str, **context):
        self._emit(logging.DEBUG, message, context)

    def info(self, message: str, **context):
        self._emit(logging.INFO, message, context)

    def warning(self, message: str, error: Optional[BaseException] = None, **context):
        self._emit(logging.WARNING, message, context, error)

    def error(self, message: str, error: Optional[BaseException] = None, **context):
        self._emit(logging.ERROR, message, context, error)

    def exception(self, message: str, **context):
        self._emit(logging.ERROR, message, context, exc_info=True)


def get_logger(name: str = 'farmdesk') -> StructuredLogger:
    return StructuredLogger(name)


api_logger = get_logger('farmdesk.api')
sync_logger = get_logger('farmdesk.sync')
trace_logger = get_logger('farmdesk.trace')
assistant_logger = get_logger('farmdesk.assistant')
db_logger = get_logger('farmdesk.db')


def log_operation(operation: str, logger: Optional[StructuredLogger] = None):
    """Log start, completion time and failure of an async operation.

        @log_operation("bootstrap", sync_logger)
        async def bootstrap(...): ...
    """
    log = logger or api_logger

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            start = time.time()
            log.debug(f"{operation} started")
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                log.error(f"{operation} failed", error=e, duration_ms=_elapsed_ms(start))
                raise
            log.info(f"{operation} completed", duration_ms=_elapsed_ms(start))
            return result

        return wrapper

    return decorator
