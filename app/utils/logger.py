import logging
import contextvars
from typing import Optional

# Context variable to store request ID across async operations
request_id_context = contextvars.ContextVar('request_id', default=None)


class RequestAwareLogger:
    """
    A logger wrapper that automatically includes request context.

    Background tasks scheduled from a request inherit the context var, so push
    dispatch logs stay correlated with the HTTP call that triggered them.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.name = name

    def _log_with_context(self, level: int, msg: str, *args, **kwargs):
        """Internal method to log with request context."""
        request_id = kwargs.pop('request_id', None)

        if not request_id:
            request_id = request_id_context.get()

        if request_id:
            extra = kwargs.get('extra', {})
            extra['request_id'] = request_id
            kwargs['extra'] = extra

        self.logger.log(level, msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs):
        self._log_with_context(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        self._log_with_context(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        self._log_with_context(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        self._log_with_context(logging.ERROR, msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        self._log_with_context(logging.ERROR, msg, *args, **kwargs, exc_info=True)


def get_logger(name: str) -> RequestAwareLogger:
    """
    Get a request-aware logger for the specified name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        RequestAwareLogger: A logger that automatically includes request context
    """
    return RequestAwareLogger(name)


def set_request_context(request_id: str):
    """Set the request ID in the current context."""
    request_id_context.set(request_id)


def get_request_context() -> Optional[str]:
    """Get the current request ID from context, or None outside a request."""
    return request_id_context.get()


def clear_request_context():
    """Clear the current request context."""
    request_id_context.set(None)


def mask_token(token: Optional[str]) -> str:
    """Shorten a device token for log output."""
    if not token:
        return "<none>"
    return f"{token[:12]}..."
