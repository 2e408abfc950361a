import time
import uuid
from typing import Callable
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from app.utils.logger import set_request_context, clear_request_context, get_logger

logger = get_logger(__name__)

# Polled by load balancers; logged at debug only
QUIET_PATHS = {"/health"}


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Assigns every request an id for log correlation.

    Reuses X-Correlation-ID or X-Request-ID when the client sends one,
    otherwise generates a UUID4. The id is stored on request.state, set in the
    logging context (inherited by background push tasks) and echoed back as
    X-Request-ID.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        request_id = (
            request.headers.get("X-Correlation-ID") or
            request.headers.get("X-Request-ID") or
            str(uuid.uuid4())
        )
        request.state.request_id = request_id
        set_request_context(request_id)

        log = logger.debug if request.url.path in QUIET_PATHS else logger.info
        started = time.perf_counter()
        log(f"Request started: {request.method} {request.url.path}", request_id=request_id)

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            elapsed_ms = (time.perf_counter() - started) * 1000
            log(
                f"Request completed: {request.method} {request.url.path} - "
                f"Status: {response.status_code} ({elapsed_ms:.0f}ms)",
                request_id=request_id
            )
            return response
        except Exception as e:
            logger.error(
                f"Request failed: {request.method} {request.url.path} - Error: {str(e)}",
                request_id=request_id
            )
            raise
        finally:
            clear_request_context()
