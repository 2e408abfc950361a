# Middleware package for the Qoomy notification API

from .request_id import RequestIDMiddleware
from .rate_limit import limiter, rate_limit_messages, rate_limit_app_backgrounded, rate_limit_evaluations

__all__ = [
    "RequestIDMiddleware",
    "limiter",
    "rate_limit_messages",
    "rate_limit_app_backgrounded",
    "rate_limit_evaluations",
]
