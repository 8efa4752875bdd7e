"""
Identity Core Logging
=====================
Structured logging setup and request context middleware.
"""

from .structured import setup_logging, RequestLoggingMiddleware

__all__ = [
    "setup_logging",
    "RequestLoggingMiddleware",
]
