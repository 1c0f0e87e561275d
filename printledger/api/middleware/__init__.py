"""API middleware."""

from printledger.api.middleware.error_handler import ErrorHandlerMiddleware
from printledger.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
