"""
Centralized error handling for Job Copilot.

Defines the exception taxonomy raised by services and auth dependencies.
Each exception carries its HTTP status so the API layer can translate it
with a single handler, plus a context manager for logging failures
without swallowing them.
"""

import logging
from typing import Any, Dict, List, Optional


class AppError(Exception):
    """
    Base class for errors that map onto an HTTP response.

    The response body is ``{"msg": message}`` unless a subclass overrides
    ``to_response``.
    """

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_response(self) -> Dict[str, Any]:
        """Convert to the JSON body returned to clients."""
        return {"msg": self.message}


class RequestValidationFailed(AppError):
    """Input failed field validation. Body lists every failing field."""

    status_code = 400

    def __init__(self, errors: List[Dict[str, Any]]):
        message = errors[0]["msg"] if errors else "Invalid request"
        super().__init__(message)
        self.errors = errors

    @classmethod
    def single(cls, msg: str, param: Optional[str] = None) -> "RequestValidationFailed":
        """Build from one message, as used for duplicate-registration errors."""
        error: Dict[str, Any] = {"msg": msg}
        if param:
            error["param"] = param
        return cls([error])

    def to_response(self) -> Dict[str, Any]:
        return {"errors": self.errors}


class BadRequestError(AppError):
    """Request is well-formed but cannot be served as asked."""

    status_code = 400


class DuplicateRecordError(BadRequestError):
    """A uniqueness constraint rejected the write."""


class AuthenticationError(AppError):
    """Missing, invalid or expired token."""

    status_code = 401


class OwnershipError(AppError):
    """Authenticated user does not own the requested resource."""

    status_code = 401


class AdminRequiredError(AppError):
    """Authenticated user lacks the admin role."""

    status_code = 403


class NotFoundError(AppError):
    """Referenced entity is absent or its id is malformed."""

    status_code = 404


class ConfigurationError(AppError):
    """Server is missing required configuration (e.g. JWT secret)."""

    status_code = 500


class ProviderUnavailableError(AppError):
    """Every configured LLM provider failed for a request."""

    status_code = 500


class MalformedProviderResponse(AppError):
    """
    Provider output could not be parsed or did not match the expected shape.

    Raised by the response parsers; UnifiedLLM treats it like any other
    provider failure and moves on to the next provider.
    """

    status_code = 500

    def __init__(self, message: str, raw: Optional[str] = None):
        super().__init__(message)
        self.raw = raw


def log_on_exception(
    logger: logging.Logger,
    operation: str,
    level: int = logging.WARNING,
    include_traceback: bool = False,
):
    """
    Context manager for logging exceptions without swallowing them silently.

    Usage:
        with log_on_exception(logger, "MongoDB update", level=logging.ERROR, include_traceback=True):
            collection.update_one(...)

    Args:
        logger: Logger instance to use
        operation: Operation description for the log message
        level: Log level (default: WARNING)
        include_traceback: Whether to include stack trace in log
    """

    class ExceptionLogger:
        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_val is not None:
                if include_traceback:
                    logger.log(level, f"[{operation}] Failed: {exc_val}", exc_info=True)
                else:
                    logger.log(level, f"[{operation}] Failed: {exc_val}")
            # Return False to not suppress the exception
            return False

    return ExceptionLogger()
