"""
Structured error handling and error formatting.
Provides consistent error payloads with error codes and context.
"""

from typing import Optional, Dict, Any
import json
import logging

from shared_utils.constants import ErrorCode, LogScope
from shared_utils.logging_utils import get_scoped_logger


class AppException(Exception):
    """Base exception for application errors."""

    def __init__(
        self,
        error_code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.error_code = error_code
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to an error dictionary."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "context": self.context
            }
        }


class ValidationError(AppException):
    """Validation/input error."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            error_code=ErrorCode.INVALID_INPUT.value,
            message=message,
            context=context,
        )


class ConfigurationError(AppException):
    """Configuration error (missing token, malformed base URL)."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            error_code=ErrorCode.INVALID_CONFIG.value,
            message=message,
            context=context,
        )


class TransportError(AppException):
    """DNS, connect, read or timeout failure before a response was received."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            error_code=ErrorCode.TRANSPORT_FAILED.value,
            message=message,
            context=context,
        )


def _format_body(body: Any) -> str:
    if isinstance(body, (dict, list)):
        return json.dumps(body)
    return str(body)


class ProtocolError(AppException):
    """Non-2xx response; carries the parsed (or raw) server body."""

    def __init__(self, status_code: int, body: Any, context: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(
            error_code=ErrorCode.HTTP_ERROR.value,
            message=f"http {status_code}: {_format_body(body)}",
            context={**(context or {}), "status_code": status_code},
        )


class SchemaError(AppException):
    """Required response field missing or of the wrong shape."""

    def __init__(self, field: str, message: str, context: Optional[Dict[str, Any]] = None):
        self.field = field
        super().__init__(
            error_code=ErrorCode.SCHEMA_MISMATCH.value,
            message=f"{message}: {field}",
            context={**(context or {}), "field": field},
        )


class FileError(AppException):
    """Local file unreadable, missing, or shorter than a requested range."""

    def __init__(self, path: str, message: str, context: Optional[Dict[str, Any]] = None):
        self.path = path
        super().__init__(
            error_code=ErrorCode.FILE_ERROR.value,
            message=f"{message}: {path}",
            context={**(context or {}), "path": path},
        )


class PollingTimeoutError(AppException):
    """Asset processing did not finish before the polling deadline."""

    def __init__(self, asset: str, timeout: float, context: Optional[Dict[str, Any]] = None):
        self.asset = asset
        self.timeout = timeout
        super().__init__(
            error_code=ErrorCode.ASSET_TIMEOUT.value,
            message=f"asset processing timeout after {timeout:g}s",
            context={**(context or {}), "asset": asset, "timeout_seconds": timeout},
        )


class ExternalServiceError(AppException):
    """External service (S3, file download) unavailable error."""

    def __init__(self, service: str, message: str, context: Optional[Dict[str, Any]] = None):
        full_message = f"{service} unavailable: {message}"
        super().__init__(
            error_code=ErrorCode.EXTERNAL_SERVICE_ERROR.value,
            message=full_message,
            context={**(context or {}), "service": service},
        )


def log_exception(
    exc: Exception,
    scope: str = LogScope.ERROR_HANDLER,
    logger: Optional[logging.Logger] = None
) -> None:
    """Log exception with structured context.

    Args:
        exc: Exception to log
        scope: Log scope identifier
        logger: Optional custom logger (uses structlog if not provided)
    """
    if logger is None:
        logger = get_scoped_logger(scope)

    if isinstance(exc, AppException):
        logger.error(
            "app_exception",
            error_code=exc.error_code,
            message=exc.message,
            context=exc.context
        )
    else:
        logger.error(
            "unexpected_exception",
            error_type=type(exc).__name__,
            message=str(exc),
            traceback=True
        )


def handle_error(
    exc: Exception,
    scope: str = LogScope.ERROR_HANDLER,
    default_error_code: str = ErrorCode.EXTERNAL_SERVICE_ERROR.value
) -> Dict[str, Any]:
    """Handle exception and return structured error dictionary.

    Args:
        exc: Exception to handle
        scope: Log scope
        default_error_code: Default error code for non-AppException errors

    Returns:
        Structured error dictionary
    """
    log_exception(exc, scope)

    if isinstance(exc, AppException):
        return exc.to_dict()
    else:
        return {
            "error": {
                "code": default_error_code,
                "message": f"An unexpected error occurred: {str(exc)}",
                "context": {"error_type": type(exc).__name__}
            }
        }
