"""
Error taxonomy for the Supabase admin API.

This module provides:
- Error codes for programmatic handling
- Service (Supabase REST) errors mapped from HTTP status codes
- Database errors carrying the PostgreSQL SQLSTATE
- Configuration errors for missing settings
- `describe_error` to turn any exception into a JSON-safe envelope
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standardized error codes."""

    # Managed service errors (1xxx)
    SERVICE_ERROR = "ERR_1000"
    SERVICE_AUTH = "ERR_1001"
    SERVICE_NOT_FOUND = "ERR_1002"
    SERVICE_CONFLICT = "ERR_1003"
    SERVICE_RATE_LIMIT = "ERR_1004"
    SERVICE_UNAVAILABLE = "ERR_1005"
    SERVICE_TIMEOUT = "ERR_1006"
    INVALID_RESPONSE = "ERR_1007"
    BAD_REQUEST = "ERR_1008"

    # Direct database errors (2xxx)
    DATABASE_ERROR = "ERR_2000"
    DATABASE_UNAVAILABLE = "ERR_2001"

    # Configuration errors (3xxx)
    CONFIG_ERROR = "ERR_3000"
    MISSING_SETTING = "ERR_3001"

    # Internal errors (9xxx)
    INTERNAL_ERROR = "ERR_9000"


class AdminAPIError(Exception):
    """
    Base exception for all errors raised by this package.

    Attributes:
        code: Standardized error code for programmatic handling
        message: Human-readable error message
        cause: Original exception that caused this error
    """

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.cause = cause

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code.value,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
        }


# =============================================================================
# Managed Service Errors
# =============================================================================


class ServiceError(AdminAPIError):
    """Error reported by (or while talking to) the Supabase REST endpoints."""

    code = ErrorCode.SERVICE_ERROR
    http_status: int | None = None

    def __init__(
        self,
        message: str,
        *,
        http_status: int | None = None,
        error_code: str | None = None,
        body: Any = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        if http_status is not None:
            self.http_status = http_status
        self.error_code = error_code
        self.body = body

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d["status"] = self.http_status
        d["error_code"] = self.error_code
        d["body"] = self.body
        return d


class BadRequestError(ServiceError):
    code = ErrorCode.BAD_REQUEST
    http_status = 400


class ServiceAuthError(ServiceError):
    """The service-role key was rejected."""

    code = ErrorCode.SERVICE_AUTH
    http_status = 401


class ServiceNotFoundError(ServiceError):
    """Endpoint or RPC function does not exist."""

    code = ErrorCode.SERVICE_NOT_FOUND
    http_status = 404


class ServiceConflictError(ServiceError):
    code = ErrorCode.SERVICE_CONFLICT
    http_status = 422


class ServiceRateLimitError(ServiceError):
    code = ErrorCode.SERVICE_RATE_LIMIT
    http_status = 429


class ServiceUnavailableError(ServiceError):
    """Service unreachable or answering 502/503."""

    code = ErrorCode.SERVICE_UNAVAILABLE

    def __init__(self, message: str = "Supabase service unavailable", **kwargs):
        super().__init__(message, **kwargs)


class ServiceTimeoutError(ServiceError):
    code = ErrorCode.SERVICE_TIMEOUT

    def __init__(
        self,
        message: str = "Request to Supabase timed out",
        *,
        timeout: float | None = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.timeout = timeout


class InvalidResponseError(ServiceError):
    """Service returned a body that could not be decoded."""

    code = ErrorCode.INVALID_RESPONSE


# =============================================================================
# Database Errors
# =============================================================================


class DatabaseError(AdminAPIError):
    """Failure on the direct SQL connection."""

    code = ErrorCode.DATABASE_ERROR

    def __init__(self, message: str, *, sqlstate: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.sqlstate = sqlstate

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d["sqlstate"] = self.sqlstate
        return d


class DatabaseUnavailableError(DatabaseError):
    code = ErrorCode.DATABASE_UNAVAILABLE


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigError(AdminAPIError):
    code = ErrorCode.CONFIG_ERROR


class MissingSettingError(ConfigError):
    """A required environment variable is not set."""

    code = ErrorCode.MISSING_SETTING

    def __init__(self, env_var: str, **kwargs):
        super().__init__(f"Missing required setting: {env_var}", **kwargs)
        self.env_var = env_var


# =============================================================================
# Mapping helpers
# =============================================================================


def error_from_status(
    status: int,
    message: str,
    *,
    error_code: str | None = None,
    body: Any = None,
) -> ServiceError:
    """
    Create an appropriate ServiceError from an HTTP status code.

    Args:
        status: HTTP status code returned by Supabase
        message: Error message extracted from the response body
        error_code: Remote error code (GoTrue `error_code` / PostgREST `code`)
        body: Decoded response body, kept for debugging

    Returns:
        Appropriate ServiceError subclass
    """
    error_map: dict[int, type[ServiceError]] = {
        400: BadRequestError,
        401: ServiceAuthError,
        403: ServiceAuthError,
        404: ServiceNotFoundError,
        409: ServiceConflictError,
        422: ServiceConflictError,
        429: ServiceRateLimitError,
        502: ServiceUnavailableError,
        503: ServiceUnavailableError,
        504: ServiceTimeoutError,
    }

    error_class = error_map.get(status, ServiceError)
    return error_class(message, http_status=status, error_code=error_code, body=body)


def describe_error(error: BaseException) -> dict[str, Any]:
    """
    JSON-safe description of an exception for response envelopes.

    Internal details are passed through unsanitized.
    """
    if isinstance(error, AdminAPIError):
        return error.to_dict()
    if isinstance(error, asyncio.TimeoutError):
        return {"error_type": "TimeoutError", "message": str(error) or "operation timed out"}
    return {
        "error_type": error.__class__.__name__,
        "message": str(error),
    }


__all__ = [
    "ErrorCode",
    "AdminAPIError",
    # Service errors
    "ServiceError",
    "BadRequestError",
    "ServiceAuthError",
    "ServiceNotFoundError",
    "ServiceConflictError",
    "ServiceRateLimitError",
    "ServiceUnavailableError",
    "ServiceTimeoutError",
    "InvalidResponseError",
    # Database errors
    "DatabaseError",
    "DatabaseUnavailableError",
    # Config errors
    "ConfigError",
    "MissingSettingError",
    # Utilities
    "error_from_status",
    "describe_error",
]
