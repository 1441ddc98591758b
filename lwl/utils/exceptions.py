"""Custom exception classes and error handling utilities."""
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from loguru import logger


class LwlException(Exception):
    """Base exception for the application."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(LwlException):
    """Data validation errors."""
    pass


class AuthenticationError(LwlException):
    """Authentication errors."""
    pass


class AuthorizationError(LwlException):
    """Raised when an authenticated user lacks the required role."""
    pass


class NotFoundError(LwlException):
    """Requested record does not exist or is not owned by the caller."""
    pass


class ConfigurationError(LwlException):
    """A required third-party credential or setting is missing."""
    pass


class ExternalServiceError(LwlException):
    """A third-party API call failed."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        *,
        status_code: int = status.HTTP_502_BAD_GATEWAY,
    ):
        super().__init__(message, details)
        self.status_code = status_code


def handle_validation_error(error: ValidationError) -> HTTPException:
    """Handle validation errors."""
    logger.warning(f"Validation error: {error.message}")
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=error.message,
    )


def handle_authentication_error(error: AuthenticationError) -> HTTPException:
    """Handle authentication errors."""
    logger.warning(f"Authentication error: {error.message}")
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=error.message,
        headers={"WWW-Authenticate": "Bearer"},
    )


def handle_authorization_error(error: AuthorizationError) -> HTTPException:
    """Handle authorization errors."""
    logger.warning(f"Authorization error: {error.message}")
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=error.message)


def handle_not_found_error(error: NotFoundError) -> HTTPException:
    """Handle missing records."""
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error.message)


def handle_configuration_error(error: ConfigurationError) -> HTTPException:
    """Handle missing configuration for third-party services."""
    logger.error(f"Configuration error: {error.message}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=error.message,
    )


def handle_external_service_error(error: ExternalServiceError) -> HTTPException:
    """Handle third-party service errors."""
    logger.error(f"External service error: {error.message}")
    return HTTPException(status_code=error.status_code, detail=error.message)


_HANDLERS = (
    (ValidationError, handle_validation_error),
    (AuthenticationError, handle_authentication_error),
    (AuthorizationError, handle_authorization_error),
    (NotFoundError, handle_not_found_error),
    (ConfigurationError, handle_configuration_error),
    (ExternalServiceError, handle_external_service_error),
)


def to_http_exception(error: LwlException) -> HTTPException:
    """Dispatch ``error`` to the matching ``handle_*`` helper."""
    for error_type, handler in _HANDLERS:
        if isinstance(error, error_type):
            return handler(error)
    logger.error(f"Unhandled application error: {error.message}")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=error.message)
