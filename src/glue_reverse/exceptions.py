"""Error hierarchy for Glue reverse engineering.

This module defines the errors raised at the public API boundary:
- Distinguishing retryable vs. permanent catalog failures
- Carrying the original message and stack trace of the failed call
- Separating configuration mistakes from transport/service failures

Missing optional metadata (certificate files, sort columns, parameters) is
never an error; it resolves to a documented default in the mapper.
"""

import traceback
from typing import Any, Dict, Optional

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

# Glue/AWS error codes that indicate a temporary condition
RETRYABLE_ERROR_CODES = frozenset(
    {
        "ThrottlingException",
        "Throttling",
        "TooManyRequestsException",
        "RequestLimitExceeded",
        "InternalServiceException",
        "InternalFailure",
        "ServiceUnavailable",
        "OperationTimeoutException",
    }
)

AUTHENTICATION_ERROR_CODES = frozenset(
    {
        "AccessDeniedException",
        "UnrecognizedClientException",
        "InvalidClientTokenId",
        "InvalidSignatureException",
        "SignatureDoesNotMatch",
        "ExpiredTokenException",
    }
)


class GlueReverseError(Exception):
    """Base exception for all Glue reverse engineering errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        retryable: bool = False,
    ):
        """Initialize error.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code (e.g., "CATALOG_REQUEST_FAILED")
            details: Additional error details for debugging
            retryable: Whether this error is retryable (default: False)
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__.upper()
        self.details = details or {}
        self.retryable = retryable

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for serialization.

        Returns:
            Dictionary representation of the error
        """
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "retryable": self.retryable,
        }

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.error_code}): {self.message}"


class CatalogRequestError(GlueReverseError):
    """A call to the Glue Data Catalog failed.

    Raised from the original botocore exception, so ``__cause__`` keeps the
    untouched error and ``details["stack"]`` holds its formatted traceback.
    """

    def __init__(
        self,
        message: str,
        error_code: str = "CATALOG_REQUEST_FAILED",
        details: Optional[Dict[str, Any]] = None,
        retryable: bool = False,
    ):
        super().__init__(message, error_code, details, retryable)

    @property
    def stack(self) -> Optional[str]:
        """Formatted traceback of the original failure, if captured."""
        return self.details.get("stack")


class AuthenticationError(CatalogRequestError):
    """Credentials or certificates were rejected by the service."""

    def __init__(
        self,
        message: str,
        error_code: str = "AUTHENTICATION_FAILED",
        details: Optional[Dict[str, Any]] = None,
        retryable: bool = False,
    ):
        super().__init__(message, error_code, details, retryable)


class ConfigurationError(GlueReverseError):
    """Connection parameters, selection or run configuration is invalid.

    NOT retryable - indicates misconfiguration.
    """

    def __init__(
        self,
        message: str,
        error_code: str = "CONFIGURATION_ERROR",
        details: Optional[Dict[str, Any]] = None,
        retryable: bool = False,
    ):
        super().__init__(message, error_code, details, retryable)


def get_aws_error_code(error: Exception) -> Optional[str]:
    """Return the AWS error code of a botocore ClientError, if any."""
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code")
    return None


def is_retryable_error(error: Exception) -> bool:
    """Check if an error is retryable.

    Args:
        error: Exception to check

    Returns:
        True if error is retryable, False otherwise
    """
    if isinstance(error, GlueReverseError):
        return error.retryable
    if isinstance(error, ClientError):
        code = get_aws_error_code(error)
        status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode", 0)
        return code in RETRYABLE_ERROR_CODES or status >= 500
    if isinstance(
        error, (EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError)
    ):
        return True
    return False


def wrap_catalog_error(error: Exception, message: Optional[str] = None) -> GlueReverseError:
    """Wrap a failed catalog call in a CatalogRequestError.

    The caller is expected to ``raise wrapped from error`` so the original
    exception stays reachable through ``__cause__``.

    Args:
        error: Original exception
        message: Optional custom message (defaults to the original message)

    Returns:
        Wrapped error carrying the original message and stack trace
    """
    if isinstance(error, GlueReverseError):
        return error

    details: Dict[str, Any] = {
        "original_error": type(error).__name__,
        "original_message": str(error),
        "stack": "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        ),
    }
    code = get_aws_error_code(error)
    if code:
        details["aws_error_code"] = code

    error_class = (
        AuthenticationError if code in AUTHENTICATION_ERROR_CODES else CatalogRequestError
    )
    if isinstance(error, BotoCoreError):
        details["transport"] = True

    return error_class(
        message=message or str(error),
        details=details,
        retryable=is_retryable_error(error),
    )
