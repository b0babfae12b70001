"""Error taxonomy for Azure operations.

Service wrappers translate Azure SDK exceptions into these types at the
service-call boundary (see ``handle_azure_error``), so commands map typed
errors to response status codes instead of inspecting SDK exceptions.
"""

import asyncio
import functools
from typing import Any, Dict, Optional


class AzureError(Exception):
    """Base exception for Azure operations."""

    error_type = "AzureError"
    status_code = 500

    def __init__(
        self,
        message: str,
        details: Optional[Dict] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error_type": self.error_type,
            "message": self.message,
            "status_code": self.status_code,
            "details": self.details,
        }


class AzureValidationError(AzureError):
    """Raised when input validation fails."""

    error_type = "ValidationError"
    status_code = 400


class AzureConfigError(AzureError):
    """Raised when Azure configuration is missing or invalid."""

    error_type = "ConfigurationError"
    status_code = 400


class AzureAuthError(AzureError):
    """Raised when Azure authentication fails."""

    error_type = "AuthenticationError"
    status_code = 401


class AzureAuthorizationError(AzureError):
    """Raised when authorization to an Azure resource fails."""

    error_type = "AuthorizationError"
    status_code = 403


class AzureNotFoundError(AzureError):
    """Raised when an Azure resource is not found."""

    error_type = "NotFoundError"
    status_code = 404


class AzureThrottlingError(AzureError):
    """Raised when Azure rejects a request with a rate limit.

    Transport-level retries have already been exhausted when this surfaces.
    """

    error_type = "ThrottlingError"
    status_code = 429


class AzureTimeoutError(AzureError):
    """Raised when an Azure call or a whole command invocation times out."""

    error_type = "TimeoutError"
    status_code = 504


class AzureAPIError(AzureError):
    """Raised when an Azure API call fails for any other reason."""

    error_type = "AzureAPIError"

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[Dict] = None):
        details = details or {}
        if status_code:
            details["status_code"] = status_code
        super().__init__(message, details, status_code=status_code or 500)


class AzureClientCreationError(AzureError):
    """Raised when a credential or client cannot be constructed."""

    error_type = "ClientCreationError"


_STATUS_ERRORS = {
    400: AzureValidationError,
    401: AzureAuthError,
    403: AzureAuthorizationError,
    404: AzureNotFoundError,
    408: AzureTimeoutError,
    429: AzureThrottlingError,
    504: AzureTimeoutError,
}


def wrap_azure_error(exception: Exception) -> AzureError:
    """Wrap an Azure SDK exception into our consistent error format.

    Args:
        exception: Original Azure SDK exception

    Returns:
        Wrapped AzureError subclass
    """
    if isinstance(exception, AzureError):
        return exception

    from azure.core.exceptions import (
        ClientAuthenticationError,
        ResourceNotFoundError,
        ServiceRequestTimeoutError,
        ServiceResponseTimeoutError,
    )

    message = str(exception)
    error_details = {"original_error": message}

    status_code = getattr(exception, "status_code", None)
    if status_code:
        error_details["status_code"] = status_code

    if isinstance(exception, ResourceNotFoundError):
        return AzureNotFoundError(message, error_details)

    if isinstance(exception, ClientAuthenticationError) and status_code != 403:
        return AzureAuthError(message, error_details)

    if isinstance(exception, (ServiceRequestTimeoutError, ServiceResponseTimeoutError, asyncio.TimeoutError, TimeoutError)):
        return AzureTimeoutError(message, error_details)

    if status_code in _STATUS_ERRORS:
        return _STATUS_ERRORS[status_code](message, error_details)

    # Classify the error by its text when no status is available
    error_str = message.lower()

    if "authentication" in error_str or "credential" in error_str:
        return AzureAuthError(message, error_details)

    if "authorization" in error_str or "forbidden" in error_str:
        return AzureAuthorizationError(message, error_details)

    if "not found" in error_str:
        return AzureNotFoundError(message, error_details)

    if "too many requests" in error_str or "throttl" in error_str:
        return AzureThrottlingError(message, error_details)

    return AzureAPIError(message, status_code, error_details)


def handle_azure_error(func):
    """Decorator to wrap Azure SDK exceptions.

    Catches Azure SDK exceptions and wraps them in our error format.
    ``ValueError`` passes through unchanged; it signals a bad argument.
    """

    @functools.wraps(func)
    async def async_wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except (AzureError, ValueError):
            raise
        except Exception as e:
            raise wrap_azure_error(e) from e

    @functools.wraps(func)
    def sync_wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (AzureError, ValueError):
            raise
        except Exception as e:
            raise wrap_azure_error(e) from e

    if asyncio.iscoroutinefunction(func):
        return async_wrapper
    return sync_wrapper
