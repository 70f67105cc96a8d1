"""
Exception hierarchy for the Jamf Pro client.

Provides typed exceptions with an error category so callers can tell argument
mistakes, HTTP failures, credential problems and reconciliation exhaustion
apart without string matching.
"""

from typing import TYPE_CHECKING, Any

from jamfpro.types import ErrorCategory

if TYPE_CHECKING:
    from jamfpro.transport.dispatcher import Response


class JamfProError(Exception):
    """
    Base exception for all client errors.

    Attributes:
        message: Human-readable error description
        category: Error classification
        cause: Original exception if wrapping
        context: Additional context dict for debugging
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        self.message = message
        self.cause = cause
        self.context = context or {}
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        return self.category in (
            ErrorCategory.TRANSIENT,
            ErrorCategory.AUTH,
        )

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


# =============================================================================
# Base categories
# =============================================================================


class AuthError(JamfProError):
    """Base class for authentication errors."""

    category = ErrorCategory.AUTH


class TransientError(JamfProError):
    """Base class for errors that may clear up on their own."""

    category = ErrorCategory.TRANSIENT


class PermanentError(JamfProError):
    """Base class for errors that will not succeed on retry."""

    category = ErrorCategory.PERMANENT


# =============================================================================
# Client-side errors
# =============================================================================


class ArgError(PermanentError):
    """An argument was rejected before any network call was made."""

    def __init__(self, arg: str, reason: str):
        super().__init__(f"{arg} is invalid because {reason}", context={"arg": arg})
        self.arg = arg
        self.reason = reason


class EncodingError(PermanentError):
    """A request body could not be encoded for the declared content type."""

    pass


class ConfigurationError(PermanentError):
    """Client configuration is missing or invalid."""

    pass


class ResourceNotFoundError(PermanentError):
    """A lookup by name did not match any resource."""

    def __init__(self, resource: str, name: str):
        super().__init__(
            f"No {resource} named {name!r}",
            context={"resource": resource, "name": name},
        )
        self.resource = resource
        self.name = name


class MissingIdError(PermanentError):
    """A create or update succeeded but the response carried no usable id."""

    def __init__(self, resource: str, operation: str, response: "Response | None" = None):
        super().__init__(
            f"{resource} {operation} returned no id",
            context={"resource": resource, "operation": operation},
        )
        self.resource = resource
        self.operation = operation
        self.response = response


class CredentialUnavailableError(AuthError):
    """The identity endpoint answered, but no usable bearer token came back."""

    pass


# =============================================================================
# HTTP errors
# =============================================================================


class ApiError(JamfProError):
    """
    A response with a status outside 200-299.

    The message is the verbatim response body; the API guarantees no
    structured error schema.
    """

    def __init__(
        self,
        status: int,
        message: str = "",
        method: str = "",
        url: str = "",
        response: "Response | None" = None,
    ):
        super().__init__(
            message,
            context={"http_status": status, "http_method": method, "http_url": url},
        )
        self.status = status
        self.method = method
        self.url = url
        self.response = response

    @property
    def category(self) -> ErrorCategory:  # type: ignore[override]
        return classify_http_status(self.status)

    @property
    def is_not_found(self) -> bool:
        return self.status == 404

    def __str__(self) -> str:
        return f"{self.method} {self.url}: {self.status} {self.message}"


# =============================================================================
# Reconciliation errors
# =============================================================================


class ReconciliationError(TransientError):
    """The read path did not reflect a mutation within the attempt budget."""

    def __init__(self, message: str, resource_id: Any, attempts: int):
        super().__init__(
            message,
            context={"resource_id": resource_id, "attempts": attempts},
        )
        self.resource_id = resource_id
        self.attempts = attempts


class DeletionNotConfirmedError(ReconciliationError):
    """The resource was still readable after every delete confirmation attempt."""

    def __init__(self, resource_id: Any, attempts: int, resource: str = "resource"):
        super().__init__(
            f"failed to delete {resource} with id {resource_id} after {attempts} attempts",
            resource_id,
            attempts,
        )


class ReconciliationTimeoutError(ReconciliationError):
    """A create/update was not observed within the configured attempt budget."""

    def __init__(self, resource_id: Any, attempts: int, resource: str = "resource"):
        super().__init__(
            f"{resource} with id {resource_id} did not reach the intended state "
            f"after {attempts} attempts",
            resource_id,
            attempts,
        )


# =============================================================================
# Classification
# =============================================================================


def classify_http_status(status_code: int) -> ErrorCategory:
    """Classify HTTP status code into error category."""
    if 200 <= status_code < 300:
        return ErrorCategory.UNKNOWN  # Not an error

    if status_code == 401:
        return ErrorCategory.AUTH

    if status_code == 429:
        return ErrorCategory.TRANSIENT

    if 400 <= status_code < 500:
        return ErrorCategory.PERMANENT

    if status_code >= 500:
        return ErrorCategory.TRANSIENT

    return ErrorCategory.UNKNOWN


def is_success_status(status_code: int) -> bool:
    return 200 <= status_code <= 299
