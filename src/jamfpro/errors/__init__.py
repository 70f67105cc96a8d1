"""
Error classification and exception hierarchy.

Provides:
- ErrorCategory enum for classifying errors
- JamfProError hierarchy for typed exceptions
- HTTP status classification
"""

from jamfpro.errors.exceptions import (
    ApiError,
    ArgError,
    AuthError,
    ConfigurationError,
    CredentialUnavailableError,
    DeletionNotConfirmedError,
    EncodingError,
    JamfProError,
    MissingIdError,
    PermanentError,
    ReconciliationError,
    ReconciliationTimeoutError,
    ResourceNotFoundError,
    TransientError,
    classify_http_status,
    is_success_status,
)
from jamfpro.types import ErrorCategory

__all__ = [
    # Enums
    "ErrorCategory",
    # Base classes
    "JamfProError",
    "AuthError",
    "TransientError",
    "PermanentError",
    # Client-side
    "ArgError",
    "EncodingError",
    "ConfigurationError",
    "ResourceNotFoundError",
    "MissingIdError",
    "CredentialUnavailableError",
    # HTTP
    "ApiError",
    # Reconciliation
    "ReconciliationError",
    "DeletionNotConfirmedError",
    "ReconciliationTimeoutError",
    # Classification utilities
    "classify_http_status",
    "is_success_status",
]
