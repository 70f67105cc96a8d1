"""
Core types shared across the client.

This module provides the enums that the transport, error and resource layers
agree on, so that comparisons never cross two copies of the same enum.
"""

from enum import Enum


class ErrorCategory(Enum):
    """
    Classification of error types for handling decisions.

    Categories:
        TRANSIENT: Temporary failures that may succeed later
                   (e.g., 429/5xx responses, replication lag)
        AUTH: Authentication failures requiring credential refresh
              (e.g., 401 responses, unusable token responses)
        PERMANENT: Failures that won't succeed on retry
                   (e.g., 404, invalid arguments, configuration issues)
        UNKNOWN: Unclassified errors
    """

    TRANSIENT = "transient"
    AUTH = "auth"
    PERMANENT = "permanent"
    UNKNOWN = "unknown"


class ContentType(str, Enum):
    """Request body encodings understood by the API."""

    JSON = "application/json"
    XML = "application/xml"
    FORM = "application/x-www-form-urlencoded"

    @classmethod
    def resolve(cls, value: "ContentType | str | None") -> "ContentType":
        """Map a declared content type onto a supported encoding.

        Anything unrecognized falls back to JSON.
        """
        if isinstance(value, cls):
            return value
        if value:
            media_type = str(value).split(";", 1)[0].strip().lower()
            for member in cls:
                if member.value == media_type:
                    return member
        return cls.JSON


SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


__all__ = ["ErrorCategory", "ContentType", "SAFE_METHODS"]
