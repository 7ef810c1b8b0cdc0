"""Domain-specific exceptions for typed error handling at boundaries."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class PostmarkError(Exception):
    """Base class for every error raised by this package.

    Example:
        >>> issubclass(ValidationError, PostmarkError)
        True
    """


class ConfigurationError(PostmarkError):
    """Missing, invalid, or incomplete configuration.

    Raised when no API token can be resolved while constructing a client.

    Example:
        >>> err = ConfigurationError("API token is required")
        >>> str(err)
        'API token is required'
    """


class ValidationError(PostmarkError):
    """An email failed local validation before any request was made.

    Carries exactly one human-readable reason: the first violated rule.

    Example:
        >>> str(ValidationError("From address is required"))
        'From address is required'
    """


class ConnectionError(PostmarkError):  # noqa: A001
    """Network-level failure talking to the API (timeout, refused connection).

    Example:
        >>> err = ConnectionError("Connection failed: timed out")
        >>> str(err)
        'Connection failed: timed out'
    """


class ApiError(PostmarkError):
    """The API answered with an error HTTP status.

    Attributes:
        message: Human-readable message from the response body, or the
            transport's error text when the body carries none.
        error_code: The body's ``ErrorCode`` when present, else the HTTP status.
        response: Parsed error body; empty when it could not be parsed.

    Example:
        >>> err = ApiError("Invalid email address", error_code=300, response={"ErrorCode": 300})
        >>> err.error_code
        300
        >>> str(err)
        'Invalid email address'
    """

    def __init__(
        self,
        message: str,
        *,
        error_code: int | str | None = None,
        response: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.response: dict[str, Any] = dict(response) if response else {}


class ArgumentError(PostmarkError, ValueError):
    """Caller misuse such as an oversized batch or an empty attachment call.

    Inherits from ValueError so generic ``except ValueError`` handlers
    keep catching it.

    Example:
        >>> err = ArgumentError("Batch cannot exceed 500 emails")
        >>> isinstance(err, ValueError)
        True
    """


__all__ = [
    "ApiError",
    "ArgumentError",
    "ConfigurationError",
    "ConnectionError",
    "PostmarkError",
    "ValidationError",
]
