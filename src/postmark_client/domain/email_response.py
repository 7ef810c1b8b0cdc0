"""Typed view of one per-message result returned by the email endpoints."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

# fromisoformat before 3.11 accepts neither "Z" nor more than six fractional digits.
_RE_FRACTION = re.compile(r"\.(\d+)")


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO 8601 timestamp, returning None when absent or malformed.

    Example:
        >>> parse_timestamp("2024-01-15T10:30:00.0000000-05:00").isoformat()
        '2024-01-15T10:30:00-05:00'
        >>> parse_timestamp("2024-01-15T15:30:00Z").isoformat()
        '2024-01-15T15:30:00+00:00'
        >>> parse_timestamp("not a date") is None
        True
    """
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = f"{text[:-1]}+00:00"
    text = _RE_FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


@dataclass(frozen=True, slots=True)
class EmailResponse:
    """Result for one submitted message.

    Success is decided by ``error_code == 0`` alone.

    Example:
        >>> response = EmailResponse.from_api({"ErrorCode": 0, "MessageID": "m1", "To": "r@x.com"})
        >>> response.success, response.error
        (True, False)
        >>> str(response)
        'Email sent to r@x.com (Message ID: m1)'
    """

    to: str | None = None
    submitted_at: datetime | None = None
    message_id: str | None = None
    error_code: int | None = None
    message: str | None = None
    raw_response: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, response: Mapping[str, Any]) -> EmailResponse:
        """Build a response from the parsed JSON object."""
        return cls(
            to=response.get("To"),
            submitted_at=parse_timestamp(response.get("SubmittedAt")),
            message_id=response.get("MessageID"),
            error_code=response.get("ErrorCode"),
            message=response.get("Message"),
            raw_response=dict(response),
        )

    @property
    def success(self) -> bool:
        """True when the API reported error code 0."""
        return self.error_code == 0

    @property
    def error(self) -> bool:
        """True when the API reported any non-zero or missing error code."""
        return not self.success

    def __str__(self) -> str:
        if self.success:
            return f"Email sent to {self.to} (Message ID: {self.message_id})"
        return f"Error {self.error_code}: {self.message}"


__all__ = ["EmailResponse", "parse_timestamp"]
