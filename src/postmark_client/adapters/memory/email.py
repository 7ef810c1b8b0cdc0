"""In-memory email adapter for testing.

:class:`EmailSpy` satisfies the same ports as the HTTP Emails client but
records messages instead of sending them. It still normalizes and validates
its input, so callers see the same local errors as in production.

Contents:
    * :class:`EmailSpy` - Captures sends for test assertions.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from ...domain.configuration import ClientConfig
from ...domain.email import Email
from ...domain.email_response import EmailResponse
from ...domain.errors import ArgumentError
from ..http.emails import BATCH_LIMIT


def _empty_email_list() -> list[Email]:
    return []


def _empty_batch_list() -> list[list[Email]]:
    return []


def _empty_client_list() -> list[dict[str, Any]]:
    return []


@dataclass
class EmailSpy:
    """Records email operations for test assertions.

    Attributes:
        sent_emails: Messages passed to :meth:`send`, after normalization.
        sent_batches: Message lists passed to :meth:`send_batch`.
        clients: Keyword arguments of every :meth:`build_emails_client` call.
        error_code: ErrorCode reported in every response; non-zero simulates
            a remote rejection.
        error_message: Message reported alongside a non-zero ``error_code``.
        raise_exception: When set, sends raise this after recording.

    Example:
        >>> spy = EmailSpy()
        >>> spy.send({"From": "a@b.com", "To": "c@d.com", "TextBody": "hi"}).success
        True
        >>> len(spy.sent_emails)
        1
    """

    sent_emails: list[Email] = field(default_factory=_empty_email_list)
    sent_batches: list[list[Email]] = field(default_factory=_empty_batch_list)
    clients: list[dict[str, Any]] = field(default_factory=_empty_client_list)
    error_code: int = 0
    error_message: str = "OK"
    raise_exception: Exception | None = None
    config: ClientConfig | None = None

    def clear(self) -> None:
        """Reset captured data for the next test."""
        self.sent_emails.clear()
        self.sent_batches.clear()
        self.clients.clear()
        self.raise_exception = None

    def build_emails_client(
        self,
        *,
        config: ClientConfig,
        api_token: str | None = None,
        base_url: str | None = None,
    ) -> EmailSpy:
        """Record the client settings and return this spy as the sender."""
        self.clients.append({"config": config, "api_token": api_token, "base_url": base_url})
        self.config = config
        return self

    def close(self) -> None:
        """Nothing to release; matches the HTTP client."""

    def send(self, email: Email | Mapping[str, Any]) -> EmailResponse:
        """Validate and record one message."""
        message = self._normalize(email)
        message.validate()
        self.sent_emails.append(message)
        if self.raise_exception is not None:
            raise self.raise_exception
        return self._response_for(message, len(self.sent_emails))

    def send_batch(self, emails: Sequence[Email | Mapping[str, Any]]) -> list[EmailResponse]:
        """Validate and record a batch, enforcing the batch limit."""
        if len(emails) > BATCH_LIMIT:
            raise ArgumentError(f"Batch cannot exceed {BATCH_LIMIT} emails")
        messages = [self._normalize(email) for email in emails]
        for message in messages:
            message.validate()
        self.sent_batches.append(messages)
        if self.raise_exception is not None:
            raise self.raise_exception
        return [self._response_for(message, index) for index, message in enumerate(messages, start=1)]

    def _normalize(self, email: Email | Mapping[str, Any]) -> Email:
        if isinstance(email, Email):
            return email
        if isinstance(email, Mapping):
            return Email.from_mapping(email, config=self.config)
        raise ArgumentError(f"Expected an Email or a mapping, got {type(email).__name__}")

    def _response_for(self, message: Email, sequence: int) -> EmailResponse:
        payload = message.to_dict()
        return EmailResponse.from_api(
            {
                "To": payload.get("To"),
                "SubmittedAt": "2024-01-15T10:30:00.0000000-05:00",
                "MessageID": f"spy-{sequence}",
                "ErrorCode": self.error_code,
                "Message": self.error_message,
            }
        )


__all__ = ["EmailSpy"]
