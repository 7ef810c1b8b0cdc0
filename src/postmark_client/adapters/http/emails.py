"""Email resource: single and batch sends.

Contents:
    * :class:`Emails` - ``send``, ``send_email`` and ``send_batch``.
    * :data:`BATCH_LIMIT` - maximum messages per batch request.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, cast

from postmark_client.domain.configuration import ClientConfig
from postmark_client.domain.email import Email, Recipients
from postmark_client.domain.email_response import EmailResponse
from postmark_client.domain.errors import ApiError, ArgumentError

from .client import BaseClient

logger = logging.getLogger(__name__)

BATCH_LIMIT = 500

EmailInput = Email | Mapping[str, Any]


class Emails(BaseClient):
    """Client for the ``/email`` and ``/email/batch`` endpoints.

    Example:
        >>> emails = Emails(api_token="server-token")  # doctest: +SKIP
        >>> emails.send_email(
        ...     from_="sender@example.com",
        ...     to="recipient@example.com",
        ...     subject="Hello!",
        ...     text_body="Hello, World!",
        ... ).success  # doctest: +SKIP
        True
    """

    def send(self, email: EmailInput) -> EmailResponse:
        """Validate and send one message.

        Args:
            email: An Email, or a mapping using API or attribute key names.

        Returns:
            The parsed per-message result.

        Raises:
            ValidationError: When the message is invalid; nothing is sent.
            ApiError: When the API answers with an error status.
            ConnectionError: On network failures.
        """
        message = self._normalize(email)
        message.validate()

        logger.info(
            "Sending email",
            extra={
                "recipients": message.to,
                "subject": message.subject,
                "message_stream": message.message_stream,
                "attachment_count": len(message.attachments),
            },
        )
        response = EmailResponse.from_api(self.post("/email", message.to_dict()))
        self._log_result(response)
        return response

    def send_email(
        self,
        from_: str,
        to: Recipients,
        subject: str,
        **fields: Any,
    ) -> EmailResponse:
        """Build an Email from keyword arguments and send it.

        Example:
            >>> Emails(api_token="t").send_email("a@b.com", "c@d.com", "Hi")  # doctest: +IGNORE_EXCEPTION_DETAIL
            Traceback (most recent call last):
            ...
            ValidationError: Either HtmlBody or TextBody is required
        """
        return self.send(Email(from_=from_, to=to, subject=subject, config=self.config, **fields))

    def send_batch(self, emails: Sequence[EmailInput]) -> list[EmailResponse]:
        """Validate and send up to :data:`BATCH_LIMIT` messages in one request.

        Every message is validated before anything is sent; one invalid
        message rejects the whole batch. Responses come back in submission
        order, and per-message failures are reported through each
        response's ``error_code`` rather than raised.

        Raises:
            ArgumentError: When the batch holds more than 500 messages.
            ValidationError: When any message is invalid.
            ApiError: When the API answers with an error status.
            ConnectionError: On network failures.
        """
        if len(emails) > BATCH_LIMIT:
            raise ArgumentError(f"Batch cannot exceed {BATCH_LIMIT} emails")

        messages = [self._normalize(email) for email in emails]
        for message in messages:
            message.validate()

        logger.info("Sending email batch", extra={"count": len(messages)})
        payload = self.post("/email/batch", [message.to_dict() for message in messages])
        if not isinstance(payload, list):
            raise ApiError(
                "Batch response is not a list",
                response=cast(Mapping[str, Any], payload) if isinstance(payload, Mapping) else None,
            )

        responses = [EmailResponse.from_api(cast(Mapping[str, Any], item)) for item in cast(list[Any], payload)]
        failed = sum(1 for response in responses if response.error)
        logger.info("Email batch submitted", extra={"count": len(responses), "failed": failed})
        return responses

    def _normalize(self, email: EmailInput) -> Email:
        if isinstance(email, Email):
            return email
        if isinstance(email, Mapping):
            return Email.from_mapping(email, config=self.config)
        raise ArgumentError(f"Expected an Email or a mapping, got {type(email).__name__}")

    @staticmethod
    def _log_result(response: EmailResponse) -> None:
        if response.success:
            logger.info("Email sent", extra={"message_id": response.message_id, "to": response.to})
        else:
            logger.warning(
                "Email rejected",
                extra={"error_code": response.error_code, "error": response.message},
            )


def build_emails_client(
    *,
    config: ClientConfig,
    api_token: str | None = None,
    base_url: str | None = None,
) -> Emails:
    """Create an Emails client from explicit settings.

    Raises:
        ConfigurationError: When neither *api_token* nor the config has a token.
    """
    return Emails(api_token, config=config, base_url=base_url)


__all__ = ["BATCH_LIMIT", "EmailInput", "Emails", "build_emails_client"]
