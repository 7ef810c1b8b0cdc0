"""Email message model: a mutable builder with validation and API projection.

Contents:
    * :class:`Email` - message fields, chaining mutators, ``validate`` and
      ``to_dict``.

Nothing is validated at construction time. :meth:`Email.validate` checks the
rules in a fixed order and reports only the first failure.
"""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from dataclasses import InitVar, dataclass, field
from enum import Enum
from typing import Any

from .attachment import Attachment
from .configuration import ClientConfig, configuration
from .enums import TrackLinks
from .errors import ArgumentError, ValidationError
from .field_names import normalize_keys

Recipients = str | Sequence[str]

FROM_REQUIRED = "From address is required"
TO_REQUIRED = "To address is required"
BODY_REQUIRED = "Either HtmlBody or TextBody is required"
TRACK_LINKS_INVALID = f"TrackLinks must be one of: {', '.join(TrackLinks.values())}"


def _join_recipients(recipients: Recipients) -> str:
    """Flatten one or many addresses into the API's comma separated form.

    Example:
        >>> _join_recipients(["x@y.com", "z@w.com"])
        'x@y.com, z@w.com'
        >>> _join_recipients("x@y.com")
        'x@y.com'
    """
    if isinstance(recipients, str):
        return recipients
    return ", ".join(recipients)


# Attribute name -> API name for the fields of a nested attachment dict.
_ATTACHMENT_KEYS: tuple[tuple[str, str], ...] = (
    ("name", "Name"),
    ("content", "Content"),
    ("content_type", "ContentType"),
    ("content_id", "ContentID"),
)
_ATTACHMENT_REQUIRED = ("name", "content", "content_type")


def _attachment_from_api(data: Any) -> Attachment:
    """Build an Attachment from a dict whose content is already encoded.

    Keys may use the API casing (``"ContentType"``) or attribute names
    (``"content_type"``).

    Raises:
        ArgumentError: When the item is not a mapping, lacks a required key
            or holds an unknown one.

    Example:
        >>> _attachment_from_api({"name": "a.txt", "content": "SGk=", "content_type": "text/plain"}).to_dict()
        {'Name': 'a.txt', 'Content': 'SGk=', 'ContentType': 'text/plain'}
        >>> _attachment_from_api({"Name": "a.txt", "ContentType": "text/plain"})  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        ArgumentError: Attachment is missing Content
    """
    if not isinstance(data, Mapping):
        raise ArgumentError(f"Attachment must be a mapping, got {type(data).__name__}")

    known = {key for pair in _ATTACHMENT_KEYS for key in pair}
    unknown = sorted(str(key) for key in data if key not in known)
    if unknown:
        raise ArgumentError(f"Attachment has unknown field(s): {', '.join(unknown)}")

    values: dict[str, Any] = {}
    for attribute, api_name in _ATTACHMENT_KEYS:
        value = data.get(api_name, data.get(attribute))
        if value is None and attribute in _ATTACHMENT_REQUIRED:
            raise ArgumentError(f"Attachment is missing {api_name}")
        values[attribute] = value
    return Attachment(**values, base64_encoded=True)


@dataclass
class Email:
    """An outbound email message.

    ``message_stream`` defaults to ``default_message_stream`` of the given
    ``config``, or of the process-wide configuration when no config is given.

    Example:
        >>> email = Email(from_="a@b.com", to="c@d.com", text_body="hi")
        >>> email.to_dict()
        {'From': 'a@b.com', 'To': 'c@d.com', 'TextBody': 'hi', 'MessageStream': 'outbound'}
        >>> email.add_header("X-Trace", "1").add_metadata("order", "42").is_valid()
        True
    """

    from_: str | None = None
    to: Recipients | None = None
    cc: Recipients | None = None
    bcc: Recipients | None = None
    subject: str | None = None
    html_body: str | None = None
    text_body: str | None = None
    reply_to: str | None = None
    tag: str | None = None
    headers: list[dict[str, str]] = field(default_factory=list)
    track_opens: bool | None = None
    track_links: TrackLinks | str | None = None
    attachments: list[Attachment] = field(default_factory=list)
    metadata: dict[str, str] = field(default_factory=dict)
    message_stream: str | None = None
    config: InitVar[ClientConfig | None] = None

    def __post_init__(self, config: ClientConfig | None) -> None:
        self.headers = [dict(header) for header in self.headers or []]
        self.attachments = [
            item if isinstance(item, Attachment) else _attachment_from_api(item)
            for item in self.attachments or []
        ]
        self.metadata = {str(key): value for key, value in (self.metadata or {}).items()}
        if self.message_stream is None:
            self.message_stream = (config or configuration()).default_message_stream

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, config: ClientConfig | None = None) -> Email:
        """Build an Email from loosely-typed key-value input.

        Keys may use the API casing (``"TextBody"``) or attribute names
        (``"text_body"``); other keys are converted from CamelCase to
        snake_case.

        Raises:
            TypeError: When a key does not name an Email field.
            ArgumentError: When a nested attachment is not a complete attachment dict.

        Example:
            >>> Email.from_mapping({"From": "a@b.com", "to": "c@d.com", "TextBody": "hi"}).text_body
            'hi'
        """
        return cls(**normalize_keys(data), config=config)

    def add_header(self, name: str, value: str) -> Email:
        """Append a custom header; duplicates are kept in call order."""
        self.headers.append({"Name": name, "Value": value})
        return self

    def add_attachment(
        self,
        attachment: Attachment | None = None,
        *,
        name: str | None = None,
        content: bytes | str | None = None,
        content_type: str | None = None,
        content_id: str | None = None,
        base64_encoded: bool = False,
    ) -> Email:
        """Append an attachment, either prebuilt or from its fields.

        Raises:
            ArgumentError: When neither an Attachment nor name, content and
                content type are given.
        """
        if attachment is not None:
            if not isinstance(attachment, Attachment):
                raise ArgumentError("Must provide an Attachment instance or attachment parameters")
            self.attachments.append(attachment)
            return self
        if name is None or content is None or content_type is None:
            raise ArgumentError("Must provide an Attachment instance or attachment parameters")
        self.attachments.append(
            Attachment(
                name=name,
                content=content,
                content_type=content_type,
                content_id=content_id,
                base64_encoded=base64_encoded,
            )
        )
        return self

    def attach_file(
        self,
        file_path: str | os.PathLike[str],
        *,
        content_type: str | None = None,
        content_id: str | None = None,
    ) -> Email:
        """Read a file from disk and append it as an attachment."""
        self.attachments.append(Attachment.from_file(file_path, content_type=content_type, content_id=content_id))
        return self

    def add_metadata(self, key: object, value: str) -> Email:
        """Set one metadata entry; the key is converted to text."""
        self.metadata[str(key)] = value
        return self

    def validate(self) -> None:
        """Check the message and raise on the first broken rule.

        Rules are checked in order: sender, recipient, body, link tracking.

        Raises:
            ValidationError: With the reason for the first failing rule.

        Example:
            >>> Email(to="c@d.com", text_body="hi").validate()  # doctest: +IGNORE_EXCEPTION_DETAIL
            Traceback (most recent call last):
            ...
            ValidationError: From address is required
        """
        if not self.from_:
            raise ValidationError(FROM_REQUIRED)
        if not self.to:
            raise ValidationError(TO_REQUIRED)
        if not self.html_body and not self.text_body:
            raise ValidationError(BODY_REQUIRED)
        if self.track_links is not None and self.track_links not in TrackLinks.values():
            raise ValidationError(TRACK_LINKS_INVALID)

    def is_valid(self) -> bool:
        """Return True when :meth:`validate` passes."""
        try:
            self.validate()
        except ValidationError:
            return False
        return True

    def to_dict(self) -> dict[str, Any]:
        """Project the message into the API's JSON field naming.

        Empty fields are left out. ``TrackOpens`` is the exception: it is
        emitted whenever it was set, including an explicit ``False``.
        """
        payload: dict[str, Any] = {}
        if self.from_:
            payload["From"] = self.from_
        if self.to:
            payload["To"] = _join_recipients(self.to)
        if self.cc:
            payload["Cc"] = _join_recipients(self.cc)
        if self.bcc:
            payload["Bcc"] = _join_recipients(self.bcc)
        if self.subject:
            payload["Subject"] = self.subject
        if self.html_body:
            payload["HtmlBody"] = self.html_body
        if self.text_body:
            payload["TextBody"] = self.text_body
        if self.reply_to:
            payload["ReplyTo"] = self.reply_to
        if self.tag:
            payload["Tag"] = self.tag
        if self.headers:
            payload["Headers"] = [dict(header) for header in self.headers]
        if self.track_opens is not None:
            payload["TrackOpens"] = self.track_opens
        if self.track_links:
            payload["TrackLinks"] = self.track_links.value if isinstance(self.track_links, Enum) else self.track_links
        if self.attachments:
            payload["Attachments"] = [attachment.to_dict() for attachment in self.attachments]
        if self.metadata:
            payload["Metadata"] = dict(self.metadata)
        if self.message_stream:
            payload["MessageStream"] = self.message_stream
        return payload


__all__ = [
    "BODY_REQUIRED",
    "FROM_REQUIRED",
    "TO_REQUIRED",
    "TRACK_LINKS_INVALID",
    "Email",
    "Recipients",
]
