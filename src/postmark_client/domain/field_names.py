"""Mapping between API field names and Email attribute names.

Loosely-typed input may use the API's casing (``"HtmlBody"``) or the
attribute names (``"html_body"``). Keys found in neither table fall back to
a CamelCase to snake_case conversion.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

API_TO_ATTRIBUTE: MappingProxyType[str, str] = MappingProxyType(
    {
        "From": "from_",
        "To": "to",
        "Cc": "cc",
        "Bcc": "bcc",
        "Subject": "subject",
        "HtmlBody": "html_body",
        "TextBody": "text_body",
        "ReplyTo": "reply_to",
        "Tag": "tag",
        "Headers": "headers",
        "TrackOpens": "track_opens",
        "TrackLinks": "track_links",
        "Attachments": "attachments",
        "Metadata": "metadata",
        "MessageStream": "message_stream",
    }
)

ATTRIBUTE_NAMES: frozenset[str] = frozenset(API_TO_ATTRIBUTE.values())

# "from" is a keyword, so the attribute carries a trailing underscore.
_ALIASES: MappingProxyType[str, str] = MappingProxyType({"from": "from_"})

_RE_UPPER = re.compile(r"([A-Z])")


def camel_to_snake(key: str) -> str:
    """Convert a CamelCase key to snake_case.

    Example:
        >>> camel_to_snake("InlineCss")
        'inline_css'
        >>> camel_to_snake("already_snake")
        'already_snake'
    """
    return _RE_UPPER.sub(r"_\1", key).lower().removeprefix("_")


def normalize_key(key: str) -> str:
    """Return the Email attribute name for an input key.

    Example:
        >>> normalize_key("HtmlBody")
        'html_body'
        >>> normalize_key("from")
        'from_'
        >>> normalize_key("reply_to")
        'reply_to'
        >>> normalize_key("SomethingElse")
        'something_else'
    """
    if key in API_TO_ATTRIBUTE:
        return API_TO_ATTRIBUTE[key]
    if key in _ALIASES:
        return _ALIASES[key]
    if key in ATTRIBUTE_NAMES:
        return key
    return camel_to_snake(key)


def normalize_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    """Rename every key of *data* to its Email attribute name."""
    return {normalize_key(str(key)): value for key, value in data.items()}


__all__ = [
    "API_TO_ATTRIBUTE",
    "ATTRIBUTE_NAMES",
    "camel_to_snake",
    "normalize_key",
    "normalize_keys",
]
