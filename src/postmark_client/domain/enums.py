"""Type-safe domain enums for link tracking and output formats."""

from __future__ import annotations

from enum import Enum


class TrackLinks(str, Enum):
    """Link tracking modes accepted by the API.

    Inherits from str so members compare equal to the raw API strings
    and serialize to JSON unchanged.

    Attributes:
        NONE: No link tracking.
        HTML_AND_TEXT: Track links in both HTML and text bodies.
        HTML_ONLY: Track links in the HTML body only.
        TEXT_ONLY: Track links in the text body only.

    Example:
        >>> TrackLinks.HTML_ONLY.value
        'HtmlOnly'
        >>> TrackLinks.NONE == "None"
        True
        >>> TrackLinks.values()
        ('None', 'HtmlAndText', 'HtmlOnly', 'TextOnly')
    """

    NONE = "None"
    HTML_AND_TEXT = "HtmlAndText"
    HTML_ONLY = "HtmlOnly"
    TEXT_ONLY = "TextOnly"

    @classmethod
    def values(cls) -> tuple[str, ...]:
        """Return the raw API values in declaration order."""
        return tuple(member.value for member in cls)


class OutputFormat(str, Enum):
    """Output format options for configuration display.

    Attributes:
        HUMAN: Human-readable TOML-like output format.
        JSON: Machine-readable JSON output format.

    Example:
        >>> OutputFormat.JSON == "json"
        True
    """

    HUMAN = "human"
    JSON = "json"


__all__ = [
    "OutputFormat",
    "TrackLinks",
]
