"""Domain layer - message models, configuration model and errors.

Contents:
    * :mod:`.attachment` - Attachment model and MIME type detection
    * :mod:`.email` - Email builder, validation and API projection
    * :mod:`.email_response` - Typed per-message API result
    * :mod:`.configuration` - ClientConfig and the process-wide default
    * :mod:`.field_names` - API field name to attribute name mapping
    * :mod:`.enums` - TrackLinks and OutputFormat
    * :mod:`.errors` - Error hierarchy
"""

from __future__ import annotations

from .attachment import Attachment, detect_content_type
from .configuration import ClientConfig, configuration, configure, reset_configuration
from .email import Email
from .email_response import EmailResponse
from .enums import OutputFormat, TrackLinks
from .errors import (
    ApiError,
    ArgumentError,
    ConfigurationError,
    ConnectionError,
    PostmarkError,
    ValidationError,
)

__all__ = [
    "ApiError",
    "ArgumentError",
    "Attachment",
    "ClientConfig",
    "ConfigurationError",
    "ConnectionError",
    "Email",
    "EmailResponse",
    "OutputFormat",
    "PostmarkError",
    "TrackLinks",
    "ValidationError",
    "configuration",
    "configure",
    "detect_content_type",
    "reset_configuration",
]
