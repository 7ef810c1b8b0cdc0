"""Email attachment model with base64 transport encoding.

Contents:
    * :data:`CONTENT_TYPES` - extension to MIME type lookup table.
    * :func:`detect_content_type` - MIME type from a filename.
    * :class:`Attachment` - one attachment, encoded once at construction.
"""

from __future__ import annotations

import base64
import os
from dataclasses import InitVar, dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any

DEFAULT_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES: MappingProxyType[str, str] = MappingProxyType(
    {
        "pdf": "application/pdf",
        "doc": "application/msword",
        "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "xls": "application/vnd.ms-excel",
        "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "png": "image/png",
        "jpg": "image/jpeg",
        "jpeg": "image/jpeg",
        "gif": "image/gif",
        "svg": "image/svg+xml",
        "txt": "text/plain",
        "html": "text/html",
        "htm": "text/html",
        "css": "text/css",
        "js": "application/javascript",
        "json": "application/json",
        "xml": "application/xml",
        "zip": "application/zip",
        "csv": "text/csv",
    }
)


def detect_content_type(filename: str) -> str:
    """Return the MIME type for *filename* based on its extension.

    Example:
        >>> detect_content_type("Report.PDF")
        'application/pdf'
        >>> detect_content_type("archive.tar.gz")
        'application/octet-stream'
        >>> detect_content_type("Makefile")
        'application/octet-stream'
    """
    extension = Path(filename).suffix.lower().lstrip(".")
    return CONTENT_TYPES.get(extension, DEFAULT_CONTENT_TYPE)


def encode_content(content: bytes | str) -> str:
    """Base64-encode raw content; text is encoded as UTF-8 first.

    Example:
        >>> encode_content(b"Hello")
        'SGVsbG8='
        >>> encode_content("Hello")
        'SGVsbG8='
    """
    raw = content.encode("utf-8") if isinstance(content, str) else content
    return base64.b64encode(raw).decode("ascii")


@dataclass
class Attachment:
    """A single file attached to an email.

    ``content`` always holds the base64 text after construction. Pass
    ``base64_encoded=True`` when the content is already encoded; it is then
    stored as given without any check.

    Example:
        >>> att = Attachment(name="hello.txt", content=b"Hello", content_type="text/plain")
        >>> att.content
        'SGVsbG8='
        >>> att.is_inline
        False
        >>> Attachment("logo.png", "iVBORw0K", "image/png", "cid:logo", base64_encoded=True).to_dict()
        {'Name': 'logo.png', 'Content': 'iVBORw0K', 'ContentType': 'image/png', 'ContentID': 'cid:logo'}
    """

    name: str
    content: str | bytes
    content_type: str
    content_id: str | None = None
    base64_encoded: InitVar[bool] = False

    def __post_init__(self, base64_encoded: bool) -> None:
        if not base64_encoded:
            self.content = encode_content(self.content)
        elif isinstance(self.content, bytes):
            self.content = self.content.decode("ascii")

    @classmethod
    def from_file(
        cls,
        file_path: str | os.PathLike[str],
        *,
        content_type: str | None = None,
        content_id: str | None = None,
    ) -> Attachment:
        """Build an attachment from a file on disk.

        Args:
            file_path: Path of the file to read.
            content_type: MIME type; detected from the extension when None.
            content_id: Content ID for inline display.

        Raises:
            FileNotFoundError: When the path does not exist.
            OSError: When the file cannot be read.
        """
        path = Path(file_path)
        content = path.read_bytes()
        return cls(
            name=path.name,
            content=content,
            content_type=content_type or detect_content_type(path.name),
            content_id=content_id,
        )

    @property
    def is_inline(self) -> bool:
        """True when a content ID is set."""
        return self.content_id is not None

    def to_dict(self) -> dict[str, Any]:
        """Return the attachment in API field naming."""
        payload: dict[str, Any] = {
            "Name": self.name,
            "Content": self.content,
            "ContentType": self.content_type,
        }
        if self.content_id is not None:
            payload["ContentID"] = self.content_id
        return payload


__all__ = [
    "CONTENT_TYPES",
    "DEFAULT_CONTENT_TYPE",
    "Attachment",
    "detect_content_type",
    "encode_content",
]
