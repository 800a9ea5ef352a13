"""Résumé media handling: decoding, content sniffing and naming."""

import base64
import binascii
import logging
import re
import time
from dataclasses import dataclass
from typing import Optional

import filetype

from core.config import settings
from core.errors import BadRequestError

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


@dataclass(frozen=True)
class ResumeFile:
    """A decoded résumé whose content type has been verified."""

    content: bytes
    mime_type: str
    extension: str

    @property
    def size(self) -> int:
        return len(self.content)


def decode_base64(file_b64: str) -> bytes:
    """
    Decode base64 text, accepting an optional ``data:...;base64,`` prefix.

    Raises:
        BadRequestError: if the text is not valid base64
    """
    payload = file_b64.strip()
    if payload.startswith("data:") and "," in payload:
        payload = payload.split(",", 1)[1]
    payload = _WHITESPACE.sub("", payload)

    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise BadRequestError("Invalid base64 file content")


def sniff_mime_type(content: bytes):
    """Detect the file type from its leading bytes, ignoring any declared name."""
    return filetype.guess(content)


def validate_resume(
    file_b64: str,
    max_size: Optional[int] = None,
    allowed_mime_types: Optional[list[str]] = None,
) -> ResumeFile:
    """
    Decode and verify an uploaded résumé.

    Args:
        file_b64: Base64 encoded file content
        max_size: Maximum decoded size in bytes (defaults to MAX_RESUME_SIZE_BYTES)
        allowed_mime_types: Accepted sniffed MIME types (defaults to ALLOWED_RESUME_MIME_TYPES)

    Returns:
        ResumeFile with the decoded bytes and sniffed type

    Raises:
        BadRequestError: on undecodable, oversized, unrecognized or disallowed content
    """
    max_size = max_size if max_size is not None else settings.max_resume_size_bytes
    allowed_mime_types = allowed_mime_types or settings.allowed_resume_mime_types

    content = decode_base64(file_b64)
    if len(content) > max_size:
        logger.info(f"Rejected résumé of {len(content)} bytes")
        raise BadRequestError(f"File is larger than {max_size}")

    kind = sniff_mime_type(content)
    if kind is None:
        raise BadRequestError("Could not detect file type")

    if kind.mime not in allowed_mime_types:
        logger.info(f"Rejected résumé with sniffed type {kind.mime}")
        raise BadRequestError("Invalid file type. Only PDF is allowed.")

    return ResumeFile(content=content, mime_type=kind.mime, extension=kind.extension)


def normalize_full_name(full_name: str) -> str:
    """
    Lower-case a name and capitalize each whitespace separated word.

    "JOHN   doe" -> "John Doe"
    """
    words = _WHITESPACE.split(full_name.strip().lower())
    return " ".join(word[:1].upper() + word[1:] for word in words if word)


def sanitize_filename(filename: str) -> str:
    """
    Sanitize filename by removing path separators and control characters.

    Args:
        filename: Original filename

    Returns:
        Sanitized filename
    """
    sanitized = _UNSAFE_FILENAME_CHARS.sub("", filename).replace(" ", "_")

    if len(sanitized) > 200:
        name, ext = sanitized.rsplit(".", 1) if "." in sanitized else (sanitized, "")
        sanitized = name[:195] + ("." + ext if ext else "")

    return sanitized or "resume"


def build_storage_path(file_name: str, now_ms: Optional[int] = None) -> str:
    """Storage key for a résumé: upload time in epoch milliseconds, then the file name."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{now_ms}_{sanitize_filename(file_name)}"


def encode_base64(content: bytes) -> str:
    return base64.b64encode(content).decode("ascii")
