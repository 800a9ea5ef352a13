"""
Tests for résumé media helpers.

Tests:
- Base64 decoding
- Size cap and content sniffing
- Name normalization
- Storage path construction
"""

import base64
import pytest

from api.services.media import (
    build_storage_path,
    decode_base64,
    normalize_full_name,
    sanitize_filename,
    validate_resume,
)
from core.errors import BadRequestError


PDF = b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n1 0 obj<<>>endobj\ntrailer<<>>\n%%EOF"
PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


class TestDecodeBase64:
    def test_plain(self):
        assert decode_base64(b64(PDF)) == PDF

    def test_data_url_prefix(self):
        assert decode_base64("data:application/pdf;base64," + b64(PDF)) == PDF

    def test_embedded_newlines(self):
        encoded = b64(PDF)
        assert decode_base64(encoded[:10] + "\n" + encoded[10:]) == PDF

    def test_invalid(self):
        with pytest.raises(BadRequestError) as exc_info:
            decode_base64("not base64 at all!!")
        assert exc_info.value.error == "Invalid base64 file content"


class TestValidateResume:
    def test_pdf_accepted(self):
        resume = validate_resume(b64(PDF))

        assert resume.content == PDF
        assert resume.mime_type == "application/pdf"
        assert resume.extension == "pdf"
        assert resume.size == len(PDF)

    def test_oversized_rejected(self):
        content = PDF + b"0" * (2 * 1024 * 1024)
        with pytest.raises(BadRequestError) as exc_info:
            validate_resume(b64(content))
        assert exc_info.value.error == "File is larger than 2097152"

    def test_exactly_at_cap_accepted(self):
        content = PDF + b"0" * (2 * 1024 * 1024 - len(PDF))
        assert validate_resume(b64(content)).size == 2 * 1024 * 1024

    def test_custom_cap(self):
        with pytest.raises(BadRequestError, match="File is larger than 10"):
            validate_resume(b64(PDF), max_size=10)

    def test_unknown_type(self):
        with pytest.raises(BadRequestError) as exc_info:
            validate_resume(b64(b"just some plain text, not a document"))
        assert exc_info.value.error == "Could not detect file type"

    def test_png_renamed_as_pdf_rejected(self):
        # The declared name never matters, only the bytes
        with pytest.raises(BadRequestError) as exc_info:
            validate_resume(b64(PNG))
        assert exc_info.value.error == "Invalid file type. Only PDF is allowed."


class TestNormalizeFullName:
    @pytest.mark.parametrize("raw,expected", [
        ("JOHN doe", "John Doe"),
        ("john DOE", "John Doe"),
        ("  mary   ann   smith ", "Mary Ann Smith"),
        ("élodie durand", "Élodie Durand"),
        ("o'neil", "O'neil"),
        ("x", "X"),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_full_name(raw) == expected


class TestStoragePath:
    def test_timestamp_prefix(self):
        assert build_storage_path("cv.pdf", now_ms=1700000000123) == "1700000000123_cv.pdf"

    def test_current_time_prefix(self):
        prefix, name = build_storage_path("cv.pdf").split("_", 1)
        assert prefix.isdigit() and len(prefix) >= 13
        assert name == "cv.pdf"

    def test_path_separators_removed(self):
        assert build_storage_path("../../etc/passwd", now_ms=1) == "1_....etcpasswd"

    def test_spaces_replaced(self):
        assert sanitize_filename("john doe cv.pdf") == "john_doe_cv.pdf"

    def test_empty_after_sanitizing(self):
        assert sanitize_filename("///") == "resume"
