"""
Tests for base64 payload handling.
"""

import pytest

from utils.errors import ImagePayloadError
from utils.media_validation import (
    decode_base64_image,
    extension_for,
    require_image_payload,
    split_data_url,
    strip_data_url_prefix,
)


class TestDataUrlPrefix:
    """The data-URL prefix is removed for every image subtype."""

    @pytest.mark.parametrize("subtype", ["png", "jpeg", "jpg", "webp", "gif", "bmp", "svg+xml", "x-icon"])
    def test_prefix_stripped(self, subtype):
        raw = f"data:image/{subtype};base64,QUJDRA=="
        assert strip_data_url_prefix(raw) == "QUJDRA=="

    def test_mime_type_reported(self):
        mime_type, payload = split_data_url("data:image/jpeg;base64,QUJD")
        assert mime_type == "image/jpeg"
        assert payload == "QUJD"

    def test_bare_payload_untouched(self):
        mime_type, payload = split_data_url("QUJDRA==")
        assert mime_type == "image/png"
        assert payload == "QUJDRA=="

    def test_non_image_prefix_is_not_stripped(self):
        raw = "data:text/plain;base64,QUJD"
        assert strip_data_url_prefix(raw) == raw


class TestRequirePayload:
    """Missing payloads are client errors."""

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_missing_payload(self, raw):
        with pytest.raises(ImagePayloadError):
            require_image_payload(raw)

    def test_prefix_only(self):
        with pytest.raises(ImagePayloadError):
            require_image_payload("data:image/png;base64,")

    def test_is_value_error(self):
        assert issubclass(ImagePayloadError, ValueError)


class TestDecode:
    def test_decodes_bytes(self):
        assert decode_base64_image("QUJDRA==") == b"ABCD"

    def test_tolerates_line_breaks(self):
        assert decode_base64_image("QUJD\nRA==") == b"ABCD"

    def test_rejects_garbage(self):
        with pytest.raises(ImagePayloadError):
            decode_base64_image("not base64!!")


class TestExtension:
    @pytest.mark.parametrize(
        "mime_type, ext",
        [("image/png", "png"), ("image/jpeg", "jpg"), ("image/webp", "webp"), ("image/svg+xml", "svg"), ("image/x-foo", "png")],
    )
    def test_extension(self, mime_type, ext):
        assert extension_for(mime_type) == ext
