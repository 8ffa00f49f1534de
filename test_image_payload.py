"""Tests for signature data URI handling."""
import base64

import pytest

from conftest import build_png, to_data_uri
from core.errors import EmbeddingError, MissingSignatureError, UnsupportedImageFormatError
from core.image_payload import (
    declared_mime_type,
    encode_data_uri,
    get_image_size,
    image_file_to_data_uri,
    is_supported_mime_type,
    mime_type_for_path,
    parse_data_uri,
)


@pytest.mark.parametrize("path, expected", [
    ("sig.png", "image/png"),
    ("sig.PNG", "image/png"),
    ("scan.jpg", "image/jpeg"),
    ("scan.jpeg", "image/jpeg"),
    ("anim.gif", "image/gif"),
    ("vector.svg", "image/svg+xml"),
    ("noext", "image/png"),
    ("weird.bmp", "image/png"),
])
def test_mime_type_for_path(path, expected):
    assert mime_type_for_path(path) == expected


def test_declared_mime_type():
    assert declared_mime_type("data:Image/JPEG;base64,AAAA") == "image/jpeg"
    assert declared_mime_type("AAAA") == ""


@pytest.mark.parametrize("mime_type, supported", [
    ("image/png", True),
    ("image/jpeg", True),
    ("image/jpg", True),
    ("image/gif", False),
    ("image/svg+xml", False),
])
def test_supported_mime_types(mime_type, supported):
    assert is_supported_mime_type(mime_type) is supported


def test_parse_png_uri():
    data = build_png()
    payload = parse_data_uri(to_data_uri(data))
    assert payload.mime_type == "image/png"
    assert payload.data == data


def test_parse_rejects_missing_image():
    with pytest.raises(MissingSignatureError):
        parse_data_uri(None)
    with pytest.raises(MissingSignatureError):
        parse_data_uri("")


def test_parse_rejects_empty_body():
    with pytest.raises(MissingSignatureError):
        parse_data_uri("data:image/png;base64,")


def test_parse_rejects_gif_by_declared_type():
    # Real PNG bytes, but the declared type decides
    with pytest.raises(UnsupportedImageFormatError) as exc_info:
        parse_data_uri(to_data_uri(build_png(), "image/gif"))
    assert exc_info.value.mime_type == "image/gif"


def test_parse_rejects_malformed_uri():
    with pytest.raises(EmbeddingError):
        parse_data_uri("data:image/png;base64")


def test_parse_rejects_non_base64_uri():
    with pytest.raises(EmbeddingError):
        parse_data_uri("data:image/png,rawbytes")


def test_parse_rejects_invalid_base64():
    with pytest.raises(EmbeddingError):
        parse_data_uri("data:image/png;base64,A")


def test_image_file_to_data_uri(tmp_path):
    data = build_png(10, 20)
    path = tmp_path / "signature.png"
    path.write_bytes(data)

    uri = image_file_to_data_uri(str(path))

    assert uri.startswith("data:image/png;base64,")
    assert base64.b64decode(uri.split(",", 1)[1]) == data


def test_encode_data_uri_format():
    assert encode_data_uri(b"\x00\x01", "image/jpeg") == "data:image/jpeg;base64,AAE="


def test_get_image_size():
    assert get_image_size(build_png(200, 100)) == (200, 100)


def test_get_image_size_rejects_garbage():
    with pytest.raises(EmbeddingError):
        get_image_size(b"definitely not an image")
