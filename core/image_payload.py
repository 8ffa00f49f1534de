"""
Data URI handling for signature images.

The signature travels through the application as a data URI, the same form a
drag-and-drop or file dialog produces. Acceptance is decided only by the MIME
type declared in the URI prefix; the bytes are never sniffed for that.
"""
from __future__ import annotations

import base64
import binascii
import io
import os
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from core.constants import (
    DEFAULT_IMAGE_MIME_TYPE,
    IMAGE_EXTENSION_MIME_TYPES,
    SUPPORTED_IMAGE_MIME_TYPES,
)
from core.errors import EmbeddingError, MissingSignatureError, UnsupportedImageFormatError
from core.models import ImagePayload


def mime_type_for_path(path: str) -> str:
    """Infer the declared MIME type from a file extension (defaults to PNG)."""
    ext = os.path.splitext(path)[1].lower()
    return IMAGE_EXTENSION_MIME_TYPES.get(ext, DEFAULT_IMAGE_MIME_TYPE)


def encode_data_uri(data: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def image_file_to_data_uri(path: str) -> str:
    """Read an image file and return it as a data URI."""
    with open(path, "rb") as f:
        data = f.read()
    return encode_data_uri(data, mime_type_for_path(path))


def declared_mime_type(uri: str) -> str:
    """Return the lower-cased MIME type from a ``data:`` prefix ('' if absent)."""
    header = uri.split(",", 1)[0]
    if not header.lower().startswith("data:"):
        return ""
    return header[5:].split(";", 1)[0].strip().lower()


def is_supported_mime_type(mime_type: str) -> bool:
    return mime_type.lower() in SUPPORTED_IMAGE_MIME_TYPES


def parse_data_uri(uri: Optional[str]) -> ImagePayload:
    """
    Decode a signature data URI.

    Raises:
        MissingSignatureError: ``uri`` is empty or None.
        UnsupportedImageFormatError: declared type is not PNG or JPEG.
        EmbeddingError: the URI is malformed or the base64 body is invalid.
    """
    if not uri:
        raise MissingSignatureError()

    if "," not in uri:
        raise EmbeddingError("Malformed image data URI")

    mime_type = declared_mime_type(uri)
    if not is_supported_mime_type(mime_type):
        raise UnsupportedImageFormatError(mime_type or "unknown")

    header, body = uri.split(",", 1)
    if ";base64" not in header.lower():
        raise EmbeddingError("Image data URI is not base64 encoded")

    try:
        data = base64.b64decode(body, validate=False)
    except (binascii.Error, ValueError) as e:
        raise EmbeddingError(f"Invalid base64 image data: {e}") from e

    if not data:
        raise MissingSignatureError()

    return ImagePayload(mime_type=mime_type, data=data)


def get_image_size(data: bytes) -> Tuple[int, int]:
    """Intrinsic pixel (width, height) of an encoded raster image."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            return img.size
    except (UnidentifiedImageError, OSError) as e:
        raise EmbeddingError(f"Could not decode signature image: {e}") from e
