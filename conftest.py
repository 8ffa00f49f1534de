"""Shared pytest fixtures: in-memory PDFs and signature images."""
import base64
import io

import fitz
import pytest
from PIL import Image


def build_pdf(pages=1, width=595, height=842, rotation=0):
    doc = fitz.open()
    for _ in range(pages):
        page = doc.new_page(width=width, height=height)
        if rotation:
            page.set_rotation(rotation)
    try:
        return doc.tobytes()
    finally:
        doc.close()


def build_png(width=200, height=100, color=(20, 20, 120, 255)):
    img = Image.new("RGBA", (width, height), color)
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def to_data_uri(data, mime_type="image/png"):
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


@pytest.fixture
def make_pdf():
    """Factory for PDF bytes: make_pdf(pages=1, width=595, height=842, rotation=0)."""
    return build_pdf


@pytest.fixture
def png_bytes():
    return build_png()


@pytest.fixture
def signature_uri(png_bytes):
    """200x100 opaque PNG as a data URI."""
    return to_data_uri(png_bytes)
