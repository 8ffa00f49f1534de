"""Round-trip tests for the signature embedder."""
import io

import fitz
import pytest
from PIL import Image

from conftest import build_pdf, build_png, to_data_uri
from core.errors import DocumentLoadError, EmbeddingError, MissingSignatureError, UnsupportedImageFormatError
from core.models import Position, SignatureConfig
from core.pdf_operations import PDFOperations, PreparedStamp


def image_rects(page):
    """One rect per image placement on a page."""
    return [fitz.Rect(info["bbox"]) for info in page.get_image_info()]


def rendered_stamp_box(page):
    """Bounding box of the dark stamp pixels on ``page`` as displayed, in points."""
    pix = page.get_pixmap(alpha=False)
    img = Image.frombytes("RGB", (pix.width, pix.height), pix.samples)
    return img.convert("L").point(lambda v: 255 if v < 128 else 0).getbbox()


def soft_mask_max(doc, page):
    """Largest alpha value of the first image's soft mask on ``page``."""
    images = page.get_images(full=True)
    assert images, "page has no image"
    smask_xref = images[0][1]
    assert smask_xref, "image has no soft mask"
    mask = fitz.Pixmap(doc, smask_xref)
    return max(mask.samples)


def sign(content, config, position):
    return PDFOperations().sign_pdf_bytes(content, config, position)


# ------------------------------------------------------------------
# Stamp image processing
# ------------------------------------------------------------------
def test_process_stamp_bakes_opacity_into_alpha():
    processed = PDFOperations().process_stamp_image(build_png(), opacity=0.5)
    with Image.open(io.BytesIO(processed)) as img:
        assert img.mode == "RGBA"
        assert img.getchannel("A").getextrema()[1] == 127


def test_process_stamp_upscales_small_images():
    processed = PDFOperations().process_stamp_image(build_png(200, 100))
    with Image.open(io.BytesIO(processed)) as img:
        assert img.size == (600, 300)


def test_process_stamp_rejects_garbage():
    with pytest.raises(EmbeddingError):
        PDFOperations().process_stamp_image(b"nope")


def test_prepared_stamp_caches_per_opacity(signature_uri):
    calls = []

    class CountingOps(PDFOperations):
        def process_stamp_image(self, image_bytes, opacity=1.0):
            calls.append(opacity)
            return super().process_stamp_image(image_bytes, opacity)

    prepared = PreparedStamp(signature_uri, CountingOps())
    first = prepared.get_bytes(0.5)
    assert prepared.get_bytes(0.5) is first
    prepared.get_bytes(1.0)
    assert calls == [0.5, 1.0]
    assert prepared.dimensions == (200, 100)

    prepared.clear_cache()
    prepared.get_bytes(0.5)
    assert calls == [0.5, 1.0, 0.5]


def test_prepared_stamp_does_not_cache_failures():
    prepared = PreparedStamp(to_data_uri(build_png(), "image/gif"))
    for _ in range(2):
        with pytest.raises(UnsupportedImageFormatError):
            prepared.get_bytes(1.0)


# ------------------------------------------------------------------
# Round trip
# ------------------------------------------------------------------
def test_signed_pdf_contains_stamp_at_expected_rect(signature_uri):
    config = SignatureConfig(image=signature_uri, size=100, opacity=1.0)
    signed = sign(build_pdf(), config, Position(100, 100, 1))

    with fitz.open(stream=signed, filetype="pdf") as doc:
        rects = image_rects(doc[0])
        assert len(rects) == 1
        rect = rects[0]
        # width 100, height 100 * 100/200 = 50, top-left at (100, 100)
        assert rect.x0 == pytest.approx(100, abs=0.5)
        assert rect.y0 == pytest.approx(100, abs=0.5)
        assert rect.x1 == pytest.approx(200, abs=0.5)
        assert rect.y1 == pytest.approx(150, abs=0.5)


@pytest.mark.parametrize("opacity", [0.3, 0.5, 0.8])
def test_soft_mask_matches_opacity(signature_uri, opacity):
    config = SignatureConfig(image=signature_uri, size=100, opacity=opacity)
    signed = sign(build_pdf(), config, Position(100, 100, 1))

    with fitz.open(stream=signed, filetype="pdf") as doc:
        assert abs(soft_mask_max(doc, doc[0]) - opacity * 255) <= 1


def test_signed_pdf_clamps_x(signature_uri):
    config = SignatureConfig(image=signature_uri, size=100)
    signed = sign(build_pdf(), config, Position(560, 100, 1))

    with fitz.open(stream=signed, filetype="pdf") as doc:
        rect = image_rects(doc[0])[0]
        assert rect.x0 == pytest.approx(495, abs=0.5)
        assert rect.x1 == pytest.approx(595, abs=0.5)


@pytest.mark.parametrize("rotation", [90, 180, 270])
def test_rotated_page_stamp_lands_where_position_points(signature_uri, rotation):
    config = SignatureConfig(image=signature_uri, size=100, opacity=1.0)
    signed = sign(build_pdf(rotation=rotation), config, Position(400, 300, 1))

    with fitz.open(stream=signed, filetype="pdf") as doc:
        box = rendered_stamp_box(doc[0])

    assert box is not None
    for actual, expected in zip(box, (400, 300, 500, 350)):
        assert actual == pytest.approx(expected, abs=1.5)


def test_rotated_page_clamps_against_displayed_width(signature_uri):
    # Displayed as 842 x 595 landscape
    config = SignatureConfig(image=signature_uri, size=100, opacity=1.0)
    pdf = build_pdf(rotation=90)

    inside = sign(pdf, config, Position(700, 100, 1))
    overflowing = sign(pdf, config, Position(800, 100, 1))

    with fitz.open(stream=inside, filetype="pdf") as doc:
        assert rendered_stamp_box(doc[0])[0] == pytest.approx(700, abs=1.5)
    with fitz.open(stream=overflowing, filetype="pdf") as doc:
        x0, _, x1, _ = rendered_stamp_box(doc[0])
        assert x0 == pytest.approx(742, abs=1.5)
        assert x1 == pytest.approx(842, abs=1.5)


def test_signing_twice_adds_two_placements(signature_uri):
    config = SignatureConfig(image=signature_uri, size=100)
    once = sign(build_pdf(), config, Position(100, 100, 1))
    twice = sign(once, config, Position(300, 400, 1))

    with fitz.open(stream=twice, filetype="pdf") as doc:
        assert len(image_rects(doc[0])) == 2


def test_out_of_range_page_stamps_last_page(signature_uri):
    config = SignatureConfig(image=signature_uri, size=100)
    signed = sign(build_pdf(pages=5), config, Position(100, 100, 99))

    with fitz.open(stream=signed, filetype="pdf") as doc:
        assert doc.page_count == 5
        for index in range(4):
            assert not doc[index].get_images(), f"page {index + 1} should be untouched"
        assert len(image_rects(doc[4])) == 1


def test_input_bytes_are_not_modified(signature_uri):
    original = build_pdf()
    snapshot = bytes(original)
    sign(original, SignatureConfig(image=signature_uri), Position())
    assert original == snapshot


def test_missing_signature_raises():
    with pytest.raises(MissingSignatureError):
        sign(build_pdf(), SignatureConfig(image=None), Position())


def test_gif_signature_raises():
    config = SignatureConfig(image=to_data_uri(build_png(), "image/gif"))
    with pytest.raises(UnsupportedImageFormatError):
        sign(build_pdf(), config, Position())


def test_corrupt_pdf_raises_document_load_error(signature_uri):
    with pytest.raises(DocumentLoadError):
        sign(b"this is not a pdf", SignatureConfig(image=signature_uri), Position())
