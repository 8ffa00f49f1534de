from __future__ import annotations

import io
import logging
from typing import Dict, Optional, Tuple

from PIL import Image, ImageEnhance, UnidentifiedImageError

import fitz  # PyMuPDF

from core.anchor import (
    compute_stamp_placement,
    placement_to_rect,
    resolve_page_index,
)
from core.constants import PDF_SAVE_OPTIONS
from core.errors import DocumentLoadError, EmbeddingError
from core.image_payload import get_image_size, parse_data_uri
from core.models import ImagePayload, Position, SignatureConfig, StampPlacement

logger = logging.getLogger(__name__)

# Images smaller than this (either side) are upscaled before insertion
UPSCALE_THRESHOLD_PX = 1000
UPSCALE_FACTOR = 3.0


class PDFOperations:
    """Stamps signature images onto PDF pages using PyMuPDF and Pillow."""

    # ------------------------------------------------------------------
    # Stamp Processing
    # ------------------------------------------------------------------
    def process_stamp_image(self, image_bytes: bytes, opacity: float = 1.0) -> bytes:
        """
        Convert a PNG/JPEG signature to RGBA PNG bytes with opacity baked
        into the alpha channel.
        """
        try:
            with Image.open(io.BytesIO(image_bytes)) as src:
                img = src.convert("RGBA")
        except (UnidentifiedImageError, OSError) as e:
            raise EmbeddingError(f"Could not decode signature image: {e}") from e

        w, h = img.size

        # Small scans look blurry once scaled to the page, upscale them
        if w < UPSCALE_THRESHOLD_PX or h < UPSCALE_THRESHOLD_PX:
            # Use premultiplied alpha for clean resizing
            img = img.convert("RGBa")
            img = img.resize(
                (int(w * UPSCALE_FACTOR), int(h * UPSCALE_FACTOR)),
                resample=Image.Resampling.BILINEAR,
            )
            img = img.convert("RGBA")
            img = ImageEnhance.Sharpness(img).enhance(1.2)

        if opacity < 1.0:
            alpha = img.getchannel("A")
            alpha = alpha.point(lambda p: int(p * opacity))
            img.putalpha(alpha)

        # compress_level=1: the final PDF save compresses the stream anyway
        img_buffer = io.BytesIO()
        img.save(img_buffer, format="PNG", optimize=False, compress_level=1)
        return img_buffer.getvalue()

    def insert_stamp_bytes(self, page: fitz.Page, img_bytes: bytes, rect: fitz.Rect) -> None:
        """Insert pre-processed stamp bytes into ``rect`` (top-left page coordinates)."""
        if not img_bytes:
            raise EmbeddingError("Empty stamp image")

        try:
            # Normalize the content stream so existing transforms don't affect our stamp
            page.clean_contents()
            page.insert_image(
                rect,
                stream=img_bytes,
                keep_proportion=False,
                overlay=True,
            )
        except (RuntimeError, ValueError) as e:
            raise EmbeddingError(f"Could not insert stamp: {e}") from e

    # ------------------------------------------------------------------
    # Page / Document Level
    # ------------------------------------------------------------------
    def apply_signature_to_page(
        self,
        page: fitz.Page,
        prepared: PreparedStamp,
        size: float,
        opacity: float,
        position: Position,
    ) -> StampPlacement:
        """
        Place the prepared stamp on ``page`` and return where it went (PDF space).

        ``position`` is read against the page as displayed, so on a rotated page
        the clamp uses the rotated width.
        """
        page_w, page_h = page.rect.width, page.rect.height
        img_w, img_h = prepared.dimensions

        placement = compute_stamp_placement(page_w, page_h, img_w, img_h, size, position)
        rect = fitz.Rect(*placement_to_rect(placement, page_h))

        self.insert_stamp_bytes(page, prepared.get_bytes(opacity), rect)
        return placement

    def apply_signature_to_pdf(
        self,
        doc: fitz.Document,
        prepared: PreparedStamp,
        size: float,
        opacity: float,
        position: Position,
    ) -> StampPlacement:
        """Resolve the target page (falling back to the last one) and stamp it."""
        page_index = resolve_page_index(doc.page_count, position.page)
        page = doc.load_page(page_index)
        placement = self.apply_signature_to_page(page, prepared, size, opacity, position)
        logger.debug("Stamped page %d of %d at %s", page_index + 1, doc.page_count, placement)
        return placement

    def sign_pdf_bytes(
        self,
        content: bytes,
        config: SignatureConfig,
        position: Position,
        prepared: Optional[PreparedStamp] = None,
    ) -> bytes:
        """Return a signed copy of ``content``. The input bytes are left untouched."""
        if prepared is None:
            prepared = PreparedStamp(config.image, self)

        try:
            doc = fitz.open(stream=content, filetype="pdf")
        except Exception as e:
            raise DocumentLoadError(str(e)) from e

        try:
            self.apply_signature_to_pdf(doc, prepared, config.size, config.opacity, position)
            return doc.tobytes(**PDF_SAVE_OPTIONS)
        finally:
            doc.close()


class PreparedStamp:
    """
    Decoded signature with lazy caching by opacity.

    Usage:
        # Before batch loop
        prepared_stamp = PreparedStamp(config.image, pdf_ops)

        # In loop - decodes once, processes once per opacity
        stamp_bytes = prepared_stamp.get_bytes(config.opacity)

    Decoding failures are not cached: every document that uses a bad payload
    gets its own error.
    """

    def __init__(self, image_uri: Optional[str], pdf_ops: Optional[PDFOperations] = None):
        self.image_uri = image_uri
        self.pdf_ops = pdf_ops or PDFOperations()
        self._payload: Optional[ImagePayload] = None
        self._dimensions: Optional[Tuple[int, int]] = None
        self._cache: Dict[float, bytes] = {}

    @property
    def payload(self) -> ImagePayload:
        if self._payload is None:
            self._payload = parse_data_uri(self.image_uri)
        return self._payload

    @property
    def dimensions(self) -> Tuple[int, int]:
        """Intrinsic pixel size of the source image."""
        if self._dimensions is None:
            self._dimensions = get_image_size(self.payload.data)
        return self._dimensions

    def get_bytes(self, opacity: float) -> bytes:
        """Get processed bytes for opacity (processes once per opacity, caches automatically)."""
        key = round(opacity, 2)
        if key not in self._cache:
            self._cache[key] = self.pdf_ops.process_stamp_image(self.payload.data, opacity)
        return self._cache[key]

    def clear_cache(self) -> None:
        """Clear the internal cache."""
        self._cache.clear()
