from __future__ import annotations

from typing import Tuple

import fitz  # PyMuPDF

from core.errors import PageNotFoundError
from core.models import Position, StampPlacement


def get_page_dim_corrected(page: fitz.Page) -> Tuple[float, float]:
    """
    Return the unrotated (width, height) of a page in points.

    PyMuPDF swaps ``page.rect`` for pages stored with a 90/270 rotation.
    This is the paper size as printed; stamp placement uses ``page.rect``.
    """
    rect = page.rect
    if page.rotation in (90, 270):
        return rect.height, rect.width
    return rect.width, rect.height


def resolve_page_index(page_count: int, requested_page: int) -> int:
    """
    Map a 1-based page request onto a 0-based page index.

    Requests outside ``[1, page_count]`` fall back to the last page. A document
    without pages raises PageNotFoundError.
    """
    if page_count <= 0:
        raise PageNotFoundError(requested_page)
    if 1 <= requested_page <= page_count:
        return requested_page - 1
    return page_count - 1


def compute_stamp_height(width: float, image_width: float, image_height: float) -> float:
    """Stamp height for a given width, keeping the image's aspect ratio."""
    return width * (image_height / image_width)


def compute_stamp_placement(
    page_w_pts: float,
    page_h_pts: float,
    image_width: float,
    image_height: float,
    size: float,
    position: Position,
) -> StampPlacement:
    """
    Compute where the stamp lands on a page.

    Args:
        page_w_pts: Page width in points.
        page_h_pts: Page height in points.
        image_width: Intrinsic pixel width of the signature image.
        image_height: Intrinsic pixel height of the signature image.
        size: Requested stamp width in points.
        position: Anchor in top-left screen coordinates.

    Returns:
        StampPlacement in PDF space (origin bottom-left). The stamp is kept
        inside the page horizontally; there is no vertical clamp.
    """
    height = compute_stamp_height(size, image_width, image_height)
    x = min(position.x, page_w_pts - size)
    y = page_h_pts - position.y - height
    return StampPlacement(x, y, size, height)


def placement_to_rect(
    placement: StampPlacement, page_h_pts: float
) -> Tuple[float, float, float, float]:
    """Convert a bottom-left placement into a top-left (x0, y0, x1, y1) rectangle."""
    y0 = page_h_pts - placement.y - placement.height
    return (
        placement.x,
        y0,
        placement.x + placement.width,
        y0 + placement.height,
    )


def widget_point_to_page_point(
    px: float,
    py: float,
    origin_x: float,
    origin_y: float,
    scale: float,
) -> Tuple[float, float]:
    """
    Map a point on the preview widget to top-left page coordinates (points).

    ``origin_x``/``origin_y`` is where the page's top-left corner is drawn on
    the widget and ``scale`` is widget pixels per PDF point.
    """
    if scale <= 0:
        raise ValueError("scale must be positive")
    return (px - origin_x) / scale, (py - origin_y) / scale
