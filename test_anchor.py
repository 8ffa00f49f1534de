"""Tests for page resolution and stamp geometry."""
import fitz
import pytest

from core.anchor import (
    compute_stamp_height,
    compute_stamp_placement,
    get_page_dim_corrected,
    placement_to_rect,
    resolve_page_index,
    widget_point_to_page_point,
)
from core.errors import PageNotFoundError
from core.models import Position, StampPlacement


def make_page(width=595, height=842, rotation=0):
    """Create an in-memory PDF and return it with its first page."""
    doc = fitz.open()
    page = doc.new_page(width=width, height=height)
    if rotation:
        page.set_rotation(rotation)
    return doc, page


# ------------------------------------------------------------------
# get_page_dim_corrected
# ------------------------------------------------------------------
def test_dim_portrait():
    doc, page = make_page(595, 842)
    w, h = get_page_dim_corrected(page)
    assert abs(w - 595) < 1 and abs(h - 842) < 1, f"Expected 595x842, got {w}x{h}"
    doc.close()


@pytest.mark.parametrize("rotation", [90, 270])
def test_dim_rotated_reports_unrotated_size(rotation):
    doc, page = make_page(595, 842, rotation=rotation)
    w, h = get_page_dim_corrected(page)
    assert abs(w - 595) < 1 and abs(h - 842) < 1, f"Expected 595x842, got {w}x{h}"
    doc.close()


# ------------------------------------------------------------------
# resolve_page_index
# ------------------------------------------------------------------
@pytest.mark.parametrize("requested, expected", [(1, 0), (3, 2), (5, 4)])
def test_page_in_range(requested, expected):
    assert resolve_page_index(5, requested) == expected


@pytest.mark.parametrize("requested", [0, -1, 6, 99])
def test_page_out_of_range_falls_back_to_last(requested):
    assert resolve_page_index(5, requested) == 4


def test_single_page_document():
    assert resolve_page_index(1, 7) == 0


def test_empty_document_raises():
    with pytest.raises(PageNotFoundError):
        resolve_page_index(0, 1)


# ------------------------------------------------------------------
# Stamp geometry
# ------------------------------------------------------------------
def test_height_keeps_aspect_ratio():
    assert compute_stamp_height(100, 200, 100) == 50
    assert compute_stamp_height(150, 300, 450) == 225


def test_placement_converts_to_bottom_left_origin():
    placement = compute_stamp_placement(595, 842, 200, 100, 100, Position(100, 100, 1))
    assert placement == StampPlacement(100, 692, 100, 50)


def test_placement_clamps_x_to_page_width():
    placement = compute_stamp_placement(595, 842, 200, 100, 100, Position(550, 100, 1))
    assert placement.x == 495


def test_placement_x_exactly_at_limit_is_kept():
    placement = compute_stamp_placement(595, 842, 200, 100, 100, Position(495, 0, 1))
    assert placement.x == 495


def test_placement_has_no_vertical_clamp():
    placement = compute_stamp_placement(595, 842, 200, 100, 100, Position(100, 830, 1))
    assert placement.y == 842 - 830 - 50
    assert placement.y < 0


def test_placement_to_rect_round_trip():
    placement = StampPlacement(100, 692, 100, 50)
    assert placement_to_rect(placement, 842) == (100, 100, 200, 150)


# ------------------------------------------------------------------
# Preview click mapping
# ------------------------------------------------------------------
def test_widget_point_to_page_point():
    assert widget_point_to_page_point(150, 120, 50, 20, 2.0) == (50, 50)


def test_widget_point_requires_positive_scale():
    with pytest.raises(ValueError):
        widget_point_to_page_point(10, 10, 0, 0, 0)
