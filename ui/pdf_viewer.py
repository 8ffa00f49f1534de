"""PDF open/close/render and click-to-place for the preview tab."""
from __future__ import annotations

import logging
from typing import Optional, Tuple, TYPE_CHECKING

import fitz

from core.anchor import (
    compute_stamp_height,
    compute_stamp_placement,
    placement_to_rect,
    resolve_page_index,
)
from core.constants import PREVIEW_ZOOM_BASE
from core.errors import SignerError
from core.models import Document, Position, StampPlacement
from core.pdf_operations import PreparedStamp

if TYPE_CHECKING:
    from ui.main_window import MainWindow

logger = logging.getLogger(__name__)


def close_current_doc(win: MainWindow) -> None:
    """Close the current PDF document and reset preview state."""
    if win.current_doc:
        win.current_doc.close()
    win.current_doc = None
    win.current_doc_id = None
    win.current_page_index = 0
    win.current_page_count = 0
    win.preview_widget.clear_preview()
    win.file_status_entry.setText("No file selected")
    win.file_status_entry.setEnabled(False)
    win.page_info_label.setText("Page Info")
    win.page_info_label.setEnabled(False)
    win.position_info_label.setText("Position")
    win.position_info_label.setEnabled(False)


def open_pdf_at_index(win: MainWindow, index: int) -> None:
    """Open a document from the session by index."""
    from ui.files_panel import refresh_file_list

    if not (0 <= index < len(win.session.documents)):
        return

    document = win.session.documents[index]
    close_current_doc(win)

    try:
        doc = fitz.open(stream=document.content, filetype="pdf")
    except Exception as e:
        logger.warning("Could not open %s for preview: %s", document.name, e)
        win.current_file_index = index
        win.file_status_entry.setText(f"Error: {e}")
        win.file_status_entry.setEnabled(True)
        win.update_navigation_ui()
        return

    win.current_doc = doc
    win.current_doc_id = document.id
    win.current_file_index = index
    win.current_page_count = len(doc)

    # Start on the page the signature goes to, if any
    position = effective_position(win, document)
    if position is not None and win.current_page_count > 0:
        win.current_page_index = resolve_page_index(win.current_page_count, position.page)
    else:
        win.current_page_index = 0

    refresh_file_list(win)
    win.update_navigation_ui()
    win.render_current_page()


def sync_preview(win: MainWindow) -> None:
    """Re-open the preview after documents were removed or the list was cleared."""
    documents = win.session.documents
    if not documents:
        win.current_file_index = -1
        close_current_doc(win)
        win.update_navigation_ui()
        return

    if win.current_doc_id is not None:
        try:
            win.current_file_index = win.session.index_of(win.current_doc_id)
            win.update_navigation_ui()
            return
        except KeyError:
            pass

    # Previewed document is gone; open the nearest one
    new_index = min(max(win.current_file_index, 0), len(documents) - 1)
    win.open_pdf_at_index(new_index)


def effective_position(win: MainWindow, document: Optional[Document]) -> Optional[Position]:
    """Position the batch would use for ``document``."""
    if document is not None and document.position is not None:
        return document.position
    return win.session.resolve_default_position()


def get_preview_stamp(win: MainWindow) -> Optional[PreparedStamp]:
    """PreparedStamp for the current signature, rebuilt when the image changes."""
    image = win.session.signature.image
    if not image:
        win._preview_stamp = None
        return None
    if win._preview_stamp is None or win._preview_stamp.image_uri != image:
        win._preview_stamp = PreparedStamp(image, win.pdf_ops)
    return win._preview_stamp


def _visual_rect(page: fitz.Page, placement: StampPlacement) -> Tuple[float, float, float, float]:
    """Placement box in the coordinates of the displayed page."""
    return placement_to_rect(placement, page.rect.height)


def _hover_box_size(win: MainWindow) -> Tuple[float, float]:
    """Width and height in points of the box that follows the cursor."""
    size = win.session.signature.size
    prepared = get_preview_stamp(win)
    if prepared is None:
        return size, size
    try:
        img_w, img_h = prepared.dimensions
    except SignerError:
        return size, size
    return size, compute_stamp_height(size, img_w, img_h)


def render_current_page(win: MainWindow) -> None:
    """Render the current page, stamped with the signature when it lands here."""
    from ui.navigation import update_page_info

    if win.current_doc is None or win.current_page_count == 0:
        return
    if not (0 <= win.current_page_index < win.current_page_count):
        return

    page = win.current_doc.load_page(win.current_page_index)
    win.preview_widget.set_ghost_size(_hover_box_size(win))
    position = effective_position(win, win.current_document())

    on_this_page = (
        position is not None
        and resolve_page_index(win.current_page_count, position.page) == win.current_page_index
    )

    if not on_this_page:
        win.preview_widget.set_page(page, zoom=PREVIEW_ZOOM_BASE)
        win.preview_widget.set_marker(None)
        update_page_info(win)
        return

    signature = win.session.signature
    prepared = get_preview_stamp(win) if win._show_signature else None

    if prepared is not None:
        try:
            _render_stamped_page(win, prepared, position)
            update_page_info(win)
            return
        except SignerError as e:
            logger.warning("Preview stamp failed: %s", e)

    # No usable signature: outline a square of the configured width
    placement = compute_stamp_placement(
        page.rect.width, page.rect.height, signature.size, signature.size, signature.size, position
    )
    win.preview_widget.set_page(page, zoom=PREVIEW_ZOOM_BASE)
    win.preview_widget.set_marker(_visual_rect(page, placement))
    update_page_info(win)


def _render_stamped_page(win: MainWindow, prepared: PreparedStamp, position: Position) -> None:
    """Stamp a throwaway copy of the current document and show the result."""
    signature = win.session.signature
    doc_copy = fitz.open(stream=win.current_doc.tobytes(), filetype="pdf")
    try:
        temp_page = doc_copy.load_page(win.current_page_index)
        placement = win.pdf_ops.apply_signature_to_page(
            temp_page, prepared, signature.size, signature.opacity, position
        )
        win.preview_widget.set_page(temp_page, zoom=PREVIEW_ZOOM_BASE)
        win.preview_widget.set_marker(_visual_rect(temp_page, placement))
    finally:
        doc_copy.close()


def on_preview_clicked(win: MainWindow, x: float, y: float) -> None:
    """Set the current document's position to the clicked point on the current page."""
    document = win.current_document()
    if document is None or win.current_doc is None:
        return

    # Clicks arrive in displayed page points, the space the embedder places in
    position = Position(x=round(x, 1), y=round(y, 1), page=win.current_page_index + 1)
    win.session.set_position(document.id, position)

    win.append_log(
        f"Position for {document.name}: x {position.x:.0f}, y {position.y:.0f} on page {position.page}"
    )
    win.on_positions_changed()
