"""File/page stepping and the navigation bar state of the preview tab."""
from __future__ import annotations

from typing import Optional, TYPE_CHECKING

import fitz
from PySide6.QtWidgets import QSpinBox

from core.anchor import get_page_dim_corrected
from core.models import Position

if TYPE_CHECKING:
    from ui.main_window import MainWindow

POINTS_PER_MM = 72 / 25.4


def step_file(win: MainWindow, delta: int) -> None:
    """Open the document ``delta`` places away in the list, if there is one."""
    target = win.current_file_index + delta
    if 0 <= target < len(win.session.documents):
        win.open_pdf_at_index(target)


def step_page(win: MainWindow, delta: int) -> None:
    show_page(win, win.current_page_index + delta)


def show_page(win: MainWindow, page_index: int) -> None:
    if page_index == win.current_page_index or not 0 <= page_index < win.current_page_count:
        return
    win.current_page_index = page_index
    win.render_current_page()
    win.update_navigation_ui()


def _sync_counter(spin: QSpinBox, current: int, total: int) -> None:
    """Show ``current / total`` (1-based) without emitting valueChanged."""
    spin.blockSignals(True)
    try:
        spin.setRange(1 if total else 0, total)
        spin.setValue(current if total else 0)
        spin.setSuffix(f" / {total}")
        spin.setEnabled(total > 0)
    finally:
        spin.blockSignals(False)


def update_navigation_ui(win: MainWindow) -> None:
    """Bring buttons, counters and labels in line with the current file and page."""
    documents = win.session.documents
    file_count = len(documents)
    has_doc = win.current_doc is not None

    _sync_counter(win.file_input, win.current_file_index + 1, file_count)
    win.btn_prev_file.setEnabled(win.current_file_index > 0)
    win.btn_next_file.setEnabled(0 <= win.current_file_index < file_count - 1)

    if 0 <= win.current_file_index < file_count:
        shown = documents[win.current_file_index]
        win.file_status_entry.setText(shown.name)
        win.file_status_entry.setToolTip(shown.source_path or shown.name)
        win.file_status_entry.setEnabled(True)
    elif file_count == 0:
        win.file_status_entry.setText("No file selected")
        win.file_status_entry.setToolTip("")
        win.file_status_entry.setEnabled(False)

    page_count = win.current_page_count if has_doc else 0
    _sync_counter(win.page_input, win.current_page_index + 1, page_count)
    win.btn_prev_page.setEnabled(has_doc and win.current_page_index > 0)
    win.btn_next_page.setEnabled(has_doc and win.current_page_index < page_count - 1)

    for button in (win.btn_zoom_in, win.btn_zoom_out, win.btn_zoom_fit, win.btn_toggle_overlay):
        button.setEnabled(has_doc)

    update_page_info(win)


def describe_page(page: fitz.Page) -> str:
    w, h = get_page_dim_corrected(page)
    orientation = "Landscape" if w > h else "Portrait"
    text = f"{orientation} {w / POINTS_PER_MM:.0f} x {h / POINTS_PER_MM:.0f} mm"
    if page.rotation:
        text += f", rotated {page.rotation}°"
    return text


def describe_position(own: Optional[Position], fallback: Optional[Position]) -> str:
    if own is not None:
        return f"Signature at {own.x:.0f}, {own.y:.0f} on page {own.page}"
    if fallback is not None:
        return f"Default {fallback.x:.0f}, {fallback.y:.0f} on page {fallback.page}"
    return "No position yet, click the page"


def update_page_info(win: MainWindow) -> None:
    """Fill the page size label and the position label under the preview."""
    if win.current_doc is None or win.current_page_count == 0:
        for label, text in ((win.page_info_label, "Page Info"), (win.position_info_label, "Position")):
            label.setText(text)
            label.setEnabled(False)
        return

    try:
        page_text = describe_page(win.current_doc.load_page(win.current_page_index))
    except (RuntimeError, ValueError) as e:
        page_text = f"Error: {e}"
    win.page_info_label.setText(page_text)
    win.page_info_label.setEnabled(True)

    document = win.current_document()
    own = document.position if document is not None else None
    win.position_info_label.setText(describe_position(own, win.session.resolve_default_position()))
    win.position_info_label.setEnabled(True)


def on_page_input_changed(win: MainWindow, value: int) -> None:
    show_page(win, value - 1)


def on_file_input_changed(win: MainWindow, value: int) -> None:
    index = value - 1
    if index != win.current_file_index and 0 <= index < len(win.session.documents):
        win.open_pdf_at_index(index)
