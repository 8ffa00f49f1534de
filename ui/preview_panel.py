"""Preview tab: file bar, view bar, the clickable page and the page bar."""
from __future__ import annotations

from typing import TYPE_CHECKING

from PySide6.QtWidgets import (
    QAbstractSpinBox, QFrame, QHBoxLayout, QLabel, QLineEdit, QPushButton, QSpinBox,
    QVBoxLayout, QWidget,
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QPalette

from core.constants import (
    NAV_SPINBOX_WIDTH, PAGE_INFO_LABEL_WIDTH,
    ZOOM_BTN_WIDTH, ZOOM_LABEL_WIDTH, ZOOM_FIT_BTN_WIDTH, TOGGLE_BTN_WIDTH,
)
from widgets.preview_widget import PDFPreviewWidget, PreviewScrollArea

if TYPE_CHECKING:
    from ui.main_window import MainWindow


def _bar() -> QHBoxLayout:
    row = QHBoxLayout()
    row.setContentsMargins(0, 0, 0, 0)
    return row


def _counter(tooltip: str) -> QSpinBox:
    """Borderless ``n / total`` spinbox used for file and page numbers."""
    spin = QSpinBox()
    spin.setButtonSymbols(QAbstractSpinBox.NoButtons)
    spin.setRange(0, 0)
    spin.setSuffix(" / 0")
    spin.setAlignment(Qt.AlignCenter)
    spin.setFixedWidth(NAV_SPINBOX_WIDTH)
    spin.setKeyboardTracking(False)
    spin.setToolTip(tooltip)
    return spin


def _info_label(placeholder: str) -> QLabel:
    label = QLabel(placeholder)
    label.setAlignment(Qt.AlignCenter)
    label.setFrameStyle(QFrame.StyledPanel | QFrame.Sunken)
    label.setAutoFillBackground(True)
    label.setBackgroundRole(QPalette.Base)
    label.setMinimumWidth(PAGE_INFO_LABEL_WIDTH)
    label.setTextInteractionFlags(Qt.TextSelectableByMouse)
    label.setEnabled(False)
    return label


def _fixed_button(text: str, width: int, tooltip: str = "") -> QPushButton:
    button = QPushButton(text)
    button.setFixedWidth(width)
    if tooltip:
        button.setToolTip(tooltip)
    return button


def _build_file_bar(win: MainWindow) -> QHBoxLayout:
    row = _bar()
    win.btn_prev_file = QPushButton("◀ File")
    win.file_input = _counter("Go to file number")
    win.btn_next_file = QPushButton("File ▶")
    win.file_status_entry = QLineEdit("No file selected")
    win.file_status_entry.setReadOnly(True)
    win.file_status_entry.setFocusPolicy(Qt.NoFocus)
    win.file_status_entry.setEnabled(False)

    row.addWidget(win.btn_prev_file)
    row.addWidget(win.file_input)
    row.addWidget(win.btn_next_file)
    row.addWidget(win.file_status_entry, 1)
    return row


def _build_view_bar(win: MainWindow) -> QHBoxLayout:
    row = _bar()
    win.btn_toggle_overlay = _fixed_button(
        "Original", TOGGLE_BTN_WIDTH, "Compare the signed preview with the untouched page"
    )
    win.btn_toggle_overlay.setCheckable(True)

    hint = QLabel("Click the page to place the signature")
    hint.setEnabled(False)

    win.btn_zoom_out = _fixed_button("-", ZOOM_BTN_WIDTH, "Zoom out (Ctrl+wheel)")
    win.zoom_label = QLabel("100%")
    win.zoom_label.setAlignment(Qt.AlignCenter)
    win.zoom_label.setFixedWidth(ZOOM_LABEL_WIDTH)
    win.btn_zoom_in = _fixed_button("+", ZOOM_BTN_WIDTH, "Zoom in (Ctrl+wheel)")
    win.btn_zoom_fit = _fixed_button("Fit", ZOOM_FIT_BTN_WIDTH, "Fit the page to the view")

    row.addWidget(win.btn_toggle_overlay)
    row.addWidget(hint, 1)
    for widget in (win.btn_zoom_out, win.zoom_label, win.btn_zoom_in, win.btn_zoom_fit):
        row.addWidget(widget)
    return row


def _build_page_bar(win: MainWindow) -> QHBoxLayout:
    row = _bar()
    win.page_info_label = _info_label("Page Info")
    win.btn_prev_page = QPushButton("◀ Page")
    win.page_input = _counter("Go to page number")
    win.btn_next_page = QPushButton("Page ▶")
    win.position_info_label = _info_label("Position")

    row.addWidget(win.page_info_label, 1)
    row.addWidget(win.btn_prev_page)
    row.addWidget(win.page_input)
    row.addWidget(win.btn_next_page)
    row.addWidget(win.position_info_label, 1)
    return row


def setup_preview_tab(win: MainWindow) -> None:
    """Create the Preview tab and add it to the left tab widget."""
    tab = QWidget()
    layout = QVBoxLayout(tab)

    layout.addLayout(_build_file_bar(win))
    layout.addLayout(_build_view_bar(win))

    win.preview_widget = PDFPreviewWidget()
    win.preview_scroll = PreviewScrollArea()
    win.preview_scroll.setWidgetResizable(False)
    win.preview_scroll.setAlignment(Qt.AlignCenter)
    win.preview_scroll.setFrameShape(QFrame.NoFrame)
    win.preview_scroll.setWidget(win.preview_widget)
    layout.addWidget(win.preview_scroll, 1)

    layout.addLayout(_build_page_bar(win))
    win.left_tabs.addTab(tab, "Preview")
