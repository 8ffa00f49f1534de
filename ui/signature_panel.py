"""Signature tab: signature image, size/opacity, and the default position."""
from __future__ import annotations

import os
import logging
from typing import Tuple, TYPE_CHECKING

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGroupBox, QLabel, QPushButton,
    QSlider, QSpinBox, QDoubleSpinBox, QGridLayout, QScrollArea, QFrame,
    QFileDialog,
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QPixmap

from core.constants import (
    SIGNATURE_IMAGE_FILTERS, DEBOUNCE_DELAY_MS,
    SIGNATURE_SIZE_MIN, SIGNATURE_SIZE_MAX, SIGNATURE_SIZE_STEP,
    SIGNATURE_OPACITY_MIN_PCT, SIGNATURE_OPACITY_MAX_PCT, SIGNATURE_OPACITY_STEP_PCT,
    POSITION_SPIN_MAX, PAGE_SPIN_MAX,
)
from core.errors import SignerError
from core.image_payload import (
    declared_mime_type, image_file_to_data_uri, is_supported_mime_type, parse_data_uri,
)
from core.models import Position
from widgets.signature_drop_area import SignatureDropArea

if TYPE_CHECKING:
    from ui.main_window import MainWindow

logger = logging.getLogger(__name__)


def setup_signature_tab(win: MainWindow) -> None:
    """Create the Signature tab."""
    tab = QWidget()
    tab_layout = QVBoxLayout(tab)
    tab_layout.setContentsMargins(0, 0, 0, 1)

    scroll_area = QScrollArea()
    scroll_area.setWidgetResizable(True)
    scroll_area.setFrameShape(QFrame.NoFrame)

    content = QWidget()
    content_layout = QVBoxLayout(content)

    # --- 1. Image Group ---
    image_group = QGroupBox("Signature Image")
    image_layout = QVBoxLayout(image_group)

    win.signature_drop_area = SignatureDropArea()
    image_layout.addWidget(win.signature_drop_area)

    win.signature_info_label = QLabel("No signature selected")
    win.signature_info_label.setWordWrap(True)
    image_layout.addWidget(win.signature_info_label)

    btn_row = QHBoxLayout()
    win.btn_browse_signature = QPushButton("Browse...")
    win.btn_remove_signature = QPushButton("Remove")
    win.btn_remove_signature.setEnabled(False)
    btn_row.addWidget(win.btn_browse_signature)
    btn_row.addWidget(win.btn_remove_signature)
    btn_row.addStretch(1)
    image_layout.addLayout(btn_row)

    content_layout.addWidget(image_group)

    # --- 2. Appearance Group ---
    appearance_group = QGroupBox("Appearance")
    appearance_layout = QVBoxLayout(appearance_group)

    win.size_slider = QSlider(Qt.Horizontal)
    win.size_spin = QSpinBox()
    win.size_spin.setSuffix(" pt")
    row, _ = _create_slider_row(
        "Width:", win.size_slider, win.size_spin,
        SIGNATURE_SIZE_MIN, SIGNATURE_SIZE_MAX, SIGNATURE_SIZE_STEP,
        int(win.session.signature.size),
    )
    appearance_layout.addLayout(row)

    win.opacity_slider = QSlider(Qt.Horizontal)
    win.opacity_spin = QSpinBox()
    win.opacity_spin.setSuffix(" %")
    row, _ = _create_slider_row(
        "Opacity:", win.opacity_slider, win.opacity_spin,
        SIGNATURE_OPACITY_MIN_PCT, SIGNATURE_OPACITY_MAX_PCT, SIGNATURE_OPACITY_STEP_PCT,
        int(round(win.session.signature.opacity * 100)),
    )
    appearance_layout.addLayout(row)

    content_layout.addWidget(appearance_group)

    # --- 3. Default Position Group ---
    win.group_default_position = QGroupBox("Default Position (documents without their own)")
    win.group_default_position.setCheckable(True)
    win.group_default_position.setChecked(win.session.default_position is not None)
    pos_layout = QGridLayout(win.group_default_position)

    fallback = win.session.default_position or Position()

    win.default_x_spin = QDoubleSpinBox()
    win.default_x_spin.setRange(0, POSITION_SPIN_MAX)
    win.default_x_spin.setDecimals(1)
    win.default_x_spin.setValue(fallback.x)

    win.default_y_spin = QDoubleSpinBox()
    win.default_y_spin.setRange(0, POSITION_SPIN_MAX)
    win.default_y_spin.setDecimals(1)
    win.default_y_spin.setValue(fallback.y)

    win.default_page_spin = QSpinBox()
    win.default_page_spin.setRange(1, PAGE_SPIN_MAX)
    win.default_page_spin.setValue(fallback.page)

    pos_layout.addWidget(QLabel("X (pt):"), 0, 0)
    pos_layout.addWidget(win.default_x_spin, 0, 1)
    pos_layout.addWidget(QLabel("Y (pt):"), 1, 0)
    pos_layout.addWidget(win.default_y_spin, 1, 1)
    pos_layout.addWidget(QLabel("Page:"), 2, 0)
    pos_layout.addWidget(win.default_page_spin, 2, 1)

    win.btn_apply_default_to_selected = QPushButton("Apply to Selected Documents")
    pos_layout.addWidget(win.btn_apply_default_to_selected, 3, 0, 1, 2)

    content_layout.addWidget(win.group_default_position)

    win.btn_save_defaults = QPushButton("Save as Defaults")
    win.btn_save_defaults.setToolTip("Store width, opacity and default position in config.ini")
    content_layout.addWidget(win.btn_save_defaults)

    content_layout.addStretch()

    scroll_area.setWidget(content)
    tab_layout.addWidget(scroll_area)

    win.right_tabs.addTab(tab, "Signature")


def _create_slider_row(
    label_text: str, slider: QSlider, spin: QSpinBox,
    min_val: int, max_val: int, step: int, def_val: int,
) -> Tuple[QHBoxLayout, QLabel]:
    """Configure a slider/spin pair snapping to ``step`` and lay it out in one row."""
    slider.setRange(min_val, max_val)
    slider.setSingleStep(step)
    slider.setPageStep(step)
    slider.setTickInterval(step)
    slider.setTickPosition(QSlider.TicksBelow)
    spin.setRange(min_val, max_val)
    spin.setSingleStep(step)

    def_val = _snap(def_val, min_val, max_val, step)
    slider.setValue(def_val)
    spin.setValue(def_val)

    def slider_changed(v):
        snapped = _snap(v, min_val, max_val, step)
        if snapped != v:
            slider.setValue(snapped)
            return
        spin.setValue(snapped)

    def spin_changed(v):
        slider.blockSignals(True)
        slider.setValue(v)
        slider.blockSignals(False)

    slider.valueChanged.connect(slider_changed)
    spin.valueChanged.connect(spin_changed)

    row = QHBoxLayout()
    label = QLabel(label_text)
    label.setMinimumWidth(70)
    spin.setFixedWidth(80)

    row.addWidget(label)
    row.addWidget(slider, stretch=1)
    row.addWidget(spin)

    return row, label


def _snap(value: int, min_val: int, max_val: int, step: int) -> int:
    snapped = min_val + round((value - min_val) / step) * step
    return max(min_val, min(snapped, max_val))


# =====================================================================
# Signature Image
# =====================================================================

def select_signature_file(win: MainWindow) -> None:
    """Open file dialog to select a signature image."""
    file_path, _ = QFileDialog.getOpenFileName(
        win, "Select Signature Image", "", SIGNATURE_IMAGE_FILTERS,
        options=win.dialog_options(),
    )
    if file_path:
        load_signature_file(win, file_path)


def load_signature_file(win: MainWindow, file_path: str) -> None:
    """Read ``file_path`` into the session as a data URI and refresh the preview."""
    from ui.log_panel import show_error

    try:
        data_uri = image_file_to_data_uri(file_path)
    except OSError as e:
        show_error(win, "Signature Image", f"Could not read image:\n{e}")
        return

    win.session.set_signature_image(data_uri)
    name = os.path.basename(file_path)
    mime_type = declared_mime_type(data_uri)
    win.append_log(f"Signature image: {name} ({mime_type})")

    update_signature_display(win, name)
    win.on_signature_changed()


def remove_signature(win: MainWindow) -> None:
    win.session.clear_signature()
    win.append_log("Signature image removed.")
    update_signature_display(win)
    win.on_signature_changed()


def update_signature_display(win: MainWindow, name: str = "") -> None:
    """Sync the drop area thumbnail and info label with the session."""
    uri = win.session.signature.image
    win.btn_remove_signature.setEnabled(bool(uri))

    if not uri:
        win.signature_drop_area.clear_image()
        win.signature_info_label.setText("No signature selected")
        win.signature_info_label.setStyleSheet("")
        return

    mime_type = declared_mime_type(uri)
    label = f"{name} ({mime_type})" if name else mime_type

    if not is_supported_mime_type(mime_type):
        # Kept as chosen; the batch reports it per document
        win.signature_drop_area.set_image(None, fallback_text=name or mime_type)
        win.signature_info_label.setText(f"{label}\nOnly PNG and JPEG images can be embedded.")
        win.signature_info_label.setStyleSheet("color: #cc0000;")
        return

    pixmap = QPixmap()
    try:
        pixmap.loadFromData(parse_data_uri(uri).data)
    except SignerError as e:
        logger.warning("Could not build signature thumbnail: %s", e)

    win.signature_drop_area.set_image(pixmap, fallback_text=name)
    win.signature_info_label.setText(label)
    win.signature_info_label.setStyleSheet("")


# =====================================================================
# Size / Opacity / Default Position
# =====================================================================

def on_size_changed(win: MainWindow, value: int) -> None:
    win.session.set_signature_size(value)
    _schedule_preview(win)


def on_opacity_changed(win: MainWindow, value: int) -> None:
    win.session.set_signature_opacity(value / 100.0)
    _schedule_preview(win)


def read_default_position_inputs(win: MainWindow) -> Position:
    return Position(
        x=win.default_x_spin.value(),
        y=win.default_y_spin.value(),
        page=win.default_page_spin.value(),
    )


def on_default_position_changed(win: MainWindow) -> None:
    """Enable, disable or update the fallback position."""
    if win.group_default_position.isChecked():
        win.session.default_position = read_default_position_inputs(win)
    else:
        win.session.default_position = None
    _schedule_preview(win)


def apply_default_to_selected(win: MainWindow) -> None:
    from ui.log_panel import show_warning

    count = win.session.set_position_for_selected(read_default_position_inputs(win))
    if count == 0:
        show_warning(win, "No Selection", "Select at least one file first.")
        return
    win.append_log(f"Position set for {count} selected document(s).")
    win.on_positions_changed()


def save_defaults(win: MainWindow) -> None:
    from ui.config_manager import save_signature_defaults
    from ui.log_panel import show_error

    if save_signature_defaults(
        win.app_config, win.config_path, win.session.signature,
        read_default_position_inputs(win),
    ):
        win.append_log("Saved signature defaults to config.ini")
    else:
        show_error(win, "Configuration Error", "Could not save config.ini. Check the log for details.")


def _schedule_preview(win: MainWindow) -> None:
    win._preview_debounce_timer.stop()
    win._preview_debounce_timer.start(DEBOUNCE_DELAY_MS)
