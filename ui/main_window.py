"""MainWindow shell: init, state, UI assembly, signal wiring."""
from __future__ import annotations

import configparser
import logging
from pathlib import Path
from typing import Callable, Optional, Tuple

import fitz

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QSplitter, QTabWidget, QFileDialog, QMessageBox,
)
from PySide6.QtCore import Qt, QTimer, QPoint

from core.anchor import resolve_page_index
from core.capabilities import Capabilities, create_persistence_sink
from core.constants import (
    APP_TITLE, APP_VERSION, SAVE_MODE_FOLDER, WINDOW_WIDTH, WINDOW_HEIGHT, SPLITTER_INITIAL_SIZES,
    LEFT_PANEL_MIN_WIDTH, RIGHT_PANEL_MIN_WIDTH,
    PREVIEW_ZOOM_MIN, PREVIEW_ZOOM_MAX, PREVIEW_ZOOM_STEP, PREVIEW_ZOOM_DEFAULT,
)
from core.models import Document
from core.pdf_operations import PDFOperations, PreparedStamp
from core.session import SigningSession

from ui.toolbar import setup_toolbar
from ui.preview_panel import setup_preview_tab
from ui.log_panel import setup_log_tab, append_log as _append_log
from ui.files_panel import (
    setup_files_tab, pick_pdf_files, add_pdf_paths, clear_files as _clear_files,
    refresh_file_list, on_list_item_changed, on_select_all_toggled,
)
from ui.signature_panel import (
    setup_signature_tab, select_signature_file, load_signature_file, remove_signature,
    on_size_changed, on_opacity_changed, on_default_position_changed,
    apply_default_to_selected, save_defaults,
)
from ui.navigation import (
    step_file, step_page, update_navigation_ui as _update_navigation_ui,
    on_page_input_changed, on_file_input_changed,
)
from ui.pdf_viewer import (
    close_current_doc as _close_current_doc,
    open_pdf_at_index as _open_pdf_at_index,
    render_current_page as _render_current_page,
    sync_preview as _sync_preview,
    on_preview_clicked,
)
from ui.processing import start_signing, choose_save_path
from ui.config_manager import read_default_position, read_signature_defaults

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """
    Main application window.

    Holds the signing session and the preview state; the tabs and their
    handlers live in the other ui/ modules and receive the window as ``win``.
    """

    def __init__(
        self,
        config: configparser.ConfigParser,
        capabilities: Capabilities,
        config_path: Path,
    ) -> None:
        super().__init__()

        self.setWindowTitle(f"{APP_TITLE} {APP_VERSION}")
        self.resize(WINDOW_WIDTH, WINDOW_HEIGHT)

        # -----------------------------------------------------------------
        # 1. Session and services
        # -----------------------------------------------------------------
        self.app_config = config
        self.config_path = config_path
        self.capabilities = capabilities

        self.session = SigningSession(
            signature=read_signature_defaults(config),
            default_position=read_default_position(config),
        )
        self.pdf_ops = PDFOperations()
        self.persistence_sink = create_persistence_sink(
            capabilities, lambda file_name: choose_save_path(self, file_name)
        )

        # -----------------------------------------------------------------
        # 2. Preview state
        # -----------------------------------------------------------------
        self.current_file_index: int = -1
        self.current_doc: Optional[fitz.Document] = None
        self.current_doc_id: Optional[str] = None
        self.current_page_index: int = 0
        self.current_page_count: int = 0

        self._preview_stamp: Optional[PreparedStamp] = None
        self._show_signature: bool = True
        self._user_zoom: float = PREVIEW_ZOOM_DEFAULT

        self._worker_thread = None
        self._progress_dialog = None

        # Slider drags re-render once they settle
        self._preview_debounce_timer = QTimer(self)
        self._preview_debounce_timer.setSingleShot(True)
        self._preview_debounce_timer.timeout.connect(self.render_current_page)

        # -----------------------------------------------------------------
        # 3. Widgets
        # -----------------------------------------------------------------
        self.setMenuBar(None)
        setup_toolbar(self)
        self._build_layout()
        self._connect_signals()

        refresh_file_list(self)
        self.update_navigation_ui()

        if capabilities.save_mode == SAVE_MODE_FOLDER:
            self.append_log(f"Signed files are saved to {capabilities.output_dir}")
        else:
            self.append_log("You will be asked where to save each signed file")

    # =================================================================
    # Layout
    # =================================================================
    def _build_layout(self) -> None:
        central = QWidget()
        self.main_splitter = QSplitter(Qt.Horizontal)
        QVBoxLayout(central).addWidget(self.main_splitter)
        self.setCentralWidget(central)

        self._add_tab_column("left_tabs", LEFT_PANEL_MIN_WIDTH, 1, (setup_preview_tab, setup_log_tab))
        self._add_tab_column("right_tabs", RIGHT_PANEL_MIN_WIDTH, 0, (setup_files_tab, setup_signature_tab))
        self.main_splitter.setSizes(SPLITTER_INITIAL_SIZES)

    def _add_tab_column(
        self,
        attr: str,
        min_width: int,
        stretch: int,
        builders: Tuple[Callable[[MainWindow], None], ...],
    ) -> None:
        """Add a tab widget column to the splitter, store it as ``attr`` and fill it."""
        column = QWidget()
        column.setMinimumWidth(min_width)
        column_layout = QVBoxLayout(column)
        column_layout.setContentsMargins(0, 0, 0, 0)

        tabs = QTabWidget()
        column_layout.addWidget(tabs)
        setattr(self, attr, tabs)

        index = self.main_splitter.count()
        self.main_splitter.addWidget(column)
        self.main_splitter.setStretchFactor(index, stretch)
        self.main_splitter.setCollapsible(index, False)

        for build in builders:
            build(self)

    # =================================================================
    # Signal Wiring
    # =================================================================
    def _connect_signals(self) -> None:
        # Preview navigation
        self.btn_prev_file.clicked.connect(lambda: step_file(self, -1))
        self.btn_next_file.clicked.connect(lambda: step_file(self, +1))
        self.file_input.valueChanged.connect(lambda v: on_file_input_changed(self, v))
        self.btn_prev_page.clicked.connect(lambda: step_page(self, -1))
        self.btn_next_page.clicked.connect(lambda: step_page(self, +1))
        self.page_input.valueChanged.connect(lambda v: on_page_input_changed(self, v))

        # Preview view
        self.btn_zoom_in.clicked.connect(lambda: self.set_zoom(self._user_zoom + PREVIEW_ZOOM_STEP))
        self.btn_zoom_out.clicked.connect(lambda: self.set_zoom(self._user_zoom - PREVIEW_ZOOM_STEP))
        self.btn_zoom_fit.clicked.connect(lambda: self.set_zoom(PREVIEW_ZOOM_DEFAULT))
        self.preview_scroll.zoom_requested.connect(
            lambda step, anchor: self.set_zoom(self._user_zoom + step * PREVIEW_ZOOM_STEP, anchor)
        )
        self.btn_toggle_overlay.toggled.connect(self._on_overlay_toggled)
        self.preview_widget.page_clicked.connect(lambda x, y: on_preview_clicked(self, x, y))

        # Files tab
        self.btn_add_files.clicked.connect(lambda: pick_pdf_files(self))
        self.file_list.files_dropped.connect(lambda paths: add_pdf_paths(self, paths))
        self.file_list.itemChanged.connect(lambda item: on_list_item_changed(self, item))
        self.chk_select_all.toggled.connect(lambda checked: on_select_all_toggled(self, checked))
        self.btn_sign.clicked.connect(lambda: start_signing(self))

        # Signature tab
        self.signature_drop_area.clicked.connect(lambda: select_signature_file(self))
        self.signature_drop_area.image_dropped.connect(lambda path: load_signature_file(self, path))
        self.btn_browse_signature.clicked.connect(lambda: select_signature_file(self))
        self.btn_remove_signature.clicked.connect(lambda: remove_signature(self))
        self.size_spin.valueChanged.connect(lambda v: on_size_changed(self, v))
        self.opacity_spin.valueChanged.connect(lambda v: on_opacity_changed(self, v))

        self.group_default_position.toggled.connect(lambda _: on_default_position_changed(self))
        for spin in (self.default_x_spin, self.default_y_spin, self.default_page_spin):
            spin.valueChanged.connect(lambda _: on_default_position_changed(self))
        self.btn_apply_default_to_selected.clicked.connect(lambda: apply_default_to_selected(self))
        self.btn_save_defaults.clicked.connect(lambda: save_defaults(self))

    # =================================================================
    # Delegate Methods
    # =================================================================
    def close_current_doc(self) -> None:
        _close_current_doc(self)

    def open_pdf_at_index(self, index: int) -> None:
        _open_pdf_at_index(self, index)

    def render_current_page(self) -> None:
        _render_current_page(self)

    def update_navigation_ui(self) -> None:
        _update_navigation_ui(self)

    def sync_preview(self) -> None:
        _sync_preview(self)

    def append_log(self, msg: str) -> None:
        _append_log(self, msg)

    def current_document(self) -> Optional[Document]:
        """Session document shown in the preview, if it still exists."""
        if self.current_doc_id is None:
            return None
        try:
            return self.session.get(self.current_doc_id)
        except KeyError:
            return None

    def dialog_options(self) -> QFileDialog.Option:
        if self.capabilities.native_dialogs:
            return QFileDialog.Option(0)
        return QFileDialog.Option.DontUseNativeDialog

    # Toolbar actions
    def add_pdfs(self) -> None:
        pick_pdf_files(self)

    def pick_signature_image(self) -> None:
        select_signature_file(self)

    def clear_files(self) -> None:
        _clear_files(self)

    def show_about(self) -> None:
        QMessageBox.about(
            self, f"About {APP_TITLE}",
            f"{APP_TITLE} {APP_VERSION}\n\n"
            "Place one signature image on many PDF documents at once.",
        )

    # =================================================================
    # Change Notifications
    # =================================================================
    def on_positions_changed(self) -> None:
        """A position was set from the list, the dialog or a preview click."""
        refresh_file_list(self)
        document = self.current_document()
        if document is not None and document.position is not None and self.current_page_count:
            self.current_page_index = resolve_page_index(self.current_page_count, document.position.page)
        self.update_navigation_ui()
        self.render_current_page()

    def on_signature_changed(self) -> None:
        self._preview_stamp = None
        self.render_current_page()

    # =================================================================
    # Preview view
    # =================================================================
    def set_zoom(self, zoom: float, anchor: Optional[QPoint] = None) -> None:
        """
        Clamp and apply a preview zoom level.

        With ``anchor`` (viewport coordinates) the page point under it stays
        put, as expected for Ctrl+wheel zooming.
        """
        zoom = round(min(max(zoom, PREVIEW_ZOOM_MIN), PREVIEW_ZOOM_MAX), 2)
        if zoom == self._user_zoom:
            return

        hbar = self.preview_scroll.horizontalScrollBar()
        vbar = self.preview_scroll.verticalScrollBar()
        ratio = zoom / self._user_zoom
        self._user_zoom = zoom

        self.zoom_label.setText(f"{zoom * 100:.0f}%")
        self.preview_widget.set_user_zoom(zoom)

        if anchor is not None:
            hbar.setValue(int((hbar.value() + anchor.x()) * ratio) - anchor.x())
            vbar.setValue(int((vbar.value() + anchor.y()) * ratio) - anchor.y())

    def _on_overlay_toggled(self, show_original: bool) -> None:
        self._show_signature = not show_original
        self.btn_toggle_overlay.setText("Signed" if show_original else "Original")
        self.render_current_page()

    def closeEvent(self, event) -> None:
        if self._worker_thread is not None:
            logger.info("Waiting for the signing batch to finish before closing")
            self._worker_thread.wait()
        self.close_current_doc()
        super().closeEvent(event)
