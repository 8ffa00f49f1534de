"""Files tab: document list, selection, per-document positions, list context menu."""
from __future__ import annotations

from typing import Iterable, List, TYPE_CHECKING

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGroupBox, QLineEdit,
    QPushButton, QListWidgetItem, QFileDialog, QMenu, QLabel, QCheckBox,
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QAction

from core.constants import (
    PDF_FILE_FILTERS, QUICK_POSITION_PAGES, DEFAULT_POSITION_X, DEFAULT_POSITION_Y,
)
from core.models import Document, Position
from widgets.file_drop_list import PdfDropListWidget

if TYPE_CHECKING:
    from ui.main_window import MainWindow

DOC_ID_ROLE = Qt.UserRole


def setup_files_tab(win: MainWindow) -> None:
    """Create the Files tab with the document list and the sign button."""
    tab = QWidget()
    layout = QVBoxLayout(tab)

    list_group = QGroupBox("Documents")
    list_layout = QVBoxLayout(list_group)

    top_row = QHBoxLayout()
    win.chk_select_all = QCheckBox("Select All")
    win.btn_add_files = QPushButton("Add PDFs...")
    top_row.addWidget(win.chk_select_all)
    top_row.addStretch(1)
    top_row.addWidget(win.btn_add_files)
    list_layout.addLayout(top_row)

    win.file_search_input = QLineEdit()
    win.file_search_input.setPlaceholderText("Search files...")
    win.file_search_input.setClearButtonEnabled(True)
    win.file_search_input.textChanged.connect(lambda text: _filter_list(win, text))
    list_layout.addWidget(win.file_search_input)

    win.file_list = PdfDropListWidget()
    win.file_list.setContextMenuPolicy(Qt.CustomContextMenu)
    win.file_list.customContextMenuRequested.connect(
        lambda pos: show_list_context_menu(win, pos)
    )
    win.file_list.itemDoubleClicked.connect(
        lambda item: on_list_item_double_clicked(win, item)
    )
    list_layout.addWidget(win.file_list)

    win.file_stats_label = QLabel("Selected: 0 / Total: 0")
    list_layout.addWidget(win.file_stats_label)
    layout.addWidget(list_group, 1)

    win.btn_sign = QPushButton("Sign 0 Document(s)")
    win.btn_sign.setEnabled(False)
    layout.addWidget(win.btn_sign)

    win.right_tabs.addTab(tab, "Files")


# =====================================================================
# Adding / Removing
# =====================================================================

def pick_pdf_files(win: MainWindow) -> None:
    """Open a file dialog and add the chosen PDFs."""
    paths, _ = QFileDialog.getOpenFileNames(
        win, "Select PDF Documents", "", PDF_FILE_FILTERS, options=win.dialog_options()
    )
    if paths:
        add_pdf_paths(win, paths)


def add_pdf_paths(win: MainWindow, paths: Iterable[str]) -> None:
    """Load PDF files into the session and refresh the list."""
    paths = list(paths)
    added = win.session.add_files(paths)
    skipped = len(paths) - len(added)

    for doc in added:
        win.append_log(f"Added: {doc.name}")
    if skipped:
        win.append_log(f"Skipped {skipped} file(s) that are not readable PDFs.")

    refresh_file_list(win)
    if added and win.current_doc is None:
        win.open_pdf_at_index(win.session.index_of(added[0].id))


def remove_documents(win: MainWindow, doc_ids: Iterable[str]) -> None:
    for doc_id in list(doc_ids):
        name = win.session.get(doc_id).name
        win.session.remove_document(doc_id)
        win.append_log(f"Removed: {name}")
    refresh_file_list(win)
    win.sync_preview()


def clear_files(win: MainWindow) -> None:
    if not win.session.documents:
        return
    win.session.clear()
    win.append_log("Cleared all documents.")
    refresh_file_list(win)
    win.sync_preview()


# =====================================================================
# List Rendering
# =====================================================================

def describe_document(doc: Document) -> str:
    """Second line of a list row: size and position marker."""
    detail = format_size(len(doc.content))
    if doc.position is not None:
        detail += f"  •  Position set (page {doc.position.page})"
    return detail


def refresh_file_list(win: MainWindow) -> None:
    """Rebuild the list widget from the session documents."""
    current_id = win.current_doc_id

    win.file_list.blockSignals(True)
    try:
        win.file_list.clear()
        for doc in win.session.documents:
            item = QListWidgetItem(f"{doc.name}\n{describe_document(doc)}")
            item.setData(DOC_ID_ROLE, doc.id)
            item.setToolTip(doc.source_path or doc.name)
            item.setFlags(item.flags() | Qt.ItemIsUserCheckable)
            item.setCheckState(Qt.Checked if doc.selected else Qt.Unchecked)
            if doc.id == current_id:
                font = item.font()
                font.setBold(True)
                item.setFont(font)
            win.file_list.addItem(item)
    finally:
        win.file_list.blockSignals(False)

    _filter_list(win, win.file_search_input.text())
    update_file_stats(win)


def update_file_stats(win: MainWindow) -> None:
    """Update the stats label, Select All checkbox and sign button."""
    total = len(win.session.documents)
    selected = len(win.session.selected_documents())

    win.file_stats_label.setText(f"Selected: {selected} / Total: {total}")

    win.chk_select_all.blockSignals(True)
    win.chk_select_all.setChecked(win.session.all_selected)
    win.chk_select_all.setEnabled(total > 0)
    win.chk_select_all.blockSignals(False)

    win.btn_sign.setText(f"Sign {selected} Document(s)")
    win.btn_sign.setEnabled(selected > 0 and win._worker_thread is None)


def _filter_list(win: MainWindow, text: str) -> None:
    search = text.strip().lower()
    for row in range(win.file_list.count()):
        item = win.file_list.item(row)
        name = item.text().split("\n", 1)[0].lower()
        item.setHidden(bool(search) and search not in name)


def _item_doc_id(item: QListWidgetItem) -> str:
    return item.data(DOC_ID_ROLE)


def _highlighted_doc_ids(win: MainWindow) -> List[str]:
    return [_item_doc_id(item) for item in win.file_list.selectedItems()]


# =====================================================================
# Selection
# =====================================================================

def on_list_item_changed(win: MainWindow, item: QListWidgetItem) -> None:
    """Mirror a checkbox change into the session."""
    doc_id = _item_doc_id(item)
    if doc_id is None:
        return
    win.session.set_selected(doc_id, item.checkState() == Qt.Checked)
    update_file_stats(win)


def on_select_all_toggled(win: MainWindow, checked: bool) -> None:
    win.session.select_all(checked)
    refresh_file_list(win)


def _set_highlighted_selected(win: MainWindow, selected: bool) -> None:
    for doc_id in _highlighted_doc_ids(win):
        win.session.set_selected(doc_id, selected)
    refresh_file_list(win)


def on_list_item_double_clicked(win: MainWindow, item: QListWidgetItem) -> None:
    """Preview the double-clicked document."""
    doc_id = _item_doc_id(item)
    if doc_id is None:
        return
    index = win.session.index_of(doc_id)
    if index != win.current_file_index:
        win.open_pdf_at_index(index)


# =====================================================================
# Positions
# =====================================================================

def set_quick_position(win: MainWindow, doc_ids: Iterable[str], page: int) -> None:
    """Place the signature at the default offset on ``page``."""
    position = Position(x=DEFAULT_POSITION_X, y=DEFAULT_POSITION_Y, page=page)
    for doc_id in doc_ids:
        win.session.set_position(doc_id, position)
    win.on_positions_changed()


def clear_positions(win: MainWindow, doc_ids: Iterable[str]) -> None:
    for doc_id in doc_ids:
        win.session.clear_position(doc_id)
    win.on_positions_changed()


def open_position_dialog(win: MainWindow, doc_id: str) -> None:
    """Numeric position entry for one document or every selected one."""
    from dialogs.position_dialog import PositionDialog

    doc = win.session.get(doc_id)
    dlg = PositionDialog(
        doc.name,
        position=doc.position or win.session.default_position,
        selected_count=len(win.session.selected_documents()),
        parent=win,
    )
    if not dlg.exec():
        return

    position = dlg.get_position()
    if dlg.apply_to_selected():
        count = win.session.set_position_for_selected(position)
        win.append_log(f"Position set for {count} selected document(s).")
    else:
        win.session.set_position(doc_id, position)
        win.append_log(f"Position set for {doc.name}.")
    win.on_positions_changed()


def show_list_context_menu(win: MainWindow, position) -> None:
    """Show right-click context menu for the document list."""
    item = win.file_list.itemAt(position)
    if item is not None and not item.isSelected():
        win.file_list.setCurrentItem(item)

    doc_ids = _highlighted_doc_ids(win)
    has_selection = bool(doc_ids)

    menu = QMenu()

    check_action = QAction("Check Highlighted", win)
    uncheck_action = QAction("Uncheck Highlighted", win)
    check_action.triggered.connect(lambda: _set_highlighted_selected(win, True))
    uncheck_action.triggered.connect(lambda: _set_highlighted_selected(win, False))
    check_action.setEnabled(has_selection)
    uncheck_action.setEnabled(has_selection)
    menu.addAction(check_action)
    menu.addAction(uncheck_action)

    menu.addSeparator()

    quick_menu = menu.addMenu("Quick Position")
    quick_menu.setEnabled(has_selection)
    for page in QUICK_POSITION_PAGES:
        action = QAction(f"Page {page}", win)
        action.triggered.connect(lambda _=False, p=page: set_quick_position(win, doc_ids, p))
        quick_menu.addAction(action)

    set_action = QAction("Set Position...", win)
    set_action.setEnabled(len(doc_ids) == 1)
    if doc_ids:
        set_action.triggered.connect(lambda: open_position_dialog(win, doc_ids[0]))
    menu.addAction(set_action)

    clear_action = QAction("Clear Position", win)
    clear_action.setEnabled(
        any(win.session.get(doc_id).position is not None for doc_id in doc_ids)
    )
    clear_action.triggered.connect(lambda: clear_positions(win, doc_ids))
    menu.addAction(clear_action)

    menu.addSeparator()

    remove_action = QAction("Remove", win)
    remove_action.setEnabled(has_selection)
    remove_action.triggered.connect(lambda: remove_documents(win, doc_ids))
    menu.addAction(remove_action)

    menu.exec(win.file_list.viewport().mapToGlobal(position))


def format_size(size_bytes: int) -> str:
    """Format a byte count into a human-readable string."""
    size = float(size_bytes)
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"
