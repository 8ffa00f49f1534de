"""Toolbar setup for the main window."""
from __future__ import annotations

from typing import TYPE_CHECKING

from PySide6.QtWidgets import QToolBar
from PySide6.QtCore import Qt
from PySide6.QtGui import QAction

if TYPE_CHECKING:
    from ui.main_window import MainWindow


def setup_toolbar(win: MainWindow) -> None:
    """Create the main toolbar with file, signature and help actions."""
    toolbar = QToolBar("Main Toolbar")
    toolbar.setMovable(False)
    toolbar.setToolButtonStyle(Qt.ToolButtonTextOnly)
    win.addToolBar(Qt.TopToolBarArea, toolbar)

    win.action_add_pdfs = QAction("Add PDFs", win)
    win.action_add_pdfs.setStatusTip("Add PDF documents to sign")
    win.action_add_pdfs.triggered.connect(lambda: win.add_pdfs())
    toolbar.addAction(win.action_add_pdfs)

    win.action_pick_signature = QAction("Signature Image", win)
    win.action_pick_signature.setStatusTip("Choose the signature image")
    win.action_pick_signature.triggered.connect(lambda: win.pick_signature_image())
    toolbar.addAction(win.action_pick_signature)

    toolbar.addSeparator()

    win.action_clear_files = QAction("Clear Files", win)
    win.action_clear_files.setStatusTip("Remove all documents from the list")
    win.action_clear_files.triggered.connect(lambda: win.clear_files())
    toolbar.addAction(win.action_clear_files)

    toolbar.addSeparator()

    win.action_about = QAction("About", win)
    win.action_about.setStatusTip("About")
    win.action_about.triggered.connect(lambda: win.show_about())
    toolbar.addAction(win.action_about)
