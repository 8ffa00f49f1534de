"""Document list that accepts PDF files dropped from the file manager."""

from typing import List

from PySide6.QtCore import Signal
from PySide6.QtGui import QDragEnterEvent, QDragMoveEvent, QDropEvent
from PySide6.QtWidgets import QListWidget, QAbstractItemView


def local_paths_from_mime(mime_data) -> List[str]:
    if not mime_data.hasUrls():
        return []
    return [url.toLocalFile() for url in mime_data.urls() if url.isLocalFile()]


class PdfDropListWidget(QListWidget):
    """
    QListWidget with checkable rows and external file drops.

    Only ``.pdf`` paths are forwarded through ``files_dropped``; anything else
    in a drop is ignored.
    """

    files_dropped = Signal(list)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setAcceptDrops(True)
        self.setDragDropMode(QAbstractItemView.DropOnly)
        self.setSelectionMode(QAbstractItemView.ExtendedSelection)
        self.setAlternatingRowColors(True)

    @staticmethod
    def _pdf_paths(event) -> List[str]:
        return [p for p in local_paths_from_mime(event.mimeData()) if p.lower().endswith(".pdf")]

    def dragEnterEvent(self, event: QDragEnterEvent) -> None:
        if self._pdf_paths(event):
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragMoveEvent(self, event: QDragMoveEvent) -> None:
        if self._pdf_paths(event):
            event.acceptProposedAction()
        else:
            event.ignore()

    def dropEvent(self, event: QDropEvent) -> None:
        paths = self._pdf_paths(event)
        if not paths:
            event.ignore()
            return
        event.acceptProposedAction()
        self.files_dropped.emit(paths)
