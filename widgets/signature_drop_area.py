"""
Signature drop zone.

Shows a hint while empty and a thumbnail of the chosen signature once one is
set. Accepts a single image file dropped from the file manager, and a click
anywhere on it opens the file browser.
"""

import os
from typing import Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QPixmap, QDragEnterEvent, QDropEvent, QMouseEvent
from PySide6.QtWidgets import QLabel, QFrame

from core.constants import DROP_AREA_MIN_HEIGHT, IMAGE_EXTENSION_MIME_TYPES, SIGNATURE_THUMB_MAX_HEIGHT
from widgets.file_drop_list import local_paths_from_mime


class SignatureDropArea(QLabel):

    image_dropped = Signal(str)
    clicked = Signal()

    HINT_TEXT = "Drop a signature image here\nor click to browse"

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setAcceptDrops(True)
        self.setAlignment(Qt.AlignCenter)
        self.setMinimumHeight(DROP_AREA_MIN_HEIGHT)
        self.setFrameStyle(QFrame.StyledPanel | QFrame.Sunken)
        self.setCursor(Qt.PointingHandCursor)
        self.setWordWrap(True)
        self._set_highlight(False)
        self.clear_image()

    def clear_image(self) -> None:
        self.setPixmap(QPixmap())
        self.setText(self.HINT_TEXT)

    def set_image(self, pixmap: Optional[QPixmap], fallback_text: str = "") -> None:
        """Show ``pixmap`` scaled to the thumbnail height, or ``fallback_text`` if it is null."""
        if pixmap is None or pixmap.isNull():
            self.setPixmap(QPixmap())
            self.setText(fallback_text or self.HINT_TEXT)
            return
        if pixmap.height() > SIGNATURE_THUMB_MAX_HEIGHT:
            pixmap = pixmap.scaledToHeight(SIGNATURE_THUMB_MAX_HEIGHT, Qt.SmoothTransformation)
        self.setText("")
        self.setPixmap(pixmap)

    def _set_highlight(self, active: bool) -> None:
        style = "border: 2px dashed #1976d2;" if active else "border: 2px dashed palette(mid);"
        self.setStyleSheet(f"QLabel {{ {style} border-radius: 6px; padding: 8px; }}")

    @staticmethod
    def _image_path(event) -> Optional[str]:
        for path in local_paths_from_mime(event.mimeData()):
            if os.path.splitext(path)[1].lower() in IMAGE_EXTENSION_MIME_TYPES:
                return path
        return None

    def dragEnterEvent(self, event: QDragEnterEvent) -> None:
        if self._image_path(event):
            self._set_highlight(True)
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragLeaveEvent(self, event) -> None:
        self._set_highlight(False)
        super().dragLeaveEvent(event)

    def dropEvent(self, event: QDropEvent) -> None:
        self._set_highlight(False)
        path = self._image_path(event)
        if path is None:
            event.ignore()
            return
        event.acceptProposedAction()
        self.image_dropped.emit(path)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if event.button() == Qt.LeftButton:
            self.clicked.emit()
        super().mouseReleaseEvent(event)
