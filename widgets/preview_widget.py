"""
Clickable PDF page preview.

The page is drawn centered on a neutral canvas. Clicking the page emits the
clicked point in page points (origin top-left of the page as displayed).
While the mouse is over the page a box the size of the signature follows
the cursor, and a second box marks where the signature currently sits.
"""

from typing import NamedTuple, Optional, Tuple

from PySide6.QtCore import Qt, QEvent, QPoint, QRect, QRectF, QSize, Signal
from PySide6.QtGui import (
    QColor, QImage, QMouseEvent, QPainter, QPaintEvent, QPalette, QPen, QPixmap, QWheelEvent,
)
from PySide6.QtWidgets import QScrollArea, QSizePolicy, QWidget

import fitz

from core.anchor import widget_point_to_page_point

Box = Tuple[float, float, float, float]


class CanvasLayout(NamedTuple):
    canvas_size: QSize
    page_rect: QRect
    scale: float  # screen pixels per page point


def layout_page(
    viewport: QSize,
    image_size: QSize,
    pixels_per_point: float,
    zoom: float,
    padding: int,
    scrollbar_margin: int,
) -> Optional[CanvasLayout]:
    """
    Fit ``image_size`` into ``viewport`` (minus padding) and apply ``zoom``.

    The canvas snaps to the viewport when the page overflows it by less than
    a scrollbar, so scrollbars appearing cannot shrink the viewport and
    trigger another layout pass.
    """
    room_w = viewport.width() - 2 * padding
    room_h = viewport.height() - 2 * padding
    if room_w <= 0 or room_h <= 0 or image_size.isEmpty():
        return None

    fit = min(room_w / image_size.width(), room_h / image_size.height())
    pixel_scale = fit * zoom
    page_w = int(image_size.width() * pixel_scale)
    page_h = int(image_size.height() * pixel_scale)

    need_w = page_w + 2 * padding
    need_h = page_h + 2 * padding
    canvas_w = viewport.width() if need_w <= viewport.width() + scrollbar_margin else need_w
    canvas_h = viewport.height() if need_h <= viewport.height() + scrollbar_margin else need_h

    page_rect = QRect((canvas_w - page_w) // 2, (canvas_h - page_h) // 2, page_w, page_h)
    return CanvasLayout(QSize(canvas_w, canvas_h), page_rect, pixel_scale * pixels_per_point)


class PDFPreviewWidget(QWidget):
    """Renders one page and turns clicks into page coordinates."""

    page_clicked = Signal(float, float)

    CANVAS_LIGHT = "#d4d4d7"
    CANVAS_DARK = "#2a2a2e"
    MARKER_COLOR = "#1976d2"
    GHOST_COLOR = "#ef6c00"
    PADDING = 20

    def __init__(self, parent=None):
        super().__init__(parent)

        self._pixmap: Optional[QPixmap] = None
        self._render_zoom: float = 1.0
        self._user_zoom: float = 1.0
        self._viewport: Optional[QSize] = None
        self._scrollbar_margin: int = 0
        self._layout: Optional[CanvasLayout] = None
        self._relayout_pending = False

        self._marker: Optional[Box] = None
        self._ghost_size: Optional[Tuple[float, float]] = None
        self._hover: Optional[QPoint] = None

        self.setSizePolicy(QSizePolicy.Ignored, QSizePolicy.Ignored)
        self.setMinimumSize(100, 100)
        self.setMouseTracking(True)

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------
    def set_page(self, page: fitz.Page, zoom: float = 1.5) -> None:
        """Rasterize ``page`` at ``zoom`` (pixels per point) and show it."""
        pix = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom), alpha=False)
        image = QImage(pix.samples, pix.width, pix.height, pix.stride, QImage.Format_RGB888).copy()
        self._pixmap = QPixmap.fromImage(image)
        self._render_zoom = zoom
        self._relayout()

    def clear_preview(self) -> None:
        self._pixmap = None
        self._marker = None
        self._hover = None
        self._relayout()

    def set_marker(self, box: Optional[Box]) -> None:
        """Box (x0, y0, x1, y1) in displayed page points where the signature sits."""
        self._marker = box
        self.update()

    def set_ghost_size(self, size: Optional[Tuple[float, float]]) -> None:
        """Width/height in points of the hover box; None disables it."""
        self._ghost_size = size
        self.update()

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    def set_user_zoom(self, zoom: float, render: bool = True) -> None:
        self._user_zoom = zoom
        if render:
            self._relayout()

    def set_viewport(self, size: QSize, scrollbar_margin: int) -> None:
        self._viewport = size
        self._scrollbar_margin = scrollbar_margin
        self._relayout()

    def _relayout(self) -> None:
        if self._relayout_pending:
            return
        self._relayout_pending = True
        try:
            viewport = self._viewport or self.size()
            if self._pixmap is None:
                self._layout = None
                self.resize(viewport)
            else:
                self._layout = layout_page(
                    viewport,
                    self._pixmap.size(),
                    self._render_zoom,
                    self._user_zoom,
                    self.PADDING,
                    self._scrollbar_margin,
                )
                if self._layout is not None:
                    self.resize(self._layout.canvas_size)
            self.update()
        finally:
            self._relayout_pending = False

    def _to_screen(self, box: Box) -> QRectF:
        scale = self._layout.scale
        origin = self._layout.page_rect.topLeft()
        x0, y0, x1, y1 = box
        return QRectF(origin.x() + x0 * scale, origin.y() + y0 * scale, (x1 - x0) * scale, (y1 - y0) * scale)

    def _page_point(self, pos: QPoint) -> Optional[Tuple[float, float]]:
        if self._layout is None or not self._layout.page_rect.contains(pos):
            return None
        origin = self._layout.page_rect.topLeft()
        return widget_point_to_page_point(pos.x(), pos.y(), origin.x(), origin.y(), self._layout.scale)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def mousePressEvent(self, event: QMouseEvent) -> None:
        point = self._page_point(event.position().toPoint()) if event.button() == Qt.LeftButton else None
        if point is None:
            super().mousePressEvent(event)
            return
        self.page_clicked.emit(*point)
        event.accept()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        pos = event.position().toPoint()
        over_page = self._page_point(pos) is not None
        self.setCursor(Qt.CrossCursor if over_page else Qt.ArrowCursor)
        self._hover = pos if over_page else None
        self.update()
        super().mouseMoveEvent(event)

    def leaveEvent(self, event: QEvent) -> None:
        self._hover = None
        self.update()
        super().leaveEvent(event)

    def changeEvent(self, event: QEvent) -> None:
        if event.type() == QEvent.PaletteChange:
            self.update()
        super().changeEvent(event)

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        if self._viewport is None:
            self._relayout()

    def paintEvent(self, event: QPaintEvent) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.SmoothPixmapTransform, True)

        dark = self.palette().color(QPalette.Window).lightness() < 128
        painter.fillRect(event.rect(), QColor(self.CANVAS_DARK if dark else self.CANVAS_LIGHT))

        if self._layout is None or self._pixmap is None:
            painter.setPen(self.palette().color(QPalette.PlaceholderText))
            painter.drawText(self.rect(), Qt.AlignCenter, "Add PDF files to see a preview")
            painter.end()
            return

        painter.drawPixmap(self._layout.page_rect, self._pixmap)
        painter.setClipRect(self._layout.page_rect)

        if self._marker is not None:
            self._draw_box(painter, self._to_screen(self._marker), self.MARKER_COLOR, Qt.DashLine)

        # The layout may have changed since the last mouse move
        hover = self._page_point(self._hover) if self._hover is not None else None
        if hover is not None and self._ghost_size is not None:
            x, y = hover
            w, h = self._ghost_size
            self._draw_box(painter, self._to_screen((x, y, x + w, y + h)), self.GHOST_COLOR, Qt.DotLine)

        painter.end()

    @staticmethod
    def _draw_box(painter: QPainter, rect: QRectF, color: str, style: Qt.PenStyle) -> None:
        fill = QColor(color)
        fill.setAlpha(40)
        pen = QPen(QColor(color))
        pen.setStyle(style)
        painter.setPen(pen)
        painter.fillRect(rect, fill)
        painter.drawRect(rect)


class PreviewScrollArea(QScrollArea):
    """Scroll area that keeps the preview sized to its viewport and reports Ctrl+wheel zoom."""

    # +1 / -1 and the cursor position in viewport coordinates
    zoom_requested = Signal(int, QPoint)

    def wheelEvent(self, event: QWheelEvent) -> None:
        if not event.modifiers() & Qt.ControlModifier:
            super().wheelEvent(event)
            return
        step = 1 if event.angleDelta().y() > 0 else -1
        self.zoom_requested.emit(step, event.position().toPoint())
        event.accept()

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        preview = self.widget()
        if isinstance(preview, PDFPreviewWidget):
            margin = max(
                self.verticalScrollBar().sizeHint().width(),
                self.horizontalScrollBar().sizeHint().height(),
            )
            preview.set_viewport(self.viewport().size(), margin)
