"""Log tab setup and user notification helpers."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QTextEdit, QMessageBox,
)

if TYPE_CHECKING:
    from ui.main_window import MainWindow

logger = logging.getLogger(__name__)

SEVERITY_INFO = "info"
SEVERITY_WARNING = "warning"
SEVERITY_ERROR = "error"


def setup_log_tab(win: MainWindow) -> None:
    """Create the Log tab with a read-only text viewer."""
    tab = QWidget()
    layout = QVBoxLayout(tab)
    win.log_viewer = QTextEdit()
    win.log_viewer.setReadOnly(True)
    layout.addWidget(win.log_viewer)
    win.left_tabs.addTab(tab, "Log")


def append_log(win: MainWindow, msg: str) -> None:
    """Append a message to the log viewer with auto-scroll."""
    if getattr(win, "log_viewer", None) is not None:
        win.log_viewer.append(msg)
    else:
        logger.info(msg)


def notify(win: MainWindow, severity: str, title: str, message: str) -> None:
    """Show ``message`` to the user. Non-interactive sessions only log it."""
    level = {
        SEVERITY_INFO: logging.INFO,
        SEVERITY_WARNING: logging.WARNING,
        SEVERITY_ERROR: logging.ERROR,
    }.get(severity, logging.INFO)
    logger.log(level, "%s: %s", title, message)

    if not win.capabilities.interactive:
        return

    if severity == SEVERITY_ERROR:
        QMessageBox.critical(win, title, message)
    elif severity == SEVERITY_WARNING:
        QMessageBox.warning(win, title, message)
    else:
        QMessageBox.information(win, title, message)


def show_info(win: MainWindow, title: str, message: str) -> None:
    notify(win, SEVERITY_INFO, title, message)


def show_warning(win: MainWindow, title: str, message: str) -> None:
    notify(win, SEVERITY_WARNING, title, message)


def show_error(win: MainWindow, title: str, message: str) -> None:
    notify(win, SEVERITY_ERROR, title, message)
