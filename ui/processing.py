"""Batch signing: SigningThread, ProgressDialog, and orchestration."""
from __future__ import annotations

import dataclasses
import logging
import os
from typing import List, Optional, Tuple, TYPE_CHECKING

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QLabel, QProgressBar, QDialog, QFileDialog,
)
from PySide6.QtCore import Qt, QThread, Signal

from core.batch import sign_documents
from core.constants import (
    PROGRESS_DIALOG_WIDTH, PROGRESS_DIALOG_HEIGHT, STATUS_LABEL_MIN_HEIGHT,
    MAX_ERRORS_DISPLAYED, PDF_FILE_FILTERS,
)
from core.errors import ValidationError
from core.models import Document, Position, SignatureConfig
from core.pdf_operations import PDFOperations
from core.persistence import SaveOutcome

if TYPE_CHECKING:
    from ui.main_window import MainWindow

logger = logging.getLogger(__name__)

MSG_SUCCESS = "{count} document(s) signed successfully!"
MSG_NONE_SIGNED = "No document was signed. Check the files and try again."
MSG_UNEXPECTED = "Error while signing documents. Check the log for details."


# =====================================================================
# WORKER THREAD
# =====================================================================
class SigningThread(QThread):
    """Background thread that signs the selected documents one after another."""

    progress_update = Signal(int, str)
    log_message = Signal(str)
    finished_processing = Signal(list, list)
    processing_failed = Signal(str)

    def __init__(
        self,
        documents: List[Document],
        config: SignatureConfig,
        default_position: Position,
        pdf_ops_instance: Optional[PDFOperations] = None,
    ):
        super().__init__()
        self.documents = documents
        self.config = config
        self.default_position = default_position
        self.pdf_ops = pdf_ops_instance or PDFOperations()
        self.errors: List[str] = []

    def run(self) -> None:
        self.setPriority(QThread.LowPriority)

        try:
            results = sign_documents(
                self.documents,
                self.config,
                self.default_position,
                pdf_ops=self.pdf_ops,
                on_progress=self._on_progress,
                on_error=self._on_error,
            )
        except Exception as e:
            logger.exception("Signing batch failed")
            self.processing_failed.emit(str(e))
            return

        self.finished_processing.emit(results, self.errors)

    def _on_progress(self, idx: int, total: int, name: str) -> None:
        self.progress_update.emit(idx, f"Signing: {name}")

    def _on_error(self, doc: Document, error: Exception) -> None:
        msg = f"Failed {doc.name}: {error}"
        self.errors.append(msg)
        self.log_message.emit(msg)


# =====================================================================
# PROGRESS DIALOG
# =====================================================================
class ProgressDialog(QDialog):
    """Fixed-size progress dialog. A running batch cannot be cancelled."""

    def __init__(self, title: str, label_text: str, max_value: int = 0, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setWindowTitle(title)
        self.setFixedSize(PROGRESS_DIALOG_WIDTH, PROGRESS_DIALOG_HEIGHT)
        self.setWindowModality(Qt.WindowModal)
        self.setWindowFlags(
            (self.windowFlags() & ~Qt.WindowContextHelpButtonHint) & ~Qt.WindowCloseButtonHint
        )

        main_layout = QVBoxLayout(self)

        self.status_label = QLabel(label_text)
        self.status_label.setWordWrap(True)
        self.status_label.setAlignment(Qt.AlignLeft | Qt.AlignVCenter)
        self.status_label.setMinimumHeight(STATUS_LABEL_MIN_HEIGHT)
        main_layout.addWidget(self.status_label)

        self.progress_bar = QProgressBar()
        self.progress_bar.setMinimum(0)
        self.progress_bar.setMaximum(max_value)
        self.progress_bar.setValue(0)
        self.progress_bar.setTextVisible(True)
        main_layout.addWidget(self.progress_bar)

    def set_value(self, value: int) -> None:
        self.progress_bar.setValue(value)

    def set_label_text(self, text: str) -> None:
        if len(text) > 50:
            text = text[:47] + "..."
        self.status_label.setText(text)

    def reject(self) -> None:
        # Escape and the window manager close button route here; the batch cannot be cancelled
        pass

    def finish(self) -> None:
        """Hide the dialog once the batch is over (close() would go through reject())."""
        self.done(QDialog.Accepted)


# =====================================================================
# BATCH ORCHESTRATION FUNCTIONS
# =====================================================================

def choose_save_path(win: MainWindow, file_name: str) -> Optional[str]:
    """Ask where to save ``file_name``. Returns None when the user cancels."""
    suggested = os.path.join(win.capabilities.output_dir, file_name)
    path, _ = QFileDialog.getSaveFileName(
        win, "Save Signed PDF", suggested, PDF_FILE_FILTERS,
        options=win.dialog_options(),
    )
    return path or None


def start_signing(win: MainWindow) -> None:
    """Validate the session and start the worker thread."""
    from ui.log_panel import show_warning, append_log

    if win._worker_thread is not None:
        return

    try:
        default_position = win.session.validate_for_signing()
    except ValidationError as e:
        show_warning(win, "Cannot Sign", e.message)
        return

    # Snapshot so edits made while the batch runs do not leak into it
    documents = [dataclasses.replace(doc) for doc in win.session.selected_documents()]
    config = win.session.signature

    append_log(win, f"Signing {len(documents)} document(s)...")

    win._progress_dialog = ProgressDialog("Signing", "Preparing...", len(documents), win)
    win._progress_dialog.show()

    win._worker_thread = SigningThread(documents, config, default_position, win.pdf_ops)
    win._worker_thread.progress_update.connect(lambda idx, msg: _on_worker_progress(win, idx, msg))
    win._worker_thread.log_message.connect(lambda msg: append_log(win, msg))
    win._worker_thread.finished_processing.connect(
        lambda results, errors: _on_worker_finished(win, results, errors)
    )
    win._worker_thread.processing_failed.connect(lambda msg: _on_worker_failed(win, msg))

    win.btn_sign.setEnabled(False)
    win._worker_thread.start()


def _on_worker_progress(win: MainWindow, current_idx: int, message: str) -> None:
    """Handle progress updates from the worker thread."""
    if win._progress_dialog:
        win._progress_dialog.set_value(current_idx)
        win._progress_dialog.set_label_text(message)


def _finish(win: MainWindow) -> None:
    from ui.files_panel import update_file_stats

    if win._progress_dialog:
        win._progress_dialog.finish()
        win._progress_dialog.deleteLater()
        win._progress_dialog = None
    if win._worker_thread is not None:
        win._worker_thread.wait()
        win._worker_thread = None
    update_file_stats(win)


def _on_worker_finished(win: MainWindow, results: list, errors: List[str]) -> None:
    """Persist the signed documents and report the outcome."""
    from ui.log_panel import append_log, notify, show_error

    _finish(win)

    try:
        outcomes = win.persistence_sink.save_all(results)
    except Exception:
        logger.exception("Saving signed documents failed")
        show_error(win, "Error", MSG_UNEXPECTED)
        return

    for line in save_log_lines(outcomes):
        append_log(win, line)

    notify(win, *summarize_signing(len(results), errors))


def _on_worker_failed(win: MainWindow, message: str) -> None:
    from ui.log_panel import append_log, show_error

    _finish(win)
    append_log(win, f"Error: {message}")
    show_error(win, "Error", MSG_UNEXPECTED)


def save_log_lines(outcomes: List[SaveOutcome]) -> List[str]:
    """One log line per signed document, saying whether it was written."""
    lines = []
    for outcome in outcomes:
        if not outcome.saved:
            lines.append(f"Not saved: {outcome.file_name}")
        elif outcome.path:
            lines.append(f"Signed: {outcome.file_name} -> {outcome.path}")
        else:
            lines.append(f"Signed: {outcome.file_name}")
    return lines


def summarize_signing(success: int, error_list: List[str]) -> Tuple[str, str, str]:
    """Severity, title and message for the end-of-batch notification."""
    from ui.log_panel import SEVERITY_ERROR, SEVERITY_INFO, SEVERITY_WARNING

    if success == 0:
        return SEVERITY_ERROR, "Nothing Signed", MSG_NONE_SIGNED

    message = MSG_SUCCESS.format(count=success)
    if not error_list:
        return SEVERITY_INFO, "Complete", message

    detail = "\n".join(error_list[:MAX_ERRORS_DISPLAYED])
    if len(error_list) > MAX_ERRORS_DISPLAYED:
        detail += f"\n...and {len(error_list) - MAX_ERRORS_DISPLAYED} more."
    return SEVERITY_WARNING, "Completed with Errors", f"{message}\nErrors: {len(error_list)}\n\n{detail}"
