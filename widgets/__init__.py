"""Reusable widget modules for PDF Batch Signer."""

from widgets.preview_widget import PDFPreviewWidget
from widgets.file_drop_list import PdfDropListWidget
from widgets.signature_drop_area import SignatureDropArea

__all__ = ["PDFPreviewWidget", "PdfDropListWidget", "SignatureDropArea"]
