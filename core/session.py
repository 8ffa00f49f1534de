"""
In-memory state of a signing session.

Holds the loaded documents and the current signature settings. The UI never
mutates a Document directly; every change goes through SigningSession so the
selection and position rules live in one place.
"""
from __future__ import annotations

import dataclasses
import logging
import os
from typing import Iterable, List, Optional

from core.errors import ValidationError
from core.models import Document, Position, SignatureConfig

logger = logging.getLogger(__name__)


def is_pdf_path(path: str) -> bool:
    return path.lower().endswith(".pdf")


def load_document_from_path(path: str) -> Document:
    """Read a PDF file into a new, unselected Document."""
    with open(path, "rb") as f:
        content = f.read()
    return Document(name=os.path.basename(path), content=content, source_path=path)


class SigningSession:
    """Documents, selection, positions and signature settings for one run of the app."""

    def __init__(
        self,
        signature: Optional[SignatureConfig] = None,
        default_position: Optional[Position] = None,
    ) -> None:
        self.documents: List[Document] = []
        self.signature: SignatureConfig = signature or SignatureConfig()
        # Fallback for selected documents without their own position
        self.default_position: Optional[Position] = default_position

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------
    def add_document(self, name: str, content: bytes, source_path: Optional[str] = None) -> Document:
        doc = Document(name=name, content=content, source_path=source_path)
        self.documents.append(doc)
        return doc

    def add_files(self, paths: Iterable[str]) -> List[Document]:
        """Load PDF files; non-PDF and unreadable paths are skipped."""
        added: List[Document] = []
        for path in paths:
            if not is_pdf_path(path):
                logger.info("Skipping non-PDF file: %s", path)
                continue
            try:
                doc = load_document_from_path(path)
            except OSError as e:
                logger.warning("Could not read %s: %s", path, e)
                continue
            self.documents.append(doc)
            added.append(doc)
        return added

    def get(self, doc_id: str) -> Document:
        for doc in self.documents:
            if doc.id == doc_id:
                return doc
        raise KeyError(doc_id)

    def index_of(self, doc_id: str) -> int:
        for i, doc in enumerate(self.documents):
            if doc.id == doc_id:
                return i
        raise KeyError(doc_id)

    def remove_document(self, doc_id: str) -> None:
        self.documents.pop(self.index_of(doc_id))

    def clear(self) -> None:
        self.documents = []

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def set_selected(self, doc_id: str, selected: bool) -> None:
        self.get(doc_id).selected = selected

    def select_all(self, selected: bool = True) -> None:
        for doc in self.documents:
            doc.selected = selected

    def selected_documents(self) -> List[Document]:
        return [doc for doc in self.documents if doc.selected]

    @property
    def all_selected(self) -> bool:
        return bool(self.documents) and all(doc.selected for doc in self.documents)

    # ------------------------------------------------------------------
    # Positions
    # ------------------------------------------------------------------
    def set_position(self, doc_id: str, position: Position) -> None:
        """Pages outside the document, zero and below included, sign the last page."""
        self.get(doc_id).position = position

    def clear_position(self, doc_id: str) -> None:
        self.get(doc_id).position = None

    def set_position_for_selected(self, position: Position) -> int:
        """Apply ``position`` to every selected document; returns how many changed."""
        selected = self.selected_documents()
        for doc in selected:
            self.set_position(doc.id, position)
        return len(selected)

    # ------------------------------------------------------------------
    # Signature
    # ------------------------------------------------------------------
    def set_signature_image(self, data_uri: str) -> None:
        self.signature = dataclasses.replace(self.signature, image=data_uri)

    def clear_signature(self) -> None:
        self.signature = dataclasses.replace(self.signature, image=None)

    def set_signature_size(self, size: float) -> None:
        self.signature = dataclasses.replace(self.signature, size=float(size))

    def set_signature_opacity(self, opacity: float) -> None:
        self.signature = dataclasses.replace(self.signature, opacity=float(opacity))

    @property
    def has_signature(self) -> bool:
        return bool(self.signature.image)

    # ------------------------------------------------------------------
    # Pre-flight
    # ------------------------------------------------------------------
    def resolve_default_position(self) -> Optional[Position]:
        """First selected document's own position, else the configured fallback."""
        for doc in self.selected_documents():
            if doc.position is not None:
                return doc.position
        return self.default_position

    def validate_for_signing(self) -> Position:
        """
        Check that a batch can start and return the default position to use.

        Raises:
            ValidationError: nothing selected, no signature image, or no
                position defined anywhere.
        """
        if not self.selected_documents():
            raise ValidationError("Select at least one file to sign.")
        if not self.has_signature:
            raise ValidationError("Add a signature image first.")

        position = self.resolve_default_position()
        if position is None:
            raise ValidationError("Set the signature position for at least one file.")
        return position
