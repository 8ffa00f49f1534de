"""Exception hierarchy for signing, embedding and saving."""
from __future__ import annotations

from typing import Optional


class SignerError(Exception):
    """Base exception for all PDF Batch Signer errors."""

    def __init__(self, message: str, document: Optional[str] = None):
        self.message = message
        self.document = document
        super().__init__(message)


class ValidationError(SignerError):
    """Missing or invalid user input, reported before any processing starts."""


class EmbeddingError(SignerError):
    """Failure while stamping a single document."""


class MissingSignatureError(EmbeddingError):
    def __init__(self, document: Optional[str] = None):
        super().__init__("No signature image provided", document)


class UnsupportedImageFormatError(EmbeddingError):
    def __init__(self, mime_type: str, document: Optional[str] = None):
        self.mime_type = mime_type
        super().__init__(
            f"Unsupported image format '{mime_type}'. Use PNG or JPEG.", document
        )


class PageNotFoundError(EmbeddingError):
    def __init__(self, requested_page: int, document: Optional[str] = None):
        self.requested_page = requested_page
        super().__init__(f"Page not found: {requested_page}", document)


class DocumentLoadError(EmbeddingError):
    def __init__(self, reason: str, document: Optional[str] = None):
        message = "Could not open PDF"
        if reason:
            message += f": {reason}"
        super().__init__(message, document)


class PersistenceError(SignerError):
    def __init__(self, file_name: str, reason: Optional[str] = None):
        self.file_name = file_name
        message = f"Could not save {file_name}"
        if reason:
            message += f": {reason}"
        super().__init__(message, file_name)
