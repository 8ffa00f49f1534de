"""Sequential batch signing of the selected documents."""
from __future__ import annotations

import logging
import os
from typing import Callable, Iterable, List, Optional

from core.constants import SIGNED_SUFFIX
from core.models import Document, Position, SignatureConfig, SignResult
from core.pdf_operations import PDFOperations, PreparedStamp

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]
ErrorCallback = Callable[[Document, Exception], None]


def signed_file_name(name: str) -> str:
    """``contract.pdf`` -> ``contract_signed.pdf``; names without extension get ``.pdf``."""
    stem, ext = os.path.splitext(name)
    if not ext:
        return f"{name}{SIGNED_SUFFIX}.pdf"
    return f"{stem}{SIGNED_SUFFIX}{ext}"


def sign_documents(
    documents: Iterable[Document],
    config: SignatureConfig,
    default_position: Position,
    pdf_ops: Optional[PDFOperations] = None,
    on_progress: Optional[ProgressCallback] = None,
    on_error: Optional[ErrorCallback] = None,
) -> List[SignResult]:
    """
    Sign every selected document, one after another.

    Each document uses its own position when set, otherwise
    ``default_position``. A document that fails is logged, reported through
    ``on_error`` and left out of the result; the rest are still processed.
    """
    pdf_ops = pdf_ops or PDFOperations()
    prepared = PreparedStamp(config.image, pdf_ops)

    selected = [doc for doc in documents if doc.selected]
    total = len(selected)
    results: List[SignResult] = []

    for idx, doc in enumerate(selected):
        if on_progress:
            on_progress(idx, total, doc.name)

        position = doc.position or default_position
        try:
            signed = pdf_ops.sign_pdf_bytes(doc.content, config, position, prepared)
        except Exception as e:
            logger.error("Failed to sign %s: %s", doc.name, e)
            if on_error:
                on_error(doc, e)
            continue

        results.append(SignResult(file_name=signed_file_name(doc.name), content=signed))
        logger.info("Signed %s (page %d)", doc.name, position.page)

    return results
