"""Plain data types shared by the signer core and the UI."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import NamedTuple, Optional

from core.constants import (
    DEFAULT_POSITION_PAGE,
    DEFAULT_POSITION_X,
    DEFAULT_POSITION_Y,
    DEFAULT_SIGNATURE_OPACITY,
    DEFAULT_SIGNATURE_SIZE,
)
from core.errors import ValidationError


@dataclass(frozen=True)
class Position:
    """Stamp anchor in top-left screen coordinates (PDF points) plus a 1-based page."""
    x: float = DEFAULT_POSITION_X
    y: float = DEFAULT_POSITION_Y
    page: int = DEFAULT_POSITION_PAGE


@dataclass
class Document:
    """A loaded PDF. ``content`` is owned and never modified in place."""
    name: str
    content: bytes = field(repr=False)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    selected: bool = False
    position: Optional[Position] = None
    source_path: Optional[str] = None


@dataclass(frozen=True)
class SignatureConfig:
    """
    Signature settings used for a batch.

    ``image`` is a data URI (``data:<mime>;base64,<data>``) or None when no
    signature has been chosen yet. ``size`` is the stamp width in points.
    """
    image: Optional[str] = None
    size: float = DEFAULT_SIGNATURE_SIZE
    opacity: float = DEFAULT_SIGNATURE_OPACITY

    def __post_init__(self) -> None:
        if not 0.0 <= self.opacity <= 1.0:
            raise ValidationError(f"Opacity must be between 0 and 1, got {self.opacity}")
        if self.size <= 0:
            raise ValidationError(f"Signature size must be positive, got {self.size}")


@dataclass(frozen=True)
class ImagePayload:
    mime_type: str
    data: bytes = field(repr=False)


@dataclass(frozen=True)
class SignResult:
    file_name: str
    content: bytes = field(repr=False)


class StampPlacement(NamedTuple):
    """Final stamp box in PDF space (origin bottom-left)."""
    x: float
    y: float
    width: float
    height: float
