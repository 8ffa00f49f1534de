"""
Where signed PDFs go.

Two variants, picked once at startup:

- DialogSink asks the user for a path for every file (a save dialog). If
  writing fails it hands the file to its fallback sink once.
- DirectorySink drops files into an output folder without asking, the way a
  browser download does, and reports no path back.
"""
from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from typing import Callable, Iterable, List, NamedTuple, Optional

from core.errors import PersistenceError
from core.models import SignResult

logger = logging.getLogger(__name__)

PathChooser = Callable[[str], Optional[str]]


def write_bytes(path: str, content: bytes) -> None:
    """Write ``content`` to ``path``, wrapping OS failures in PersistenceError."""
    try:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, "wb") as f:
            f.write(content)
    except OSError as e:
        raise PersistenceError(os.path.basename(path), str(e)) from e


class SaveOutcome(NamedTuple):
    file_name: str
    saved: bool
    path: Optional[str] = None  # only known when the variant picked it


class PersistenceSink(ABC):
    """Saves a signed document under a suggested file name."""

    @abstractmethod
    def store(self, file_name: str, content: bytes) -> SaveOutcome:
        """Persist ``content`` and say whether anything was written."""

    def save(self, file_name: str, content: bytes) -> Optional[str]:
        """Persist ``content``. Returns the written path when the variant knows it."""
        return self.store(file_name, content).path

    def save_all(self, results: Iterable[SignResult]) -> List[SaveOutcome]:
        """Save results one at a time; a failed save is logged and skipped."""
        outcomes: List[SaveOutcome] = []
        for result in results:
            try:
                outcomes.append(self.store(result.file_name, result.content))
            except PersistenceError as e:
                logger.error("Error saving %s: %s", result.file_name, e)
                outcomes.append(SaveOutcome(result.file_name, saved=False))
        return outcomes


class DirectorySink(PersistenceSink):
    """Write straight into ``directory``; existing files are never overwritten."""

    def __init__(self, directory: str):
        self.directory = directory

    def unique_path(self, file_name: str) -> str:
        stem, ext = os.path.splitext(file_name)
        candidate = os.path.join(self.directory, file_name)
        counter = 1
        while os.path.exists(candidate):
            candidate = os.path.join(self.directory, f"{stem} ({counter}){ext}")
            counter += 1
        return candidate

    def store(self, file_name: str, content: bytes) -> SaveOutcome:
        path = self.unique_path(file_name)
        write_bytes(path, content)
        logger.info("Saved %s", path)
        # Like a browser download: the file lands, the caller gets no path
        return SaveOutcome(file_name, saved=True)


class DialogSink(PersistenceSink):
    """
    Ask for a destination via ``choose_path`` (None means the user cancelled).

    A write failure is retried once through ``fallback`` when one is given.
    """

    def __init__(self, choose_path: PathChooser, fallback: Optional[PersistenceSink] = None):
        self.choose_path = choose_path
        self.fallback = fallback

    def store(self, file_name: str, content: bytes) -> SaveOutcome:
        path = self.choose_path(file_name)
        if not path:
            logger.info("Save of %s cancelled", file_name)
            return SaveOutcome(file_name, saved=False)

        try:
            write_bytes(path, content)
        except PersistenceError as e:
            if self.fallback is None:
                raise
            logger.warning("Error saving %s, falling back to output folder: %s", file_name, e)
            return self.fallback.store(file_name, content)

        logger.info("Saved %s", path)
        return SaveOutcome(file_name, saved=True, path=path)
