"""
Where the application keeps its files.

config.ini must stay writable, so a PyInstaller build keeps it next to the
executable rather than in the temporary _MEIPASS extraction folder.
"""

from __future__ import annotations
import sys
from pathlib import Path


def is_frozen() -> bool:
    """True if running from a PyInstaller executable."""
    return bool(getattr(sys, "frozen", False))


def app_dir() -> Path:
    """Folder of the executable when frozen, otherwise the project root."""
    if is_frozen():
        return Path(sys.executable).resolve().parent
    # utils.py is inside core/
    return Path(__file__).resolve().parent.parent


def config_file_path(name: str = "config.ini") -> Path:
    """
    Location of the settings file.

    Example:
        >>> config_file_path()
        PosixPath('/opt/pdf-batch-signer/config.ini')
    """
    return app_dir() / name
