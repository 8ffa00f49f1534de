"""
Signing core of PDF Batch Signer: models, geometry, embedding, batch and saving.

Nothing in this package imports Qt.
"""

from core.utils import app_dir, config_file_path, is_frozen

__all__ = [
    "app_dir",
    "config_file_path",
    "is_frozen",
]
