from __future__ import annotations

from typing import Dict, Final


# ============================================================
# WINDOW / LAYOUT
# ============================================================

APP_TITLE = "PDF Batch Signer"
APP_VERSION = "1.0.0"

WINDOW_WIDTH = 1400
WINDOW_HEIGHT = 900
SPLITTER_INITIAL_SIZES = [950, 450]
LEFT_PANEL_MIN_WIDTH = 500
RIGHT_PANEL_MIN_WIDTH = 380

NAV_SPINBOX_WIDTH = 80
PAGE_INFO_LABEL_WIDTH = 220
ZOOM_BTN_WIDTH = 30
ZOOM_LABEL_WIDTH = 50
ZOOM_FIT_BTN_WIDTH = 40
TOGGLE_BTN_WIDTH = 80

PROGRESS_DIALOG_WIDTH = 420
PROGRESS_DIALOG_HEIGHT = 120
STATUS_LABEL_MIN_HEIGHT = 32

DROP_AREA_MIN_HEIGHT = 140
SIGNATURE_THUMB_MAX_HEIGHT = 100

MAX_ERRORS_DISPLAYED = 5

# Debounce delay in milliseconds for preview updates
DEBOUNCE_DELAY_MS = 150

# ============================================================
# PREVIEW
# ============================================================

# Render resolution of the preview page relative to PDF points (72 DPI)
PREVIEW_ZOOM_BASE = 1.5
PREVIEW_ZOOM_MIN = 0.25
PREVIEW_ZOOM_MAX = 4.0
PREVIEW_ZOOM_STEP = 0.25
PREVIEW_ZOOM_DEFAULT = 1.0

# ============================================================
# SIGNATURE
# ============================================================

SUPPORTED_IMAGE_MIME_TYPES: Final[tuple] = ("image/png", "image/jpeg", "image/jpg")

# Extension -> declared MIME type used when a file is turned into a data URI.
IMAGE_EXTENSION_MIME_TYPES: Final[Dict[str, str]] = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
}
DEFAULT_IMAGE_MIME_TYPE: Final[str] = "image/png"

SIGNATURE_IMAGE_FILTERS = "Images (*.png *.jpg *.jpeg *.gif *.svg);;All Files (*)"
PDF_FILE_FILTERS = "PDF Documents (*.pdf);;All Files (*)"

# Stamp width in points
SIGNATURE_SIZE_MIN = 50
SIGNATURE_SIZE_MAX = 200
SIGNATURE_SIZE_STEP = 10
DEFAULT_SIGNATURE_SIZE = 100.0

# Opacity sliders work in percent
SIGNATURE_OPACITY_MIN_PCT = 10
SIGNATURE_OPACITY_MAX_PCT = 100
SIGNATURE_OPACITY_STEP_PCT = 10
DEFAULT_SIGNATURE_OPACITY = 1.0

# ============================================================
# POSITION
# ============================================================

DEFAULT_POSITION_X = 100.0
DEFAULT_POSITION_Y = 100.0
DEFAULT_POSITION_PAGE = 1

# Pages offered by the file list's quick-position menu
QUICK_POSITION_PAGES = (1, 2, 3, 4, 5)

POSITION_SPIN_MAX = 10000
PAGE_SPIN_MAX = 9999

# ============================================================
# OUTPUT
# ============================================================

SIGNED_SUFFIX = "_signed"

SAVE_MODE_DIALOG = "dialog"
SAVE_MODE_FOLDER = "folder"
SAVE_MODES = (SAVE_MODE_DIALOG, SAVE_MODE_FOLDER)

# Qt platform plugins that cannot show interactive dialogs
NON_INTERACTIVE_QT_PLATFORMS = ("offscreen", "minimal")

PDF_SAVE_OPTIONS = {
    "garbage": 3,
    "deflate": True,
}

# ============================================================
# DEFAULT APP CONFIGURATION
# ============================================================

# These defaults are used when creating a new config.ini file
# or when values are missing from an existing config.
DEFAULT_APP_CONFIG = {
    "General": {
        "signature_size": DEFAULT_SIGNATURE_SIZE,
        "signature_opacity": DEFAULT_SIGNATURE_OPACITY,
        "use_native_dialogs": "true",
    },
    "Position": {
        "x": DEFAULT_POSITION_X,
        "y": DEFAULT_POSITION_Y,
        "page": DEFAULT_POSITION_PAGE,
    },
    "Output": {
        "save_mode": SAVE_MODE_DIALOG,
        "output_dir": "",  # Empty -> ~/Downloads
    },
}
