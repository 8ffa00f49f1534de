"""
Startup capability detection.

Decided once when the application starts and passed to the main window, so
no code path has to inspect the environment again.
"""
from __future__ import annotations

import configparser
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from core.constants import (
    NON_INTERACTIVE_QT_PLATFORMS,
    SAVE_MODE_DIALOG,
    SAVE_MODE_FOLDER,
    SAVE_MODES,
)
from core.persistence import DialogSink, DirectorySink, PathChooser, PersistenceSink

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Capabilities:
    interactive: bool       # dialogs can be shown at all
    native_dialogs: bool    # use the OS file dialogs instead of Qt's own
    save_mode: str          # SAVE_MODE_DIALOG or SAVE_MODE_FOLDER
    output_dir: str
    platform: str


def default_output_dir(home: Optional[Path] = None) -> str:
    home = home or Path.home()
    downloads = home / "Downloads"
    return str(downloads if downloads.is_dir() else home)


def detect_capabilities(
    config: configparser.ConfigParser,
    env: Optional[Mapping[str, str]] = None,
    platform: Optional[str] = None,
) -> Capabilities:
    """Combine config.ini settings with what the runtime environment allows."""
    env = os.environ if env is None else env
    platform = platform or sys.platform

    qt_platform = env.get("QT_QPA_PLATFORM", "").split(":", 1)[0].strip().lower()
    interactive = qt_platform not in NON_INTERACTIVE_QT_PLATFORMS

    try:
        use_native = config.getboolean("General", "use_native_dialogs", fallback=True)
    except ValueError:
        logger.warning("Invalid use_native_dialogs value in config.ini, using default")
        use_native = True

    save_mode = config.get("Output", "save_mode", fallback=SAVE_MODE_DIALOG).strip().lower()
    if save_mode not in SAVE_MODES:
        logger.warning("Unknown save_mode '%s' in config.ini, using '%s'", save_mode, SAVE_MODE_DIALOG)
        save_mode = SAVE_MODE_DIALOG
    if not interactive:
        save_mode = SAVE_MODE_FOLDER

    output_dir = config.get("Output", "output_dir", fallback="").strip()
    output_dir = os.path.expanduser(output_dir) if output_dir else default_output_dir()

    caps = Capabilities(
        interactive=interactive,
        native_dialogs=interactive and use_native,
        save_mode=save_mode,
        output_dir=output_dir,
        platform=platform,
    )
    logger.info("Capabilities: %s", caps)
    return caps


def create_persistence_sink(capabilities: Capabilities, choose_path: PathChooser) -> PersistenceSink:
    """Build the sink matching the configured save mode."""
    folder_sink = DirectorySink(capabilities.output_dir)
    if capabilities.save_mode == SAVE_MODE_DIALOG:
        return DialogSink(choose_path, fallback=folder_sink)
    return folder_sink
