"""Application config.ini read/write management."""
from __future__ import annotations

import os
import logging
import configparser
from typing import Optional, Union

from core.constants import (
    DEFAULT_APP_CONFIG,
    DEFAULT_POSITION_PAGE,
    DEFAULT_POSITION_X,
    DEFAULT_POSITION_Y,
    DEFAULT_SIGNATURE_OPACITY,
    DEFAULT_SIGNATURE_SIZE,
)
from core.errors import ValidationError
from core.models import Position, SignatureConfig

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def init_config(config_path: PathLike) -> configparser.ConfigParser:
    """Create or load config.ini, ensuring all default keys exist."""
    config = configparser.ConfigParser()

    if os.path.exists(config_path):
        try:
            config.read(config_path, encoding="utf-8")
        except configparser.Error as e:
            logger.warning("Could not read config.ini, creating new one: %s", e)
            config = configparser.ConfigParser()

    modified = False
    for section, options in DEFAULT_APP_CONFIG.items():
        if not config.has_section(section):
            config.add_section(section)
            modified = True
        for key, default_value in options.items():
            if not config.has_option(section, key):
                config.set(section, key, str(default_value))
                modified = True

    if modified or not os.path.exists(config_path):
        write_config(config, config_path)

    return config


def write_config(config: configparser.ConfigParser, config_path: PathLike) -> bool:
    try:
        with open(config_path, "w", encoding="utf-8") as f:
            config.write(f)
    except OSError as e:
        logger.warning("Could not save config.ini: %s", e)
        return False
    return True


def _get_float(config: configparser.ConfigParser, section: str, key: str, default: float) -> float:
    try:
        return config.getfloat(section, key, fallback=default)
    except ValueError:
        logger.warning("Invalid %s.%s in config.ini, using %s", section, key, default)
        return default


def _get_int(config: configparser.ConfigParser, section: str, key: str, default: int) -> int:
    try:
        return config.getint(section, key, fallback=default)
    except ValueError:
        logger.warning("Invalid %s.%s in config.ini, using %s", section, key, default)
        return default


def read_signature_defaults(config: configparser.ConfigParser) -> SignatureConfig:
    """Signature size/opacity from config.ini (no image)."""
    size = _get_float(config, "General", "signature_size", DEFAULT_SIGNATURE_SIZE)
    opacity = _get_float(config, "General", "signature_opacity", DEFAULT_SIGNATURE_OPACITY)
    try:
        return SignatureConfig(size=size, opacity=opacity)
    except ValidationError as e:
        logger.warning("Invalid signature defaults in config.ini: %s", e)
        return SignatureConfig()


def read_default_position(config: configparser.ConfigParser) -> Position:
    x = _get_float(config, "Position", "x", DEFAULT_POSITION_X)
    y = _get_float(config, "Position", "y", DEFAULT_POSITION_Y)
    page = _get_int(config, "Position", "page", DEFAULT_POSITION_PAGE)
    if page < 1:
        logger.warning("Invalid Position.page %d in config.ini, using %d", page, DEFAULT_POSITION_PAGE)
        page = DEFAULT_POSITION_PAGE
    return Position(x=x, y=y, page=page)


def save_signature_defaults(
    config: configparser.ConfigParser,
    config_path: PathLike,
    signature: SignatureConfig,
    position: Optional[Position] = None,
) -> bool:
    """Store size/opacity (and optionally the default position) as new defaults."""
    for section in ("General", "Position"):
        if not config.has_section(section):
            config.add_section(section)

    config.set("General", "signature_size", f"{signature.size:g}")
    config.set("General", "signature_opacity", f"{signature.opacity:g}")

    if position is not None:
        config.set("Position", "x", f"{position.x:g}")
        config.set("Position", "y", f"{position.y:g}")
        config.set("Position", "page", str(position.page))

    return write_config(config, config_path)
