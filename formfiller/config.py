"""Runtime settings read from the environment (and an optional ``.env`` file)."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .utils import get_logger

logger = get_logger(__name__)

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_PREVIEW_MAX_WIDTH = 600
# Streamlit cannot observe the browser width, so the preview is sized against this.
DEFAULT_VIEWPORT_WIDTH = 1280


@dataclass(frozen=True)
class Settings:
    log_level: str = DEFAULT_LOG_LEVEL
    preview_max_width: int = DEFAULT_PREVIEW_MAX_WIDTH
    viewport_width: int = DEFAULT_VIEWPORT_WIDTH


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r; expected an integer, using %d", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r; expected a positive integer, using %d", name, raw, default)
        return default
    return value


def load_settings() -> Settings:
    """Load ``.env`` (if present) and build :class:`Settings` from the environment."""

    load_dotenv()
    return Settings(
        log_level=os.getenv("PDFFORMFILLER_LOG", DEFAULT_LOG_LEVEL).upper(),
        preview_max_width=_int_from_env("PDFFORMFILLER_PREVIEW_MAX_WIDTH", DEFAULT_PREVIEW_MAX_WIDTH),
        viewport_width=_int_from_env("PDFFORMFILLER_VIEWPORT_WIDTH", DEFAULT_VIEWPORT_WIDTH),
    )


__all__ = ["Settings", "load_settings"]
