"""Utility helpers for PDF Form Filler."""

from __future__ import annotations

import logging
import os
import re
from datetime import datetime
from typing import Optional

_LOG_ENV = "PDFFORMFILLER_LOG"
_LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
_CAPITAL_PATTERN = re.compile(r"([A-Z])")


def get_logger(name: str) -> logging.Logger:
    """Return a module logger whose level follows ``PDFFORMFILLER_LOG``."""

    logger = logging.getLogger(name)
    level_name = os.getenv(_LOG_ENV, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(handler)
        # Avoid duplicate lines once the Streamlit entry point configures the root logger.
        logger.propagate = False
    logger.setLevel(level)
    return logger


def prettify_label(name: str) -> str:
    """Turn a field name such as ``clientName`` into ``Client Name``."""

    spaced = _CAPITAL_PATTERN.sub(r" \1", name)
    if not spaced:
        return spaced
    return spaced[0].upper() + spaced[1:]


def strip_pdf_suffix(file_name: str) -> str:
    if file_name.lower().endswith(".pdf"):
        return file_name[: -len(".pdf")]
    return file_name


def build_export_name(file_name: str, now: Optional[datetime] = None) -> str:
    """Return ``filled-<basename>-<unix time in ms>.pdf`` for a download."""

    moment = now or datetime.now()
    millis = int(moment.timestamp() * 1000)
    return f"filled-{strip_pdf_suffix(file_name)}-{millis}.pdf"


def format_size(size: int) -> str:
    """Human readable megabytes with one decimal, as shown in the file list."""

    return f"{size / 1024 / 1024:.1f} MB"


__all__ = ["build_export_name", "format_size", "get_logger", "prettify_label", "strip_pdf_suffix"]
