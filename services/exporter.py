"""Produce the downloadable, filled copy of a document."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

from formfiller.filler import SkippedField, fill_form
from formfiller.models import UploadedDocument
from formfiller.utils import build_export_name, get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ExportResult:
    file_name: str
    data: bytes = field(repr=False)
    filled: Tuple[str, ...] = ()
    skipped: Tuple[SkippedField, ...] = ()
    mime: str = "application/pdf"


class DocumentExporter:
    """Fill a document's current values into its original bytes."""

    def export(self, document: UploadedDocument, now: Optional[datetime] = None) -> ExportResult:
        """Return the filled PDF and its download name.

        Raises :class:`~formfiller.errors.ExportError` if the PDF cannot be
        opened or serialized. Fields that cannot be resolved are only logged
        and listed in ``skipped``.
        """

        result = fill_form(document.original_bytes, document.fields)
        file_name = build_export_name(document.name, now)
        logger.info("Exported %s as %s (%d bytes)", document.name, file_name, len(result.data))
        return ExportResult(
            file_name=file_name,
            data=result.data,
            filled=result.filled,
            skipped=result.skipped,
        )


__all__ = ["DocumentExporter", "ExportResult"]
