"""Exception hierarchy for PDF Form Filler."""

from __future__ import annotations


class FormFillerError(Exception):
    """Base exception for every error raised by this package."""


class UnsupportedFileError(FormFillerError):
    """Raised when an upload batch holds no PDF files."""


class DocumentNotFoundError(FormFillerError, KeyError):
    """Raised when a document id is not part of the session."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class FieldResolutionError(FormFillerError):
    """Raised when a value cannot be written into a named form field."""

    def __init__(self, field_name: str, reason: str) -> None:
        super().__init__(f"{field_name}: {reason}")
        self.field_name = field_name
        self.reason = reason


class ExportError(FormFillerError):
    """Raised when the filled document cannot be built or serialized."""


class PreviewError(FormFillerError):
    """Raised when a document cannot be opened or rendered for preview."""


__all__ = [
    "DocumentNotFoundError",
    "ExportError",
    "FieldResolutionError",
    "FormFillerError",
    "PreviewError",
    "UnsupportedFileError",
]
