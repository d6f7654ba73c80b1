"""PDF Form Filler package."""

from .errors import (
    DocumentNotFoundError,
    ExportError,
    FieldResolutionError,
    FormFillerError,
    PreviewError,
    UnsupportedFileError,
)
from .fallback import fallback_fields
from .filler import FillResult, SkippedField, fill_form
from .models import FieldKind, FormField, PreviewHandle, UploadedDocument
from .parser import DetectionResult, NativeField, classify_field, detect_fields

__version__ = "0.1.0"

__all__ = [
    "DetectionResult",
    "DocumentNotFoundError",
    "ExportError",
    "FieldKind",
    "FieldResolutionError",
    "FillResult",
    "FormField",
    "FormFillerError",
    "NativeField",
    "PreviewError",
    "PreviewHandle",
    "SkippedField",
    "UnsupportedFileError",
    "UploadedDocument",
    "classify_field",
    "detect_fields",
    "fallback_fields",
    "fill_form",
    "__version__",
]
